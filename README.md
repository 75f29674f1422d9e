# glpipegen

`glpipegen` turns reflection data of a linked GLSL program into C++ pipeline
binding code: shader stage wrappers that embed the preprocessed shader text,
`std140`-aligned uniform block structs, vertex and instance input structs,
attribute format/binding setup and resource binding calls. It also carries the
small amount of 3D math a renderer built on that code needs: quaternions,
view/projection matrices, a camera and a model transform.

## Installing

The package needs Python 3.10 or later and depends on `numpy`. The `test`
extra pulls in `pytest`.

## What is inside

- `glpipegen.codegen` – the generator.
  - `read_shader_source(path)` loads a shader file into a `ShaderSource`; the
    file must begin with a `#version` line, otherwise `CodegenError` is raised.
    The stage is taken from the extension.
  - `get_shader_stage(extension)` maps `.vert`, `.tesc`, `.tese`, `.geom`,
    `.frag` and `.comp` to a `ShaderStage`; any other extension raises
    `ValueError`.
  - `Definition.parse` reads `NAME`, `NAME=value` (`true`, `false` or an
    integer) and `NAME>0`; `str()` of a definition gives its `#define` line.
    `parse_definitions` splits each argument on `;`.
  - `generate_pipeline(name, shaders, reflection)` returns the header text and
    the implementation text for the `pipelines::<name>` namespace, built from
    a `ProgramReflection` (its `UniformBlock`s, sampler uniforms and pipe
    inputs). Inputs whose names start with `vertex` go into `VertexInput`, the
    rest into `InstanceInput`.
  - `write_pipeline(name, shaders, reflection, output)` writes `<output>.h`
    and `<output>.cpp` and returns both paths.
- `glpipegen.glsl_types` – `GlslType` and `ObjectReflection` describe
  reflected types; `get_type` maps them to C++ spellings (`TypeDecl`),
  `emit_struct` writes struct definitions, `gather_attributes`,
  `write_attributes` and `get_data_format` produce vertex attribute setup, and
  `Field.create_from_sampler` / `Field.create_from_pipe_input` build fields.
  Unsupported input raises `CodegenError`.
- `glpipegen.includer` – `DirStackFileIncluder` resolves quoted includes by
  searching the directories of the files being included, innermost first, then
  directories added with `push_external_local_directory`, most recent first.
  Angle-bracket includes are looked up only in the `system_directories` given
  to the constructor. A miss returns `None`; a hit returns an `IncludeResult`.
- `glpipegen.resource_limits` – `ResourceLimits` and
  `default_resource_limits()`, the built-in limits assumed for shader
  compilation.
- `glpipegen.errors` – names for GL error codes and debug message types and
  severities, logging handlers for GL and GLFW error reports, and
  `check_for_gl_error(get_error)`, which raises `GLError` when the callable
  reports an error.
- `glpipegen.util` – `Quat`, `rotate_point`, `translation_matrix`,
  `scale_matrix`, `look_at`, `perspective`, `GlslMat3`/`GlslMat4` (padded
  column packing to bytes), `Point2d`, `Dimensions2d` and `Rect2d`.
- `glpipegen.transform` – `Transform`, giving model and normal matrices.
- `glpipegen.camera` – `Camera`, a free-flying camera that registers cursor
  and resize callbacks with a window object and moves on the `Key` W/A/S/D
  keys.

## A short example

```python
from glpipegen.codegen import Definition, get_shader_stage, to_pascal_case
from glpipegen.errors import gl_error_to_string
from glpipegen.util import Dimensions2d

print(get_shader_stage(".frag"))                # ShaderStage.FRAGMENT
print(to_pascal_case("VERTEX") + "Shader")      # VertexShader
print(Definition.parse("USE_NORMAL_MAP=true"))  # #define USE_NORMAL_MAP 1
print(gl_error_to_string(0x0502))               # GL_INVALID_OPERATION

size = Dimensions2d(1920, 1080)
print(size.reduce_size(1))                      # Dimensions2d(width=960, height=540)
```

## What it does not do

- There is no command-line tool; the generator is used from Python.
- It does not compile, preprocess, link or reflect GLSL itself. The caller
  supplies the preprocessed shader text and a `ProgramReflection` describing
  the linked program.
- It opens no windows and makes no GL calls. `Camera` works with any object
  offering `is_key_down`, `is_mouse_cursor_grabbed`,
  `set_cursor_pos_callback` and `add_resize_callback`, and
  `check_for_gl_error` takes the error query as a callable.

## Running the tests

With the `test` extra installed, run `pytest` from the project root.