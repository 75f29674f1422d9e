"""Generation of C++ pipeline declarations from reflected GLSL programs."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import ClassVar, Iterable, Sequence

from glpipegen.glsl_types import (
    AlignmentRequirements,
    CodegenError,
    Field,
    GlslType,
    ObjectReflection,
    TypeDecl,
    emit_struct,
    gather_attributes,
    get_type,
    write_attributes,
)

_log = logging.getLogger(__name__)

INCLUDE_EXTENSION = "#extension GL_GOOGLE_include_directive : enable\n"
_ARB_INCLUDE_EXTENSION = "#extension GL_ARB_shading_language_include : enable"

_HEADER_INCLUDES = (
    "graphics/OpenGLContext.h",
    "graphics/commands.h",
    "graphics/Shader.h",
    "util.h",
    "loader/shaders.h",
    "graphics/texturing.h",
)

_VERTEX_INPUT_STRUCT = "VertexInput"
_INSTANCE_INPUT_STRUCT = "InstanceInput"
_VERTEX_INPUT_MEMBER = "perVertex"
_INSTANCE_INPUT_MEMBER = "perInstance"
_VERTEX_INPUT_BINDING = 0
_INSTANCE_INPUT_BINDING = 1
_VERTEX_PREFIX = "vertex"

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


class ShaderStage(Enum):
    VERTEX = ".vert"
    TESS_CONTROL = ".tesc"
    TESS_EVALUATION = ".tese"
    GEOMETRY = ".geom"
    FRAGMENT = ".frag"
    COMPUTE = ".comp"


def get_shader_stage(extension: str) -> ShaderStage:
    """Shader stage for a file extension such as ``".vert"``."""
    try:
        return ShaderStage(str(extension))
    except ValueError:
        raise ValueError(f"unknown shader stage for extension {extension!r}") from None


def to_pascal_case(s: str) -> str:
    """Keep the first character and lower-case the rest."""
    return s[:1] + s[1:].lower()


def to_lower_case(s: str) -> str:
    return s.lower()


def _lower_first(s: str) -> str:
    return s[:1].lower() + s[1:]


class _Flag(Enum):
    NO_VALUE = "no value"
    GREATER_THAN_ZERO = "greater than zero"


_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")


def _parse_int(text: str, definition: str) -> int:
    match = _INT_PREFIX.match(text)
    if match is None:
        raise ValueError(f"invalid integer value {text!r} in definition {definition!r}")
    value = int(match.group(1))
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"integer value {text!r} in definition {definition!r} is out of range")
    return value


@dataclass(frozen=True)
class Definition:
    """A preprocessor definition given as ``NAME``, ``NAME=value`` or ``NAME>0``."""

    name: str
    value: int | bool | _Flag = _Flag.NO_VALUE

    NO_VALUE: ClassVar[_Flag] = _Flag.NO_VALUE
    GREATER_THAN_ZERO: ClassVar[_Flag] = _Flag.GREATER_THAN_ZERO

    @classmethod
    def parse(cls, text: str) -> Definition:
        positions = [i for i in (text.find(">"), text.find("=")) if i != -1]
        if not positions:
            return cls(text)
        index = min(positions)
        name, rest = text[:index], text[index + 1:]
        if text[index] == ">" and rest == "0":
            return cls(name, _Flag.GREATER_THAN_ZERO)
        if text[index] == "=":
            if rest == "true":
                return cls(name, True)
            if rest == "false":
                return cls(name, False)
            value = _parse_int(rest, text)
            _log.info("parsing integer %s into %d", rest, value)
            return cls(name, value)
        return cls(name, 0)

    def __str__(self) -> str:
        value = self.value
        if isinstance(value, bool):
            # any boolean definition is emitted as 1
            suffix = " 1"
        elif isinstance(value, int):
            suffix = f" {value}"
        elif value is _Flag.NO_VALUE:
            suffix = " 1"
        else:
            suffix = " 3"
        return f"#define {self.name}{suffix}"


def parse_definitions(args: Iterable[str]) -> list[Definition]:
    """Definitions from arguments, each holding ``;``-separated entries."""
    definitions = []
    for arg in args:
        parts = arg.split(";")
        if parts[-1] == "":
            parts.pop()
        definitions.extend(Definition.parse(part) for part in parts)
    return definitions


@dataclass
class ShaderSource:
    """One shader stage of a program and its preprocessed text."""

    file_path: Path
    stage: ShaderStage
    preprocessed_source: str
    version_statement: str = ""
    source: str = ""

    def upper_case_stage(self) -> str:
        if self.stage is ShaderStage.VERTEX:
            return "VERTEX"
        if self.stage is ShaderStage.FRAGMENT:
            return "FRAGMENT"
        return "UNKNOWN"


@dataclass(frozen=True)
class UniformBlock:
    """A reflected uniform block and the binding it occupies."""

    name: str
    type: GlslType
    binding: int
    std140: bool = True


@dataclass
class ProgramReflection:
    """Reflection data of a linked program."""

    uniform_blocks: Sequence[UniformBlock] = field(default_factory=list)
    uniforms: Sequence[ObjectReflection] = field(default_factory=list)
    pipe_inputs: Sequence[ObjectReflection] = field(default_factory=list)


def read_shader_source(path) -> ShaderSource:
    """Read a shader file, which must start with a ``#version`` line."""
    path = Path(path)
    _log.info("reading shader source from %s", path)
    text = path.read_text()
    first_line, _, rest = text.partition("\n")
    if not first_line.startswith("#version"):
        raise CodegenError("shader must start with #version statement")
    stage = get_shader_stage(path.suffix)
    source = "\n" + rest
    return ShaderSource(
        file_path=path,
        stage=stage,
        preprocessed_source=f"{first_line}\n{_ARB_INCLUDE_EXTENSION}\n{source}",
        version_statement=f"{first_line}\n{INCLUDE_EXTENSION}",
        source=source,
    )


def _quoted(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _bindings_extra(prefix: str) -> str:
    return (f"    using CreateInfo = {prefix}CreateInfo;\n"
            f"    using PipelineState = {prefix}PipelineState;\n")


def generate_pipeline(name: str, shaders: Iterable[ShaderSource],
                      reflection: ProgramReflection) -> tuple[str, str]:
    """Header text and implementation text of a pipeline namespace.

    The implementation text does not include the generated header; the
    caller prepends the ``#include`` line naming it.
    """
    shaders = list(shaders)
    namespace_open = f"namespace pipelines {{ namespace {name} {{\n"
    header = ["#pragma once\n", "// autogenerated from GLSL, do not edit\n",
              "#include <glm/glm.hpp>\n"]
    header.extend(f'#include "../../src/{include}"\n' for include in _HEADER_INCLUDES)
    header.append(namespace_open)
    impl = ["#include <memory>\n", namespace_open]

    for shader in shaders:
        stage = shader.upper_case_stage()
        struct_name = f"{to_pascal_case(stage)}Shader"
        impl.append(f'const char* {stage}_SHADER = R""(\n{shader.preprocessed_source})"";\n')
        header.append(
            f"struct {struct_name} {{\n"
            f"    string key = {_quoted(str(shader.file_path))};\n"
            "    string getKey() const;\n"
            "    shared_ptr<Shader> build(OpenGLContext& context);\n"
            "};\n")
        impl.append(f"string {struct_name}::getKey() const {{ return key; }}\n")
        impl.append(
            f"shared_ptr<Shader> {struct_name}::build(OpenGLContext& context) {{\n"
            "    return make_shared<Shader>(std::move(context.buildShader("
            f"ShaderType::{stage}, key, {stage}_SHADER)));\n"
            "}\n")

    header.append("class Shaders {\n    ShaderCache& cache;\npublic:\n"
                  "    Shaders(ShaderCache& cache);\n    Shaders(ShaderCache* cache);\n"
                  "    ShaderStages getStages() const;\n};\n")
    impl.append("Shaders::Shaders(ShaderCache* cache) : cache(*cache) {}\n")
    impl.append("Shaders::Shaders(ShaderCache& cache) : cache(cache) {}\n")
    impl.append("ShaderStages Shaders::getStages() const {\n    return {\n")
    for shader in shaders:
        stage = shader.upper_case_stage()
        impl.append(f"    .{to_lower_case(stage)} = cache.get({to_pascal_case(stage)}Shader {{}}),\n")
    impl.append("    };\n};\n")

    defs: list[str] = []

    uniform_blocks = []
    for block in reflection.uniform_blocks:
        if not block.std140:
            raise CodegenError(f"uniform block `{block.name}` must be layout(std140)")
        decl = get_type(block.type, AlignmentRequirements.STD140, defs)
        uniform_blocks.append(Field(
            _lower_first(block.name),
            TypeDecl(f"const BufferView<{decl.base}>", decl.num_elements),
            block.type,
            block.binding,
        ))

    # uniforms with an offset belong to a uniform block; the rest must be samplers
    textures = [Field.create_from_sampler(uniform)
                for uniform in reflection.uniforms if uniform.offset == -1]

    vertex_inputs: list[Field] = []
    instance_inputs: list[Field] = []
    for pipe_input in reflection.pipe_inputs:
        input_field = Field.create_from_pipe_input(pipe_input, defs)
        if input_field is None:
            continue
        if (input_field.name.startswith(_VERTEX_PREFIX)
                and len(input_field.name) > len(_VERTEX_PREFIX)):
            input_field.name = _lower_first(input_field.name[len(_VERTEX_PREFIX):])
            vertex_inputs.append(input_field)
        else:
            instance_inputs.append(input_field)

    header.extend(defs)

    vertex_bindings = [Field(_VERTEX_INPUT_MEMBER,
                             TypeDecl(f"const VertexBufferBinding<{_VERTEX_INPUT_STRUCT}>"))]
    header.append(emit_struct(_VERTEX_INPUT_STRUCT, AlignmentRequirements.C_DEFAULT,
                              vertex_inputs))
    if instance_inputs:
        header.append(emit_struct(_INSTANCE_INPUT_STRUCT, AlignmentRequirements.C_DEFAULT,
                                  instance_inputs))
        vertex_bindings.append(Field(
            _INSTANCE_INPUT_MEMBER,
            TypeDecl(f"const VertexBufferBinding<{_INSTANCE_INPUT_STRUCT}>")))

    header.append("struct VertexBindingPipelineState;\nstruct VertexBindingCreateInfo;\n")
    header.append(emit_struct("VertexBindings", AlignmentRequirements.C_DEFAULT,
                              vertex_bindings, _bindings_extra("VertexBinding")))
    header.append("struct VertexBindingPipelineState {\n"
                  "    void bindAll(const VertexBindings& bindings, BoundVertexArrayGuard& guard, "
                  "OpenGLContext& context);\n};\n")

    impl.append("void VertexBindingPipelineState::bindAll(const VertexBindings& bindings, "
                "BoundVertexArrayGuard& guard, OpenGLContext& context) {\n")
    bound = [(_VERTEX_INPUT_BINDING, _VERTEX_INPUT_MEMBER, _VERTEX_INPUT_STRUCT)]
    if instance_inputs:
        bound.append((_INSTANCE_INPUT_BINDING, _INSTANCE_INPUT_MEMBER, _INSTANCE_INPUT_STRUCT))
    for binding, member, struct_name in bound:
        impl.append(f"    guard.bindVertexBuffer({binding}, bindings.{member}.buffer, "
                    f"bindings.{member}.byteOffset, sizeof({struct_name}));\n")
    impl.append("}\n")

    header.append("struct VertexBindingCreateInfo {\n"
                  "    VertexBindingPipelineState init(VertexArray& array, "
                  "OpenGLContext& context);\n};\n")

    impl.append("VertexBindingPipelineState VertexBindingCreateInfo::init(VertexArray& array, "
                "OpenGLContext& context) {\n")
    attributes = []
    for vertex_input in vertex_inputs:
        attributes.extend(gather_attributes(vertex_input, _VERTEX_INPUT_STRUCT,
                                            _VERTEX_INPUT_BINDING))
    for instance_input in instance_inputs:
        attributes.extend(gather_attributes(instance_input, _INSTANCE_INPUT_STRUCT,
                                            _INSTANCE_INPUT_BINDING))
    impl.append("    context.withBoundVertexArray(array, [](auto guard) {\n")
    impl.append(write_attributes(attributes))
    if instance_inputs:
        impl.append(f"        guard.setBindingDivisor({_INSTANCE_INPUT_BINDING}, 1);\n")
    impl.append("    });\n    return VertexBindingPipelineState {};\n}\n")

    header.append("struct ResourceBindingPipelineState;\nstruct ResourceBindingCreateInfo;\n")
    header.append(emit_struct("ResourceBindings", AlignmentRequirements.C_DEFAULT,
                              uniform_blocks + textures, _bindings_extra("ResourceBinding")))
    header.append("struct ResourceBindingPipelineState {\n"
                  "    void bindAll(const ResourceBindings& bindings, "
                  "OpenGLContext& context);\n};\n")

    impl.append("void ResourceBindingPipelineState::bindAll(const ResourceBindings& bindings, "
                "OpenGLContext& context) {\n")
    for block in uniform_blocks:
        impl.append(f"    context.bindUniformBuffer(bindings.{block.name}.buffer, "
                    f"{block.location}, bindings.{block.name}.byteOffset, "
                    f"sizeof({block.original_type.type_name}));\n")
    for texture in textures:
        if texture.type.num_elements is not None:
            impl.append(f"    for(int i = 0; i < {texture.type.num_elements}; i++) {{\n")
            impl.append(f"        context.bindTextureAndSampler({texture.location} + i, "
                        f"bindings.{texture.name}[i]);\n")
            impl.append("    }\n")
        else:
            impl.append(f"    context.bindTextureAndSampler({texture.location}, "
                        f"bindings.{texture.name});\n")
    impl.append("}\n")

    header.append("struct ResourceBindingCreateInfo {\n"
                  "    ResourceBindingPipelineState init();\n};\n")
    impl.append("ResourceBindingPipelineState ResourceBindingCreateInfo::init() {\n"
                "    return ResourceBindingPipelineState {};\n}\n")

    header.append("using Pipeline = GraphicsPipeline<VertexBindings, ResourceBindings>;\n")
    header.append("using Create = GraphicsPipelineCreateInfo<VertexBindings, "
                  "ResourceBindings, Shaders>;\n")
    header.append("using DrawCmd = DrawCommand<VertexBindings, ResourceBindings>;\n")

    header.append("}}")
    impl.append("}}")
    return "".join(header), "".join(impl)


def write_pipeline(name: str, shaders: Iterable[ShaderSource],
                   reflection: ProgramReflection, output) -> tuple[Path, Path]:
    """Write ``.h`` and ``.cpp`` files next to ``output``; return their paths."""
    output = Path(output)
    header, impl = generate_pipeline(name, shaders, reflection)
    header_path = output.with_suffix(".h")
    impl_path = output.with_suffix(".cpp")
    _log.info("opening output file %s", output)
    header_path.write_text(header)
    impl_path.write_text(f"#include {_quoted(header_path.name)}\n{impl}")
    return header_path, impl_path