"""Mapping of reflected GLSL types to C++ declarations for generated pipelines."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

GL_SAMPLER_2D = 0x8B5E
GL_SAMPLER_CUBE = 0x8B60

_STD140_STRUCT_ALIGNMENT = 16
_FLOAT_SIZE = 4

_DATA_FORMATS = {
    1: "DataFormat::R32_SFLOAT",
    2: "DataFormat::R32G32_SFLOAT",
    3: "DataFormat::R32G32B32_SFLOAT",
    4: "DataFormat::R32G32B32A32_SFLOAT",
}


class CodegenError(Exception):
    """A shader interface that cannot be turned into C++ declarations."""


class AlignmentRequirements(Enum):
    C_DEFAULT = "c_default"
    STD140 = "std140"


@dataclass(frozen=True)
class GlslType:
    """A reflected GLSL type.

    ``array_sizes`` holds one entry per array dimension, ``None`` for an
    unsized one. ``members`` holds ``(name, type)`` pairs of a struct or block.
    """

    basic: str = "float"
    vector_size: int = 1
    matrix_cols: int = 0
    matrix_rows: int = 0
    array_sizes: tuple[int | None, ...] = ()
    type_name: str = ""
    members: tuple[tuple[str, GlslType], ...] = ()
    is_builtin: bool = False
    layout_location: int | None = None
    layout_binding: int | None = None

    @property
    def is_struct(self) -> bool:
        return bool(self.members)

    @property
    def is_matrix(self) -> bool:
        return self.matrix_cols > 0

    @property
    def is_vector(self) -> bool:
        return self.vector_size > 1 and not self.is_matrix

    @property
    def is_array(self) -> bool:
        return bool(self.array_sizes)

    @property
    def is_sized_array(self) -> bool:
        return self.is_array and all(size is not None for size in self.array_sizes)


@dataclass(frozen=True)
class ObjectReflection:
    """A reflected uniform or pipe input of a linked program."""

    name: str
    type: GlslType
    gl_define_type: int = 0
    offset: int = -1


@dataclass(frozen=True)
class TypeDecl:
    """A C++ type spelling, with an element count for fixed-size arrays."""

    base: str
    num_elements: int | None = None


@dataclass
class Field:
    """A member of a generated struct."""

    name: str
    type: TypeDecl
    original_type: GlslType | None = None
    location: int | None = None

    @classmethod
    def create_from_pipe_input(cls, reflection: ObjectReflection,
                               defs: list[str]) -> Field | None:
        """Field for a vertex/instance input; None for built-in variables."""
        glsl_type = reflection.type
        decl = get_type(glsl_type, AlignmentRequirements.C_DEFAULT, defs)
        if glsl_type.is_builtin:
            return None
        if glsl_type.layout_location is None:
            raise CodegenError(
                f"field {reflection.name} requires a layout(location = _) specifier")
        return cls(reflection.name, decl, glsl_type, glsl_type.layout_location)

    @classmethod
    def create_from_sampler(cls, uniform: ObjectReflection) -> Field:
        """Field for a top-level sampler uniform."""
        glsl_type = uniform.type
        if glsl_type.layout_binding is None:
            raise CodegenError(
                f"unsupported top-level uniform `{uniform.name} - must have a "
                "`layout(binding = _)` declaration")
        if uniform.gl_define_type == GL_SAMPLER_2D:
            base = "const TextureBinding<Texture2d>"
        elif uniform.gl_define_type == GL_SAMPLER_CUBE:
            base = "const TextureBinding<TextureCube>"
        else:
            raise CodegenError(
                f"unsupported top-level uniform `{uniform.name}` - must be a sampler")
        num_elements = None
        if glsl_type.is_sized_array and len(glsl_type.array_sizes) == 1:
            num_elements = glsl_type.array_sizes[0]
        elif glsl_type.is_array:
            raise CodegenError("only 1D fixed-sized arrays supported at the moment")
        return cls(uniform.name, TypeDecl(base, num_elements), glsl_type,
                   glsl_type.layout_binding)


@dataclass(frozen=True)
class VertexAttribute:
    location: int
    offset_expr: str
    data_format: str
    binding: int


def emit_struct(name: str, alignment: AlignmentRequirements, fields,
                extra_defs: str = "") -> str:
    """C++ struct definition with one member per field."""
    lines = ["struct "]
    if alignment is AlignmentRequirements.STD140:
        lines[0] += f"alignas({_STD140_STRUCT_ALIGNMENT}) "
    lines[0] += f"{name} {{\n"
    for field in fields:
        suffix = "" if field.type.num_elements is None else f"[{field.type.num_elements}]"
        lines.append(f"    {field.type.base} {field.name}{suffix};\n")
    lines.append(extra_defs)
    lines.append("};\n")
    return "".join(lines)


def get_type(glsl_type: GlslType, alignment: AlignmentRequirements,
             defs: list[str]) -> TypeDecl:
    """C++ spelling of ``glsl_type``; struct definitions are appended to ``defs``."""
    num_elements = None
    if glsl_type.is_sized_array and len(glsl_type.array_sizes) == 1:
        num_elements = glsl_type.array_sizes[0]
    elif glsl_type.is_array:
        raise CodegenError("only 1D fixed-sized arrays are supported")

    if glsl_type.is_struct:
        fields = [
            Field(member_name, get_type(member_type, alignment, defs), member_type)
            for member_name, member_type in glsl_type.members
        ]
        defs.append(emit_struct(glsl_type.type_name, alignment, fields))
        base = glsl_type.type_name
    elif glsl_type.is_matrix:
        base = ""
        if glsl_type.basic == "float":
            if glsl_type.matrix_rows == glsl_type.matrix_cols:
                base = f"glsl::mat{glsl_type.matrix_rows}"
            else:
                # column-major: matCxR has C columns and R rows
                base = f"glm::mat{glsl_type.matrix_cols}x{glsl_type.matrix_rows}"
    elif glsl_type.is_vector:
        if glsl_type.basic != "float":
            raise CodegenError(f"unsupported vector of {glsl_type.basic}")
        size = glsl_type.vector_size
        if alignment is AlignmentRequirements.STD140:
            align = 4 * _FLOAT_SIZE if size == 3 else size * _FLOAT_SIZE
            base = f"alignas({align}) glm::vec{size}"
        else:
            base = f"glm::vec{size}"
    else:
        base = glsl_type.basic

    return TypeDecl(base, num_elements)


def get_data_format(basic: str, vector_size: int) -> str:
    """Vertex attribute data format for ``vector_size`` components of ``basic``."""
    if basic == "float" and vector_size in _DATA_FORMATS:
        return _DATA_FORMATS[vector_size]
    raise CodegenError(f"no data format for {vector_size} components of {basic}")


def gather_attributes(field: Field, struct_name: str, binding: int) -> list[VertexAttribute]:
    """Vertex attributes for one input field; a matrix takes one per column."""
    if field.type.num_elements is not None:
        raise CodegenError(f"array vertex input `{field.name}` is not supported")
    if field.location is None or field.original_type is None:
        raise CodegenError(f"vertex input `{field.name}` has no location")
    original = field.original_type
    if original.is_matrix:
        data_format = get_data_format(original.basic, original.matrix_rows)
        return [
            VertexAttribute(
                field.location + column,
                f"offsetof({struct_name}, {field.name}.column{column})",
                data_format,
                binding,
            )
            for column in range(original.matrix_cols)
        ]
    return [VertexAttribute(
        field.location,
        f"offsetof({struct_name}, {field.name})",
        get_data_format(original.basic, original.vector_size),
        binding,
    )]


def write_attributes(attributes) -> str:
    """Statements that enable, format and bind each attribute, in that order."""
    attributes = list(attributes)
    enables = [f"        guard.enableAttribute({a.location});\n" for a in attributes]
    formats = [
        f"        guard.setAttributeFormat({a.location}, {a.data_format}, {a.offset_expr});\n"
        for a in attributes
    ]
    bindings = [
        f"        guard.setAttributeBinding({a.location}, {a.binding});\n" for a in attributes
    ]
    return "".join(enables + formats + bindings)