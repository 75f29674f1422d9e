"""Names for OpenGL error codes and handlers for GL and GLFW error reports."""

from __future__ import annotations

import logging
from typing import Callable

_log = logging.getLogger(__name__)

GL_NO_ERROR = 0
GL_INVALID_ENUM = 0x0500
GL_INVALID_VALUE = 0x0501
GL_INVALID_OPERATION = 0x0502
GL_STACK_OVERFLOW = 0x0503
GL_STACK_UNDERFLOW = 0x0504
GL_OUT_OF_MEMORY = 0x0505
GL_INVALID_FRAMEBUFFER_OPERATION = 0x0506
GL_TABLE_TOO_LARGE_EXT = 0x8031
GL_TEXTURE_TOO_LARGE_EXT = 0x8065

GL_DEBUG_TYPE_ERROR = 0x824C
GL_DEBUG_TYPE_DEPRECATED_BEHAVIOR = 0x824D
GL_DEBUG_TYPE_UNDEFINED_BEHAVIOR = 0x824E
GL_DEBUG_TYPE_PORTABILITY = 0x824F
GL_DEBUG_TYPE_PERFORMANCE = 0x8250
GL_DEBUG_TYPE_OTHER = 0x8251
GL_DEBUG_TYPE_MARKER = 0x8268
GL_DEBUG_TYPE_PUSH_GROUP = 0x8269
GL_DEBUG_TYPE_POP_GROUP = 0x826A

GL_DEBUG_SEVERITY_HIGH = 0x9146
GL_DEBUG_SEVERITY_MEDIUM = 0x9147
GL_DEBUG_SEVERITY_LOW = 0x9148
GL_DEBUG_SEVERITY_NOTIFICATION = 0x826B

_ERROR_NAMES = {
    GL_NO_ERROR: "GL_NO_ERROR",
    GL_INVALID_ENUM: "GL_INVALID_ENUM",
    GL_INVALID_VALUE: "GL_INVALID_VALUE",
    GL_INVALID_OPERATION: "GL_INVALID_OPERATION",
    GL_STACK_OVERFLOW: "GL_STACK_OVERFLOW",
    GL_STACK_UNDERFLOW: "GL_STACK_UNDERFLOW",
    GL_OUT_OF_MEMORY: "GL_OUT_OF_MEMORY",
    GL_TABLE_TOO_LARGE_EXT: "GL_TABLE_TOO_LARGE_EXT",
    GL_TEXTURE_TOO_LARGE_EXT: "GL_TEXTURE_TOO_LARGE_EXT",
    GL_INVALID_FRAMEBUFFER_OPERATION: "GL_INVALID_FRAMEBUFFER_OPERATION",
}

_DEBUG_TYPE_NAMES = {
    GL_DEBUG_TYPE_ERROR: "ERROR",
    GL_DEBUG_TYPE_DEPRECATED_BEHAVIOR: "DEPRECATED_BEHAVIOR",
    GL_DEBUG_TYPE_UNDEFINED_BEHAVIOR: "UNDEFINED_BEHAVIOR",
    GL_DEBUG_TYPE_PORTABILITY: "PORTABILITY",
    GL_DEBUG_TYPE_PERFORMANCE: "PERFORMANCE",
    GL_DEBUG_TYPE_MARKER: "MARKER",
    GL_DEBUG_TYPE_PUSH_GROUP: "PUSH_GROUP",
    GL_DEBUG_TYPE_POP_GROUP: "POP_GROUP",
    GL_DEBUG_TYPE_OTHER: "OTHER",
}

_SEVERITY_NAMES = {
    GL_DEBUG_SEVERITY_HIGH: "HIGH",
    GL_DEBUG_SEVERITY_MEDIUM: "MEDIUM",
    GL_DEBUG_SEVERITY_LOW: "LOW",
    GL_DEBUG_SEVERITY_NOTIFICATION: "NOTIFICATION",
}


def gl_error_to_string(err: int) -> str:
    """Symbolic name of a ``glGetError`` code, or ``"unknown"``."""
    try:
        return _ERROR_NAMES[err]
    except KeyError:
        _log.warning("0x%x", err)
        return "unknown"


def debug_message_type_to_string(message_type: int) -> str:
    """Name of a debug message type; raises ValueError for an unknown one."""
    try:
        return _DEBUG_TYPE_NAMES[message_type]
    except KeyError:
        raise ValueError(f"unknown debug message type 0x{message_type:x}") from None


def debug_message_severity_to_string(severity: int) -> str:
    """Name of a debug message severity; raises ValueError for an unknown one."""
    try:
        return _SEVERITY_NAMES[severity]
    except KeyError:
        raise ValueError(f"unknown debug message severity 0x{severity:x}") from None


class GLError(RuntimeError):
    """An error reported by ``glGetError``."""

    def __init__(self, code: int) -> None:
        self.code = code
        self.name = gl_error_to_string(code)
        super().__init__(f"GL error: {self.name}")


def handle_glfw_error(code: int, desc: str) -> None:
    """Log an error reported by GLFW."""
    _log.error("GLFW error: %s", desc)


def handle_gl_error(source: int, message_type: int, message_id: int, severity: int,
                    message: str) -> None:
    """Log a message delivered through the GL debug output callback."""
    _log.error(
        "GL error: type=%s, id=%s, severity=%s, message={%s}",
        debug_message_type_to_string(message_type),
        message_id,
        debug_message_severity_to_string(severity),
        message,
    )


def check_for_gl_error(get_error: Callable[[], int]) -> None:
    """Query ``get_error`` once and raise GLError if it reports a problem."""
    code = get_error()
    if code != GL_NO_ERROR:
        error = GLError(code)
        _log.critical("%s", error)
        raise error