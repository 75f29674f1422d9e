"""C++ pipeline binding code generation from reflected GLSL, with camera and transform math."""

__version__ = "0.1.0"