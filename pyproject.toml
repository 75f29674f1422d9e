[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glpipegen"
version = "0.1.0"
description = "Generate C++ graphics-pipeline binding code from reflected GLSL programs, with small camera and transform math helpers."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["glsl", "opengl", "shaders", "code generation", "pipeline", "std140", "camera", "quaternion"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["glpipegen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
