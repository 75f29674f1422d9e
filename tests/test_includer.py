from pathlib import Path

import pytest

from glpipegen.includer import DirStackFileIncluder, IncludeResult


def _posix(path: Path) -> str:
    return str(path).replace("\\", "/")


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_finds_header_next_to_includer(tmp_path):
    _write(tmp_path / "light.glsl", "struct Light {};")
    includer = DirStackFileIncluder()
    result = includer.include_local("light.glsl", str(tmp_path / "main.vert"), 1)
    assert result == IncludeResult(_posix(tmp_path) + "/light.glsl", b"struct Light {};")
    assert result.text == "struct Light {};"


def test_missing_header_returns_none(tmp_path):
    includer = DirStackFileIncluder()
    assert includer.include_local("absent.glsl", str(tmp_path / "main.vert"), 1) is None


def test_system_include_is_never_resolved(tmp_path):
    _write(tmp_path / "light.glsl", "x")
    includer = DirStackFileIncluder()
    includer.push_external_local_directory(tmp_path)
    assert includer.include_system("light.glsl", str(tmp_path / "main.vert"), 1) is None


def test_nested_include_searches_directory_of_parent_first(tmp_path):
    _write(tmp_path / "sub" / "a.glsl", "A")
    _write(tmp_path / "sub" / "b.glsl", "inner")
    _write(tmp_path / "b.glsl", "outer")
    includer = DirStackFileIncluder()
    first = includer.include_local("sub/a.glsl", str(tmp_path / "main.vert"), 1)
    assert first.content == b"A"
    nested = includer.include_local("b.glsl", first.header_name, 2)
    assert nested.content == b"inner"
    assert nested.header_name.endswith("/sub/b.glsl")


def test_returning_to_depth_one_discards_nested_directories(tmp_path):
    _write(tmp_path / "sub" / "a.glsl", "A")
    _write(tmp_path / "b.glsl", "outer")
    includer = DirStackFileIncluder()
    includer.include_local("sub/a.glsl", str(tmp_path / "main.vert"), 1)
    result = includer.include_local("b.glsl", str(tmp_path / "main.vert"), 1)
    assert result.content == b"outer"
    assert includer.directories == (_posix(tmp_path), _posix(tmp_path))


def test_external_directory_is_searched_after_local(tmp_path):
    _write(tmp_path / "ext" / "only_ext.glsl", "ext")
    _write(tmp_path / "ext" / "both.glsl", "ext")
    _write(tmp_path / "src" / "both.glsl", "src")
    includer = DirStackFileIncluder()
    includer.push_external_local_directory(tmp_path / "ext")
    includer_name = str(tmp_path / "src" / "main.frag")
    assert includer.include_local("only_ext.glsl", includer_name, 1).content == b"ext"
    assert includer.include_local("both.glsl", includer_name, 1).content == b"src"


def test_most_recent_external_directory_wins(tmp_path):
    _write(tmp_path / "one" / "h.glsl", "one")
    _write(tmp_path / "two" / "h.glsl", "two")
    includer = DirStackFileIncluder()
    includer.push_external_local_directory(tmp_path / "one")
    includer.push_external_local_directory(tmp_path / "two")
    result = includer.include_local("h.glsl", str(tmp_path / "elsewhere" / "m.vert"), 1)
    assert result.content == b"two"


def test_includer_without_directory_uses_current_directory(tmp_path, monkeypatch):
    _write(tmp_path / "x.glsl", "cwd")
    monkeypatch.chdir(tmp_path)
    result = DirStackFileIncluder().include_local("x.glsl", "main.vert", 1)
    assert result.header_name == "./x.glsl"
    assert result.content == b"cwd"


def test_backslashes_become_forward_slashes(tmp_path):
    _write(tmp_path / "sub" / "h.glsl", "h")
    result = DirStackFileIncluder().include_local("sub\\h.glsl", str(tmp_path / "m.vert"), 1)
    assert "\\" not in result.header_name
    assert result.content == b"h"


def test_negative_depth_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        DirStackFileIncluder().include_local("h.glsl", str(tmp_path / "m.vert"), -1)