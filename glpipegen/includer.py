"""Resolution of ``#include`` directives against a stack of directories."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class IncludeResult:
    """A resolved include: the path it was found at and the file's bytes."""

    header_name: str
    content: bytes

    @property
    def text(self) -> str:
        return self.content.decode("utf-8")


def _get_directory(path: str) -> str:
    """Directory part of ``path``, or ``"."`` when it has no separator."""
    last = max(path.rfind("/"), path.rfind("\\"))
    return "." if last == -1 else path[:last]


def _try_read(path: str) -> bytes | None:
    try:
        return Path(path).read_bytes()
    except OSError:
        return None


class DirStackFileIncluder:
    """Searches backwards through the stack of active include directories.

    Directories pushed with :meth:`push_external_local_directory` sit at the
    bottom of the stack and are searched after the directories of the files
    currently being included; the most recently pushed is searched first.
    System (angle-bracket) includes are looked up only in the
    ``system_directories`` given, of which there are none by default.
    """

    def __init__(self, system_directories=()) -> None:
        self._directory_stack: list[str] = []
        self._external_count = 0
        self._system_directories = tuple(str(d) for d in system_directories)

    @property
    def directories(self) -> tuple[str, ...]:
        return tuple(self._directory_stack)

    def push_external_local_directory(self, directory) -> None:
        """Add a directory to search for local (quoted) includes."""
        self._directory_stack.append(str(directory))
        self._external_count = len(self._directory_stack)

    def include_local(self, header_name: str, includer_name: str,
                      inclusion_depth: int) -> IncludeResult | None:
        """Resolve ``#include "header_name"``; None when no file is found."""
        return self._read_local_path(header_name, includer_name, int(inclusion_depth))

    def include_system(self, header_name: str, includer_name: str,
                       inclusion_depth: int) -> IncludeResult | None:
        """Resolve ``#include <header_name>``; None when no file is found."""
        return self._read_system_path(header_name)

    def _read_system_path(self, header_name: str) -> IncludeResult | None:
        for directory in self._system_directories:
            path = f"{directory}/{header_name}".replace("\\", "/")
            content = _try_read(path)
            if content is not None:
                return IncludeResult(path, content)
        return None

    def _read_local_path(self, header_name: str, includer_name: str,
                         depth: int) -> IncludeResult | None:
        if depth < 0:
            raise ValueError("inclusion depth must be non-negative")
        size = depth + self._external_count
        del self._directory_stack[size:]
        self._directory_stack.extend([""] * (size - len(self._directory_stack)))
        if depth == 1:
            self._directory_stack[-1] = _get_directory(includer_name)

        for directory in reversed(list(self._directory_stack)):
            path = f"{directory}/{header_name}".replace("\\", "/")
            content = _try_read(path)
            if content is None:
                continue
            self._directory_stack.append(_get_directory(path))
            return IncludeResult(path, content)
        return None