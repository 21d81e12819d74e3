"""Resource stores — where page, component, and script files live.

The engine only needs three capabilities from storage: existence checks,
listing the files that share a base name, and reading bytes. Anything that
provides them satisfies ``ResourceStore``.

Paths are posix-style strings. ``list_matching(prefix)`` receives
``"<directory>/<base>"`` and returns the names (not paths) of the files in
``<directory>`` that start with ``"<base>."``, sorted.
"""

import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class ResourceStore(Protocol):
    """Read-only, filesystem-like provider of resource files."""

    def exists(self, path: str) -> bool: ...

    def list_matching(self, prefix: str) -> list[str]: ...

    def read_all(self, path: str) -> bytes: ...


class FileSystemStore:
    """Resources read from the local filesystem.

    Thread-Safety:
        Safe. Stateless apart from the optional root.
    """

    __slots__ = ("_root",)

    def __init__(self, root: str | Path | None = None) -> None:
        self._root = Path(root) if root is not None else None

    def _path(self, path: str) -> Path:
        candidate = Path(path)
        if self._root is not None and not candidate.is_absolute():
            return self._root / candidate
        return candidate

    def exists(self, path: str) -> bool:
        return self._path(path).is_file()

    def list_matching(self, prefix: str) -> list[str]:
        target = self._path(prefix)
        directory = target.parent
        if not directory.is_dir():
            return []
        stem = target.name + "."
        return sorted(
            item.name
            for item in directory.iterdir()
            if item.name.startswith(stem) and item.is_file()
        )

    def read_all(self, path: str) -> bytes:
        return self._path(path).read_bytes()

    def __repr__(self) -> str:
        return f"FileSystemStore({self._root!s})" if self._root else "FileSystemStore()"


class DictStore:
    """Resources held in memory, keyed by posix path.

    Useful for tests and for embedding pages that never touch disk::

        store = DictStore({
            "pages/home/content.html": "<p>Hi {{ name }}</p>",
            "pages/home/scripts.js": "console.log('ready');",
        })
    """

    __slots__ = ("_files",)

    def __init__(self, files: Mapping[str, str | bytes] | None = None) -> None:
        self._files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.add(path, content)

    def add(self, path: str, content: str | bytes) -> None:
        data = content.encode("utf-8") if isinstance(content, str) else content
        self._files[posixpath.normpath(path)] = data

    def exists(self, path: str) -> bool:
        return posixpath.normpath(path) in self._files

    def list_matching(self, prefix: str) -> list[str]:
        normalized = posixpath.normpath(prefix)
        directory, base = posixpath.split(normalized)
        stem = base + "."
        names = []
        for path in self._files:
            parent, name = posixpath.split(path)
            if parent == directory and name.startswith(stem):
                names.append(name)
        return sorted(names)

    def read_all(self, path: str) -> bytes:
        try:
            return self._files[posixpath.normpath(path)]
        except KeyError:
            raise FileNotFoundError(path) from None

    def __repr__(self) -> str:
        return f"DictStore({len(self._files)} files)"
