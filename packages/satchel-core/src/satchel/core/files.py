"""File system and file search collaborators.

The bundle engine only talks to these through the small ``File``,
``Directory`` and ``FileSearchStrategy`` protocols. ``FileSystem`` is the local
implementation: it maps app-relative paths (``~/scripts/app.js``) onto a root
directory on disk.
"""

from __future__ import annotations

import fnmatch
import logging
import re
from pathlib import Path
from typing import BinaryIO, List, Optional, Pattern, Protocol, Union

from satchel.core.paths import APP_ROOT, app_relative, combine, normalize_path

log = logging.getLogger("satchel.core.files")


class File(Protocol):
    """A source file addressed by its full virtual path."""

    full_path: str

    @property
    def directory(self) -> "Directory":
        ...

    def open(self) -> BinaryIO:
        ...


class Directory(Protocol):
    full_path: str


class FileSearchStrategy(Protocol):
    """Enumerates candidate files of a directory; order feeds wildcard claims."""

    def find_files(self, directory: "VirtualDirectory") -> List["VirtualFile"]:
        ...


class FileSystem:
    """Local directory exposed through app-relative virtual paths."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).expanduser().resolve()

    def __repr__(self) -> str:
        return f"FileSystem({str(self.root)!r})"

    def to_local(self, path: str) -> Path:
        virtual = normalize_path(app_relative(normalize_path(path)))
        rel = virtual[len(APP_ROOT):].lstrip("/")
        local = (self.root / rel).resolve() if rel else self.root
        if local != self.root and self.root not in local.parents:
            raise ValueError(f"Path escapes the asset root: {path!r}")
        return local

    def get_file(self, path: str) -> "VirtualFile":
        return VirtualFile(self, normalize_path(app_relative(normalize_path(path))))

    def get_directory(self, path: str) -> "VirtualDirectory":
        return VirtualDirectory(self, normalize_path(app_relative(normalize_path(path))))

    def file_exists(self, path: str) -> bool:
        return self.to_local(path).is_file()

    def directory_exists(self, path: str) -> bool:
        return self.to_local(path).is_dir()


class VirtualFile:
    def __init__(self, fs: FileSystem, full_path: str):
        self.fs = fs
        self.full_path = full_path

    def __repr__(self) -> str:
        return f"VirtualFile({self.full_path!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VirtualFile):
            return NotImplemented
        return self.full_path.lower() == other.full_path.lower()

    def __hash__(self) -> int:
        return hash(self.full_path.lower())

    @property
    def name(self) -> str:
        return self.full_path.rsplit("/", 1)[-1]

    @property
    def directory(self) -> "VirtualDirectory":
        parent = self.full_path.rsplit("/", 1)[0] if "/" in self.full_path else APP_ROOT
        return VirtualDirectory(self.fs, parent)

    @property
    def local_path(self) -> Path:
        return self.fs.to_local(self.full_path)

    @property
    def exists(self) -> bool:
        return self.local_path.is_file()

    def open(self) -> BinaryIO:
        return self.local_path.open("rb")


class VirtualDirectory:
    def __init__(self, fs: FileSystem, full_path: str):
        self.fs = fs
        self.full_path = full_path

    def __repr__(self) -> str:
        return f"VirtualDirectory({self.full_path!r})"

    @property
    def name(self) -> str:
        return self.full_path.rsplit("/", 1)[-1]

    @property
    def local_path(self) -> Path:
        return self.fs.to_local(self.full_path)

    @property
    def exists(self) -> bool:
        return self.local_path.is_dir()

    def get_file(self, name: str) -> VirtualFile:
        return VirtualFile(self.fs, normalize_path(combine(self.full_path, name)))

    def get_directory(self, name: str) -> "VirtualDirectory":
        return VirtualDirectory(self.fs, normalize_path(combine(self.full_path, name)))

    def list_files(self) -> List[VirtualFile]:
        entries = sorted((p for p in self.local_path.iterdir() if p.is_file()), key=lambda p: p.name.lower())
        return [self.get_file(p.name) for p in entries]

    def list_directories(self) -> List["VirtualDirectory"]:
        entries = sorted((p for p in self.local_path.iterdir() if p.is_dir()), key=lambda p: p.name.lower())
        return [self.get_directory(p.name) for p in entries]


class FileSearch:
    """Glob/exclude based search over a directory tree.

    ``pattern`` is a ``;``-separated list of globs matched against the file
    name (case-insensitive). ``exclude`` is a regex matched against the full
    virtual path. Files of a directory come first (by name), then each
    sub-directory in name order.
    """

    def __init__(
        self,
        pattern: str = "*",
        exclude: Optional[Union[str, Pattern[str]]] = None,
        recursive: bool = True,
    ):
        self.pattern = pattern or "*"
        self.patterns = [p.strip().lower() for p in self.pattern.split(";") if p.strip()] or ["*"]
        if isinstance(exclude, str):
            exclude = re.compile(exclude, re.IGNORECASE)
        self.exclude = exclude
        self.recursive = recursive

    def __repr__(self) -> str:
        ex = self.exclude.pattern if self.exclude is not None else None
        return f"FileSearch(pattern={self.pattern!r}, exclude={ex!r}, recursive={self.recursive})"

    def matches(self, file: VirtualFile) -> bool:
        name = file.name.lower()
        if not any(fnmatch.fnmatchcase(name, p) for p in self.patterns):
            return False
        if self.exclude is not None and self.exclude.search(file.full_path):
            return False
        return True

    def find_files(self, directory: VirtualDirectory) -> List[VirtualFile]:
        found = [f for f in directory.list_files() if self.matches(f)]
        if self.recursive:
            for sub in directory.list_directories():
                found.extend(self.find_files(sub))
        log.debug("find_files %s -> %d file(s)", directory.full_path, len(found))
        return found
