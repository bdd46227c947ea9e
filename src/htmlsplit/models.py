"""Core htmlsplit data models."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Optional


def normalize_path(path: Path | str) -> Path:
    """Collapse `..`, `.` and duplicate separators without touching the filesystem."""
    return Path(os.path.normpath(str(path)))


@dataclass(frozen=True, slots=True)
class Document:
    """An in-flight file: a normalized path, its payload and the base it is relative to."""

    path: Path
    contents: bytes
    base: Optional[Path] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalize_path(self.path))
        if self.base is not None:
            object.__setattr__(self, "base", normalize_path(self.base))

    @property
    def text(self) -> str:
        return self.contents.decode("utf-8")

    def with_contents(self, contents: bytes) -> Document:
        return replace(self, contents=contents)

    def with_path(self, path: Path | str) -> Document:
        return replace(self, path=normalize_path(path))


@dataclass(slots=True)
class SplitRecord:
    """Bookkeeping for one parent document and the parts extracted from it."""

    parent_path: Path
    parts: Dict[Path, Optional[bytes]] = field(default_factory=dict)
    missing_count: int = 0
    parent: Optional[Document] = None
    emitted: bool = False

    @property
    def is_complete(self) -> bool:
        return self.missing_count == 0 and self.parent is not None
