"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

DEFAULT_SOURCE_GLOBS = [
    "src/**/*",
    # Project metadata that tooling reads alongside the sources.
    "bower.json",
]

HTML_EXTENSION = ".html"


@dataclass(slots=True)
class AppConfig:
    root: Path | None = None
    entrypoint: str | None = None
    shell: str | None = None
    fragments: List[str] = field(default_factory=list)
    source_globs: List[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_GLOBS))
    html_extension: str = HTML_EXTENSION
    strict_parts: bool = False

    def __post_init__(self) -> None:
        if self.root is None:
            self.root = Path.cwd()

    def resolve_root(self, base_dir: Path | None = None) -> Path:
        if self.root is None:
            self.root = Path.cwd()
        if Path(self.root).is_absolute() or base_dir is None:
            return Path(self.root)
        return base_dir / self.root
