"""Utility helpers for working with files and globs."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator

from htmlsplit.config import HTML_EXTENSION


def iter_html_paths(inputs: Iterable[Path], *, extension: str = HTML_EXTENSION) -> Iterator[Path]:
    """Yield HTML paths from input paths, descending into directories."""
    for item in inputs:
        if item.is_dir():
            yield from iter_html_paths(
                sorted(child for child in item.rglob(f"*{extension}")), extension=extension
            )
        elif item.is_file() and item.name.endswith(extension):
            yield item


def resolve_glob(root: Path, glob: str) -> str:
    """Anchor a glob at `root`, keeping a leading `!` exclusion marker."""
    if glob.startswith("!"):
        return "!" + str(root / glob[1:])
    return str(root / glob)


def invert_glob(glob: str) -> str:
    return glob[1:] if glob.startswith("!") else "!" + glob


def iter_glob_files(root: Path, globs: Iterable[str]) -> Iterator[Path]:
    """Yield files under `root` matched by `globs`, minus `!`-prefixed exclusions.

    Results are deduplicated and sorted so repeated runs see the same order.
    """
    included: set[Path] = set()
    excluded: set[Path] = set()
    for glob in globs:
        target = excluded if glob.startswith("!") else included
        pattern = glob[1:] if glob.startswith("!") else glob
        if Path(pattern).is_absolute():
            pattern = str(Path(pattern).relative_to(root))
        target.update(path for path in root.glob(pattern) if path.is_file())
    yield from sorted(included - excluded)
