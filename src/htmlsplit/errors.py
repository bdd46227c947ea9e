"""Exceptions raised while splitting and rejoining documents."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable


class SplitError(Exception):
    """Base class for failures tied to a single document path."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)
        self.message = message


class ParseError(SplitError):
    """A composite document could not be decoded, parsed or serialized."""


class ConsistencyError(SplitError):
    """The split registry was asked to do something that breaks its invariants."""


class DuplicateSplitError(ConsistencyError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "document was already split; splitting it again is not supported")


class PartOwnershipError(ConsistencyError):
    def __init__(self, path: Path | str, owner: Path | str) -> None:
        super().__init__(path, f"part is already registered under {owner}")
        self.owner = Path(owner)


class UnknownPartError(ConsistencyError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "no split record owns this part")


class PartAlreadySetError(ConsistencyError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "part content was already received")


class ParentAlreadySetError(ConsistencyError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "parent document was already received; it is being reprocessed")


class RecordFinalizedError(ConsistencyError):
    def __init__(self, path: Path | str, parent_path: Path | str) -> None:
        super().__init__(path, f"arrived after {parent_path} was already rejoined")
        self.parent_path = Path(parent_path)


class UnregisteredPartError(SplitError):
    def __init__(self, path: Path | str) -> None:
        super().__init__(path, "looks like a split part but no split record owns it")


class IncompleteRejoinError(SplitError):
    """Raised when a run finishes while some split documents were never rejoined."""

    def __init__(self, parent_paths: Iterable[Path]) -> None:
        self.parent_paths = [Path(p) for p in parent_paths]
        listing = ", ".join(str(p) for p in self.parent_paths)
        super().__init__(
            self.parent_paths[0] if self.parent_paths else "",
            f"{len(self.parent_paths)} split document(s) never rejoined: {listing}",
        )
