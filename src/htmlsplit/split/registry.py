"""Bookkeeping shared by the HTML splitter and rejoiner."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from htmlsplit.errors import (
    ConsistencyError,
    DuplicateSplitError,
    ParentAlreadySetError,
    PartAlreadySetError,
    PartOwnershipError,
    RecordFinalizedError,
    UnknownPartError,
)
from htmlsplit.models import Document, SplitRecord, normalize_path

LOGGER = logging.getLogger(__name__)


class SplitRegistry:
    """Tracks which parts were split from which parent and what has come back.

    One registry is shared by a splitter and a rejoiner. Records are keyed by
    parent path; a reverse index maps each part path to its owning record.
    Every mutation raises a `ConsistencyError` subclass instead of silently
    overwriting state.
    """

    def __init__(self) -> None:
        self._records: Dict[Path, SplitRecord] = {}
        self._owners: Dict[Path, SplitRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, parent_path: object) -> bool:
        return isinstance(parent_path, (str, Path)) and self.is_tracked(parent_path)

    def __iter__(self) -> Iterator[SplitRecord]:
        return iter(list(self._records.values()))

    def get_or_create(self, parent_path: Path | str) -> SplitRecord:
        key = normalize_path(parent_path)
        record = self._records.get(key)
        if record is None:
            record = SplitRecord(parent_path=key)
            self._records[key] = record
        return record

    def get(self, parent_path: Path | str) -> Optional[SplitRecord]:
        return self._records.get(normalize_path(parent_path))

    def begin_split(self, parent_path: Path | str) -> SplitRecord:
        """Create the record for a fresh split of `parent_path`."""
        key = normalize_path(parent_path)
        if key in self._records:
            raise DuplicateSplitError(key)
        return self.get_or_create(key)

    def register_part(self, parent_path: Path | str, child_path: Path | str) -> None:
        record = self.get_or_create(parent_path)
        child = normalize_path(child_path)
        if record.emitted:
            raise RecordFinalizedError(child, record.parent_path)
        owner = self._owners.get(child)
        if owner is not None:
            raise PartOwnershipError(child, owner.parent_path)
        record.parts[child] = None
        record.missing_count += 1
        self._owners[child] = record
        LOGGER.debug("Registered %s as part of %s", child, record.parent_path)

    def set_part_content(self, child_path: Path | str, content: bytes) -> SplitRecord:
        child = normalize_path(child_path)
        record = self._owners.get(child)
        if record is None:
            raise UnknownPartError(child)
        if record.emitted:
            raise RecordFinalizedError(child, record.parent_path)
        if record.parts[child] is not None:
            raise PartAlreadySetError(child)
        record.parts[child] = content
        record.missing_count -= 1
        return record

    def set_parent_handle(self, parent_path: Path | str, document: Document) -> SplitRecord:
        key = normalize_path(parent_path)
        record = self._records.get(key)
        if record is None:
            raise ConsistencyError(key, "document was never split")
        if record.emitted:
            raise RecordFinalizedError(key, key)
        if record.parent is not None:
            raise ParentAlreadySetError(key)
        record.parent = document
        return record

    def mark_emitted(self, record: SplitRecord) -> None:
        """Move a complete record out of the accepting-updates state."""
        if record.emitted:
            raise RecordFinalizedError(record.parent_path, record.parent_path)
        if not record.is_complete:
            raise ConsistencyError(record.parent_path, "cannot rejoin an incomplete record")
        record.emitted = True

    def is_complete(self, record: SplitRecord) -> bool:
        return record.is_complete

    def owner_of(self, child_path: Path | str) -> Optional[SplitRecord]:
        return self._owners.get(normalize_path(child_path))

    def is_tracked(self, parent_path: Path | str) -> bool:
        return normalize_path(parent_path) in self._records

    def incomplete_records(self) -> List[SplitRecord]:
        """Records still waiting on their parent or on at least one part."""
        return [record for record in self._records.values() if not record.emitted]
