"""Document stream transforms and helpers for forking and merging streams."""

from __future__ import annotations

import itertools
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional

from htmlsplit.errors import SplitError
from htmlsplit.models import Document

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class TransformFailure:
    path: Path
    error: SplitError


class DocumentTransform:
    """Base class for one-to-many document transforms.

    Subclasses implement `process`, which handles a single document and
    returns its outputs (possibly none). Calling the transform on an iterable
    pulls one document at a time and yields its outputs only once the whole
    document has been handled, so a failing document never emits partial
    output. Failures are logged and collected on `failures`; the stream moves
    on to the next document unless `fail_fast` is set.
    """

    def __init__(self, *, fail_fast: bool = False) -> None:
        self.fail_fast = fail_fast
        self.failures: List[TransformFailure] = []

    def process(self, document: Document) -> Iterable[Document]:
        raise NotImplementedError

    def __call__(self, documents: Iterable[Document]) -> Iterator[Document]:
        for document in documents:
            try:
                outputs = list(self.process(document))
            except SplitError as exc:
                LOGGER.error("Failed to process %s: %s", document.path, exc.message)
                self.failures.append(TransformFailure(path=document.path, error=exc))
                if self.fail_fast:
                    raise
                continue
            yield from outputs


Stage = Callable[[Iterable[Document]], Iterable[Document]]


def run_pipeline(documents: Iterable[Document], *stages: Stage) -> Iterator[Document]:
    """Feed `documents` through each stage in turn."""
    stream: Iterable[Document] = documents
    for stage in stages:
        stream = stage(stream)
    return iter(stream)


def fork_stream(
    documents: Iterable[Document], predicate: Callable[[Document], bool]
) -> tuple[Iterator[Document], Iterator[Document]]:
    """Split a stream into (matching, rest) branches."""
    left, right = itertools.tee(documents)
    return (
        (doc for doc in left if predicate(doc)),
        (doc for doc in right if not predicate(doc)),
    )


def merge_streams(
    *streams: Iterable[Document], shuffle: bool = False, seed: Optional[int] = None
) -> Iterator[Document]:
    """Join branches back into one stream.

    Without `shuffle` the branches are interleaved round-robin. With `shuffle`
    the combined items are delivered in a random order, which is the only
    guarantee a merge of forked branches really gives.
    """
    if shuffle:
        merged = [doc for stream in streams for doc in stream]
        random.Random(seed).shuffle(merged)
        yield from merged
        return

    sentinel = object()
    for batch in itertools.zip_longest(*streams, fillvalue=sentinel):
        for doc in batch:
            if doc is not sentinel:
                yield doc
