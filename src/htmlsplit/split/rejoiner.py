"""Put documents split by `HtmlSplitter` back together."""

from __future__ import annotations

import logging
import re
from typing import Iterable

from bs4 import ParserRejectedMarkup

from htmlsplit.errors import ConsistencyError, ParseError, UnregisteredPartError
from htmlsplit.html import dom
from htmlsplit.models import Document, SplitRecord, normalize_path
from htmlsplit.split.registry import SplitRegistry
from htmlsplit.streams import DocumentTransform

LOGGER = logging.getLogger(__name__)

PART_NAME_PATTERN = re.compile(r"_script_\d+\.[A-Za-z0-9]+$")


class HtmlRejoiner(DocumentTransform):
    """Rejoin split parts into their parent HTML document.

    Parents and parts may arrive in any order. Each arrival is recorded in
    the registry and held back; the arrival that completes a record (the
    parent, or the last missing part) emits the single rejoined document.
    Documents the registry knows nothing about pass through untouched.

    With `strict_parts`, a document named like a split part that no record
    owns is reported as an error instead of being passed through, since it
    usually means an intermediate stage renamed or duplicated a part.
    """

    def __init__(
        self,
        registry: SplitRegistry,
        *,
        strict_parts: bool = False,
        fail_fast: bool = False,
    ) -> None:
        super().__init__(fail_fast=fail_fast)
        self.registry = registry
        self.strict_parts = strict_parts

    def process(self, document: Document) -> Iterable[Document]:
        path = document.path
        if self.registry.is_tracked(path):
            record = self.registry.set_parent_handle(path, document)
            LOGGER.debug("Received parent %s", path)
        else:
            record = self.registry.owner_of(path)
            if record is None:
                if self.strict_parts and PART_NAME_PATTERN.search(path.name):
                    raise UnregisteredPartError(path)
                return [document]
            record = self.registry.set_part_content(path, document.contents)
            LOGGER.debug("Received part %s of %s", path, record.parent_path)

        if not self.registry.is_complete(record):
            LOGGER.debug(
                "Holding %s: waiting on %d part(s)%s",
                record.parent_path,
                record.missing_count,
                "" if record.parent is not None else " and the parent",
            )
            return []
        return [self._rejoin(record)]

    def _rejoin(self, record: SplitRecord) -> Document:
        parent = record.parent
        if parent is None:
            raise ConsistencyError(record.parent_path, "cannot rejoin before the parent arrives")
        try:
            doc = dom.parse(parent.text)
            for script_tag in dom.query_all(doc, dom.is_external_script):
                src = dom.get_attribute(script_tag, "src") or ""
                script_path = normalize_path(record.parent_path.parent / src)
                if script_path not in record.parts:
                    continue
                content = record.parts[script_path] or b""
                dom.remove_attribute(script_tag, "src")
                dom.set_text_content(script_tag, content.decode("utf-8"))
            joined_contents = dom.serialize(doc)
        except (UnicodeError, ParserRejectedMarkup) as exc:
            raise ParseError(record.parent_path, str(exc)) from exc

        self.registry.mark_emitted(record)
        LOGGER.debug("Rejoined %s from %d part(s)", record.parent_path, len(record.parts))
        return parent.with_contents(joined_contents.encode("utf-8"))
