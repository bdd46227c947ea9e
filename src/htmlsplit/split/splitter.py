"""Extract inline scripts from HTML documents into separate documents."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List

from bs4 import ParserRejectedMarkup

from htmlsplit.config import HTML_EXTENSION
from htmlsplit.errors import ParseError
from htmlsplit.html import dom
from htmlsplit.models import Document
from htmlsplit.split.registry import SplitRegistry
from htmlsplit.streams import DocumentTransform

LOGGER = logging.getLogger(__name__)

EXTENSIONS_FOR_TYPE: Dict[str, str] = {
    "text/ecmascript-6": "js",
    "application/javascript": "js",
    "text/javascript": "js",
    "application/x-typescript": "ts",
    "text/x-typescript": "ts",
}
DEFAULT_SCRIPT_EXTENSION = "js"


def extension_for_type(type_attribute: str | None) -> str:
    if not type_attribute:
        return DEFAULT_SCRIPT_EXTENSION
    return EXTENSIONS_FOR_TYPE.get(type_attribute, DEFAULT_SCRIPT_EXTENSION)


def part_filename(parent_name: str, index: int, extension: str) -> str:
    return f"{parent_name}_script_{index}.{extension}"


class HtmlSplitter(DocumentTransform):
    """Split inline scripts out of HTML documents.

    Each inline script becomes its own document next to the parent, named
    `<parent>_script_<i>.<ext>`, and the parent's script element is rewritten
    to point at it. The splitter keeps no state of its own; the parent/part
    relationship is recorded in the shared registry so a `HtmlRejoiner`
    further down the stream can put the document back together.
    """

    def __init__(
        self,
        registry: SplitRegistry,
        *,
        extension: str = HTML_EXTENSION,
        fail_fast: bool = False,
    ) -> None:
        super().__init__(fail_fast=fail_fast)
        self.registry = registry
        self.extension = extension

    def process(self, document: Document) -> Iterable[Document]:
        if not document.contents or not str(document.path).endswith(self.extension):
            return [document]

        try:
            doc = dom.parse(document.text)
            script_tags = dom.query_all(doc, dom.is_inline_script)
            style_tags = dom.query_all(doc, dom.is_style)

            parts: List[Document] = []
            for index, script_tag in enumerate(script_tags):
                source = dom.get_text_content(script_tag)
                extension = extension_for_type(dom.get_attribute(script_tag, "type"))
                child_name = part_filename(document.path.name, index, extension)
                dom.set_text_content(script_tag, "")
                dom.set_attribute(script_tag, "src", child_name)
                parts.append(
                    Document(
                        path=document.path.parent / child_name,
                        contents=source.encode("utf-8"),
                        base=document.base,
                    )
                )

            split_contents = dom.serialize(doc)
        except (UnicodeError, ParserRejectedMarkup) as exc:
            raise ParseError(document.path, str(exc)) from exc

        LOGGER.debug(
            "Split %s: %d inline script(s), %d style element(s) left in place",
            document.path,
            len(parts),
            len(style_tags),
        )
        if not parts:
            return [document]

        self.registry.begin_split(document.path)
        for part in parts:
            self.registry.register_part(document.path, part.path)
        return [*parts, document.with_contents(split_contents.encode("utf-8"))]
