"""Parse, query and serialize HTML documents.

A thin layer over BeautifulSoup with the built-in ``html.parser`` backend,
which leaves missing ``<html>``/``<body>`` wrappers alone so fragments
serialize back the way they were written.
"""

from __future__ import annotations

from typing import Callable, List, Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import Doctype, PageElement, Script

Predicate = Callable[[Tag], bool]

PARSER = "html.parser"


def parse(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, PARSER)


def serialize(doc: BeautifulSoup) -> str:
    parts = []
    for node in doc.contents:
        if isinstance(node, Doctype):
            # bs4 appends a newline to doctypes and only strips an upper-case
            # "DOCTYPE " keyword; keep the source layout instead.
            if node.lower().startswith("doctype "):
                parts.append(f"<!{node}>")
            else:
                parts.append(f"<!DOCTYPE {node}>")
        elif isinstance(node, Tag):
            parts.append(node.decode(formatter="minimal"))
        else:
            parts.append(node.output_ready(formatter="minimal"))
    return "".join(parts)


def has_tag_name(name: str) -> Predicate:
    return lambda tag: tag.name == name


def has_attr(name: str) -> Predicate:
    return lambda tag: tag.has_attr(name)


def not_(predicate: Predicate) -> Predicate:
    return lambda tag: not predicate(tag)


def and_(*predicates: Predicate) -> Predicate:
    return lambda tag: all(predicate(tag) for predicate in predicates)


is_inline_script = and_(has_tag_name("script"), not_(has_attr("src")))
is_external_script = and_(has_tag_name("script"), has_attr("src"))
is_style = has_tag_name("style")


def query_all(doc: BeautifulSoup | Tag, predicate: Predicate) -> List[Tag]:
    """Return every element matching `predicate`, in document order."""
    return [tag for tag in doc.find_all(True) if predicate(tag)]


def get_attribute(tag: Tag, name: str) -> Optional[str]:
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value


def set_attribute(tag: Tag, name: str, value: str) -> None:
    tag[name] = value


def remove_attribute(tag: Tag, name: str) -> None:
    if tag.has_attr(name):
        del tag[name]


def get_text_content(tag: Tag) -> str:
    return "".join(str(child) for child in tag.descendants if isinstance(child, NavigableString))


def set_text_content(tag: Tag, text: str) -> None:
    tag.clear()
    if text:
        # Script strings are written out verbatim, without entity escaping.
        tag.append(Script(text))


def _signature(node: PageElement) -> tuple:
    # Flattened walk with an explicit stack; deep nesting must not hit the recursion limit.
    items: List[tuple] = []
    stack: List[Optional[PageElement]] = [node]
    while stack:
        current = stack.pop()
        if current is None:
            items.append(("/",))
        elif isinstance(current, Tag):
            attrs = tuple(sorted((key, get_attribute(current, key) or "") for key in current.attrs))
            items.append((current.name, attrs))
            stack.append(None)
            stack.extend(reversed(current.contents))
        else:
            items.append((type(current).__name__, str(current)))
    return tuple(items)


def structurally_equal(left: str, right: str) -> bool:
    """Compare two documents by elements, attributes and text, ignoring attribute order."""
    return _signature(parse(left)) == _signature(parse(right))
