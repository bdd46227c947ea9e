"""Tests for HtmlSplitter."""

from __future__ import annotations

from pathlib import Path

import pytest

from htmlsplit.errors import DuplicateSplitError, ParseError
from htmlsplit.html import dom
from htmlsplit.models import Document
from htmlsplit.split.registry import SplitRegistry
from htmlsplit.split.splitter import HtmlSplitter, extension_for_type, part_filename

SCENARIO = (
    b"<script>console.log(1)</script>"
    b'<script type="application/x-typescript">let x:number=1</script>'
)


@pytest.fixture
def registry() -> SplitRegistry:
    return SplitRegistry()


@pytest.fixture
def splitter(registry: SplitRegistry) -> HtmlSplitter:
    return HtmlSplitter(registry)


def _scripts(document: Document):
    return dom.query_all(dom.parse(document.text), dom.has_tag_name("script"))


class TestExtensionForType:
    """Test the content-type to extension lookup."""

    @pytest.mark.parametrize(
        "type_attribute, expected",
        [
            ("text/ecmascript-6", "js"),
            ("application/javascript", "js"),
            ("text/javascript", "js"),
            ("application/x-typescript", "ts"),
            ("text/x-typescript", "ts"),
            ("module", "js"),
            ("", "js"),
            (None, "js"),
        ],
    )
    def test_extension_for_type(self, type_attribute, expected) -> None:
        assert extension_for_type(type_attribute) == expected

    def test_part_filename(self) -> None:
        assert part_filename("index.html", 3, "ts") == "index.html_script_3.ts"


class TestPassthrough:
    """Documents the splitter leaves alone."""

    def test_non_html_passthrough(self, splitter: HtmlSplitter, registry: SplitRegistry) -> None:
        """Should return non-HTML documents unchanged."""
        document = Document(path="a/app.js", contents=b"<script>x</script>")

        assert list(splitter([document])) == [document]
        assert len(registry) == 0

    def test_empty_html_passthrough(self, splitter: HtmlSplitter) -> None:
        """Should return empty HTML documents unchanged."""
        document = Document(path="a/index.html", contents=b"")

        outputs = list(splitter([document]))

        assert outputs == [document]

    def test_html_without_inline_scripts(
        self, splitter: HtmlSplitter, registry: SplitRegistry
    ) -> None:
        """Should pass through HTML with only external scripts, byte for byte."""
        document = Document(
            path="a/index.html",
            contents=b'<html><body><script src="lib.js"></script><p>x</p></body></html>',
        )

        outputs = list(splitter([document]))

        assert outputs == [document]
        assert outputs[0].contents == document.contents
        assert not registry.is_tracked("a/index.html")

    def test_custom_extension(self, registry: SplitRegistry) -> None:
        """Should only split documents with the configured extension."""
        splitter = HtmlSplitter(registry, extension=".htm")
        html = Document(path="a/index.html", contents=b"<script>x</script>")
        htm = Document(path="a/index.htm", contents=b"<script>x</script>")

        outputs = list(splitter([html, htm]))

        assert outputs[0] == html
        assert [doc.path.name for doc in outputs[1:]] == ["index.htm_script_0.js", "index.htm"]


class TestSplit:
    """Test extraction of inline scripts."""

    def test_scenario(self, splitter: HtmlSplitter, registry: SplitRegistry) -> None:
        """Should extract both scripts and rewrite the parent."""
        outputs = list(splitter([Document(path="a/index.html", contents=SCENARIO)]))

        assert [doc.path for doc in outputs] == [
            Path("a/index.html_script_0.js"),
            Path("a/index.html_script_1.ts"),
            Path("a/index.html"),
        ]
        assert outputs[0].contents == b"console.log(1)"
        assert outputs[1].contents == b"let x:number=1"

        scripts = _scripts(outputs[2])
        assert [dom.get_attribute(tag, "src") for tag in scripts] == [
            "index.html_script_0.js",
            "index.html_script_1.ts",
        ]
        assert all(dom.get_text_content(tag) == "" for tag in scripts)
        assert dom.get_attribute(scripts[1], "type") == "application/x-typescript"

    def test_registers_relationship(self, splitter: HtmlSplitter, registry: SplitRegistry) -> None:
        """Should record the parent and its parts in the registry."""
        list(splitter([Document(path="a/index.html", contents=SCENARIO)]))

        record = registry.get("a/index.html")
        assert record is not None
        assert list(record.parts) == [
            Path("a/index.html_script_0.js"),
            Path("a/index.html_script_1.ts"),
        ]
        assert record.missing_count == 2
        assert record.parent is None
        assert registry.owner_of("a/index.html_script_1.ts") is record

    def test_document_order_indexing(self, splitter: HtmlSplitter) -> None:
        """Should index only inline scripts, in document order, and keep element order."""
        html = (
            b"<html><head><script src='lib.js'></script><script>one()</script></head>"
            b"<body><script type='text/x-typescript'>two()</script>"
            b"<script src='other.js'></script><script>three()</script></body></html>"
        )

        outputs = list(splitter([Document(path="site/page.html", contents=html)]))

        children, parent = outputs[:-1], outputs[-1]
        assert [doc.path.name for doc in children] == [
            "page.html_script_0.js",
            "page.html_script_1.ts",
            "page.html_script_2.js",
        ]
        assert [doc.contents for doc in children] == [b"one()", b"two()", b"three()"]
        assert [dom.get_attribute(tag, "src") for tag in _scripts(parent)] == [
            "lib.js",
            "page.html_script_0.js",
            "page.html_script_1.ts",
            "other.js",
            "page.html_script_2.js",
        ]

    def test_script_text_verbatim(self, splitter: HtmlSplitter) -> None:
        """Should keep script source byte for byte, including markup-like characters."""
        source = "if (a < b && c > d) { s = '&amp;'; }\n"
        document = Document(path="a/index.html", contents=f"<script>{source}</script>".encode())

        child = list(splitter([document]))[0]

        assert child.text == source

    def test_empty_inline_script(self, splitter: HtmlSplitter) -> None:
        """Should extract an empty inline script as an empty part."""
        outputs = list(splitter([Document(path="a/index.html", contents=b"<script></script>")]))

        assert outputs[0].path == Path("a/index.html_script_0.js")
        assert outputs[0].contents == b""

    def test_styles_not_extracted(self, splitter: HtmlSplitter) -> None:
        """Should leave style elements untouched."""
        html = b"<style>p { color: red; }</style><script>go()</script>"

        outputs = list(splitter([Document(path="a/index.html", contents=html)]))

        assert len(outputs) == 2
        parent = dom.parse(outputs[-1].text)
        styles = dom.query_all(parent, dom.is_style)
        assert len(styles) == 1
        assert dom.get_text_content(styles[0]) == "p { color: red; }"
        assert not styles[0].has_attr("src")

    def test_keeps_base(self, splitter: HtmlSplitter) -> None:
        """Should give parts the parent's base."""
        document = Document(path="/p/a/index.html", contents=b"<script>x</script>", base=Path("/p"))

        outputs = list(splitter([document]))

        assert all(doc.base == Path("/p") for doc in outputs)


class TestFailures:
    """Test failure handling."""

    def test_undecodable_document(self, splitter: HtmlSplitter, registry: SplitRegistry) -> None:
        """Should record a parse failure and emit nothing for the document."""
        bad = Document(path="a/bad.html", contents=b"<script>\xff\xfe</script>")
        good = Document(path="a/good.html", contents=b"<script>ok()</script>")

        outputs = list(splitter([bad, good]))

        assert [doc.path.name for doc in outputs] == ["good.html_script_0.js", "good.html"]
        assert len(splitter.failures) == 1
        assert splitter.failures[0].path == Path("a/bad.html")
        assert isinstance(splitter.failures[0].error, ParseError)
        assert not registry.is_tracked("a/bad.html")

    def test_fail_fast(self, registry: SplitRegistry) -> None:
        """Should raise when fail_fast is set."""
        splitter = HtmlSplitter(registry, fail_fast=True)

        with pytest.raises(ParseError):
            list(splitter([Document(path="a/bad.html", contents=b"\xff")]))

    def test_split_twice_rejected(self, splitter: HtmlSplitter, registry: SplitRegistry) -> None:
        """Should refuse to split the same parent a second time."""
        document = Document(path="a/index.html", contents=SCENARIO)

        outputs = list(splitter([document, document]))

        assert len(outputs) == 3
        assert len(splitter.failures) == 1
        assert isinstance(splitter.failures[0].error, DuplicateSplitError)
        assert registry.get("a/index.html").missing_count == 2

    def test_second_splitter_on_shared_registry(self, registry: SplitRegistry) -> None:
        """Should reject a colliding parent split by another splitter sharing the registry."""
        document = Document(path="a/index.html", contents=SCENARIO)
        list(HtmlSplitter(registry)([document]))

        other = HtmlSplitter(registry)
        assert list(other([document])) == []
        assert isinstance(other.failures[0].error, DuplicateSplitError)
