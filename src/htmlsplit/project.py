"""Project-level entry point tying sources, splitter and rejoiner together."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, List

from htmlsplit.config import AppConfig
from htmlsplit.errors import IncompleteRejoinError
from htmlsplit.models import Document, SplitRecord
from htmlsplit.split.registry import SplitRegistry
from htmlsplit.split.rejoiner import HtmlRejoiner
from htmlsplit.split.splitter import HtmlSplitter
from htmlsplit.utils.files import iter_glob_files, resolve_glob

LOGGER = logging.getLogger(__name__)


class HtmlProject:
    """Splits and rejoins inline scripts from a project's HTML files.

    Use `split_html()` and `rejoin_html()` to surround processing steps that
    operate on the extracted scripts. Every splitter and rejoiner handed out
    by one project shares the project's registry, so a parent may be split by
    any of them and rejoined by any other. Call `finalize()` once the stream
    has been drained to find documents that were split but never rejoined.
    """

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.root = self.config.resolve_root(Path.cwd()).resolve()
        self.entrypoint = self._resolve(self.config.entrypoint)
        self.shell = self._resolve(self.config.shell)
        self.fragments = [self.root / fragment for fragment in self.config.fragments]
        self.source_globs = [resolve_glob(self.root, glob) for glob in self.config.source_globs]
        self.registry = SplitRegistry()

        LOGGER.debug("root: %s", self.root)
        LOGGER.debug("entrypoint: %s", self.entrypoint)
        LOGGER.debug("shell: %s", self.shell)
        LOGGER.debug("fragments: %s", self.fragments)
        LOGGER.debug("sources: %s", self.source_globs)

    def _resolve(self, relative: str | None) -> Path | None:
        return self.root / relative if relative else None

    @property
    def all_source_globs(self) -> List[str]:
        """Entrypoint, shell and fragments followed by the source globs."""
        globs: List[str] = []
        if self.entrypoint is not None:
            globs.append(str(self.entrypoint))
        if self.shell is not None:
            globs.append(str(self.shell))
        globs.extend(str(fragment) for fragment in self.fragments)
        globs.extend(self.source_globs)
        return globs

    def sources(self) -> Iterator[Document]:
        """Read every project source file as a `Document` rooted at the project root."""
        for path in iter_glob_files(self.root, self.all_source_globs):
            yield Document(path=path, contents=path.read_bytes(), base=self.root)

    def split_html(self, *, fail_fast: bool = False) -> HtmlSplitter:
        return HtmlSplitter(
            self.registry, extension=self.config.html_extension, fail_fast=fail_fast
        )

    def rejoin_html(self, *, fail_fast: bool = False) -> HtmlRejoiner:
        return HtmlRejoiner(
            self.registry, strict_parts=self.config.strict_parts, fail_fast=fail_fast
        )

    def is_split_file(self, parent_path: Path | str) -> bool:
        return self.registry.is_tracked(parent_path)

    def get_split_file(self, parent_path: Path | str) -> SplitRecord | None:
        return self.registry.get(parent_path)

    def get_parent_file(self, child_path: Path | str) -> SplitRecord | None:
        return self.registry.owner_of(child_path)

    def finalize(self) -> None:
        """Report documents that were split but never rejoined.

        Raises `IncompleteRejoinError` listing their paths; their records stay
        in the registry.
        """
        incomplete = self.registry.incomplete_records()
        for record in incomplete:
            LOGGER.warning(
                "%s was split but never rejoined (%d part(s) missing, parent %s)",
                record.parent_path,
                record.missing_count,
                "received" if record.parent is not None else "missing",
            )
        if incomplete:
            raise IncompleteRejoinError(record.parent_path for record in incomplete)
        LOGGER.info("All %d split document(s) rejoined", len(self.registry))
