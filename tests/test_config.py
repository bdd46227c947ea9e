"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from htmlsplit.config import DEFAULT_SOURCE_GLOBS, AppConfig


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        """Should create config with default values."""
        config = AppConfig()

        assert config.root == Path.cwd()
        assert config.entrypoint is None
        assert config.shell is None
        assert config.fragments == []
        assert config.source_globs == ["src/**/*", "bower.json"]
        assert config.html_extension == ".html"
        assert config.strict_parts is False

    def test_source_globs_not_shared(self) -> None:
        """Should give every config its own copy of the default globs."""
        first = AppConfig()
        first.source_globs.append("extra/**")

        assert AppConfig().source_globs == DEFAULT_SOURCE_GLOBS
        assert "extra/**" not in DEFAULT_SOURCE_GLOBS

    def test_custom_config(self) -> None:
        """Should create config with custom values."""
        config = AppConfig(
            root=Path("/project"),
            entrypoint="index.html",
            shell="src/app-shell.html",
            fragments=["src/view-one.html"],
            source_globs=["src/**/*.html"],
            strict_parts=True,
        )

        assert config.root == Path("/project")
        assert config.entrypoint == "index.html"
        assert config.shell == "src/app-shell.html"
        assert config.fragments == ["src/view-one.html"]
        assert config.source_globs == ["src/**/*.html"]
        assert config.strict_parts is True

    def test_resolve_root_absolute(self) -> None:
        """Should return absolute root as-is."""
        config = AppConfig(root=Path("/absolute/project"))

        assert config.resolve_root(Path("/elsewhere")) == Path("/absolute/project")

    def test_resolve_root_relative_no_base(self) -> None:
        """Should return relative root when no base_dir provided."""
        config = AppConfig(root=Path("relative/project"))

        assert config.resolve_root(base_dir=None) == Path("relative/project")

    def test_resolve_root_relative_with_base(self) -> None:
        """Should resolve relative root against base_dir."""
        config = AppConfig(root=Path("relative/project"))

        resolved = config.resolve_root(base_dir=Path("/base"))

        assert resolved == Path("/base/relative/project")
