"""Shared fixtures for site_emmer tests.

The ``site`` fixture builds throwaway site trees under ``tmp_path`` so every
test works against real files: ``site.write("content/home/index.html", ...)``
creates parents as needed, and ``site.config()`` returns a
:class:`~site_emmer.config.BuildConfig` rooted at the tree.
"""

from __future__ import annotations

import datetime as dt
import typing as typ
from pathlib import Path
from textwrap import dedent

import pytest

from site_emmer.config import BuildConfig

FIXED_TODAY = dt.date(2024, 5, 17)


class SiteTree:
    """Helper for writing site files relative to a root directory."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def write(self, relative: str, text: str) -> Path:
        """Write dedented ``text`` to ``root/relative`` and return the path."""
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dedent(text), encoding="utf-8")
        return path

    def read(self, relative: str) -> str:
        """Return the text of ``root/relative``."""
        return (self.root / relative).read_text(encoding="utf-8")

    def config(self, **overrides: typ.Any) -> BuildConfig:
        """Return a build configuration rooted at this tree."""
        return BuildConfig(root_dir=self.root, **overrides)

    def output_files(self, output: str = "dist") -> dict[str, bytes]:
        """Return every output file keyed by its output-relative POSIX path."""
        base = self.root / output
        return {
            path.relative_to(base).as_posix(): path.read_bytes()
            for path in sorted(base.rglob("*"))
            if path.is_file()
        }


@pytest.fixture
def site(tmp_path: Path) -> SiteTree:
    """Return an empty site tree rooted in a per-test directory."""
    root = tmp_path / "site"
    root.mkdir()
    return SiteTree(root)


@pytest.fixture
def today() -> dt.date:
    """Return the fixed date used for ``current_year`` and sitemap values."""
    return FIXED_TODAY
