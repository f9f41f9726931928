"""Folder-based static site generator.

site_emmer pairs ``*.html`` content files with optional same-named YAML data
files, wraps them in layouts, expands includes, renders template expressions
with Jinja2, and writes the site plus a sitemap and copied static assets.

Exports
-------
- ``app``: Cyclopts application behind the ``emmer`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.
- ``build``, ``build_with_errors``, ``safe_build``: programmatic build entry
  points taking a :class:`BuildConfig`.
- ``Watcher``: rebuild loop driven by filesystem events.

Examples
--------
>>> from pathlib import Path
>>> from site_emmer import BuildConfig, build_with_errors
>>> errors = build_with_errors(BuildConfig(root_dir=Path("my-site")))  # doctest: +SKIP
>>> len(errors)  # doctest: +SKIP
0
"""

from __future__ import annotations

from .cli import app, main
from .config import BuildConfig, WatchConfig
from .coordinator import (
    BuildCoordinator,
    BuildReport,
    build,
    build_with_errors,
    safe_build,
)
from .errors import BuildError, BuildErrors
from .watcher import Watcher

__all__ = [
    "BuildConfig",
    "BuildCoordinator",
    "BuildError",
    "BuildErrors",
    "BuildReport",
    "WatchConfig",
    "Watcher",
    "app",
    "build",
    "build_with_errors",
    "main",
    "safe_build",
]
