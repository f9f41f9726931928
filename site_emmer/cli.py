"""Cyclopts CLI entrypoint for building and watching emmer sites.

The ``emmer`` console script defined here builds a site from a folder of
content pairs and templates, or watches it and rebuilds on every relevant
change. Directory names default to ``content``, ``dist``, ``templates`` and
``assets`` under the site root, can be set in an ``emmer.yaml`` file at the
root, and can be overridden per invocation (or through ``EMMER_*`` environment
variables).

Examples
--------
Build the site in the current directory:

>>> from site_emmer.cli import main
>>> main()  # doctest: +SKIP

Build a site elsewhere, returning structured errors:

>>> from site_emmer.cli import app
>>> app(["build", "--root-dir", "../my-site", "--structured-errors"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import (
    BuildConfig,
    ProjectConfig,
    find_config_file,
    load_project_config,
    resolve_root,
)
from .coordinator import BuildCoordinator, log_outcome
from .watcher import Watcher

app = App(name="emmer", config=cyclopts.config.Env("EMMER_", command=False))  # type: ignore[unknown-argument]

RootDir = typ.Annotated[
    Path | None,
    Parameter(name=["--root-dir", "-r"], help="Site root (default: current directory)"),
]
SourceDir = typ.Annotated[
    Path | None,
    Parameter(name=["--source-dir", "-s"], help="Content directory (default: content)"),
]
OutputDir = typ.Annotated[
    Path | None,
    Parameter(name=["--output-dir", "-o"], help="Output directory (default: dist)"),
]
TemplatesDir = typ.Annotated[
    Path | None,
    Parameter(
        name=["--templates-dir", "-t"], help="Templates directory (default: templates)"
    ),
]
AssetsDir = typ.Annotated[
    Path | None,
    Parameter(name=["--assets-dir", "-a"], help="Assets directory (default: assets)"),
]
Verbose = typ.Annotated[
    bool, Parameter(name=["--verbose", "-v"], help="Report progress while building")
]
ConfigFile = typ.Annotated[
    Path | None,
    Parameter(help="Path to a project file (default: <root>/emmer.yaml if present)"),
]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        force=True,
    )


def _load_project(root_dir: Path | None, config: Path | None) -> ProjectConfig:
    """Return the project settings from ``config`` or ``<root>/emmer.yaml``."""
    path = config or find_config_file(resolve_root(root_dir))
    if path is None:
        return ProjectConfig(build=BuildConfig(root_dir=root_dir))
    return load_project_config(path, root_dir=root_dir)


@app.command(help="Build the static site once.")
def build(
    *,
    root_dir: RootDir = None,
    source_dir: SourceDir = None,
    output_dir: OutputDir = None,
    templates_dir: TemplatesDir = None,
    assets_dir: AssetsDir = None,
    verbose: Verbose = False,
    structured_errors: typ.Annotated[
        bool,
        Parameter(
            name=["--structured-errors", "-e"],
            help="Print every error as file:line:column: message",
        ),
    ] = False,
    config: ConfigFile = None,
) -> None:
    """Build the site and report written pages and errors.

    Parameters
    ----------
    root_dir : Path or None, optional
        Site root; every other directory is resolved beneath it.
    source_dir, output_dir, templates_dir, assets_dir : Path or None, optional
        Per-directory overrides of the project file or defaults.
    verbose : bool, optional
        Log progress for each build step.
    structured_errors : bool, optional
        Print each error with its kind and location instead of only logging a
        summary.
    config : Path or None, optional
        Explicit project file path.

    Returns
    -------
    None
        Writes the site and prints ``wrote <path>`` for every page.
    """
    project = _load_project(root_dir, config)
    build_config = project.build.with_overrides(
        source_dir=source_dir,
        output_dir=output_dir,
        templates_dir=templates_dir,
        assets_dir=assets_dir,
        verbose=verbose or None,
        structured_errors=structured_errors or None,
    )
    _configure_logging(verbose=build_config.verbose)

    report = BuildCoordinator(build_config).run()
    for path in report.written:
        print(f"wrote {_format_path(path)}")
    if report.sitemap is not None:
        print(f"wrote {_format_path(report.sitemap)}")
    if build_config.structured_errors:
        for error in report.errors:
            print(f"{error.severity}[{error.kind}] {error}")
        print(f"{len(report.errors)} error(s)")
    else:
        log_outcome(report.errors)
        if report.errors:
            print(f"Build completed with {len(report.errors)} error(s).")
        else:
            print("Site built successfully.")


@app.command(help="Build, then rebuild whenever content or templates change.")
def watch(
    *,
    root_dir: RootDir = None,
    source_dir: SourceDir = None,
    output_dir: OutputDir = None,
    templates_dir: TemplatesDir = None,
    assets_dir: AssetsDir = None,
    verbose: Verbose = False,
    max_events: typ.Annotated[
        int | None, Parameter(help="Stop after this many filesystem events")
    ] = None,
    debounce: typ.Annotated[
        float | None, Parameter(help="Seconds to wait before each rebuild")
    ] = None,
    config: ConfigFile = None,
) -> None:
    """Watch the source and templates directories until interrupted."""
    project = _load_project(root_dir, config)
    build_config = project.build.with_overrides(
        source_dir=source_dir,
        output_dir=output_dir,
        templates_dir=templates_dir,
        assets_dir=assets_dir,
        verbose=verbose or None,
    )
    # Watch mode always reports rebuilds.
    _configure_logging(verbose=True)
    watcher = Watcher(
        build_config, project.watch, max_events=max_events, debounce=debounce
    )
    print("Press Ctrl+C to stop watching")
    try:
        rebuilds = watcher.run()
    except KeyboardInterrupt:
        watcher.stop()
        print("Stopped watching.")
        return
    print(f"Stopped after {rebuilds} rebuild(s).")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``emmer`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
