"""High-level orchestration of a full site build.

:class:`BuildCoordinator` runs one build pass strictly in sequence: resolve
the site directories, load the global site data and the templates once,
discover every content pair, build each page in discovery order, copy static
assets, and write the sitemap from the same list of pairs. Page-level failures
accumulate in an append-ordered :class:`~site_emmer.errors.BuildErrors`; only
an unlistable source directory stops a pass.

Three entry points wrap the coordinator:

- :func:`build` returns the errors when ``structured_errors`` is set and
  otherwise logs them with a summary line.
- :func:`build_with_errors` always returns the errors.
- :func:`safe_build` never raises; anything unexpected becomes a ``build``
  error, which keeps watch loops and editor integrations alive.

Example
-------
>>> from pathlib import Path
>>> from site_emmer.coordinator import build_with_errors
>>> from site_emmer.config import BuildConfig
>>> errors = build_with_errors(BuildConfig(root_dir=Path("my-site")))  # doctest: +SKIP
>>> [str(error) for error in errors]  # doctest: +SKIP
[]
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from .assets import publish_assets
from .config import BuildConfig, SitePaths, resolve_paths
from .data import DataParser, load_site_data
from .discovery import discover_content
from .errors import BuildError, BuildErrors
from .generator import ContentPair, PageBuilder, PageResult, TemplateEngine
from .sitemap import generate_sitemap
from .template_store import load_templates

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class BuildReport:
    """Everything a build pass produced.

    Attributes
    ----------
    paths : SitePaths
        Directories the pass worked with.
    pairs : list[ContentPair]
        Content pairs in discovery order.
    pages : list[PageResult]
        Per-page outcomes, in the same order as ``pairs``.
    errors : BuildErrors
        Every recorded failure, in the order encountered.
    assets : list[Path]
        Output directories populated with static assets.
    sitemap : Path or None
        Written sitemap, or ``None`` when writing it failed.
    """

    paths: SitePaths
    pairs: list[ContentPair] = dc.field(default_factory=list)
    pages: list[PageResult] = dc.field(default_factory=list)
    errors: BuildErrors = dc.field(default_factory=BuildErrors)
    assets: list[Path] = dc.field(default_factory=list)
    sitemap: Path | None = None

    @property
    def written(self) -> list[Path]:
        """Output files written for pages, in build order."""
        return [page.output_path for page in self.pages if page.written]


class BuildCoordinator:
    """Run the full discover -> render -> publish pipeline for one site."""

    def __init__(
        self,
        config: BuildConfig,
        *,
        engine: TemplateEngine | None = None,
        data_parser: DataParser | None = None,
        cwd: Path | None = None,
        today: dt.date | None = None,
    ) -> None:
        """Initialize the coordinator.

        Parameters
        ----------
        config : BuildConfig
            Directories and switches for the pass.
        engine : TemplateEngine, optional
            Template engine handed to every page build; Jinja2 by default.
        data_parser : DataParser, optional
            Data-file parser; ruamel.yaml by default.
        cwd : Path, optional
            Base for relative roots; defaults to the process working
            directory, which is never changed.
        today : date, optional
            Date used for ``current_year`` and sitemap ``lastmod`` values.
        """
        self.config = config
        self.engine = engine
        self.data_parser = data_parser
        self.paths = resolve_paths(config, cwd=cwd)
        self.today = today

    def run(self) -> BuildReport:
        """Execute one build pass.

        Returns
        -------
        BuildReport
            Pages, assets, sitemap and the accumulated errors.

        Raises
        ------
        SourceTreeError
            If the source directory exists but cannot be listed.
        OSError
            If the output directory cannot be created.
        """
        paths = self.paths
        verbose = self.config.verbose
        report = BuildReport(paths=paths)
        if verbose:
            logger.info("Building static site...")
            logger.info("Source: %s", paths.source)
            logger.info("Output: %s", paths.output)
            logger.info("Templates: %s", paths.templates)
            logger.info("Assets: %s", paths.assets)

        paths.output.mkdir(parents=True, exist_ok=True)

        site_data, site_errors = load_site_data(
            paths.source, self.data_parser, verbose=verbose
        )
        report.errors.extend(site_errors)
        templates, template_errors = load_templates(paths.templates, verbose=verbose)
        report.errors.extend(template_errors)
        report.pairs = discover_content(paths.source, verbose=verbose)

        builder = PageBuilder(
            source_dir=paths.source,
            output_dir=paths.output,
            site_data=site_data,
            templates=templates,
            engine=self.engine,
            data_parser=self.data_parser,
            verbose=verbose,
            today=self.today,
        )
        for pair in report.pairs:
            result = builder.build(pair)
            report.pages.append(result)
            report.errors.extend(result.errors)

        try:
            report.assets = publish_assets(paths, verbose=verbose)
        except OSError as exc:
            report.errors.append(
                BuildError.build(paths.source, f"Failed to copy static assets: {exc}")
            )

        try:
            report.sitemap = generate_sitemap(
                report.pairs, paths.output, site_data, verbose=verbose, today=self.today
            )
        except OSError as exc:
            report.errors.append(
                BuildError.build(paths.output, f"Failed to write sitemap: {exc}")
            )

        if verbose:
            logger.info(
                "Site built: %d page(s), %d error(s)",
                len(report.pages),
                len(report.errors),
            )
        return report


def build(config: BuildConfig, **options: typ.Any) -> BuildErrors | None:
    """Build the site described by ``config``.

    Returns
    -------
    BuildErrors or None
        The accumulated errors when ``config.structured_errors`` is set;
        otherwise ``None`` after logging every error and a summary.
    """
    report = BuildCoordinator(config, **options).run()
    if config.structured_errors:
        return report.errors
    log_outcome(report.errors)
    return None


def build_with_errors(config: BuildConfig, **options: typ.Any) -> BuildErrors:
    """Build the site and return the accumulated errors."""
    errors = build(dc.replace(config, structured_errors=True), **options)
    return errors if errors is not None else BuildErrors()


def safe_build(config: BuildConfig, **options: typ.Any) -> BuildErrors:
    """Build the site without ever raising.

    Any exception escaping the pass, including a fatal source-directory
    failure, is converted into a single ``build`` error against the site root.
    """
    try:
        return build_with_errors(config, **options)
    except Exception as exc:  # noqa: BLE001 - converted into a build error
        logger.debug("Build failed", exc_info=True)
        root = config.root_dir if config.root_dir is not None else Path(".")
        return BuildErrors([BuildError.build(root, f"Build failed: {exc}")])


def log_outcome(errors: BuildErrors) -> None:
    """Log each error followed by a one-line summary of the pass."""
    if not errors:
        logger.info("Site built successfully.")
        return
    for error in errors:
        log = logger.warning if error.severity == "warning" else logger.error
        log("[%s] %s", error.kind, error)
    logger.warning("Build completed with %d error(s).", len(errors))


__all__ = [
    "BuildCoordinator",
    "BuildReport",
    "build",
    "build_with_errors",
    "log_outcome",
    "safe_build",
]
