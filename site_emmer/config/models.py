"""Typed dataclasses describing site_emmer build configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path


@dc.dataclass(slots=True)
class BuildConfig:
    """Directories and switches recognised by a build pass.

    Attributes
    ----------
    root_dir : Path or None
        Site root; ``None`` means the current working directory. Every other
        directory is resolved relative to it.
    source_dir, output_dir, templates_dir, assets_dir : Path
        Directory names (or absolute paths) for content, build output,
        layout/include templates and static assets.
    verbose : bool
        Report per-step progress through logging. Never changes outcomes.
    structured_errors : bool
        Return the accumulated :class:`~site_emmer.errors.BuildErrors` to the
        caller instead of only logging them.
    """

    root_dir: Path | None = None
    source_dir: Path = Path("content")
    output_dir: Path = Path("dist")
    templates_dir: Path = Path("templates")
    assets_dir: Path = Path("assets")
    verbose: bool = False
    structured_errors: bool = False

    def __post_init__(self) -> None:
        if self.root_dir is not None:
            self.root_dir = Path(self.root_dir)
        self.source_dir = Path(self.source_dir)
        self.output_dir = Path(self.output_dir)
        self.templates_dir = Path(self.templates_dir)
        self.assets_dir = Path(self.assets_dir)

    def with_overrides(self, **overrides: object) -> BuildConfig:
        """Return a copy with every non-``None`` override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return dc.replace(self, **values)


@dc.dataclass(slots=True)
class WatchConfig:
    """Options specific to the watch loop."""

    max_events: int | None = None
    debounce: float = 0.0
    poll_interval: float = 0.5


@dc.dataclass(slots=True)
class ProjectConfig:
    """Build and watch settings loaded together from one config file."""

    build: BuildConfig = dc.field(default_factory=BuildConfig)
    watch: WatchConfig = dc.field(default_factory=WatchConfig)


@dc.dataclass(frozen=True, slots=True)
class SitePaths:
    """Absolute directories derived from a :class:`BuildConfig`."""

    root: Path
    source: Path
    output: Path
    templates: Path
    assets: Path


__all__ = ["BuildConfig", "ProjectConfig", "SitePaths", "WatchConfig"]
