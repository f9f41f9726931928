"""Resolve the absolute directories used by a build pass."""

from __future__ import annotations

from pathlib import Path

from .models import BuildConfig, SitePaths


def resolve_root(root_dir: Path | None, *, cwd: Path | None = None) -> Path:
    """Return ``root_dir`` as an absolute path, defaulting to the cwd."""
    base = cwd or Path.cwd()
    if root_dir is None:
        return base
    root = Path(root_dir).expanduser()
    if not root.is_absolute():
        root = base / root
    return root


def resolve_paths(config: BuildConfig, *, cwd: Path | None = None) -> SitePaths:
    """Compute the absolute source/output/templates/assets directories.

    Parameters
    ----------
    config : BuildConfig
        Build configuration carrying the root and per-directory overrides.
    cwd : Path, optional
        Base used when ``config.root_dir`` is unset or relative; defaults to
        the process working directory. The working directory itself is never
        changed.

    Returns
    -------
    SitePaths
        Absolute directories. Absolute overrides are kept as given; relative
        ones are joined onto the root.

    Examples
    --------
    >>> from pathlib import Path
    >>> paths = resolve_paths(BuildConfig(root_dir=Path("/srv/site")))
    >>> paths.output
    PosixPath('/srv/site/dist')
    """
    root = resolve_root(config.root_dir, cwd=cwd)
    return SitePaths(
        root=root,
        source=root / config.source_dir,
        output=root / config.output_dir,
        templates=root / config.templates_dir,
        assets=root / config.assets_dir,
    )


__all__ = ["resolve_paths", "resolve_root"]
