"""Copy static asset directories into the build output."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from ._constants import STATIC_ASSET_DIRS
from .config import SitePaths

logger = logging.getLogger(__name__)


def asset_sources(paths: SitePaths) -> list[tuple[Path, Path]]:
    """Return ``(source, destination)`` pairs for every asset tree to copy.

    The well-known directories (``images``, ``css``, ``js``, ``assets``,
    ``fonts``, ``downloads``) are taken from the content directory. The
    configured assets directory is taken from the site root and, when it has a
    name outside the well-known set, from the content directory too. Only
    existing directories are returned; each destination keeps the source's
    name at the output root.
    """
    candidates = [paths.source / name for name in STATIC_ASSET_DIRS]
    assets_name = paths.assets.name
    if assets_name not in STATIC_ASSET_DIRS:
        candidates.append(paths.source / assets_name)
    candidates.append(paths.assets)

    pairs: list[tuple[Path, Path]] = []
    seen: set[Path] = set()
    for source in candidates:
        if source in seen or not source.is_dir():
            continue
        seen.add(source)
        pairs.append((source, paths.output / source.name))
    return pairs


def publish_assets(paths: SitePaths, *, verbose: bool = False) -> list[Path]:
    """Copy asset trees into the output directory without deleting anything.

    Existing files in the output are overwritten by same-named source files;
    files that only exist in the output are left alone.

    Returns
    -------
    list[Path]
        Destination directories that were populated, in copy order.

    Raises
    ------
    OSError
        If a tree cannot be copied.
    """
    paths.output.mkdir(parents=True, exist_ok=True)
    copied: list[Path] = []
    for source, destination in asset_sources(paths):
        shutil.copytree(source, destination, dirs_exist_ok=True)
        copied.append(destination)
        if verbose:
            logger.info("Copied: %s/", source.name)
    return copied


__all__ = ["asset_sources", "publish_assets"]
