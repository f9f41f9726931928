"""Discover content pages and pair them with their data files.

A page is anchored by an ``*.html`` file. Its data file, when present, sits in
the same directory and shares the base name (``index.html`` + ``index.yaml``).
Only the source root and its immediate subdirectories are scanned.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ._constants import CONTENT_SUFFIX, DATA_SUFFIXES
from .errors import SourceTreeError
from .generator.models import ContentPair

logger = logging.getLogger(__name__)


def discover_content(source_dir: Path, *, verbose: bool = False) -> list[ContentPair]:
    """Return every content pair under ``source_dir`` in a stable order.

    Files directly inside ``source_dir`` come first, followed by the files of
    each immediate subdirectory in name order. Deeper directories are not
    scanned.

    Parameters
    ----------
    source_dir : Path
        Root of the content tree.
    verbose : bool, optional
        Log each discovered page and its data file.

    Returns
    -------
    list[ContentPair]
        Discovered pairs; empty when ``source_dir`` does not exist.

    Raises
    ------
    SourceTreeError
        If ``source_dir`` exists but cannot be listed.
    """
    if not source_dir.is_dir():
        if verbose:
            logger.info("No source directory found at %s", source_dir)
        return []
    if verbose:
        logger.info("Scanning %s for content files", source_dir)
    try:
        entries = sorted(source_dir.iterdir())
    except OSError as exc:
        msg = f"Cannot list source directory '{source_dir}': {exc}"
        raise SourceTreeError(msg) from exc

    pairs = _pairs_from_entries(entries, verbose=verbose)
    for entry in entries:
        if entry.is_dir():
            pairs.extend(find_pairs_in_directory(entry, verbose=verbose))
    return pairs


def find_pairs_in_directory(
    directory: Path, *, verbose: bool = False
) -> list[ContentPair]:
    """Return the content pairs found directly inside ``directory``.

    A directory that cannot be listed yields no pairs and a logged warning so
    that sibling directories are still scanned.
    """
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.warning("Error reading directory %s: %s", directory, exc)
        return []
    return _pairs_from_entries(entries, verbose=verbose)


def find_data_file(html_path: Path) -> Path | None:
    """Return the sibling data file sharing ``html_path``'s base name."""
    for suffix in DATA_SUFFIXES:
        candidate = html_path.with_suffix(suffix)
        if candidate.is_file():
            return candidate
    return None


def _pairs_from_entries(entries: list[Path], *, verbose: bool) -> list[ContentPair]:
    pairs: list[ContentPair] = []
    for entry in entries:
        if entry.suffix != CONTENT_SUFFIX or not entry.is_file():
            continue
        data_path = find_data_file(entry)
        if verbose:
            logger.info("  Found: %s", entry.name)
            if data_path is not None:
                logger.info("    Data: %s", data_path.name)
        pairs.append(ContentPair(entry, data_path))
    return pairs


__all__ = ["discover_content", "find_data_file", "find_pairs_in_directory"]
