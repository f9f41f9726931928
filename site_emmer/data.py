"""Load YAML data files into plain mappings.

The site-wide ``site.yaml`` and every per-page ``<name>.yaml`` go through
:class:`YamlDataParser`, a thin adapter over ruamel.yaml that reports parse
failures with a one-based line and column. Loading never raises for a broken
file: the caller receives an empty mapping and a ``yaml`` build error instead.
"""

from __future__ import annotations

import io
import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from ._constants import DATA_SUFFIXES, SITE_DATA_STEM
from .errors import BuildError

logger = logging.getLogger(__name__)

DataMapping = dict[str, typ.Any]


class DataParseError(Exception):
    """A data document could not be parsed into a mapping."""

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        return f"{self.line}:{self.column}: {self.message}"


class DataParser(typ.Protocol):
    """Capability turning a document string into a mapping."""

    def parse(self, text: str) -> DataMapping:
        """Return the mapping in ``text`` or raise :class:`DataParseError`."""
        ...


class YamlDataParser:
    """Parse YAML 1.2 documents with ruamel.yaml's safe loader."""

    def __init__(self) -> None:
        self._yaml = YAML(typ="safe")
        self._yaml.version = (1, 2)

    def parse(self, text: str) -> DataMapping:
        """Parse ``text`` into a mapping; an empty document yields ``{}``.

        Raises
        ------
        DataParseError
            If the YAML is malformed, holds a scalar that cannot be constructed
            (such as an impossible date), or its top level is not a mapping.
        """
        try:
            loaded = self._yaml.load(io.StringIO(text))
        except MarkedYAMLError as exc:
            mark = exc.problem_mark or exc.context_mark
            line = mark.line + 1 if mark is not None else 1
            column = mark.column + 1 if mark is not None else 1
            message = " ".join(
                part for part in (exc.context, exc.problem) if part
            ) or str(exc)
            raise DataParseError(message, line, column) from exc
        except YAMLError as exc:
            raise DataParseError(str(exc)) from exc
        except (ValueError, TypeError) as exc:
            # Well-formed scalars the constructor cannot build, e.g. 2024-02-30.
            raise DataParseError(f"{type(exc).__name__}: {exc}") from exc
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            msg = f"expected a mapping at the top level, found {type(loaded).__name__}"
            raise DataParseError(msg)
        return dict(loaded)


def load_data_file(
    path: Path, parser: DataParser | None = None
) -> tuple[DataMapping, list[BuildError]]:
    """Read and parse one data file.

    Returns
    -------
    tuple[DataMapping, list[BuildError]]
        The parsed mapping and no errors, or an empty mapping and a single
        ``yaml`` error describing the read or parse failure.
    """
    active = parser or YamlDataParser()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return {}, [BuildError.yaml(path, f"Failed to read YAML file: {exc}")]
    try:
        return active.parse(text), []
    except DataParseError as exc:
        error = BuildError.yaml(path, exc.message, line=exc.line, column=exc.column)
        return {}, [error]


def find_site_data_file(source_dir: Path) -> Path | None:
    """Return the first existing ``site.<ext>`` file under ``source_dir``."""
    for suffix in DATA_SUFFIXES:
        candidate = source_dir / f"{SITE_DATA_STEM}{suffix}"
        if candidate.is_file():
            return candidate
    return None


def load_site_data(
    source_dir: Path, parser: DataParser | None = None, *, verbose: bool = False
) -> tuple[DataMapping, list[BuildError]]:
    """Load the global site data, or an empty mapping when there is none."""
    path = find_site_data_file(source_dir)
    if path is None:
        if verbose:
            logger.info("No site data found in %s, using empty site data", source_dir)
        return {}, []
    if verbose:
        logger.info("Loading site data from %s", path)
    return load_data_file(path, parser)


__all__ = [
    "DataMapping",
    "DataParseError",
    "DataParser",
    "YamlDataParser",
    "find_site_data_file",
    "load_data_file",
    "load_site_data",
]
