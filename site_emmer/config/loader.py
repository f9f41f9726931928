"""Load the optional ``emmer.yaml`` project file into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from site_emmer._constants import CONFIG_FILENAME
from site_emmer.errors import ConfigError

from .models import BuildConfig, ProjectConfig, WatchConfig

_BUILD_KEYS = frozenset(
    {
        "source_dir",
        "output_dir",
        "templates_dir",
        "assets_dir",
        "verbose",
        "structured_errors",
    }
)
_PATH_KEYS = frozenset({"source_dir", "output_dir", "templates_dir", "assets_dir"})
_BOOL_KEYS = frozenset({"verbose", "structured_errors"})
_WATCH_KEYS = frozenset({"max_events", "debounce", "poll_interval"})


def find_config_file(root: Path) -> Path | None:
    """Return ``<root>/emmer.yaml`` when it exists, otherwise ``None``."""
    candidate = root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def load_project_config(path: Path, *, root_dir: Path | None = None) -> ProjectConfig:
    """Load build and watch settings from a YAML project file.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML file (usually ``emmer.yaml``).
    root_dir : Path, optional
        Root directory recorded on the resulting :class:`BuildConfig`. The
        file itself never sets the root; it lives inside it.

    Returns
    -------
    ProjectConfig
        Build configuration with file values applied over the defaults and
        the optional ``watch`` block.

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist.
    ConfigError
        If the YAML cannot be parsed, the top level is not a mapping, or a key
        is unknown or has the wrong type.

    Examples
    --------
    >>> from pathlib import Path
    >>> project = load_project_config(Path("emmer.yaml"))  # doctest: +SKIP
    >>> project.build.output_dir  # doctest: +SKIP
    PosixPath('public')
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    try:
        with path.open("r", encoding="utf-8") as handle:
            loaded = loader.load(handle) or {}
    except YAMLError as exc:
        msg = f"Configuration file '{path}' is not valid YAML: {exc}"
        raise ConfigError(msg) from exc
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise ConfigError(msg)

    raw: dict[str, typ.Any] = dict(loaded)
    watch_raw = raw.pop("watch", None) or {}
    unknown = sorted(set(raw) - _BUILD_KEYS)
    if unknown:
        msg = f"Unknown configuration keys in '{path}': {', '.join(unknown)}"
        raise ConfigError(msg)

    build = BuildConfig(root_dir=root_dir, **_build_values(raw, path))
    watch = _build_watch_config(watch_raw, path)
    return ProjectConfig(build=build, watch=watch)


def _build_values(raw: typ.Mapping[str, typ.Any], path: Path) -> dict[str, typ.Any]:
    """Validate the build keys of a project file."""
    values: dict[str, typ.Any] = {}
    for key, value in raw.items():
        if key in _PATH_KEYS:
            if not isinstance(value, str) or not value.strip():
                msg = f"'{key}' in '{path}' must be a non-empty string."
                raise ConfigError(msg)
            values[key] = Path(value)
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                msg = f"'{key}' in '{path}' must be true or false."
                raise ConfigError(msg)
            values[key] = value
    return values


def _build_watch_config(payload: object, path: Path) -> WatchConfig:
    """Build a WatchConfig from the optional ``watch`` block."""
    if not isinstance(payload, dict):
        msg = f"'watch' in '{path}' must be a mapping."
        raise ConfigError(msg)
    unknown = sorted(set(payload) - _WATCH_KEYS)
    if unknown:
        msg = f"Unknown watch keys in '{path}': {', '.join(unknown)}"
        raise ConfigError(msg)
    base = WatchConfig()
    max_events = payload.get("max_events", base.max_events)
    if max_events is not None and (
        isinstance(max_events, bool) or not isinstance(max_events, int) or max_events < 0
    ):
        msg = f"'watch.max_events' in '{path}' must be a non-negative integer."
        raise ConfigError(msg)
    return WatchConfig(
        max_events=max_events,
        debounce=_non_negative_float(payload, "debounce", base.debounce, path),
        poll_interval=_non_negative_float(
            payload, "poll_interval", base.poll_interval, path
        ),
    )


def _non_negative_float(
    payload: typ.Mapping[str, typ.Any], key: str, default: float, path: Path
) -> float:
    value = payload.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int | float) or value < 0:
        msg = f"'watch.{key}' in '{path}' must be a non-negative number."
        raise ConfigError(msg)
    return float(value)


__all__ = ["find_config_file", "load_project_config"]
