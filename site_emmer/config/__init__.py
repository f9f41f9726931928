"""Build configuration for site_emmer.

This subpackage holds the typed configuration dataclasses
(:class:`BuildConfig`, :class:`WatchConfig`, :class:`ProjectConfig`), the
loader for the optional ``emmer.yaml`` project file, and :func:`resolve_paths`,
which turns a configuration into the absolute directories a build pass works
with. No component changes the process working directory; the resolved
:class:`SitePaths` is threaded through instead.

Examples
--------
>>> from pathlib import Path
>>> from site_emmer.config import BuildConfig, resolve_paths
>>> paths = resolve_paths(BuildConfig(root_dir=Path("/srv/site")))
>>> paths.source
PosixPath('/srv/site/content')
"""

from .loader import find_config_file, load_project_config
from .models import BuildConfig, ProjectConfig, SitePaths, WatchConfig
from .paths import resolve_paths, resolve_root

__all__ = [
    "BuildConfig",
    "ProjectConfig",
    "SitePaths",
    "WatchConfig",
    "find_config_file",
    "load_project_config",
    "resolve_paths",
    "resolve_root",
]
