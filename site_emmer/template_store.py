"""Load layout and include templates into a name-keyed mapping."""

from __future__ import annotations

import logging
from pathlib import Path

from ._constants import TEMPLATE_SUFFIX
from .errors import BuildError

logger = logging.getLogger(__name__)

TemplateMap = dict[str, str]


def template_name(reference: str) -> str:
    """Return the map key for a ``layout``/``include`` reference.

    >>> template_name("partials/header.html")
    'header'
    >>> template_name("footer")
    'footer'
    """
    return Path(reference).stem


def load_templates(
    templates_dir: Path, *, verbose: bool = False
) -> tuple[TemplateMap, list[BuildError]]:
    """Read every top-level ``*.html`` file of ``templates_dir``.

    Subdirectories are not searched and a missing directory yields an empty
    map. A template that cannot be read is left out of the map and reported as
    a ``build`` error; pages referring to it then report the missing name.
    """
    if not templates_dir.is_dir():
        if verbose:
            logger.info("No templates directory found at %s", templates_dir)
        return {}, []
    if verbose:
        logger.info("Loading templates from %s", templates_dir)
    templates: TemplateMap = {}
    errors: list[BuildError] = []
    try:
        entries = sorted(templates_dir.iterdir())
    except OSError as exc:
        return {}, [BuildError.build(templates_dir, f"Failed to list templates: {exc}")]
    for path in entries:
        if path.suffix != TEMPLATE_SUFFIX or not path.is_file():
            continue
        try:
            templates[path.stem] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            errors.append(BuildError.build(path, f"Failed to read template: {exc}"))
            continue
        if verbose:
            logger.info("  Loaded template: %s", path.stem)
    return templates, errors


__all__ = ["TemplateMap", "load_templates", "template_name"]
