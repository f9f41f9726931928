"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import copy
import dataclasses as dc
import datetime as dt
import typing as typ
from pathlib import Path

from site_emmer.errors import BuildError


@dc.dataclass(frozen=True, slots=True)
class ContentPair:
    """An HTML content file and its optional same-named data file.

    Attributes
    ----------
    html_path : Path
        Content file; always exists at discovery time.
    data_path : Path or None
        ``<stem>.yaml`` (or ``.yml``) beside the content file, when present.
    """

    html_path: Path
    data_path: Path | None = None


@dc.dataclass(slots=True)
class PageResult:
    """Outcome of building a single page.

    Attributes
    ----------
    pair : ContentPair
        The page that was built.
    output_path : Path
        Destination inside the output directory.
    written : bool
        Whether the destination file was written.
    errors : list[BuildError]
        Failures recorded while building, in the order they happened.
    """

    pair: ContentPair
    output_path: Path
    written: bool = False
    errors: list[BuildError] = dc.field(default_factory=list)


def build_render_context(
    site_data: typ.Mapping[str, typ.Any],
    page_data: typ.Mapping[str, typ.Any],
    content: str,
    *,
    today: dt.date | None = None,
) -> dict[str, typ.Any]:
    """Return a fresh rendering context for one page.

    The site data is deep-copied so nothing a page render does to the context
    can reach the shared mapping or another page. ``page``, ``content`` and
    ``current_year`` are injected last and shadow same-named site keys.

    >>> ctx = build_render_context({"site": {"name": "X"}}, {"page": {"t": 1}}, "body",
    ...                            today=dt.date(2024, 5, 1))
    >>> ctx["site"], ctx["page"], ctx["content"], ctx["current_year"]
    ({'name': 'X'}, {'t': 1}, 'body', 2024)
    """
    current = today or dt.datetime.now(dt.UTC).date()
    page = page_data.get("page")
    context: dict[str, typ.Any] = copy.deepcopy(dict(site_data))
    context.update(
        {
            "page": copy.deepcopy(page) if isinstance(page, dict) else {},
            "content": content,
            "current_year": current.year,
        }
    )
    return context


__all__ = [
    "ContentPair",
    "PageResult",
    "build_render_context",
]
