"""Sitemap generation for built pages.

This module turns the content pairs of a build pass into ``sitemap.xml`` at
the output root. Each page contributes one ``<url>`` entry whose location is
the configured base URL followed by the page's containing directory name
(``content/about/index.html`` becomes ``https://example.com/about``) and whose
``<lastmod>`` is today's UTC date. The base URL comes from ``site.url`` in the
site data and falls back to ``https://example.com``.

Typical usage mirrors the build pipeline:

>>> from site_emmer.sitemap import SitemapGenerator
>>> generator = SitemapGenerator.from_site_data({"site": {"url": "https://x.dev"}})
>>> generator.base_url
'https://x.dev'
>>> generator.run(pairs, Path("dist"))  # doctest: +SKIP
PosixPath('dist/sitemap.xml')

The XML is rendered from the packaged ``templates/sitemap.xml.jinja`` with
autoescaping enabled, and the file is overwritten on every build.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import logging
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from ._constants import DEFAULT_BASE_URL, SITEMAP_FILENAME
from .generator.models import ContentPair

logger = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class SitemapEntry:
    """One ``<url>`` element of the sitemap."""

    loc: str
    lastmod: str


def base_url_from(site_data: typ.Mapping[str, typ.Any]) -> str:
    """Return ``site.url`` without a trailing slash, or the default base URL."""
    site = site_data.get("site")
    url = site.get("url") if isinstance(site, dict) else None
    if not isinstance(url, str) or not url.strip():
        return DEFAULT_BASE_URL
    return url.strip().rstrip("/")


def page_url_path(html_path: Path) -> str:
    """Return the URL path of a page: its containing directory name.

    >>> page_url_path(Path("content/about/index.html"))
    '/about'
    """
    return f"/{html_path.parent.name}"


class SitemapGenerator:
    """Render ``sitemap.xml`` for a list of content pairs."""

    def __init__(
        self, base_url: str = DEFAULT_BASE_URL, *, templates_dir: Path | None = None
    ) -> None:
        """Initialize the generator and its Jinja environment.

        Parameters
        ----------
        base_url : str, optional
            Prefix for every ``<loc>``; defaults to ``https://example.com``.
        templates_dir : Path, optional
            Directory containing ``sitemap.xml.jinja``. Defaults to the
            package's ``templates`` directory.
        """
        self.base_url = base_url.rstrip("/")
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("sitemap.xml.jinja")

    @classmethod
    def from_site_data(
        cls, site_data: typ.Mapping[str, typ.Any], **kwargs: typ.Any
    ) -> SitemapGenerator:
        """Build a generator whose base URL comes from ``site.url``."""
        return cls(base_url_from(site_data), **kwargs)

    def entries(
        self, pairs: cabc.Iterable[ContentPair], *, today: dt.date | None = None
    ) -> list[SitemapEntry]:
        """Return one entry per pair, in pair order."""
        lastmod = (today or dt.datetime.now(dt.UTC).date()).isoformat()
        return [
            SitemapEntry(f"{self.base_url}{page_url_path(pair.html_path)}", lastmod)
            for pair in pairs
        ]

    def render(
        self, pairs: cabc.Iterable[ContentPair], *, today: dt.date | None = None
    ) -> str:
        """Return the sitemap document for ``pairs``."""
        xml = self.template.render(entries=self.entries(pairs, today=today))
        if not xml.endswith("\n"):
            xml += "\n"
        return xml

    def run(
        self,
        pairs: cabc.Iterable[ContentPair],
        output_dir: Path,
        *,
        today: dt.date | None = None,
    ) -> Path:
        """Write ``sitemap.xml`` into ``output_dir`` and return its path.

        Raises
        ------
        OSError
            If the output directory or file cannot be written.
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        sitemap_path = output_dir / SITEMAP_FILENAME
        sitemap_path.write_text(self.render(pairs, today=today), encoding="utf-8")
        return sitemap_path


def generate_sitemap(
    pairs: cabc.Iterable[ContentPair],
    output_dir: Path,
    site_data: typ.Mapping[str, typ.Any],
    *,
    verbose: bool = False,
    today: dt.date | None = None,
) -> Path:
    """Write the sitemap for ``pairs`` using the base URL from ``site_data``."""
    generator = SitemapGenerator.from_site_data(site_data)
    path = generator.run(pairs, output_dir, today=today)
    if verbose:
        logger.info("Generated: %s", path.name)
    return path


__all__ = [
    "SitemapEntry",
    "SitemapGenerator",
    "base_url_from",
    "generate_sitemap",
    "page_url_path",
]
