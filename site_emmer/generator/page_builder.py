"""Build one content page into an output HTML file.

:class:`PageBuilder` walks a single :class:`~site_emmer.generator.models.ContentPair`
through the page pipeline: load its data file, read the content, extract the
layout, build a fresh render context, resolve includes, render, and write the
result under the output directory. Each step that fails records a
:class:`~site_emmer.errors.BuildError` and carries on with a safe default
(empty data, empty content, empty output), so a broken page still produces a
file and never stops the rest of the site from building.

Example
-------
>>> from pathlib import Path
>>> from site_emmer.generator import ContentPair, PageBuilder
>>> builder = PageBuilder(
...     source_dir=Path("content"), output_dir=Path("dist"),
...     site_data={}, templates={},
... )  # doctest: +SKIP
>>> builder.build(ContentPair(Path("content/home/index.html")))  # doctest: +SKIP
PageResult(..., output_path=PosixPath('dist/home/index.html'), written=True, errors=[])
"""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

from site_emmer.data import DataParser, YamlDataParser, load_data_file
from site_emmer.errors import BuildError
from site_emmer.template_store import TemplateMap

from .engine import TemplateEngine
from .models import ContentPair, PageResult, build_render_context
from .resolver import TemplateResolver, extract_layout

logger = logging.getLogger(__name__)


def output_path_for(html_path: Path, source_dir: Path, output_dir: Path) -> Path:
    """Return where ``html_path`` is written under ``output_dir``.

    The source-relative path is re-rooted under ``output_dir``. When
    ``html_path`` is not literally under ``source_dir`` (for example it was
    reached through a symlink), everything after the first path segment named
    like the source directory is used instead; failing that, only the file
    name is kept.

    >>> output_path_for(Path("/s/content/home/index.html"), Path("/s/content"), Path("/s/dist"))
    PosixPath('/s/dist/home/index.html')
    >>> output_path_for(Path("/x/content/a/b.html"), Path("/s/content"), Path("/o"))
    PosixPath('/o/a/b.html')
    >>> output_path_for(Path("/elsewhere/page.html"), Path("/s/content"), Path("/o"))
    PosixPath('/o/page.html')
    """
    try:
        return output_dir / html_path.relative_to(source_dir)
    except ValueError:
        pass
    parts = html_path.parts
    marker = source_dir.name
    if marker in parts[:-1]:
        index = parts.index(marker)
        return output_dir.joinpath(*parts[index + 1 :])
    return output_dir / html_path.name


class PageBuilder:
    """Render content pairs against shared site data and templates."""

    def __init__(
        self,
        *,
        source_dir: Path,
        output_dir: Path,
        site_data: typ.Mapping[str, typ.Any],
        templates: TemplateMap,
        engine: TemplateEngine | None = None,
        data_parser: DataParser | None = None,
        verbose: bool = False,
        today: dt.date | None = None,
    ) -> None:
        """Initialize the builder with the read-only inputs of a build pass.

        Parameters
        ----------
        source_dir : Path
            Content root used to derive each page's output path.
        output_dir : Path
            Directory receiving the rendered pages.
        site_data : Mapping
            Global site data; copied into every page context, never mutated.
        templates : TemplateMap
            Layouts and includes keyed by name.
        engine : TemplateEngine, optional
            Expression evaluator; defaults to Jinja2.
        data_parser : DataParser, optional
            Parser for page data files; defaults to ruamel.yaml.
        verbose : bool, optional
            Log a line for every page built.
        today : date, optional
            Date used for ``current_year``; defaults to today's UTC date.
        """
        self.source_dir = source_dir
        self.output_dir = output_dir
        self.site_data = site_data
        self.templates = templates
        self.resolver = TemplateResolver(templates, engine)
        self.data_parser = data_parser or YamlDataParser()
        self.verbose = verbose
        self.today = today

    def build(self, pair: ContentPair) -> PageResult:
        """Build ``pair`` and return its output path and recorded errors."""
        html_path = pair.html_path
        result = PageResult(
            pair=pair,
            output_path=output_path_for(html_path, self.source_dir, self.output_dir),
        )

        page_data: dict[str, typ.Any] = {}
        if pair.data_path is not None:
            page_data, data_errors = load_data_file(pair.data_path, self.data_parser)
            result.errors.extend(data_errors)

        try:
            html = html_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            result.errors.append(
                BuildError.build(html_path, f"Failed to read file: {exc}")
            )
            html = ""

        layout_name, content = extract_layout(html)
        context = build_render_context(
            self.site_data, page_data, content, today=self.today
        )
        rendered, render_errors = self._render(layout_name, content, context, html_path)
        result.errors.extend(render_errors)

        result.written = self._write(result, rendered)
        if self.verbose and result.written:
            logger.info("Built: %s", result.output_path.relative_to(self.output_dir))
        return result

    def _render(
        self,
        layout_name: str | None,
        content: str,
        context: dict[str, typ.Any],
        html_path: Path,
    ) -> tuple[str, list[BuildError]]:
        if layout_name is None:
            return self.resolver.render_content(content, context, file=html_path)
        layout = self.templates.get(layout_name)
        if layout is None:
            error = BuildError.include(
                html_path, f"Layout template not found: {layout_name}"
            )
            rendered, errors = self.resolver.render_content(
                content, context, file=html_path
            )
            return rendered, [error, *errors]
        return self.resolver.render_with_layout(
            layout, content, context, file=html_path
        )

    def _write(self, result: PageResult, rendered: str) -> bool:
        destination = result.output_path
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(rendered, encoding="utf-8")
        except OSError as exc:
            result.errors.append(
                BuildError.build(
                    result.pair.html_path, f"Failed to write output file: {exc}"
                )
            )
            return False
        return True


__all__ = ["PageBuilder", "output_path_for"]
