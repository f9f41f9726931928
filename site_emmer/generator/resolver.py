"""Resolve ``layout`` and ``include`` directives before template rendering.

Content files may open with ``{% layout "name" %}`` to be wrapped by a layout
template, and any template text may contain ``{% include "name" %}`` markers.
Both are handled here, textually, before the combined source is handed to the
template engine:

1. :func:`extract_layout` takes the first line-leading layout marker off the
   page and returns the layout name with the remaining body.
2. The layout's literal ``{{ content }}`` placeholder is replaced by the body.
3. :meth:`TemplateResolver.resolve_includes` substitutes every include marker,
   left to right in a single pass, with the named template rendered against
   the page context. Markers inside an included template are not expanded;
   they come out as literal text.
4. The expanded source is parsed and rendered by the engine.

Every failure becomes a :class:`~site_emmer.errors.BuildError` attributed to
the page being built; rendering itself never raises.
"""

from __future__ import annotations

import re
import typing as typ
from pathlib import Path

from site_emmer.errors import BuildError
from site_emmer.template_store import TemplateMap, template_name

from .engine import JinjaTemplateEngine, TemplateEngine, TemplateParseError

LAYOUT_PATTERN = re.compile(
    r'^[ \t]*{%-?\s*layout\s+"([^"]+)"\s*-?%}(.*)', re.MULTILINE | re.DOTALL
)
INCLUDE_PATTERN = re.compile(r'{%-?\s*include\s+"([^"]+)"\s*-?%}')
CONTENT_PLACEHOLDER = "{{ content }}"

Context = typ.Mapping[str, typ.Any]


def extract_layout(html: str) -> tuple[str | None, str]:
    """Split a content file into its layout name and page body.

    Only the first line-leading ``{% layout "<name>" %}`` marker counts.
    Everything after it, stripped of surrounding whitespace, is the body; the
    layout name loses its directory and extension so it matches template map
    keys. Without a marker the content is returned unchanged.

    >>> extract_layout('{% layout "base.html" %}\\n<h1>Hi</h1>\\n')
    ('base', '<h1>Hi</h1>')
    >>> extract_layout("<p>plain</p>")
    (None, '<p>plain</p>')
    """
    match = LAYOUT_PATTERN.search(html)
    if match is None:
        return None, html
    return template_name(match.group(1)), match.group(2).strip()


def text_location(text: str, offset: int) -> tuple[int, int]:
    """Return the one-based line and column of ``offset`` within ``text``.

    >>> text_location("ab\\ncd", 4)
    (2, 2)
    """
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


class TemplateResolver:
    """Apply layouts and includes from a template map, then render."""

    def __init__(
        self, templates: TemplateMap, engine: TemplateEngine | None = None
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        templates : TemplateMap
            Layout and include sources keyed by name. Only read, never
            modified.
        engine : TemplateEngine, optional
            Expression evaluator; defaults to :class:`JinjaTemplateEngine`.
        """
        self.templates = templates
        self.engine = engine or JinjaTemplateEngine()

    def resolve_includes(
        self, content: str, context: Context, *, file: str | Path
    ) -> tuple[str, list[BuildError]]:
        """Replace every include marker in ``content`` with rendered output.

        Parameters
        ----------
        content : str
            Template source containing zero or more include markers.
        context : Mapping
            Context used to render each included template.
        file : str or Path
            Page that errors are reported against.

        Returns
        -------
        tuple[str, list[BuildError]]
            Source with each marker replaced by the included template's
            rendered output (wrapped as an engine literal), and the errors
            collected in marker order. A missing template is replaced by
            nothing and reported as an ``include`` error located at the marker.
        """
        errors: list[BuildError] = []

        def _substitute(match: re.Match[str]) -> str:
            reference = match.group(1)
            source = self.templates.get(template_name(reference))
            if source is None:
                line, column = text_location(content, match.start())
                errors.append(
                    BuildError.include(
                        file,
                        f"Include template not found: {reference}",
                        line=line,
                        column=column,
                    )
                )
                return ""
            rendered, include_errors = self._render_include(
                reference, source, context, file=file
            )
            errors.extend(include_errors)
            return self.engine.literal(rendered)

        return INCLUDE_PATTERN.sub(_substitute, content), errors

    def render_with_layout(
        self, layout: str, content: str, context: Context, *, file: str | Path
    ) -> tuple[str, list[BuildError]]:
        """Insert ``content`` into ``layout``'s placeholder and render the result."""
        combined = layout.replace(CONTENT_PLACEHOLDER, content)
        return self.render(combined, context, file=file)

    def render_content(
        self, content: str, context: Context, *, file: str | Path
    ) -> tuple[str, list[BuildError]]:
        """Render a page body that has no layout."""
        return self.render(content, context, file=file)

    def render(
        self, source: str, context: Context, *, file: str | Path
    ) -> tuple[str, list[BuildError]]:
        """Expand includes in ``source``, then parse and render it.

        A parse failure yields empty output; render failures yield whatever the
        engine produced (empty for Jinja). Both are reported as ``template``
        errors after any include errors.
        """
        expanded, errors = self.resolve_includes(source, context, file=file)
        try:
            parsed = self.engine.parse(expanded)
        except TemplateParseError as exc:
            errors.append(
                BuildError.template(file, exc.message, line=exc.line, column=exc.column)
            )
            return "", errors
        output, render_errors = self.engine.render(parsed, context)
        errors.extend(
            BuildError.template(file, err.message, line=err.line, column=err.column)
            for err in render_errors
        )
        return output, errors

    def _render_include(
        self, reference: str, source: str, context: Context, *, file: str | Path
    ) -> tuple[str, list[BuildError]]:
        """Render one included template without expanding its own includes."""
        protected = INCLUDE_PATTERN.sub(
            lambda match: self.engine.literal(match.group(0)), source
        )
        try:
            parsed = self.engine.parse(protected)
        except TemplateParseError as exc:
            error = BuildError.template(
                file,
                f"In include '{reference}': {exc.message}",
                line=exc.line,
                column=exc.column,
            )
            return "", [error]
        output, render_errors = self.engine.render(parsed, context)
        errors = [
            BuildError.template(
                file,
                f"In include '{reference}': {err.message}",
                line=err.line,
                column=err.column,
            )
            for err in render_errors
        ]
        return output, errors


__all__ = [
    "CONTENT_PLACEHOLDER",
    "INCLUDE_PATTERN",
    "LAYOUT_PATTERN",
    "TemplateResolver",
    "extract_layout",
    "text_location",
]
