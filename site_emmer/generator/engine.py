"""Template engine adapter used to evaluate page and template expressions.

The build pipeline only needs three capabilities from a template engine:
parse a string (reporting syntax errors with a location), render a parsed
template against a context (reporting render errors instead of raising), and
wrap already-rendered text so a later render pass emits it untouched.
:class:`JinjaTemplateEngine` provides them on top of Jinja2.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from jinja2 import (
    ChainableUndefined,
    Environment,
    Template,
    TemplateError,
    TemplateSyntaxError,
)

# Runtime failures user expressions can trigger while rendering.
_RENDER_ERRORS = (
    TemplateError,
    ArithmeticError,
    AttributeError,
    LookupError,
    RuntimeError,
    TypeError,
    ValueError,
)
_ENDRAW_PATTERN = re.compile(r"{%-?\s*endraw\s*-?%}")
_TEMPLATE_FILENAME = "<template>"
# Comment delimiters that inline CSS and scripts do not produce.
_COMMENT_START = "{##"
_COMMENT_END = "##}"


class TemplateParseError(Exception):
    """Raised when a template string is not syntactically valid."""

    def __init__(self, message: str, line: int = 1, column: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


@dc.dataclass(frozen=True, slots=True)
class TemplateRenderError:
    """A failure reported while rendering a parsed template."""

    message: str
    line: int = 1
    column: int = 1


class TemplateEngine(typ.Protocol):
    """Capability interface for the external template engine."""

    def parse(self, source: str) -> typ.Any:
        """Return a parsed template or raise :class:`TemplateParseError`."""
        ...

    def render(
        self, parsed: typ.Any, context: typ.Mapping[str, typ.Any]
    ) -> tuple[str, list[TemplateRenderError]]:
        """Render ``parsed`` and return the output with any render errors."""
        ...

    def literal(self, text: str) -> str:
        """Return template source that renders to exactly ``text``."""
        ...


class JinjaTemplateEngine:
    """Evaluate templates with Jinja2.

    Undefined names, and attribute chains through them, render as empty
    strings. Nothing is autoescaped, and trailing newlines are kept so output
    mirrors the source layout. Comments are written ``{## ... ##}`` so that a
    literal ``{#`` in page HTML passes through untouched.
    """

    def __init__(self, env: Environment | None = None) -> None:
        """Initialize the engine with an optional preconfigured environment.

        Parameters
        ----------
        env : Environment, optional
            Jinja environment to compile templates with. Defaults to a
            loader-less environment with autoescaping disabled.
        """
        self.env = env or Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=ChainableUndefined,
            comment_start_string=_COMMENT_START,
            comment_end_string=_COMMENT_END,
        )

    def parse(self, source: str) -> Template:
        """Compile ``source`` into a Jinja template.

        Raises
        ------
        TemplateParseError
            Carrying the line Jinja reports; Jinja does not report columns.
        """
        try:
            return self.env.from_string(source)
        except TemplateSyntaxError as exc:
            raise TemplateParseError(exc.message or str(exc), exc.lineno or 1) from exc

    def render(
        self, parsed: Template, context: typ.Mapping[str, typ.Any]
    ) -> tuple[str, list[TemplateRenderError]]:
        """Render ``parsed``; a failure yields empty output and one error."""
        try:
            return parsed.render(dict(context)), []
        except _RENDER_ERRORS as exc:
            error = TemplateRenderError(_describe(exc), _template_line(exc))
            return "", [error]

    def literal(self, text: str) -> str:
        """Wrap ``text`` in a raw block, splitting out any ``endraw`` tags.

        >>> JinjaTemplateEngine().literal("{{ x }}")
        '{% raw %}{{ x }}{% endraw %}'
        """
        if not text:
            return ""
        escaped = _ENDRAW_PATTERN.sub(
            lambda match: "{% endraw %}{{ " + repr(match.group(0)) + " }}{% raw %}",
            text,
        )
        return "{% raw %}" + escaped + "{% endraw %}"


def _describe(exc: BaseException) -> str:
    message = str(exc)
    if isinstance(exc, TemplateError):
        return message or type(exc).__name__
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


def _template_line(exc: BaseException) -> int:
    """Return the innermost template line in ``exc``'s traceback, or 1."""
    line = 1
    tb = exc.__traceback__
    while tb is not None:
        if tb.tb_frame.f_code.co_filename == _TEMPLATE_FILENAME:
            line = tb.tb_lineno
        tb = tb.tb_next
    return line


__all__ = [
    "JinjaTemplateEngine",
    "TemplateEngine",
    "TemplateParseError",
    "TemplateRenderError",
]
