"""Utilities for resolving templates and building individual pages."""

from .engine import JinjaTemplateEngine, TemplateEngine, TemplateParseError
from .models import ContentPair, PageResult, build_render_context
from .page_builder import PageBuilder, output_path_for
from .resolver import TemplateResolver, extract_layout

__all__ = [
    "ContentPair",
    "JinjaTemplateEngine",
    "PageBuilder",
    "PageResult",
    "TemplateEngine",
    "TemplateParseError",
    "TemplateResolver",
    "build_render_context",
    "extract_layout",
    "output_path_for",
]
