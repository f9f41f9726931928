"""Unit tests for building single pages."""

from __future__ import annotations

import datetime as dt
import logging
import typing as typ
from pathlib import Path

import pytest

from site_emmer.generator import (
    ContentPair,
    PageBuilder,
    build_render_context,
    output_path_for,
)

if typ.TYPE_CHECKING:
    from conftest import SiteTree


def _builder(
    site: SiteTree,
    *,
    site_data: dict[str, typ.Any] | None = None,
    templates: dict[str, str] | None = None,
    today: dt.date,
    **kwargs: typ.Any,
) -> PageBuilder:
    return PageBuilder(
        source_dir=site.root / "content",
        output_dir=site.root / "dist",
        site_data=site_data or {},
        templates=templates or {},
        today=today,
        **kwargs,
    )


def test_output_path_mirrors_source_layout(tmp_path: Path) -> None:
    source = tmp_path / "content"
    output = tmp_path / "dist"
    assert output_path_for(source / "a" / "index.html", source, output) == (
        output / "a" / "index.html"
    )
    assert output_path_for(source / "index.html", source, output) == (
        output / "index.html"
    )


def test_output_path_falls_back_to_source_named_segment(tmp_path: Path) -> None:
    linked = tmp_path / "mirror" / "content" / "blog" / "index.html"
    result = output_path_for(linked, tmp_path / "content", tmp_path / "dist")
    assert result == tmp_path / "dist" / "blog" / "index.html"


def test_render_context_injects_page_content_and_year() -> None:
    site_data = {"site": {"name": "X"}, "content": "shadowed"}
    context = build_render_context(
        site_data,
        {"page": {"title": "T"}, "ignored": True},
        "<p>body</p>",
        today=dt.date(2030, 1, 2),
    )
    assert context == {
        "site": {"name": "X"},
        "page": {"title": "T"},
        "content": "<p>body</p>",
        "current_year": 2030,
    }
    assert site_data["content"] == "shadowed"


def test_render_context_defaults_page_to_empty_mapping() -> None:
    context = build_render_context({}, {"page": "not a mapping"}, "")
    assert context["page"] == {}


def test_builds_page_with_layout_data_and_site(site: SiteTree, today: dt.date) -> None:
    html = site.write(
        "content/home/index.html",
        """\
        {% layout "base" %}
        <h1>{{ page.title }}</h1>
        """,
    )
    data = site.write("content/home/index.yaml", "page:\n  title: Welcome\n")
    layout = (
        "<title>{{ site.name }}</title><main>{{ content }}</main>{{ current_year }}"
    )
    builder = _builder(
        site,
        site_data={"site": {"name": "Emmer"}},
        templates={"base": layout},
        today=today,
    )

    result = builder.build(ContentPair(html, data))

    assert result.errors == []
    assert result.written
    assert result.output_path == site.root / "dist" / "home" / "index.html"
    assert site.read("dist/home/index.html") == (
        "<title>Emmer</title><main><h1>Welcome</h1></main>2024"
    )


def test_page_without_data_file_renders_with_empty_page(
    site: SiteTree, today: dt.date
) -> None:
    html = site.write("content/about/index.html", "[{{ page.title }}]\n")

    result = _builder(site, today=today).build(ContentPair(html))

    assert result.errors == []
    assert site.read("dist/about/index.html") == "[]\n"


def test_malformed_page_data_is_reported_and_page_still_written(
    site: SiteTree, today: dt.date
) -> None:
    html = site.write("content/news/index.html", "<p>{{ page.title }}</p>")
    data = site.write("content/news/index.yaml", "page:\n  title: [unclosed\n")

    result = _builder(site, today=today).build(ContentPair(html, data))

    assert [error.kind for error in result.errors] == ["yaml"]
    assert result.errors[0].file == str(data)
    assert result.errors[0].line > 1
    assert site.read("dist/news/index.html") == "<p></p>"


def test_missing_layout_reports_include_error_and_renders_body(
    site: SiteTree, today: dt.date
) -> None:
    html = site.write("content/home/index.html", '{% layout "nope" %}\n<p>hi</p>\n')

    result = _builder(site, today=today).build(ContentPair(html))

    assert len(result.errors) == 1
    assert result.errors[0].kind == "include"
    assert "nope" in result.errors[0].message
    assert site.read("dist/home/index.html") == "<p>hi</p>"


def test_unreadable_content_becomes_build_error_and_empty_output(
    site: SiteTree, today: dt.date
) -> None:
    html = site.root / "content" / "bad" / "index.html"
    html.parent.mkdir(parents=True)
    html.write_bytes(b"\xff\xfe\xfa")

    result = _builder(site, today=today).build(ContentPair(html))

    assert [error.kind for error in result.errors] == ["build"]
    assert result.errors[0].message.startswith("Failed to read file")
    assert site.read("dist/bad/index.html") == ""


def test_write_failure_is_reported_not_raised(site: SiteTree, today: dt.date) -> None:
    html = site.write("content/home/index.html", "<p>x</p>")
    (site.root / "dist").write_text("not a directory", encoding="utf-8")

    result = _builder(site, today=today).build(ContentPair(html))

    assert not result.written
    assert [error.kind for error in result.errors] == ["build"]
    assert result.errors[0].message.startswith("Failed to write output file")


def test_pages_do_not_share_mutated_context(site: SiteTree, today: dt.date) -> None:
    first = site.write(
        "content/a/index.html", "{% set _ = site.tags.append('x') %}{{ site.tags }}"
    )
    second = site.write("content/b/index.html", "{{ site.tags | length }}")
    site_data = {"site": {"tags": []}}
    builder = _builder(site, site_data=site_data, today=today)

    builder.build(ContentPair(first))
    builder.build(ContentPair(second))

    assert site.read("dist/a/index.html") == "['x']"
    assert site.read("dist/b/index.html") == "0"
    assert site_data == {"site": {"tags": []}}


def test_verbose_logs_each_built_page(
    site: SiteTree, today: dt.date, caplog: pytest.LogCaptureFixture
) -> None:
    html = site.write("content/home/index.html", "x")
    builder = _builder(site, today=today, verbose=True)

    with caplog.at_level(logging.INFO, logger="site_emmer"):
        builder.build(ContentPair(html))

    assert f"Built: {Path('home') / 'index.html'}" in caplog.text
