"""Tests for YAML data loading and structured build errors."""

from __future__ import annotations

import typing as typ

import pytest

from site_emmer.data import (
    DataParseError,
    YamlDataParser,
    find_site_data_file,
    load_data_file,
    load_site_data,
)
from site_emmer.errors import BuildError, BuildErrors

if typ.TYPE_CHECKING:
    from conftest import SiteTree


def test_parser_returns_nested_mapping() -> None:
    parsed = YamlDataParser().parse("page:\n  title: Home\n  tags: [a, b]\n")
    assert parsed == {"page": {"title": "Home", "tags": ["a", "b"]}}


def test_parser_treats_empty_document_as_empty_mapping() -> None:
    assert YamlDataParser().parse("") == {}


def test_parser_uses_yaml_1_2_booleans() -> None:
    assert YamlDataParser().parse("flag: yes\n") == {"flag": "yes"}


def test_parser_reports_one_based_location() -> None:
    with pytest.raises(DataParseError) as excinfo:
        YamlDataParser().parse("page:\n  title: Home\n   bad: indent\n")

    assert excinfo.value.line == 3
    assert excinfo.value.column > 1


def test_parser_rejects_non_mapping_documents() -> None:
    with pytest.raises(DataParseError, match="mapping"):
        YamlDataParser().parse("- one\n- two\n")


def test_load_data_file_reports_yaml_error(site: SiteTree) -> None:
    path = site.write("content/home/index.yaml", "page: {title: [\n")

    data, errors = load_data_file(path)

    assert data == {}
    assert len(errors) == 1
    assert errors[0].kind == "yaml"
    assert errors[0].file == str(path)


def test_load_data_file_reports_read_error(site: SiteTree) -> None:
    missing = site.root / "content" / "gone.yaml"

    data, errors = load_data_file(missing)

    assert data == {}
    assert errors[0].message.startswith("Failed to read YAML file")


def test_site_data_prefers_yaml_over_yml(site: SiteTree) -> None:
    site.write("content/site.yml", "site: {name: yml}\n")
    site.write("content/site.yaml", "site: {name: yaml}\n")
    source = site.root / "content"

    assert find_site_data_file(source) == source / "site.yaml"
    assert load_site_data(source) == ({"site": {"name": "yaml"}}, [])


def test_missing_site_data_is_empty(site: SiteTree) -> None:
    assert load_site_data(site.root / "content") == ({}, [])


def test_build_error_formats_location() -> None:
    error = BuildError.template("a.html", "boom", line=3, column=7)
    assert str(error) == "a.html:3:7: boom"
    assert error.severity == "error"


def test_build_errors_keep_append_order_and_filter() -> None:
    errors = BuildErrors()
    errors.append(BuildError.yaml("b.yaml", "bad"))
    errors.extend(
        [BuildError.include("a.html", "missing"), BuildError.yaml("a.yaml", "bad")]
    )

    assert [error.file for error in errors] == ["b.yaml", "a.html", "a.yaml"]
    assert errors.of_kind("yaml") == [errors[0], errors[2]]
    assert errors.for_file("a.html") == [errors[1]]
    assert errors.count_by_kind() == {"yaml": 2, "include": 1}
    assert errors[1:] == BuildErrors([errors[1], errors[2]])
    assert errors.has_errors


def test_empty_build_errors_are_falsy() -> None:
    errors = BuildErrors()
    assert not errors
    assert not errors.has_errors
    assert errors == []


def test_parser_reports_unconstructible_scalar() -> None:
    with pytest.raises(DataParseError, match="ValueError") as excinfo:
        YamlDataParser().parse("page:\n  date: 2024-02-30\n")

    assert (excinfo.value.line, excinfo.value.column) == (1, 1)


def test_load_data_file_reports_impossible_date_as_yaml_error(
    site: SiteTree,
) -> None:
    path = site.write("content/events/index.yaml", "page:\n  date: 2024-02-30\n")

    data, errors = load_data_file(path)

    assert data == {}
    assert [error.kind for error in errors] == ["yaml"]
    assert "ValueError" in errors[0].message
