"""Tests for the ``emmer`` command-line commands."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import pytest

from site_emmer import cli
from site_emmer.config import BuildConfig, WatchConfig

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from conftest import SiteTree


@pytest.fixture(autouse=True)
def restore_root_logging() -> cabc.Iterator[None]:
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_build_reports_written_files(
    site: SiteTree, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    site.write("content/home/index.html", "<p>home</p>")
    monkeypatch.chdir(site.root)

    cli.build(root_dir=site.root)

    out = capsys.readouterr().out.splitlines()
    assert out == [
        f"wrote {Path('dist') / 'home' / 'index.html'}",
        f"wrote {Path('dist') / 'sitemap.xml'}",
        "Site built successfully.",
    ]


def test_build_prints_structured_errors(
    site: SiteTree, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    site.write("content/home/index.html", '{% include "ghost" %}')
    monkeypatch.chdir(site.root)

    cli.build(root_dir=site.root, structured_errors=True)

    out = capsys.readouterr().out.splitlines()
    page = site.root / "content" / "home" / "index.html"
    assert f"error[include] {page}:1:1: Include template not found: ghost" in out
    assert out[-1] == "1 error(s)"


def test_build_summarises_errors_without_structured_flag(
    site: SiteTree, capsys: pytest.CaptureFixture[str]
) -> None:
    site.write("content/home/index.html", '{% include "ghost" %}')

    cli.build(root_dir=site.root)

    assert capsys.readouterr().out.splitlines()[-1] == (
        "Build completed with 1 error(s)."
    )


def test_project_file_and_flags_combine(
    site: SiteTree, capsys: pytest.CaptureFixture[str]
) -> None:
    site.write("emmer.yaml", "source_dir: pages\noutput_dir: public\n")
    site.write("pages/home/index.html", "home")

    cli.build(root_dir=site.root, output_dir=Path("www"))

    assert (site.root / "www" / "home" / "index.html").is_file()
    assert not (site.root / "public").exists()
    assert "Site built successfully." in capsys.readouterr().out


def test_explicit_config_file_is_used(
    site: SiteTree, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    config = tmp_path / "elsewhere.yaml"
    config.write_text("output_dir: public\n", encoding="utf-8")
    site.write("content/home/index.html", "home")

    cli.build(root_dir=site.root, config=config)

    assert (site.root / "public" / "home" / "index.html").is_file()
    capsys.readouterr()


class _FakeWatcher:
    instances: typ.ClassVar[list[_FakeWatcher]] = []
    outcome: typ.ClassVar[int | type[BaseException]] = 0

    def __init__(
        self,
        config: BuildConfig,
        watch: WatchConfig | None = None,
        *,
        max_events: int | None = None,
        debounce: float | None = None,
    ) -> None:
        self.config = config
        self.watch = watch
        self.max_events = max_events
        self.debounce = debounce
        self.stopped = False
        _FakeWatcher.instances.append(self)

    def run(self) -> int:
        if isinstance(self.outcome, int):
            return self.outcome
        raise self.outcome

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture
def fake_watcher(monkeypatch: pytest.MonkeyPatch) -> type[_FakeWatcher]:
    _FakeWatcher.instances = []
    _FakeWatcher.outcome = 0
    monkeypatch.setattr(cli, "Watcher", _FakeWatcher)
    return _FakeWatcher


def test_watch_passes_settings_to_watcher(
    site: SiteTree,
    fake_watcher: type[_FakeWatcher],
    capsys: pytest.CaptureFixture[str],
) -> None:
    site.write("emmer.yaml", "watch:\n  debounce: 0.5\n")
    fake_watcher.outcome = 2

    cli.watch(root_dir=site.root, source_dir=Path("src"), max_events=4)

    (watcher,) = fake_watcher.instances
    assert watcher.config.source_dir == Path("src")
    assert watcher.config.root_dir == site.root
    assert watcher.watch == WatchConfig(debounce=0.5)
    assert watcher.max_events == 4
    assert watcher.debounce is None
    assert capsys.readouterr().out.splitlines() == [
        "Press Ctrl+C to stop watching",
        "Stopped after 2 rebuild(s).",
    ]


def test_watch_stops_cleanly_on_interrupt(
    site: SiteTree,
    fake_watcher: type[_FakeWatcher],
    capsys: pytest.CaptureFixture[str],
) -> None:
    fake_watcher.outcome = KeyboardInterrupt

    cli.watch(root_dir=site.root)

    assert fake_watcher.instances[0].stopped
    assert capsys.readouterr().out.splitlines()[-1] == "Stopped watching."
