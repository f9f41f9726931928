"""Watch the content and template directories and rebuild on change.

The watcher performs an initial build, subscribes to filesystem events on the
resolved source and templates directories, and then blocks on a queue of
:class:`ChangeEvent` values. Every event whose path ends in ``.html``,
``.yaml`` or ``.yml`` triggers a full :func:`~site_emmer.coordinator.safe_build`;
other events are dropped silently. Events that arrive while a rebuild runs
wait in the queue and are handled once it finishes.

Subscriptions are a small capability: :class:`WatchdogSubscription` feeds the
queue from a watchdog observer thread, while tests can push events into a
plain :class:`QueueSubscription`.

Examples
--------
>>> from pathlib import Path
>>> from site_emmer.config import BuildConfig
>>> watcher = Watcher(BuildConfig(root_dir=Path("my-site")), max_events=10)
>>> watcher.run()  # doctest: +SKIP
3
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import os
import queue
import threading
import time
import typing as typ
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from ._constants import WATCHED_SUFFIXES
from .config import BuildConfig, WatchConfig, resolve_paths
from .coordinator import log_outcome, safe_build
from .errors import BuildErrors

logger = logging.getLogger(__name__)

_FORWARDED_EVENT_TYPES = frozenset(
    {EVENT_TYPE_CREATED, EVENT_TYPE_DELETED, EVENT_TYPE_MODIFIED, EVENT_TYPE_MOVED}
)


@dc.dataclass(frozen=True, slots=True)
class ChangeEvent:
    """A filesystem change reported for ``path``."""

    path: Path
    kind: str


def is_relevant(event: ChangeEvent) -> bool:
    """Whether ``event`` concerns a content, template or data file.

    >>> is_relevant(ChangeEvent(Path("content/home/index.yaml"), "modified"))
    True
    >>> is_relevant(ChangeEvent(Path("content/css/site.css"), "modified"))
    False
    """
    return event.path.name.endswith(WATCHED_SUFFIXES)


class QueueSubscription:
    """Queue-backed stream of change events."""

    def __init__(self) -> None:
        self.events: queue.Queue[ChangeEvent] = queue.Queue()

    def __enter__(self) -> typ.Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def put(self, event: ChangeEvent) -> None:
        """Enqueue ``event`` for the consumer."""
        self.events.put(event)

    def get(self, timeout: float | None = None) -> ChangeEvent | None:
        """Return the next event, or ``None`` if none arrives within ``timeout``."""
        try:
            return self.events.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        """Release resources held by the subscription."""


class _QueueingHandler(FileSystemEventHandler):
    """Forward file (not directory) change events into a subscription."""

    def __init__(self, subscription: QueueSubscription) -> None:
        super().__init__()
        self.subscription = subscription

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in _FORWARDED_EVENT_TYPES:
            return
        raw_path = getattr(event, "dest_path", "") or event.src_path
        path = Path(os.fsdecode(raw_path))
        self.subscription.put(ChangeEvent(path, event.event_type))


class WatchdogSubscription(QueueSubscription):
    """Subscription fed by a watchdog observer watching ``paths`` recursively."""

    def __init__(self, paths: cabc.Sequence[Path]) -> None:
        super().__init__()
        self._observer = Observer()
        handler = _QueueingHandler(self)
        for path in paths:
            self._observer.schedule(handler, str(path), recursive=True)
        self._observer.start()

    def close(self) -> None:
        """Stop the observer thread and wait for it to exit."""
        self._observer.stop()
        self._observer.join()


Subscribe = cabc.Callable[[cabc.Sequence[Path]], QueueSubscription]


class Watcher:
    """Rebuild a site whenever its content or templates change."""

    def __init__(
        self,
        config: BuildConfig,
        watch: WatchConfig | None = None,
        *,
        max_events: int | None = None,
        debounce: float | None = None,
        subscribe: Subscribe = WatchdogSubscription,
        **build_options: typ.Any,
    ) -> None:
        """Initialize the watcher.

        Parameters
        ----------
        config : BuildConfig
            Build configuration used for every rebuild.
        watch : WatchConfig, optional
            Loop settings; ``max_events`` and ``debounce`` override it.
        max_events : int, optional
            Stop after this many events have been received, relevant or not.
            ``None`` watches until :meth:`stop` is called.
        debounce : float, optional
            Seconds to wait after a relevant event before rebuilding.
        subscribe : callable, optional
            Factory returning a subscription for a list of directories;
            defaults to :class:`WatchdogSubscription`.
        **build_options
            Extra keyword arguments for :func:`~site_emmer.coordinator.safe_build`.
        """
        settings = watch or WatchConfig()
        self.config = config
        self.max_events = max_events if max_events is not None else settings.max_events
        self.debounce = debounce if debounce is not None else settings.debounce
        self.poll_interval = settings.poll_interval
        self.subscribe = subscribe
        self.build_options = build_options
        self.paths = resolve_paths(config, cwd=build_options.get("cwd"))
        self._stop = threading.Event()

    def stop(self) -> None:
        """Ask the loop to exit after the event it is currently handling."""
        self._stop.set()

    def watched_directories(self) -> list[Path]:
        """Return the existing directories among source and templates."""
        directories: list[Path] = []
        for directory in (self.paths.source, self.paths.templates):
            if directory.is_dir():
                directories.append(directory)
            else:
                logger.warning("Not watching missing directory %s", directory)
        return directories

    def run(self) -> int:
        """Build once, then rebuild on relevant changes until stopped.

        Returns
        -------
        int
            Number of rebuilds triggered by change events.
        """
        directories = self.watched_directories()
        logger.info(
            "Watching for changes in %s",
            " and ".join(str(directory) for directory in directories) or "nothing",
        )
        self._rebuild()
        rebuilds = 0
        received = 0
        with self.subscribe(directories) as subscription:
            while not self._stop.is_set():
                if self.max_events is not None and received >= self.max_events:
                    break
                event = subscription.get(timeout=self.poll_interval)
                if event is None:
                    continue
                received += 1
                if not is_relevant(event):
                    continue
                logger.info("File changed: %s", event.path)
                if self.debounce:
                    time.sleep(self.debounce)
                self._rebuild()
                rebuilds += 1
        logger.info("Stopping file watcher")
        return rebuilds

    def _rebuild(self) -> BuildErrors:
        errors = safe_build(self.config, **self.build_options)
        log_outcome(errors)
        return errors


def watch(config: BuildConfig, watch_config: WatchConfig | None = None) -> int:
    """Run a :class:`Watcher` for ``config`` until it stops."""
    return Watcher(config, watch_config).run()


__all__ = [
    "ChangeEvent",
    "QueueSubscription",
    "Watcher",
    "WatchdogSubscription",
    "is_relevant",
    "watch",
]
