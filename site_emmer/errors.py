"""Structured build errors and the exceptions raised by site_emmer.

A build pass never stops because one page is broken. Instead, every recoverable
failure is recorded as a :class:`BuildError` and appended to a
:class:`BuildErrors` sequence that the coordinator hands back to the caller (or
logs). Only failures that prevent a build from starting at all are raised, as
subclasses of :class:`EmmerError`.

Examples
--------
>>> errors = BuildErrors()
>>> errors.append(BuildError.build("content/home/index.html", "Failed to read"))
>>> str(errors[0])
'content/home/index.html:1:1: Failed to read'
>>> errors.count_by_kind()
{'build': 1}
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ
from pathlib import Path

ErrorKind = typ.Literal["template", "yaml", "build", "include"]
Severity = typ.Literal["error", "warning"]


class EmmerError(Exception):
    """Base class for fatal site_emmer failures."""


class SourceTreeError(EmmerError):
    """Raised when the source directory exists but cannot be listed."""


class ConfigError(EmmerError, ValueError):
    """Raised when a build configuration file is invalid."""


@dc.dataclass(frozen=True, slots=True)
class BuildError:
    """One non-fatal failure encountered while building the site.

    Attributes
    ----------
    file : str
        Path of the file the failure relates to.
    line : int
        One-based line number; ``1`` when no better location is known.
    column : int
        One-based column number; ``1`` when no better location is known.
    message : str
        Human readable description of the failure.
    kind : ErrorKind
        Failure family: ``template``, ``yaml``, ``build`` or ``include``.
    severity : Severity
        ``error`` or ``warning``.
    """

    file: str
    line: int
    column: int
    message: str
    kind: ErrorKind
    severity: Severity = "error"

    def __str__(self) -> str:
        return f"{self.file}:{self.line}:{self.column}: {self.message}"

    @classmethod
    def build(cls, file: str | Path, message: str) -> BuildError:
        """Return a filesystem failure located at the start of ``file``."""
        return cls(str(file), 1, 1, message, "build")

    @classmethod
    def include(
        cls, file: str | Path, message: str, *, line: int = 1, column: int = 1
    ) -> BuildError:
        """Return an unresolved include/layout failure."""
        return cls(str(file), line, column, message, "include")

    @classmethod
    def template(
        cls, file: str | Path, message: str, *, line: int = 1, column: int = 1
    ) -> BuildError:
        """Return a template parse or render failure."""
        return cls(str(file), line, column, message, "template")

    @classmethod
    def yaml(
        cls, file: str | Path, message: str, *, line: int = 1, column: int = 1
    ) -> BuildError:
        """Return a data-file read or parse failure."""
        return cls(str(file), line, column, message, "yaml")


class BuildErrors(cabc.Sequence[BuildError]):
    """Append-ordered collection of :class:`BuildError` records.

    Entries keep the order in which they were appended, so errors from a build
    pass appear in content discovery order.
    """

    __slots__ = ("_items",)

    def __init__(self, items: cabc.Iterable[BuildError] = ()) -> None:
        self._items: list[BuildError] = list(items)

    def append(self, error: BuildError) -> None:
        """Record ``error`` after every previously recorded entry."""
        self._items.append(error)

    def extend(self, errors: cabc.Iterable[BuildError]) -> None:
        """Record each entry of ``errors`` in iteration order."""
        self._items.extend(errors)

    @typ.overload
    def __getitem__(self, index: int) -> BuildError: ...

    @typ.overload
    def __getitem__(self, index: slice) -> BuildErrors: ...

    def __getitem__(self, index: int | slice) -> BuildError | BuildErrors:
        if isinstance(index, slice):
            return BuildErrors(self._items[index])
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BuildErrors):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"BuildErrors({self._items!r})"

    def of_kind(self, kind: ErrorKind) -> BuildErrors:
        """Return the entries of the given ``kind``, order preserved."""
        return BuildErrors(error for error in self._items if error.kind == kind)

    def for_file(self, file: str | Path) -> BuildErrors:
        """Return the entries reported against ``file``."""
        target = str(file)
        return BuildErrors(error for error in self._items if error.file == target)

    def count_by_kind(self) -> dict[str, int]:
        """Return how many entries each kind has, in first-seen order."""
        counts: dict[str, int] = {}
        for error in self._items:
            counts[error.kind] = counts.get(error.kind, 0) + 1
        return counts

    @property
    def has_errors(self) -> bool:
        """Whether any entry has ``error`` severity."""
        return any(error.severity == "error" for error in self._items)


__all__ = [
    "BuildError",
    "BuildErrors",
    "ConfigError",
    "EmmerError",
    "ErrorKind",
    "Severity",
    "SourceTreeError",
]
