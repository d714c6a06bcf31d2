"""Boundary contracts between the dashboard and the record store.

The dashboard never constructs a concrete backend. Callers inject objects
satisfying these protocols; `classroom.stores.InMemoryExperimentStore` is the
reference implementation.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from experiment_analysis.records import ClassRecord, SubmissionRecord

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class SnapshotStream(Protocol[T]):
    """Push-based stream that delivers the full current set on every change."""

    def subscribe(self, on_change: Callable[[Sequence[T]], None]) -> Unsubscribe:
        """Register `on_change` and return a function that unregisters it."""
        ...


RecordStream = SnapshotStream[SubmissionRecord]
ClassStream = SnapshotStream[ClassRecord]


class WriteSink(Protocol):
    """Write path for submissions and classes."""

    def create_submission(self, payload: Mapping[str, Any]) -> str:
        """Persist a submission payload and return its id."""
        ...

    def upsert_class(self, code: str, name: str) -> None:
        """Create or replace the class keyed by `code`."""
        ...
