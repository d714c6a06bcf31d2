"""In-memory record store implementing the stream and write-sink contracts.

Every change re-emits the full snapshot to each subscriber. Submissions are
emitted newest first, matching what the dashboard expects from a live backend.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime, timezone as dt_timezone
from typing import Any, Generic, TypeVar

from django.utils import timezone

from experiment_analysis.records import (
    ClassRecord,
    SubmissionRecord,
    class_from_wire,
    submission_from_wire,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SnapshotPublisher(Generic[T]):
    """Fan-out of full snapshots to registered callbacks."""

    def __init__(self, snapshot: Callable[[], tuple[T, ...]]) -> None:
        self._snapshot = snapshot
        self._callbacks: list[Callable[[Sequence[T]], None]] = []

    def subscribe(self, on_change: Callable[[Sequence[T]], None]) -> Callable[[], None]:
        """Register `on_change`, deliver the current snapshot, return a disposer."""

        self._callbacks.append(on_change)
        on_change(self._snapshot())

        def unsubscribe() -> None:
            if on_change in self._callbacks:
                self._callbacks.remove(on_change)

        return unsubscribe

    def publish(self) -> None:
        snapshot = self._snapshot()
        for callback in list(self._callbacks):
            callback(snapshot)

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)


class InMemoryExperimentStore:
    """Submissions and classes held in process memory.

    Attributes:
        submissions: Record stream of SubmissionRecord snapshots.
        classes: Class stream of ClassRecord snapshots.
    """

    def __init__(self, *, clock: Callable[[], datetime] = timezone.now) -> None:
        self._clock = clock
        self._submissions: list[SubmissionRecord] = []
        self._classes: dict[str, ClassRecord] = {}
        self.submissions: SnapshotPublisher[SubmissionRecord] = SnapshotPublisher(
            self.submission_snapshot
        )
        self.classes: SnapshotPublisher[ClassRecord] = SnapshotPublisher(self.class_snapshot)

    def submission_snapshot(self) -> tuple[SubmissionRecord, ...]:
        """Current submissions, newest first (stable for equal timestamps)."""

        return tuple(sorted(self._submissions, key=_created_at_key, reverse=True))

    def class_snapshot(self) -> tuple[ClassRecord, ...]:
        return tuple(self._classes.values())

    def create_submission(self, payload: Mapping[str, Any]) -> str:
        """Store a payload with a server-assigned id and timestamp."""

        record_id = uuid.uuid4().hex
        document = dict(payload)
        document["id"] = record_id
        document["createdAt"] = self._clock()
        self._submissions.append(submission_from_wire(document))
        logger.debug("Stored submission %s (%d total)", record_id, len(self._submissions))
        self.submissions.publish()
        return record_id

    def upsert_class(self, code: str, name: str) -> None:
        self._classes[code] = ClassRecord(code=code, name=name)
        self.classes.publish()

    def load(
        self,
        *,
        submissions: Iterable[Mapping[str, Any]] = (),
        classes: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        """Bulk-load stored documents (wire schema) and publish once per stream."""

        for document in classes:
            item = class_from_wire(document)
            self._classes[item.code] = item
        for document in submissions:
            self._submissions.append(submission_from_wire(document))
        self.classes.publish()
        self.submissions.publish()


_OLDEST = datetime.min.replace(tzinfo=dt_timezone.utc)


def _created_at_key(record: SubmissionRecord) -> datetime:
    """Sort key treating naive timestamps as UTC and missing ones as oldest."""

    created_at = record.created_at
    if created_at is None:
        return _OLDEST
    if created_at.tzinfo is None:
        return created_at.replace(tzinfo=dt_timezone.utc)
    return created_at
