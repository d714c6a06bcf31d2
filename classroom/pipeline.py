"""Reactive recomputation of dashboard views.

The pipeline subscribes to the record and class streams and re-derives every
view, in full and synchronously, whenever a stream emits or the class filter
changes. Results are published through `classroom.signals.dashboard_updated`
to subscribers registered with `ReactivePipeline.subscribe`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from classroom.conf import experiment_settings
from classroom.contracts import ClassStream, RecordStream, Unsubscribe
from classroom.signals import dashboard_updated
from experiment_analysis.dto import DashboardViews
from experiment_analysis.engine import derive_views
from experiment_analysis.filters import ClassFilter, FilterController, filter_records
from experiment_analysis.records import ClassRecord, SubmissionRecord
from experiment_analysis.tables import (
    FilterOption,
    SubmissionRow,
    class_options,
    filter_options,
    submission_rows,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardUpdate:
    """Read-only snapshot handed to the presentation layer.

    Attributes:
        views: Every derived statistics view.
        filter_options: Class selector entries with submission counts.
        classes: Known classes sorted by code.
        submissions: Submissions table rows for the active filter.
    """

    views: DashboardViews
    filter_options: tuple[FilterOption, ...]
    classes: tuple[ClassRecord, ...]
    submissions: tuple[SubmissionRow, ...]


class ReactivePipeline:
    """Recompute dashboard views from live streams.

    Args:
        records: Submission stream (full snapshots, newest first).
        classes: Optional class stream used for the selector.
        filter_controller: Shared class filter; a private one is created when
            omitted.
        precision_limit: Precision ranking length; defaults to the configured
            `PRECISION_RANKING_LIMIT`.

    Subscriptions stay connected to the module-level `dashboard_updated` signal
    with strong references. Callers must call each disposer returned by
    `subscribe` or call `close()`; otherwise the pipeline and its callbacks live
    for the rest of the process.
    """

    def __init__(
        self,
        records: RecordStream,
        classes: ClassStream | None = None,
        *,
        filter_controller: FilterController | None = None,
        precision_limit: int | None = None,
    ) -> None:
        self._record_stream = records
        self._class_stream = classes
        self.filter = filter_controller or FilterController()
        self._precision_limit = (
            precision_limit
            if precision_limit is not None
            else experiment_settings().precision_ranking_limit
        )
        self._records: tuple[SubmissionRecord, ...] = ()
        self._classes: tuple[ClassRecord, ...] = ()
        self._latest: DashboardUpdate | None = None
        self._disposers: list[Unsubscribe] = []
        self._subscriptions: list[_Subscription] = []
        self._started = False
        self._closed = False

    @property
    def latest(self) -> DashboardUpdate | None:
        """Most recently published update, if any."""

        return self._latest

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> ReactivePipeline:
        """Subscribe to the streams and the filter. Idempotent."""

        if self._closed:
            raise RuntimeError("Cannot start a closed pipeline.")
        if self._started:
            return self
        self._started = True
        self._disposers.append(self.filter.add_listener(self._on_filter_change))
        self._disposers.append(self._record_stream.subscribe(self._on_records))
        if self._class_stream is not None:
            self._disposers.append(self._class_stream.subscribe(self._on_classes))
        return self

    def subscribe(self, on_update: Callable[[DashboardUpdate], None]) -> Unsubscribe:
        """Register a presentation callback and return its disposer.

        The callback receives the latest update immediately when one exists,
        then every recomputation until the disposer is called.
        """

        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed pipeline.")
        subscription = _Subscription(pipeline=self, callback=on_update)
        self._subscriptions.append(subscription)
        dashboard_updated.connect(subscription.receive, sender=self, weak=False)
        if self._latest is not None:
            on_update(self._latest)
        return subscription.dispose

    def select_class(self, class_code: str | None) -> ClassFilter:
        """Change the active class filter (recomputes when it changes)."""

        return self.filter.select(class_code)

    def close(self) -> None:
        """Detach from every stream and subscriber. No update fires afterwards."""

        if self._closed:
            return
        self._closed = True
        for dispose in self._disposers:
            dispose()
        self._disposers.clear()
        for subscription in list(self._subscriptions):
            subscription.dispose()

    def _on_records(self, records: Sequence[SubmissionRecord]) -> None:
        self._records = tuple(records)
        self._recompute()

    def _on_classes(self, classes: Sequence[ClassRecord]) -> None:
        self._classes = tuple(classes)
        self._recompute()

    def _on_filter_change(self, active: ClassFilter) -> None:
        self._recompute()

    def _recompute(self) -> None:
        if self._closed:
            return
        active = self.filter.active
        logger.debug(
            "Recomputing dashboard views: records=%d filter=%s", len(self._records), active.label
        )
        update = DashboardUpdate(
            views=derive_views(self._records, active, precision_limit=self._precision_limit),
            filter_options=filter_options(self._records, self._classes),
            classes=class_options(self._classes),
            submissions=submission_rows(filter_records(self._records, active)),
        )
        self._latest = update
        dashboard_updated.send(sender=self, update=update)


@dataclass(eq=False)
class _Subscription:
    """A presentation callback connected to `dashboard_updated`."""

    pipeline: ReactivePipeline
    callback: Callable[[DashboardUpdate], None]
    active: bool = True

    def receive(self, sender: Any, update: DashboardUpdate, **kwargs: Any) -> None:
        if self.active:
            self.callback(update)

    def dispose(self) -> None:
        if not self.active:
            return
        self.active = False
        dashboard_updated.disconnect(self.receive, sender=self.pipeline)
        if self in self.pipeline._subscriptions:
            self.pipeline._subscriptions.remove(self)
