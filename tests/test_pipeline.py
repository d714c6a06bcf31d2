"""Integration tests for the reactive dashboard pipeline."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pytest import approx

from classroom.pipeline import DashboardUpdate, ReactivePipeline
from classroom.signals import dashboard_updated
from classroom.stores import InMemoryExperimentStore
from experiment_analysis.filters import FilterController

pytestmark = pytest.mark.integration


def _payload(class_code: str, group: str, control: list[float], washers: list[float]) -> dict:
    return {
        "classCode": class_code,
        "groupName": group,
        "members": ["Alex"],
        "hypothesis": "decrease",
        "conditions": [
            {"label": "Control", "mass": 250, "trials": control},
            {"label": "3 washers", "mass": 280, "trials": washers},
        ],
    }


@pytest.fixture
def store() -> InMemoryExperimentStore:
    ticks = iter(datetime(2025, 10, 2, 9, 0, tzinfo=timezone.utc) + timedelta(minutes=i) for i in range(100))
    return InMemoryExperimentStore(clock=lambda: next(ticks))


def test_pipeline_recomputes_on_every_stream_change(store) -> None:
    """Each new submission republishes a full recomputation."""

    updates: list[DashboardUpdate] = []
    pipeline = ReactivePipeline(store.submissions, store.classes).start()
    pipeline.subscribe(updates.append)
    assert updates[-1].views.record_count == 0

    store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))
    store.create_submission(_payload("P2", "Rollers", [1.2, 1.3, 1.1], [0.4, 0.6, 0.8]))

    latest = updates[-1]
    assert latest.views.record_count == 2
    assert latest.views.condition_stats[0].mean == approx(1.1)
    assert latest.submissions[0].group_name == "Rollers"
    assert pipeline.latest is latest


def test_filter_change_recomputes_and_class_stream_feeds_selector(store) -> None:
    """Selecting a class re-derives views; class upserts refresh selector counts."""

    controller = FilterController()
    pipeline = ReactivePipeline(store.submissions, store.classes, filter_controller=controller).start()
    updates: list[DashboardUpdate] = []
    pipeline.subscribe(updates.append)

    store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))
    store.create_submission(_payload("P3", "Zoomers", [2.0, 2.0, 2.0], [1.0, 1.0, 1.0]))
    store.upsert_class("P3", "Period 3")

    assert [(o.value, o.count) for o in updates[-1].filter_options] == [("ALL", 2), ("P3", 1)]

    controller.select("P3")
    views = updates[-1].views
    assert views.active_filter == "P3"
    assert views.filtered_count == 1
    assert views.condition_stats[0].mean == approx(2.0)
    assert views.comparison[0].by_class["P2"] is None
    assert [row.class_code for row in updates[-1].submissions] == ["P3", "P3"]


def test_disposed_subscriber_stops_receiving_updates(store) -> None:
    """A disposer detaches its callback; other subscribers keep receiving."""

    pipeline = ReactivePipeline(store.submissions).start()
    first: list[DashboardUpdate] = []
    second: list[DashboardUpdate] = []
    dispose_first = pipeline.subscribe(first.append)
    pipeline.subscribe(second.append)

    dispose_first()
    dispose_first()
    store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))

    assert len(first) == 1
    assert len(second) == 2


def test_close_detaches_from_streams_and_signal(store) -> None:
    """No recomputation fires after the pipeline is closed."""

    pipeline = ReactivePipeline(store.submissions, store.classes).start()
    updates: list[DashboardUpdate] = []
    pipeline.subscribe(updates.append)
    seen_before = len(updates)

    pipeline.close()
    store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))
    store.upsert_class("P2", "Period 2")
    pipeline.select_class("P2")

    assert len(updates) == seen_before
    assert store.submissions.subscriber_count == 0
    assert store.classes.subscriber_count == 0
    assert not dashboard_updated.has_listeners(sender=pipeline)
    with pytest.raises(RuntimeError):
        pipeline.subscribe(updates.append)


def test_signal_carries_update_for_pipeline_sender(store) -> None:
    """External receivers can listen on `dashboard_updated` for a pipeline."""

    pipeline = ReactivePipeline(store.submissions).start()
    received: list[DashboardUpdate] = []

    def receiver(sender, update, **kwargs) -> None:
        received.append(update)

    dashboard_updated.connect(receiver, sender=pipeline, weak=False)
    try:
        store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))
    finally:
        dashboard_updated.disconnect(receiver, sender=pipeline)
        pipeline.close()

    assert len(received) == 1
    assert received[0].views.record_count == 1


@pytest.mark.parametrize("limit", [1, 5])
def test_precision_limit_comes_from_settings(store, settings, limit) -> None:
    """`CARTS_EXPERIMENT['PRECISION_RANKING_LIMIT']` bounds the ranking."""

    settings.CARTS_EXPERIMENT = {**settings.CARTS_EXPERIMENT, "PRECISION_RANKING_LIMIT": limit}
    for index in range(3):
        store.create_submission(_payload("P2", f"G{index}", [1.0, 1.1, 0.9], [0.8, 0.7, 0.8]))

    pipeline = ReactivePipeline(store.submissions).start()

    assert pipeline.latest is not None
    assert len(pipeline.latest.views.precision_ranking) == min(limit, 3)


def test_start_publishes_records_before_any_class_snapshot(store) -> None:
    """Starting on a populated store never publishes an empty record set."""

    store.create_submission(_payload("P2", "Rockets", [1.0, 1.1, 0.9], [0.8, 0.8, 0.8]))
    store.upsert_class("P2", "Period 2")
    pipeline = ReactivePipeline(store.submissions, store.classes)
    counts: list[int] = []

    def receiver(sender, update, **kwargs) -> None:
        counts.append(update.views.record_count)

    dashboard_updated.connect(receiver, sender=pipeline, weak=False)
    try:
        pipeline.start()
    finally:
        dashboard_updated.disconnect(receiver, sender=pipeline)
        pipeline.close()

    assert counts
    assert all(count == 1 for count in counts)
    assert pipeline.latest is not None
    assert [option.value for option in pipeline.latest.filter_options] == ["ALL", "P2"]
