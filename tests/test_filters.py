"""Tests for the active class filter."""

from __future__ import annotations

import pytest

from experiment_analysis.filters import ALL, ALL_CLASSES, ClassFilter, FilterController, filter_records
from factories import make_submission

pytestmark = pytest.mark.unit


def test_filter_records_keeps_source_order() -> None:
    """ALL keeps everything; a class code keeps only matching records."""

    records = (
        make_submission("1", class_code="P2"),
        make_submission("2", class_code="P3"),
        make_submission("3", class_code="P2"),
    )

    assert filter_records(records, ALL_CLASSES) == records
    assert [r.id for r in filter_records(records, ClassFilter("P2"))] == ["1", "3"]


def test_unknown_class_code_is_allowed_and_filters_everything() -> None:
    """Selecting a class without records is not an error."""

    controller = FilterController()
    active = controller.select("P9")

    assert active == ClassFilter("P9")
    assert active.label == "P9"
    assert filter_records((make_submission("1"),), active) == ()


def test_listeners_fire_only_on_change_and_can_be_removed() -> None:
    """Listeners see each distinct selection once until removed."""

    controller = FilterController()
    seen: list[str] = []
    remove = controller.add_listener(lambda active: seen.append(active.label))

    controller.select("P2")
    controller.select("P2")
    controller.select(ALL)
    remove()
    controller.select("P3")

    assert seen == ["P2", ALL]
    assert controller.active == ClassFilter("P3")
    assert controller.select_all().is_all
