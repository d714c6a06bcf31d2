"""Tests for selector entries and the submissions table."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from experiment_analysis.records import ClassRecord, ConditionSample, Hypothesis
from experiment_analysis.tables import (
    class_options,
    filter_options,
    format_fixed,
    student_summary,
    submission_rows,
)
from factories import make_submission

pytestmark = pytest.mark.unit


def test_filter_options_count_submissions_per_class() -> None:
    """ALL comes first with the total; classes show name and count."""

    records = (
        make_submission("1", class_code="P2"),
        make_submission("2", class_code="P2"),
        make_submission("3", class_code="P5"),
    )
    classes = (ClassRecord(code="P2", name="Period 2"), ClassRecord(code="P3", name=""))

    options = filter_options(records, classes)

    assert [(o.value, o.label, o.count) for o in options] == [
        ("ALL", "ALL", 3),
        ("P2", "Period 2", 2),
        ("P3", "P3", 0),
    ]


def test_class_options_sort_by_code() -> None:
    """Classes are offered in code order."""

    classes = (ClassRecord(code="P8", name="Period 8"), ClassRecord(code="P2", name="Period 2"))

    assert [item.code for item in class_options(classes)] == ["P2", "P8"]


def test_submission_rows_flatten_conditions_with_fixed_precision() -> None:
    """One row per condition, with avg/sd rendered as plain numbers."""

    created = datetime(2025, 10, 2, 9, 0, tzinfo=timezone.utc)
    record = make_submission(
        "1",
        group_name="Rockets",
        hypothesis=Hypothesis.decrease,
        conditions=(("Control", 250.0, (1.0, 1.2, 1.1)), ("3 washers", 280.0, (0.8, None, None))),
        created_at=created,
    )

    rows = submission_rows((record,))

    assert len(rows) == 2
    assert rows[0].members == "Alex, Bo"
    assert rows[0].hypothesis == "decrease"
    assert rows[0].created_at == created
    assert rows[0].avg == "1.100"
    assert rows[0].sd == "0.082"
    assert rows[1].avg == "0.800"
    assert rows[1].sd == ""


def test_student_summary_and_formatting() -> None:
    """The confirmation view reports each condition's live avg and sd."""

    (summary,) = student_summary((ConditionSample(label="Control", mass=250.0, trials=(1.0, 1.2)),))

    assert summary.avg == pytest.approx(1.1)
    assert summary.sd == pytest.approx(0.1)
    assert format_fixed(None) == ""
    assert format_fixed(0.12345, digits=2) == "0.12"
