"""Pytest fixtures shared across the test suite."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

import pytest

from experiment_analysis.records import Hypothesis, SubmissionRecord
from factories import make_submission


@pytest.fixture
def p2_submissions() -> tuple[SubmissionRecord, ...]:
    """Two P2 submissions with a Control and a "3 washers" condition, newest first."""

    return (
        make_submission(
            "a",
            group_name="Rockets",
            hypothesis=Hypothesis.increase,
            conditions=(
                ("Control", 250.0, (1.0, 1.1, 0.9)),
                ("3 washers", 280.0, (0.8, 0.8, 0.8)),
            ),
            created_at=datetime(2025, 10, 2, 9, 5, tzinfo=timezone.utc),
        ),
        make_submission(
            "b",
            group_name="Rollers",
            hypothesis=Hypothesis.decrease,
            conditions=(
                ("Control", 250.0, (1.2, 1.3, 1.1)),
                ("3 washers", 280.0, (0.4, 0.6, 0.8)),
            ),
            created_at=datetime(2025, 10, 2, 9, 0, tzinfo=timezone.utc),
        ),
    )


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Enforce that every test has exactly one speed marker.

    - `unit`: pure, fast tests with no Django machinery.
    - `integration`: tests touching Django settings, signals, or commands.
    """

    invalid: list[str] = []
    for item in items:
        has_unit = item.get_closest_marker("unit") is not None
        has_integration = item.get_closest_marker("integration") is not None
        if has_unit == has_integration:
            markers = []
            if has_unit:
                markers.append("unit")
            if has_integration:
                markers.append("integration")
            invalid.append(f"{item.nodeid} (markers={markers or 'none'})")

    if invalid:
        joined = "\n".join(f"- {nodeid}" for nodeid in invalid)
        raise pytest.UsageError(
            "Each test must have exactly one speed marker: `@pytest.mark.unit` or "
            "`@pytest.mark.integration`.\n"
            f"Offending tests:\n{joined}"
        )
