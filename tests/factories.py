"""Record builders shared by tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from experiment_analysis.records import ConditionSample, Hypothesis, SubmissionRecord


def make_submission(
    record_id: str,
    *,
    class_code: str = "P2",
    group_name: str | None = None,
    hypothesis: Hypothesis | None = Hypothesis.increase,
    conditions: Sequence[tuple[str, float | None, Sequence[float | None]]] = (),
    created_at: datetime | None = None,
) -> SubmissionRecord:
    """Build a SubmissionRecord from `(label, mass, trials)` tuples."""

    return SubmissionRecord(
        id=record_id,
        class_code=class_code,
        group_name=group_name or f"Group {record_id}",
        members=("Alex", "Bo"),
        hypothesis=hypothesis,
        conditions=tuple(
            ConditionSample(label=label, mass=mass, trials=tuple(trials))
            for label, mass, trials in conditions
        ),
        created_at=created_at,
    )
