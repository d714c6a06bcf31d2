"""Presentation-ready tables derived from records.

These helpers shape data for selectors and tables; they do not format
anything beyond fixed-precision numbers.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime

from .filters import ALL
from .records import ClassRecord, ConditionSample, SubmissionRecord


@dataclass(frozen=True, slots=True)
class FilterOption:
    """An entry in the class selector.

    Attributes:
        value: `ALL` or a class code.
        label: Display label (class name, or code when unnamed).
        count: Number of submissions for this entry.
    """

    value: str
    label: str
    count: int


@dataclass(frozen=True, slots=True)
class SubmissionRow:
    """One (submission, condition) row of the submissions table."""

    submission_id: str
    created_at: datetime | None
    class_code: str
    group_name: str
    members: str
    hypothesis: str
    label: str
    mass: float | None
    trials: tuple[float | None, ...]
    avg: str
    sd: str


@dataclass(frozen=True, slots=True)
class ConditionSummary:
    """Per-condition result shown to a group after it submits."""

    label: str
    mass: float | None
    trials: tuple[float | None, ...]
    avg: float | None
    sd: float | None


def format_fixed(value: float | None, *, digits: int = 3) -> str:
    """Format a number to fixed precision, or "" when missing."""

    if value is None:
        return ""
    return f"{value:.{digits}f}"


def class_options(classes: Iterable[ClassRecord]) -> tuple[ClassRecord, ...]:
    """Classes sorted by code for the student selector."""

    return tuple(sorted(classes, key=lambda item: item.code))


def filter_options(
    records: Sequence[SubmissionRecord], classes: Iterable[ClassRecord]
) -> tuple[FilterOption, ...]:
    """Build selector entries: `ALL` first, then each known class with its count."""

    counts: dict[str, int] = {}
    for record in records:
        counts[record.class_code] = counts.get(record.class_code, 0) + 1

    options = [FilterOption(value=ALL, label=ALL, count=len(records))]
    for item in classes:
        options.append(
            FilterOption(value=item.code, label=item.display_name, count=counts.get(item.code, 0))
        )
    return tuple(options)


def submission_rows(records: Iterable[SubmissionRecord]) -> tuple[SubmissionRow, ...]:
    """Flatten submissions into one row per condition, in source order."""

    return tuple(
        SubmissionRow(
            submission_id=record.id,
            created_at=record.created_at,
            class_code=record.class_code,
            group_name=record.group_name,
            members=", ".join(record.members),
            hypothesis=record.hypothesis.value if record.hypothesis is not None else "",
            label=condition.label,
            mass=condition.mass,
            trials=condition.trials,
            avg=format_fixed(condition.avg),
            sd=format_fixed(condition.sd),
        )
        for record in records
        for condition in record.conditions
    )


def student_summary(conditions: Iterable[ConditionSample]) -> tuple[ConditionSummary, ...]:
    """Summarize a group's own conditions for the confirmation view."""

    return tuple(
        ConditionSummary(
            label=condition.label,
            mass=condition.mass,
            trials=condition.trials,
            avg=condition.avg,
            sd=condition.sd,
        )
        for condition in conditions
    )
