"""Aggregation helpers for the instructor dashboard.

Each function is a deterministic, pure transformation of submission records.
Records arrive ordered by the upstream source (newest first); nothing here
re-sorts them except the precision ranking, which uses a stable sort so ties
keep source order.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .dto import (
    ComparisonRow,
    ConditionStats,
    EffectSize,
    HypothesisTally,
    PrecisionEntry,
    StripPoint,
    TrendPoint,
    TrendSummary,
)
from .filters import ClassFilter
from .numeric import (
    cohens_d,
    confidence_interval_95,
    finite_values,
    linear_regression,
    mean,
    sample_std_dev,
    standard_error,
)
from .records import Hypothesis, SubmissionRecord

PRECISION_RANKING_LIMIT = 10
CONTROL_MARKER = "control"


def condition_label_universe(records: Iterable[SubmissionRecord]) -> tuple[str, ...]:
    """Distinct condition labels across all records, in first-seen order.

    Callers pass the unfiltered records so the set of comparison columns does
    not shrink when a class filter is applied.
    """

    labels: dict[str, None] = {}
    for record in records:
        for condition in record.conditions:
            labels.setdefault(condition.label, None)
    return tuple(labels)


def class_code_universe(records: Iterable[SubmissionRecord]) -> tuple[str, ...]:
    """Distinct class codes across all records, in first-seen order."""

    codes: dict[str, None] = {}
    for record in records:
        codes.setdefault(record.class_code, None)
    return tuple(codes)


def condition_averages(records: Iterable[SubmissionRecord], label: str) -> list[float]:
    """Finite per-submission averages for conditions with exactly `label`."""

    return finite_values(
        condition.avg
        for record in records
        for condition in record.conditions
        if condition.label == label
    )


def condition_masses(records: Iterable[SubmissionRecord], label: str) -> list[float]:
    """Finite cart masses for conditions with exactly `label`."""

    return finite_values(
        condition.mass
        for record in records
        for condition in record.conditions
        if condition.label == label
    )


def condition_stats(
    records: Sequence[SubmissionRecord], labels: Sequence[str]
) -> tuple[ConditionStats, ...]:
    """Mean, standard error, 95% interval and count for each label."""

    stats: list[ConditionStats] = []
    for label in labels:
        values = condition_averages(records, label)
        stats.append(
            ConditionStats(
                label=label,
                mean=mean(values),
                standard_error=standard_error(values),
                ci95=confidence_interval_95(values),
                n=len(values),
            )
        )
    return tuple(stats)


def trend_summary(records: Sequence[SubmissionRecord], labels: Sequence[str]) -> TrendSummary:
    """Regress mean distance on mean mass across condition labels.

    A label contributes a point only when both its mean mass and its mean
    distance are available.
    """

    points: list[TrendPoint] = []
    for label in labels:
        mass = mean(condition_masses(records, label))
        distance = mean(condition_averages(records, label))
        if mass is None or distance is None:
            continue
        points.append(TrendPoint(x=mass, y=distance, label=label))
    return TrendSummary(points=tuple(points), regression=linear_regression(points))


def trend_direction(slope: float) -> Hypothesis | None:
    """Hypothesis supported by the sign of a slope (None for a flat trend)."""

    if slope > 0:
        return Hypothesis.increase
    if slope < 0:
        return Hypothesis.decrease
    return None


def hypothesis_tally(records: Sequence[SubmissionRecord], *, slope: float) -> HypothesisTally:
    """Count hypotheses and how many agree with the pooled trend.

    Unset hypotheses count as `increase`. Correctness is judged against the
    slope of the class-wide trend, not each group's own data.
    """

    counts = {hypothesis.value: 0 for hypothesis in Hypothesis}
    for record in records:
        counts[record.effective_hypothesis.value] += 1

    direction = trend_direction(slope)
    total = len(records)
    correct = counts[direction.value] if direction is not None else 0
    return HypothesisTally(
        counts=counts,
        correct_direction=direction.value if direction is not None else None,
        correct=correct,
        total=total,
        correct_rate=correct / total if total else None,
    )


def precision_ranking(
    records: Sequence[SubmissionRecord], *, limit: int = PRECISION_RANKING_LIMIT
) -> tuple[PrecisionEntry, ...]:
    """Rank submissions by the spread of all their trials, tightest first.

    Args:
        records: Submissions in source order.
        limit: Maximum number of entries to return.

    Returns:
        Up to `limit` entries. Submissions with fewer than two finite trials have
        no spread (`sd=None`) and sort after every measured submission.
    """

    if limit < 1:
        raise ValueError("limit must be >= 1")

    entries: list[PrecisionEntry] = []
    for record in records:
        trials = finite_values(record.all_trials())
        sd = sample_std_dev(trials)
        entries.append(
            PrecisionEntry(
                submission_id=record.id,
                class_code=record.class_code,
                group_name=record.group_name,
                sd=sd,
                n_trials=len(trials),
            )
        )
    entries.sort(key=lambda entry: (entry.sd is None, entry.sd or 0.0))
    return tuple(entries[:limit])


def strip_points(records: Iterable[SubmissionRecord]) -> tuple[StripPoint, ...]:
    """Every individual finite trial, labelled with its condition."""

    return tuple(
        StripPoint(label=condition.label, value=value)
        for record in records
        for condition in record.conditions
        for value in finite_values(condition.trials)
    )


def find_control_label(labels: Iterable[str]) -> str | None:
    """Return the first label containing "control" (case-insensitive)."""

    for label in labels:
        if CONTROL_MARKER in label.lower():
            return label
    return None


def effect_sizes(
    records: Sequence[SubmissionRecord], labels: Sequence[str]
) -> tuple[EffectSize, ...]:
    """Cohen's d of every non-control label against the control label.

    Returns:
        An empty tuple when no label looks like a control condition.
    """

    control = find_control_label(labels)
    if control is None:
        return ()
    control_values = condition_averages(records, control)
    return tuple(
        EffectSize(
            label=label,
            control_label=control,
            d=cohens_d(control_values, condition_averages(records, label)),
        )
        for label in labels
        if label != control
    )


def class_comparison(
    records: Sequence[SubmissionRecord],
    *,
    labels: Sequence[str],
    class_codes: Sequence[str],
    active: ClassFilter,
) -> tuple[ComparisonRow, ...]:
    """Pivot mean distance into one row per label and one column per class.

    With every class selected each column averages its own class. With one
    class selected only that class's column is populated; every other column
    is None.
    """

    rows: list[ComparisonRow] = []
    for label in labels:
        by_class: dict[str, float | None] = {}
        for code in class_codes:
            if not active.is_all and code != active.class_code:
                by_class[code] = None
                continue
            members = [record for record in records if record.class_code == code]
            by_class[code] = mean(condition_averages(members, label))
        rows.append(ComparisonRow(label=label, by_class=by_class))
    return tuple(rows)
