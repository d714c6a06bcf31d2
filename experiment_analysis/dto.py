"""DTO types returned by the experiment analysis engine.

DTOs are immutable snapshots handed to the presentation layer. They are
re-derived on every change and are never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ConfidenceInterval:
    """A two-sided interval around a mean.

    Attributes:
        low: Lower bound, or None when the mean is missing.
        high: Upper bound, or None when the mean is missing.
    """

    low: float | None
    high: float | None


@dataclass(frozen=True, slots=True)
class TrendPoint:
    """A single `(x, y)` observation used for regression."""

    x: float
    y: float
    label: str = ""


@dataclass(frozen=True, slots=True)
class RegressionResult:
    """Ordinary least squares fit.

    Attributes:
        slope: Change in `y` per unit of `x`.
        intercept: Value of `y` at `x == 0`.
        r2: Coefficient of determination (0 for degenerate fits).
        n: Number of usable points in the fit.
    """

    slope: float
    intercept: float
    r2: float
    n: int = 0


@dataclass(frozen=True, slots=True)
class ConditionStats:
    """Descriptive statistics for one condition label across submissions.

    Attributes:
        label: Condition label.
        mean: Mean of the per-submission averages, or None.
        standard_error: Standard error of those averages, or None.
        ci95: Normal-approximation 95% interval.
        n: Number of contributing submission averages.
    """

    label: str
    mean: float | None
    standard_error: float | None
    ci95: ConfidenceInterval
    n: int


@dataclass(frozen=True, slots=True)
class TrendSummary:
    """Mass/distance trend across condition means.

    Attributes:
        points: One point per condition label with both a mean mass and a mean
            distance.
        regression: Fit of distance on mass across those points.
    """

    points: tuple[TrendPoint, ...]
    regression: RegressionResult


@dataclass(frozen=True, slots=True)
class HypothesisTally:
    """Hypothesis counts compared against the pooled trend direction.

    Attributes:
        counts: Mapping of hypothesis value -> number of submissions.
        correct_direction: "increase" or "decrease" depending on the sign of the
            trend slope, or None when the slope is exactly zero.
        correct: Number of submissions whose hypothesis matches the trend.
        total: Number of tallied submissions.
        correct_rate: `correct / total`, or None when nothing was tallied.
    """

    counts: dict[str, int]
    correct_direction: str | None
    correct: int
    total: int
    correct_rate: float | None


@dataclass(frozen=True, slots=True)
class PrecisionEntry:
    """A submission ranked by the dispersion of its raw trials (None when unmeasurable)."""

    submission_id: str
    class_code: str
    group_name: str
    sd: float | None
    n_trials: int


@dataclass(frozen=True, slots=True)
class StripPoint:
    """An individual trial value for strip plots."""

    label: str
    value: float


@dataclass(frozen=True, slots=True)
class EffectSize:
    """Cohen's d of one condition against the control condition."""

    label: str
    control_label: str
    d: float | None


@dataclass(frozen=True, slots=True)
class ComparisonRow:
    """One row of the cross-class comparison table.

    Attributes:
        label: Condition label.
        by_class: Mapping of class code -> mean distance (None when that cell is
            not populated for the active filter).
    """

    label: str
    by_class: dict[str, float | None]


@dataclass(frozen=True)
class DashboardViews:
    """Every derived dashboard view for one `(records, filter)` pair."""

    active_filter: str
    record_count: int
    filtered_count: int
    condition_labels: tuple[str, ...] = ()
    class_codes: tuple[str, ...] = ()
    condition_stats: tuple[ConditionStats, ...] = ()
    trend: TrendSummary = field(
        default_factory=lambda: TrendSummary(
            points=(), regression=RegressionResult(slope=0.0, intercept=0.0, r2=0.0)
        )
    )
    hypotheses: HypothesisTally = field(
        default_factory=lambda: HypothesisTally(
            counts={}, correct_direction=None, correct=0, total=0, correct_rate=None
        )
    )
    precision_ranking: tuple[PrecisionEntry, ...] = ()
    strip_points: tuple[StripPoint, ...] = ()
    effect_sizes: tuple[EffectSize, ...] = ()
    comparison: tuple[ComparisonRow, ...] = ()
