"""Orchestration entry point for the experiment analysis engine.

`derive_views` is a pure function of `(records, active filter)`: calling it
twice on the same inputs yields equal results, so callers may recompute on
every change without caching.
"""

from __future__ import annotations

from collections.abc import Iterable

from .aggregations import (
    PRECISION_RANKING_LIMIT,
    class_code_universe,
    class_comparison,
    condition_label_universe,
    condition_stats,
    effect_sizes,
    hypothesis_tally,
    precision_ranking,
    strip_points,
    trend_summary,
)
from .dto import DashboardViews
from .filters import ALL_CLASSES, ClassFilter, filter_records
from .records import SubmissionRecord


def derive_views(
    records: Iterable[SubmissionRecord],
    active: ClassFilter = ALL_CLASSES,
    *,
    precision_limit: int = PRECISION_RANKING_LIMIT,
) -> DashboardViews:
    """Derive every dashboard view from the current submissions.

    Args:
        records: Full current submission set, newest first.
        active: Active class filter.
        precision_limit: Length of the precision ranking.

    Returns:
        DashboardViews snapshot. Label and class universes are computed from
        all records; every other view uses the filtered records.
    """

    all_records = tuple(records)
    filtered = filter_records(all_records, active)
    labels = condition_label_universe(all_records)
    class_codes = class_code_universe(all_records)
    trend = trend_summary(filtered, labels)

    return DashboardViews(
        active_filter=active.label,
        record_count=len(all_records),
        filtered_count=len(filtered),
        condition_labels=labels,
        class_codes=class_codes,
        condition_stats=condition_stats(filtered, labels),
        trend=trend,
        hypotheses=hypothesis_tally(filtered, slope=trend.regression.slope),
        precision_ranking=precision_ranking(filtered, limit=precision_limit),
        strip_points=strip_points(filtered),
        effect_sizes=effect_sizes(filtered, labels),
        comparison=class_comparison(
            all_records, labels=labels, class_codes=class_codes, active=active
        ),
    )
