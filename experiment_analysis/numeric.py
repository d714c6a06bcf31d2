"""Primitive statistics for trial measurements.

Every function accepts sequences of `float | None` and treats anything that is
not a finite number as missing. Insufficient data never raises: the result is
None (or a documented degenerate default) so live dashboards keep rendering
while groups are still entering data.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Sequence

from .dto import ConfidenceInterval, RegressionResult, TrendPoint

CI95_Z = 1.96

_LEADING_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


def parse_numeric(raw: object) -> float | None:
    """Parse free-text numeric input into a finite float.

    Args:
        raw: User input. Strings may use a decimal comma (`1,35`) or a decimal
            point (`1.35`); only the leading number is read, so trailing units
            such as `2.5 m` are ignored. Ints and floats pass through.

    Returns:
        The parsed float, or None when the input is empty, malformed, boolean,
        or not finite.
    """

    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            value = float(raw)
        except OverflowError:
            return None
    elif isinstance(raw, str):
        match = _LEADING_NUMBER_RE.match(raw.replace(",", ".", 1).strip())
        if match is None:
            return None
        value = float(match.group(0))
    else:
        return None
    if not math.isfinite(value):
        return None
    return value


def _is_finite(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def finite_values(values: Iterable[object]) -> list[float]:
    """Return only the finite numeric values, preserving order."""

    return [float(value) for value in values if _is_finite(value)]


def mean(values: Iterable[float | None]) -> float | None:
    """Arithmetic mean of the finite values, or None when there are none."""

    valid = finite_values(values)
    if not valid:
        return None
    return sum(valid) / len(valid)


def sample_std_dev(values: Iterable[float | None]) -> float | None:
    """Standard deviation of the finite values.

    The deviation is taken around the mean of the finite values and divided by
    `n` (population formula), not `n - 1`. Dashboards compare groups against one
    another with this figure, so it is kept consistent across every view.

    Returns:
        None for fewer than two finite values; otherwise the deviation.
    """

    valid = finite_values(values)
    if len(valid) < 2:
        return None
    center = sum(valid) / len(valid)
    variance = sum((value - center) ** 2 for value in valid) / len(valid)
    return math.sqrt(variance)


def standard_error(values: Iterable[float | None]) -> float | None:
    """Standard error of the mean: `sd / sqrt(n)` over the finite values."""

    valid = finite_values(values)
    sd = sample_std_dev(valid)
    if sd is None:
        return None
    return sd / math.sqrt(len(valid))


def confidence_interval_95(values: Iterable[float | None]) -> ConfidenceInterval:
    """Normal-approximation 95% interval around the mean.

    Uses the fixed 1.96 multiplier against the standard error, even for the
    small per-condition samples seen in class. When the standard error is
    unavailable the interval collapses to the mean (both bounds None when the
    mean itself is missing).
    """

    valid = finite_values(values)
    center = mean(valid)
    se = standard_error(valid)
    if center is None or se is None:
        return ConfidenceInterval(low=center, high=center)
    margin = CI95_Z * se
    return ConfidenceInterval(low=center - margin, high=center + margin)


def linear_regression(points: Sequence[TrendPoint]) -> RegressionResult:
    """Ordinary least squares fit of `y` on `x`.

    Args:
        points: Trend points; points with a non-finite coordinate are ignored.

    Returns:
        RegressionResult. With fewer than two usable points, or when every `x`
        is identical, the result is the degenerate `slope=0, intercept=0, r2=0`.
        R² is 0 when every `y` is identical.
    """

    usable = [(point.x, point.y) for point in points if _is_finite(point.x) and _is_finite(point.y)]
    n = len(usable)
    if n < 2:
        return RegressionResult(slope=0.0, intercept=0.0, r2=0.0, n=n)

    mean_x = sum(x for x, _ in usable) / n
    mean_y = sum(y for _, y in usable) / n
    sxx = sum((x - mean_x) ** 2 for x, _ in usable)
    sxy = sum((x - mean_x) * (y - mean_y) for x, y in usable)
    if sxx == 0:
        return RegressionResult(slope=0.0, intercept=0.0, r2=0.0, n=n)

    slope = sxy / sxx
    intercept = mean_y - slope * mean_x
    ss_tot = sum((y - mean_y) ** 2 for _, y in usable)
    if ss_tot == 0:
        r2 = 0.0
    else:
        ss_res = sum((y - (intercept + slope * x)) ** 2 for x, y in usable)
        r2 = 1.0 - ss_res / ss_tot
    return RegressionResult(slope=slope, intercept=intercept, r2=r2, n=n)


def cohens_d(group_a: Iterable[float | None], group_b: Iterable[float | None]) -> float | None:
    """Standardized mean difference `(mean(B) - mean(A)) / pooled_sd`.

    The pooled deviation weights each group's (n - 1) sample variance.

    Returns:
        None when either group has fewer than two finite values, or when the
        pooled deviation is zero or not finite.
    """

    a = finite_values(group_a)
    b = finite_values(group_b)
    n_a, n_b = len(a), len(b)
    if n_a < 2 or n_b < 2:
        return None

    mean_a = sum(a) / n_a
    mean_b = sum(b) / n_b
    ss_a = sum((value - mean_a) ** 2 for value in a)
    ss_b = sum((value - mean_b) ** 2 for value in b)
    pooled = math.sqrt((ss_a + ss_b) / (n_a + n_b - 2))
    if pooled == 0 or not math.isfinite(pooled):
        return None
    return (mean_b - mean_a) / pooled
