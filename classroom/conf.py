"""Access to the `CARTS_EXPERIMENT` settings dict with defaults."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from django.conf import settings

from experiment_analysis.aggregations import PRECISION_RANKING_LIMIT
from experiment_analysis.drafts import TRIALS_PER_CONDITION
from experiment_analysis.records import DEFAULT_CONDITIONS


@dataclass(frozen=True, slots=True)
class ExperimentSettings:
    """Resolved experiment configuration.

    Attributes:
        default_conditions: `(key, label)` pairs for new submissions.
        default_classes: `(code, name)` pairs seeded by the instructor.
        precision_ranking_limit: Length of the precision ranking.
        trials_per_condition: Trial fields per condition on new drafts.
    """

    default_conditions: tuple[tuple[str, str], ...] = DEFAULT_CONDITIONS
    default_classes: tuple[tuple[str, str], ...] = ()
    precision_ranking_limit: int = PRECISION_RANKING_LIMIT
    trials_per_condition: int = TRIALS_PER_CONDITION


def experiment_settings() -> ExperimentSettings:
    """Resolve `settings.CARTS_EXPERIMENT`, falling back to defaults per key."""

    raw = getattr(settings, "CARTS_EXPERIMENT", None) or {}
    defaults = ExperimentSettings()
    limit = int(raw.get("PRECISION_RANKING_LIMIT", defaults.precision_ranking_limit))
    if limit < 1:
        raise ValueError("CARTS_EXPERIMENT['PRECISION_RANKING_LIMIT'] must be >= 1")
    return ExperimentSettings(
        default_conditions=_pairs(raw.get("DEFAULT_CONDITIONS"), defaults.default_conditions),
        default_classes=_pairs(raw.get("DEFAULT_CLASSES"), defaults.default_classes),
        precision_ranking_limit=limit,
        trials_per_condition=int(raw.get("TRIALS_PER_CONDITION", defaults.trials_per_condition)),
    )


def _pairs(value: Iterable[Sequence[str]] | None, default: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
    """Coerce a list of 2-item sequences into a tuple of string pairs."""

    if value is None:
        return default
    return tuple((str(first), str(second)) for first, second in value)
