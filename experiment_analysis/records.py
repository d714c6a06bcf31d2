"""Typed records for cart-mass experiment submissions.

Records are immutable. Derived per-condition values (`avg`, `sd`) are computed
from the trials on access and are never stored alongside them, so a record
cannot drift from its own measurements.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from .numeric import mean, parse_numeric, sample_std_dev


class Hypothesis(StrEnum):
    """Predicted effect of added cart mass on roll distance."""

    increase = "increase"
    decrease = "decrease"


DEFAULT_HYPOTHESIS = Hypothesis.increase

DEFAULT_CONDITIONS: tuple[tuple[str, str], ...] = (
    ("control", "Control (no added mass)"),
    ("washers3", "3 washers"),
    ("bars5", "5 bars"),
    ("washers3_bars5", "3 washers + 5 bars"),
)


class RecordDecodeError(ValueError):
    """Raised when a stored document cannot be decoded into a record."""


@dataclass(frozen=True, slots=True)
class ConditionSample:
    """Measurements for one experimental condition.

    Attributes:
        label: Condition label (compared as an exact string across submissions).
        mass: Cart mass in grams, or None when missing.
        trials: Ordered roll distances in meters (None for missing trials).
    """

    label: str
    mass: float | None
    trials: tuple[float | None, ...] = ()

    @property
    def avg(self) -> float | None:
        """Mean of the finite trials."""

        return mean(self.trials)

    @property
    def sd(self) -> float | None:
        """Population standard deviation of the finite trials."""

        return sample_std_dev(self.trials)


@dataclass(frozen=True, slots=True)
class SubmissionRecord:
    """One group's complete submission.

    Attributes:
        id: Opaque identifier assigned by the record store.
        class_code: Upper-case class code.
        group_name: Group display name.
        members: Member names in entry order.
        hypothesis: Stated hypothesis, or None when unset.
        conditions: Condition samples with unique labels.
        created_at: Server-assigned creation timestamp, if known.
    """

    id: str
    class_code: str
    group_name: str
    members: tuple[str, ...] = ()
    hypothesis: Hypothesis | None = None
    conditions: tuple[ConditionSample, ...] = ()
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        labels = [condition.label for condition in self.conditions]
        if len(labels) != len(set(labels)):
            raise ValueError(f"Duplicate condition labels in submission {self.id!r}: {labels}")

    @property
    def effective_hypothesis(self) -> Hypothesis:
        """Hypothesis used for tallying (unset counts as `increase`)."""

        return self.hypothesis or DEFAULT_HYPOTHESIS

    def all_trials(self) -> list[float | None]:
        """Every trial value across all conditions, in condition order."""

        return [trial for condition in self.conditions for trial in condition.trials]


@dataclass(frozen=True, slots=True)
class ClassRecord:
    """A class (period) that groups submit under."""

    code: str
    name: str

    @property
    def display_name(self) -> str:
        return self.name or self.code


def parse_hypothesis(raw: object) -> Hypothesis | None:
    """Return the Hypothesis for a raw value, or None when unset/unknown."""

    if isinstance(raw, Hypothesis):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return Hypothesis(raw.strip().lower())
    except ValueError:
        return None


def parse_timestamp(raw: object) -> datetime | None:
    """Coerce a datetime or ISO-8601 string into a datetime when safe."""

    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            return datetime.fromisoformat(raw.strip())
        except ValueError:
            return None
    return None


def condition_from_wire(doc: Mapping[str, Any]) -> ConditionSample:
    """Decode a stored condition. Stored `avg`/`sd` are ignored and re-derived."""

    raw_trials = doc.get("trials") or ()
    if isinstance(raw_trials, (str, bytes)) or not isinstance(raw_trials, Sequence):
        raw_trials = ()
    return ConditionSample(
        label=str(doc.get("label") or ""),
        mass=parse_numeric(doc.get("mass")),
        trials=tuple(parse_numeric(trial) for trial in raw_trials),
    )


def submission_from_wire(doc: Mapping[str, Any]) -> SubmissionRecord:
    """Decode a stored submission document into a SubmissionRecord.

    Args:
        doc: Mapping using the persisted field names (`classCode`, `groupName`,
            `members`, `hypothesis`, `conditions`, `createdAt`) plus `id`.

    Returns:
        SubmissionRecord. Malformed numeric fields become None; conditions that
        repeat an earlier label are dropped.

    Raises:
        RecordDecodeError: When `doc` is not a mapping or has no `id`.
    """

    if not isinstance(doc, Mapping):
        raise RecordDecodeError(f"Submission document must be a mapping, got {type(doc).__name__}.")
    record_id = doc.get("id")
    if record_id is None or str(record_id) == "":
        raise RecordDecodeError("Submission document is missing an id.")

    conditions: list[ConditionSample] = []
    seen: set[str] = set()
    for raw_condition in doc.get("conditions") or ():
        if not isinstance(raw_condition, Mapping):
            continue
        condition = condition_from_wire(raw_condition)
        if condition.label in seen:
            continue
        seen.add(condition.label)
        conditions.append(condition)

    raw_members = doc.get("members") or ()
    members = tuple(str(member) for member in raw_members) if isinstance(raw_members, (list, tuple)) else ()

    return SubmissionRecord(
        id=str(record_id),
        class_code=str(doc.get("classCode") or ""),
        group_name=str(doc.get("groupName") or ""),
        members=members,
        hypothesis=parse_hypothesis(doc.get("hypothesis")),
        conditions=tuple(conditions),
        created_at=parse_timestamp(doc.get("createdAt")),
    )


def condition_to_wire(condition: ConditionSample) -> dict[str, Any]:
    """Encode a condition using the persisted field names."""

    return {
        "label": condition.label,
        "mass": condition.mass,
        "trials": list(condition.trials),
        "avg": condition.avg,
        "sd": condition.sd,
    }


def submission_to_wire(record: SubmissionRecord) -> dict[str, Any]:
    """Encode a SubmissionRecord using the persisted field names."""

    return {
        "id": record.id,
        "classCode": record.class_code,
        "groupName": record.group_name,
        "members": list(record.members),
        "hypothesis": record.hypothesis.value if record.hypothesis is not None else None,
        "conditions": [condition_to_wire(condition) for condition in record.conditions],
        "createdAt": record.created_at,
    }


def class_from_wire(doc: Mapping[str, Any]) -> ClassRecord:
    """Decode a stored class document (`code`, `name`)."""

    if not isinstance(doc, Mapping):
        raise RecordDecodeError(f"Class document must be a mapping, got {type(doc).__name__}.")
    code = str(doc.get("code") or doc.get("id") or "").strip()
    if not code:
        raise RecordDecodeError("Class document is missing a code.")
    return ClassRecord(code=code, name=str(doc.get("name") or ""))
