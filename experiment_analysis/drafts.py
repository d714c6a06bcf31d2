"""Student-entered submission drafts and their eligibility rules.

A draft holds raw text exactly as typed. Parsing happens through
`parse_numeric` only, and a draft becomes a write payload only when every
condition is complete: no partial submissions are accepted.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from .numeric import parse_numeric
from .records import (
    DEFAULT_CONDITIONS,
    ConditionSample,
    Hypothesis,
    condition_to_wire,
)

TRIALS_PER_CONDITION = 3


class SubmissionNotEligible(ValueError):
    """Raised when a draft is not ready to be written."""

    def __init__(self, problems: Sequence[str]) -> None:
        """Initialize the error.

        Args:
            problems: Human-readable reasons the draft was rejected.
        """

        super().__init__("Submission is not eligible: " + "; ".join(problems))
        self.problems = tuple(problems)


@dataclass(frozen=True, slots=True)
class ConditionDraft:
    """Raw text for one condition as entered on the form."""

    key: str
    label: str
    mass: str = ""
    trials: tuple[str, ...] = ("",) * TRIALS_PER_CONDITION


@dataclass(frozen=True, slots=True)
class SubmissionDraft:
    """Raw form state for one group's submission.

    Attributes:
        class_code: Selected class code ("" when none selected).
        group_name: Group name text.
        members: Comma-separated member names.
        hypothesis: Selected hypothesis.
        conditions: One draft per condition, in form order.
    """

    class_code: str = ""
    group_name: str = ""
    members: str = ""
    hypothesis: Hypothesis = Hypothesis.increase
    conditions: tuple[ConditionDraft, ...] = field(default_factory=tuple)


def blank_draft(
    default_conditions: Sequence[tuple[str, str]] = DEFAULT_CONDITIONS,
    *,
    trials_per_condition: int = TRIALS_PER_CONDITION,
) -> SubmissionDraft:
    """Return an empty draft with one condition per default condition."""

    if trials_per_condition < 1:
        raise ValueError("trials_per_condition must be >= 1")
    return SubmissionDraft(
        conditions=tuple(
            ConditionDraft(key=key, label=label, trials=("",) * trials_per_condition)
            for key, label in default_conditions
        )
    )


def parse_condition(draft: ConditionDraft) -> ConditionSample:
    """Parse a condition draft into a ConditionSample (live avg/sd)."""

    return ConditionSample(
        label=draft.label,
        mass=parse_numeric(draft.mass),
        trials=tuple(parse_numeric(trial) for trial in draft.trials),
    )


def split_members(raw: str) -> tuple[str, ...]:
    """Split comma-separated member names, dropping blanks."""

    return tuple(part.strip() for part in raw.split(",") if part.strip())


def eligibility_problems(draft: SubmissionDraft) -> list[str]:
    """List every reason the draft cannot be submitted yet.

    Returns:
        An empty list when the draft is eligible.
    """

    problems: list[str] = []
    if not draft.class_code.strip():
        problems.append("Select your class.")
    if not draft.group_name.strip():
        problems.append("Enter a group name.")
    if not draft.conditions:
        problems.append("No conditions to submit.")
    for condition in draft.conditions:
        if parse_numeric(condition.mass) is None:
            problems.append(f"{condition.label}: cart mass must be a number.")
        for index, trial in enumerate(condition.trials, start=1):
            if parse_numeric(trial) is None:
                problems.append(f"{condition.label}: trial {index} distance must be a number.")
    return problems


def is_eligible(draft: SubmissionDraft) -> bool:
    """Return True when every field of every condition parses."""

    return not eligibility_problems(draft)


def build_payload(draft: SubmissionDraft) -> dict[str, Any]:
    """Build the wire payload for a draft.

    The store assigns `createdAt` (and the id) on write.

    Raises:
        SubmissionNotEligible: When any required field is missing or malformed.
    """

    problems = eligibility_problems(draft)
    if problems:
        raise SubmissionNotEligible(problems)
    return {
        "classCode": draft.class_code.strip().upper(),
        "groupName": draft.group_name.strip(),
        "members": list(split_members(draft.members)),
        "hypothesis": Hypothesis(draft.hypothesis).value,
        "conditions": [condition_to_wire(parse_condition(condition)) for condition in draft.conditions],
    }
