"""Service-layer functions for the classroom write path.

Services validate drafts with the pure `experiment_analysis` helpers and hand
payloads to an injected WriteSink. A sink failure is surfaced once as
`SubmissionFailed`; retrying is left to the user.
"""

from __future__ import annotations

import logging

from classroom.conf import ExperimentSettings, experiment_settings
from classroom.contracts import WriteSink
from experiment_analysis.drafts import SubmissionDraft, blank_draft, build_payload

logger = logging.getLogger(__name__)

SUBMISSION_FAILED_MESSAGE = "Submission failed. Check your connection and try again."


class SubmissionFailed(RuntimeError):
    """Raised when the sink rejects or cannot accept a write."""

    def __init__(self, message: str = SUBMISSION_FAILED_MESSAGE) -> None:
        super().__init__(message)


def new_draft(*, config: ExperimentSettings | None = None) -> SubmissionDraft:
    """Return an empty draft laid out from `CARTS_EXPERIMENT`.

    Uses `DEFAULT_CONDITIONS` for the condition rows and `TRIALS_PER_CONDITION`
    for the number of trial fields in each row.
    """

    config = config or experiment_settings()
    return blank_draft(config.default_conditions, trials_per_condition=config.trials_per_condition)


def submit_draft(draft: SubmissionDraft, *, sink: WriteSink) -> str:
    """Validate a draft and write it to the sink.

    Args:
        draft: Raw form state.
        sink: Injected write path.

    Returns:
        The id assigned by the sink.

    Raises:
        SubmissionNotEligible: When the draft is incomplete (nothing is written).
        SubmissionFailed: When the sink raises.
    """

    payload = build_payload(draft)
    try:
        submission_id = sink.create_submission(payload)
    except Exception as exc:
        logger.exception("Submission write failed for group %r", payload["groupName"])
        raise SubmissionFailed() from exc
    logger.info(
        "Stored submission %s for class=%s group=%r",
        submission_id,
        payload["classCode"],
        payload["groupName"],
    )
    return submission_id


def normalize_class_code(code: str) -> str:
    """Trim and upper-case a class code."""

    return code.strip().upper()


def upsert_class(code: str, name: str, *, sink: WriteSink) -> str:
    """Create or update a class.

    Returns:
        The normalized class code.

    Raises:
        ValueError: When the code or name is blank.
    """

    cleaned_code = normalize_class_code(code)
    cleaned_name = name.strip()
    if not cleaned_code or not cleaned_name:
        raise ValueError("Both a class code and a class name are required.")
    sink.upsert_class(cleaned_code, cleaned_name)
    logger.info("Upserted class %s (%s)", cleaned_code, cleaned_name)
    return cleaned_code


def seed_default_classes(
    *, sink: WriteSink, config: ExperimentSettings | None = None
) -> tuple[str, ...]:
    """Upsert every preset class from `CARTS_EXPERIMENT['DEFAULT_CLASSES']`.

    Returns:
        The seeded class codes in preset order.
    """

    config = config or experiment_settings()
    return tuple(upsert_class(code, name, sink=sink) for code, name in config.default_classes)
