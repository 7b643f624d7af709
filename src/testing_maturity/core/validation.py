"""Completeness and value-domain gate for submitted response sets.

A response set maps question ids to integer ratings. It is only scored when
every question of the model is answered with an integer in [1, 5]. JSON does
not tell 3 from 3.0, so integral floats count as integers. All
violations are collected in questionnaire order so error output is
deterministic. Keys that are not questions of the model are ignored, which
tolerates clients built against a neighbouring model version.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from testing_maturity.core.maturity_model import MaturityModel

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class MissingAnswer:
    """The question has no entry in the response set."""

    question_id: str

    kind = "missing"

    @property
    def message(self) -> str:
        return f"Missing answer for question: {self.question_id}"


@dataclass(frozen=True)
class OutOfRangeAnswer:
    """The answer is not an integer in [1, 5]."""

    question_id: str
    value: Any

    kind = "out_of_range"

    @property
    def message(self) -> str:
        return (
            f"Invalid answer for question {self.question_id}: "
            f"must be {MIN_RATING}-{MAX_RATING}, got {self.value!r}"
        )


AnswerError = MissingAnswer | OutOfRangeAnswer


class ValidationFailedError(Exception):
    """Raised when a response set is incomplete or contains invalid ratings.

    Attributes:
        errors: Every violation, in questionnaire order.
    """

    def __init__(self, errors: list[AnswerError]) -> None:
        self.errors = errors
        super().__init__(f"Assessment responses failed validation ({len(errors)} errors)")


def is_valid_rating(value: Any) -> bool:
    """Return True for an integral number (not bool) within the rating scale.

    JSON does not distinguish 3 from 3.0, so integral floats are accepted.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if isinstance(value, float) and not value.is_integer():
        return False
    return MIN_RATING <= value <= MAX_RATING


def validate_responses(
    responses: Mapping[str, Any],
    model: MaturityModel,
) -> list[AnswerError]:
    """Check a response set against every question of the model.

    Args:
        responses: Mapping of question id to submitted rating.
        model: The loaded maturity model.

    Returns:
        All violations in questionnaire order; empty when the set is valid.
    """
    errors: list[AnswerError] = []
    for question in model.questionnaire:
        if question.id not in responses:
            errors.append(MissingAnswer(question.id))
            continue
        value = responses[question.id]
        if not is_valid_rating(value):
            errors.append(OutOfRangeAnswer(question.id, value))
    return errors


def ensure_valid(responses: Mapping[str, Any], model: MaturityModel) -> dict[str, Any]:
    """Validate a response set and return it with every rating as an int.

    Args:
        responses: Mapping of question id to submitted rating.
        model: The loaded maturity model.

    Returns:
        Copy of ``responses`` with model questions rated as ``int``; extra
        keys are kept unchanged.

    Raises:
        ValidationFailedError: If the set is incomplete or has invalid ratings.
    """
    errors = validate_responses(responses, model)
    if errors:
        raise ValidationFailedError(errors)
    normalized = dict(responses)
    for question in model.questionnaire:
        normalized[question.id] = int(responses[question.id])
    return normalized
