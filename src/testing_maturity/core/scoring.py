"""Testing maturity scoring algorithm.

Reduces a validated response set into three levels of scores on the 1-5
scale:

    dimension score — mean of the dimension's question ratings
    area score      — mean of the area's dimension scores
    overall score   — mean of ALL dimension scores across the model

Every dimension carries equal weight regardless of how many questions it
has. The overall score is a flat mean over dimensions, not the mean of the
area scores, so areas with more dimensions pull the overall score harder.
This must be preserved as is.

This module is intentionally independent of the database layer so that
the scoring logic can be unit-tested without any infrastructure.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.observability import get_logger

logger = get_logger(__name__)

# Maturity level boundary thresholds (inclusive lower bound).
#   4.5-5.0 -> Level 5
#   3.5-4.5 -> Level 4
#   2.5-3.5 -> Level 3
#   1.5-2.5 -> Level 2
#   1.0-1.5 -> Level 1
_LEVEL_THRESHOLDS: list[tuple[float, int]] = [
    (4.5, 5),
    (3.5, 4),
    (2.5, 3),
    (1.5, 2),
]


def score_to_level(score: float) -> int:
    """Discretise a 1-5 score into a maturity level.

    Used for the overall, area and dimension levels alike. A score exactly
    on a breakpoint rounds up (2.5 -> 3).

    Args:
        score: Score on the 1-5 scale.

    Returns:
        Maturity level integer 1-5.
    """
    for threshold, level in _LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return 1


def _mean(values: list[float]) -> float:
    return sum(values) / len(values)


@dataclass(frozen=True)
class ScoreResult:
    """Scores computed for one submission.

    Attributes:
        dimension_scores: 'area::dimension' key -> mean rating, model order.
        area_scores: Area -> mean of its dimension scores, model order.
        overall_score: Mean of all dimension scores.
        overall_level: Level 1-5 derived from overall_score.
    """

    dimension_scores: dict[str, float] = field(default_factory=dict)
    area_scores: dict[str, float] = field(default_factory=dict)
    overall_score: float = 0.0
    overall_level: int = 1

    def dimension_level(self, key: str) -> int:
        return score_to_level(self.dimension_scores[key])

    def area_level(self, area: str) -> int:
        return score_to_level(self.area_scores[area])


class AssessmentScorer:
    """Scoring engine for the testing maturity assessment.

    Callers must run ``validate_responses`` first. A question id missing
    from the responses raises KeyError rather than being defaulted, so
    upstream data-quality bugs surface instead of skewing scores.
    """

    def score_dimensions(
        self,
        responses: Mapping[str, Any],
        model: MaturityModel,
    ) -> dict[str, float]:
        """Compute the mean rating of every dimension.

        Questions are grouped by (area, dimension) preserving questionnaire
        order.

        Args:
            responses: Validated mapping of question id to rating.
            model: The maturity model.

        Returns:
            Mapping of 'area::dimension' key to dimension score.
        """
        ratings_by_dimension: dict[str, list[float]] = {}
        for question in model.questionnaire:
            ratings_by_dimension.setdefault(question.dimension_key, []).append(
                responses[question.id]
            )
        return {key: _mean(ratings) for key, ratings in ratings_by_dimension.items()}

    def score_areas(
        self,
        dimension_scores: Mapping[str, float],
        model: MaturityModel,
    ) -> dict[str, float]:
        """Compute each area's score as the mean of its dimension scores.

        Args:
            dimension_scores: Output of ``score_dimensions``.
            model: The maturity model.

        Returns:
            Mapping of area name to area score.
        """
        area_by_key = {question.dimension_key: question.area for question in model.questionnaire}

        scores_by_area: dict[str, list[float]] = {}
        for key, score in dimension_scores.items():
            scores_by_area.setdefault(area_by_key[key], []).append(score)

        return {area: _mean(scores) for area, scores in scores_by_area.items()}

    def score_overall(self, dimension_scores: Mapping[str, float]) -> float:
        """Compute the flat mean of all dimension scores.

        Args:
            dimension_scores: Output of ``score_dimensions``.

        Returns:
            Overall score on the 1-5 scale.
        """
        return _mean(list(dimension_scores.values()))

    def aggregate(
        self,
        responses: Mapping[str, Any],
        model: MaturityModel,
    ) -> ScoreResult:
        """Run the full scoring pipeline for a validated response set.

        Args:
            responses: Validated mapping of question id to rating.
            model: The maturity model.

        Returns:
            ScoreResult with dimension, area and overall scores and the
            overall maturity level.
        """
        dimension_scores = self.score_dimensions(responses, model)
        area_scores = self.score_areas(dimension_scores, model)
        overall_score = self.score_overall(dimension_scores)
        overall_level = score_to_level(overall_score)

        logger.debug(
            "Assessment scoring complete",
            model_version=model.version,
            dimension_count=len(dimension_scores),
            area_count=len(area_scores),
            overall_score=overall_score,
            overall_level=overall_level,
        )

        return ScoreResult(
            dimension_scores=dimension_scores,
            area_scores=area_scores,
            overall_score=overall_score,
            overall_level=overall_level,
        )


_DEFAULT_SCORER = AssessmentScorer()


def aggregate(responses: Mapping[str, Any], model: MaturityModel) -> ScoreResult:
    """Score a validated response set with the default scorer."""
    return _DEFAULT_SCORER.aggregate(responses, model)
