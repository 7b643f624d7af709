"""Report assembly: joins computed scores with the model's descriptive text.

Pure lookup and ordering over a ScoreResult. No score is recomputed here;
levels are discretised with the same rule the scorer uses.
"""

from dataclasses import dataclass

from testing_maturity.core.maturity_model import MaturityLevel, MaturityModel
from testing_maturity.core.scoring import ScoreResult, score_to_level

OPPORTUNITY_COUNT = 3


@dataclass(frozen=True)
class DimensionReport:
    """One dimension with its rubric text for the current and next level."""

    key: str
    area: str
    dimension: str
    score: float
    level: int
    current_text: str
    next_text: str | None


@dataclass(frozen=True)
class AreaReport:
    """One area with its simplified description and its dimensions."""

    area: str
    score: float
    level: int
    description: str
    dimensions: list[DimensionReport]


@dataclass(frozen=True)
class MaturityReport:
    """Presentation view of a scored assessment."""

    model_version: str
    overall_score: float
    overall_level: int
    level_info: MaturityLevel
    areas: list[AreaReport]
    opportunities: list[DimensionReport]


def assemble_report(score_result: ScoreResult, model: MaturityModel) -> MaturityReport:
    """Build the report view for a score result.

    Dimensions follow rubric order. Dimensions of the model that the score
    result does not contain (a result scored under another model version)
    are left out.

    Args:
        score_result: Scores produced by the aggregator.
        model: The maturity model providing descriptive text.

    Returns:
        MaturityReport with per-area sections and the lowest-scoring
        dimensions as improvement opportunities.
    """
    dimensions_by_area: dict[str, list[DimensionReport]] = {}
    for dimension in model.maturity_model:
        score = score_result.dimension_scores.get(dimension.key)
        if score is None:
            continue
        level = score_to_level(score)
        dimensions_by_area.setdefault(dimension.area, []).append(
            DimensionReport(
                key=dimension.key,
                area=dimension.area,
                dimension=dimension.dimension,
                score=score,
                level=level,
                current_text=dimension.levels.get(level, ""),
                next_text=dimension.levels.get(level + 1, "") if level < 5 else None,
            )
        )

    areas: list[AreaReport] = []
    for area, dimensions in dimensions_by_area.items():
        score = score_result.area_scores.get(area)
        if score is None:
            continue
        level = score_to_level(score)
        areas.append(
            AreaReport(
                area=area,
                score=score,
                level=level,
                description=model.area_description(area, level),
                dimensions=dimensions,
            )
        )

    all_dimensions = [dimension for area in areas for dimension in area.dimensions]
    # sorted() is stable: equal scores keep rubric order
    opportunities = sorted(all_dimensions, key=lambda dimension: dimension.score)[
        :OPPORTUNITY_COUNT
    ]

    return MaturityReport(
        model_version=model.version,
        overall_score=score_result.overall_score,
        overall_level=score_result.overall_level,
        level_info=model.level(score_result.overall_level),
        areas=areas,
        opportunities=opportunities,
    )
