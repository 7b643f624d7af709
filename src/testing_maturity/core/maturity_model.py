"""Maturity model document: levels, rubric dimensions and the questionnaire.

The model is static input data loaded once per process. Its structure
mirrors the JSON document shipped in ``testing_maturity/data/model.json``:

    maturity_levels  - the 5 ranked maturity stages with descriptive text
    maturity_model   - (area, dimension) pairs with rubric text per rank
    questionnaire    - ordered questions, each tied to one (area, dimension)
    simplified_model - one-line description per area and rank

Schema invariants are enforced on construction so that a loaded model is
always safe to score against.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator

LEVEL_RANKS: frozenset[int] = frozenset({1, 2, 3, 4, 5})

_KEY_SEPARATOR = "::"


def dimension_key(area: str, dimension: str) -> str:
    """Build the persisted key identifying an (area, dimension) pair.

    Args:
        area: Area name, e.g. 'Test Strategy'.
        dimension: Dimension name within the area.

    Returns:
        Key of the form 'area::dimension'.
    """
    return f"{area}{_KEY_SEPARATOR}{dimension}"


def _check_ranks(ranked: dict[int, str], owner: str) -> None:
    missing = sorted(LEVEL_RANKS - ranked.keys())
    unexpected = sorted(ranked.keys() - LEVEL_RANKS)
    if missing or unexpected:
        raise ValueError(
            f"{owner} must define text for ranks 1-5 "
            f"(missing={missing}, unexpected={unexpected})"
        )


class MaturityLevel(BaseModel):
    """One of the five model-wide maturity stages.

    Attributes:
        level: Rank 1-5.
        name: Short name, e.g. 'Agentic AI'.
        name_full: Display name including the rank.
        ai_concepts: Optional AI concepts introduced at this stage.
        overview: Summary of an organisation at this stage.
        what_to_expect: What day-to-day testing looks like.
        human_focus: Where people spend their effort.
    """

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1, le=5)
    name: str = Field(..., min_length=1)
    name_full: str = Field(..., min_length=1)
    ai_concepts: str | None = None
    overview: str
    what_to_expect: str
    human_focus: str


class MaturityDimension(BaseModel):
    """Rubric for one (area, dimension) pair."""

    model_config = ConfigDict(frozen=True)

    area: str = Field(..., min_length=1)
    dimension: str = Field(..., min_length=1)
    levels: dict[int, str]

    @property
    def key(self) -> str:
        return dimension_key(self.area, self.dimension)

    @model_validator(mode="after")
    def _all_ranks_described(self) -> "MaturityDimension":
        _check_ranks(self.levels, f"Dimension {self.key!r}")
        return self


class Question(BaseModel):
    """A single rateable questionnaire item.

    Attributes:
        id: Unique question identifier.
        index: Position in the questionnaire.
        area: Area the question belongs to.
        dimension: Dimension within the area.
        question_number_within_dimension: 1-based position in its dimension.
        title: Short title.
        prompt: Full question text presented to the respondent.
        options: Answer-option description per rank 1-5.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    index: int = 0
    area: str = Field(..., min_length=1)
    dimension: str = Field(..., min_length=1)
    question_number_within_dimension: int = 1
    title: str
    prompt: str
    options: dict[int, str]

    @property
    def dimension_key(self) -> str:
        return dimension_key(self.area, self.dimension)

    @model_validator(mode="after")
    def _all_options_described(self) -> "Question":
        _check_ranks(self.options, f"Question {self.id!r}")
        return self


class MaturityModel(BaseModel):
    """The complete, immutable maturity model document.

    Callers never mutate a loaded model; it is shared read-only across
    requests for the lifetime of the process.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = ""
    source_file: str = ""
    version: str = Field(..., min_length=1)
    generated_at: str = ""
    maturity_levels: tuple[MaturityLevel, ...]
    simplified_model: dict[str, dict[int, str]] = Field(default_factory=dict)
    maturity_model: tuple[MaturityDimension, ...]
    questionnaire: tuple[Question, ...]

    @model_validator(mode="after")
    def _check_invariants(self) -> "MaturityModel":
        ranks = [level.level for level in self.maturity_levels]
        if sorted(ranks) != sorted(LEVEL_RANKS):
            raise ValueError(
                f"maturity_levels must have ranks exactly 1-5 without gaps or duplicates, got {ranks}"
            )

        dimension_keys = [dimension.key for dimension in self.maturity_model]
        if len(set(dimension_keys)) != len(dimension_keys):
            raise ValueError("maturity_model contains duplicate (area, dimension) pairs")

        question_ids = [question.id for question in self.questionnaire]
        if len(set(question_ids)) != len(question_ids):
            raise ValueError("questionnaire contains duplicate question ids")

        known_keys = set(dimension_keys)
        for question in self.questionnaire:
            if question.dimension_key not in known_keys:
                raise ValueError(
                    f"Question {question.id!r} references unknown dimension "
                    f"{question.dimension_key!r}"
                )

        asked_keys = {question.dimension_key for question in self.questionnaire}
        unasked = [key for key in dimension_keys if key not in asked_keys]
        if unasked:
            raise ValueError(f"Dimensions without any question: {unasked}")
        return self

    # -----------------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------------

    @property
    def areas(self) -> list[str]:
        """Area names in first-appearance order of the rubric."""
        return list(dict.fromkeys(dimension.area for dimension in self.maturity_model))

    def level(self, rank: int) -> MaturityLevel:
        """Return the maturity level with the given rank.

        Raises:
            KeyError: If the rank is not 1-5.
        """
        for level in self.maturity_levels:
            if level.level == rank:
                return level
        raise KeyError(rank)

    def dimension(self, key: str) -> MaturityDimension:
        """Return the rubric dimension for an 'area::dimension' key.

        Raises:
            KeyError: If the key is not part of the model.
        """
        for dimension in self.maturity_model:
            if dimension.key == key:
                return dimension
        raise KeyError(key)

    def area_description(self, area: str, rank: int) -> str:
        """Return the simplified one-line description for an area at a rank."""
        return self.simplified_model.get(area, {}).get(rank, "")
