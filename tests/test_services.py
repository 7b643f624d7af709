"""Unit tests for the assessment service workflow."""

import uuid
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from factories import make_assessment_record, uniform_responses
from testing_maturity.core.lead import LeadContact, LeadRejectedError
from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.core.model_loader import ModelLoader, ModelUnavailableError
from testing_maturity.core.services import (
    AssessmentService,
    NotifyFailedError,
    TokenNotFoundError,
    score_result_from_assessment,
)
from testing_maturity.core.validation import MissingAnswer, OutOfRangeAnswer, ValidationFailedError

_TOKEN = "fixed-report-token-for-tests-000000000000"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def mock_model_loader(small_model: MaturityModel) -> MagicMock:
    loader = MagicMock(spec=ModelLoader)
    loader.load.return_value = small_model
    return loader


@pytest.fixture()
def mock_lead_repo() -> AsyncMock:
    repo = AsyncMock()
    lead = MagicMock()
    lead.id = uuid.uuid4()
    repo.create_lead.return_value = lead
    return repo


@pytest.fixture()
def mock_assessment_repo() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def mock_uow() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def mock_notifier() -> AsyncMock:
    return AsyncMock()


@pytest.fixture()
def token_generator() -> MagicMock:
    generator = MagicMock()
    generator.generate.return_value = _TOKEN
    return generator


@pytest.fixture()
def assessment_service(
    mock_model_loader: MagicMock,
    mock_lead_repo: AsyncMock,
    mock_assessment_repo: AsyncMock,
    mock_uow: AsyncMock,
    token_generator: MagicMock,
    mock_notifier: AsyncMock,
) -> AssessmentService:
    return AssessmentService(
        model_loader=mock_model_loader,
        lead_repository=mock_lead_repo,
        assessment_repository=mock_assessment_repo,
        unit_of_work=mock_uow,
        token_generator=token_generator,
        notifier=mock_notifier,
    )


# ---------------------------------------------------------------------------
# submit_assessment
# ---------------------------------------------------------------------------


class TestSubmitAssessment:
    """Tests for AssessmentService.submit_assessment."""

    @pytest.mark.asyncio()
    async def test_submit_success(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_lead_repo: AsyncMock,
        mock_assessment_repo: AsyncMock,
        mock_uow: AsyncMock,
        mock_notifier: AsyncMock,
    ) -> None:
        """Scores, persists both rows in one commit, then notifies."""
        responses = uniform_responses(small_model, 4)

        result = await assessment_service.submit_assessment(lead_data, responses)

        assert result.report_token == _TOKEN
        assert result.overall_score == 4.0
        assert result.overall_level == 4

        contact = mock_lead_repo.create_lead.call_args.args[0]
        assert isinstance(contact, LeadContact)
        assert contact.email == "ada@example.com"

        kwargs = mock_assessment_repo.create_assessment.call_args.kwargs
        assert kwargs["lead_id"] == mock_lead_repo.create_lead.return_value.id
        assert kwargs["model_version"] == "test-1"
        assert kwargs["responses"] == responses
        assert kwargs["report_token"] == _TOKEN
        assert kwargs["score_result"].overall_level == 4

        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()
        mock_notifier.notify.assert_awaited_once()
        notify_kwargs = mock_notifier.notify.call_args.kwargs
        assert notify_kwargs["report_token"] == _TOKEN
        assert notify_kwargs["overall_level"] == 4
        assert notify_kwargs["level_name"] == "Stage 4"

    @pytest.mark.asyncio()
    async def test_raw_responses_stored_with_extra_keys(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_assessment_repo: AsyncMock,
    ) -> None:
        responses = {**uniform_responses(small_model, 2), "Q-retired": 5}

        await assessment_service.submit_assessment(lead_data, responses)

        assert mock_assessment_repo.create_assessment.call_args.kwargs["responses"] == responses

    @pytest.mark.asyncio()
    async def test_integral_float_ratings_scored_and_stored_as_ints(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_assessment_repo: AsyncMock,
    ) -> None:
        responses = {question.id: 3.0 for question in small_model.questionnaire}

        result = await assessment_service.submit_assessment(lead_data, responses)

        assert result.overall_level == 3
        stored = mock_assessment_repo.create_assessment.call_args.kwargs["responses"]
        assert stored == uniform_responses(small_model, 3)
        assert all(type(value) is int for value in stored.values())

    @pytest.mark.asyncio()
    async def test_missing_answer_writes_nothing(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_lead_repo: AsyncMock,
        mock_assessment_repo: AsyncMock,
        mock_uow: AsyncMock,
        mock_notifier: AsyncMock,
        token_generator: MagicMock,
    ) -> None:
        responses = uniform_responses(small_model, 3)
        del responses["Q4"]

        with pytest.raises(ValidationFailedError) as exc_info:
            await assessment_service.submit_assessment(lead_data, responses)

        assert exc_info.value.errors == [MissingAnswer("Q4")]
        mock_lead_repo.create_lead.assert_not_awaited()
        mock_assessment_repo.create_assessment.assert_not_awaited()
        mock_uow.commit.assert_not_awaited()
        mock_notifier.notify.assert_not_awaited()
        token_generator.generate.assert_not_called()

    @pytest.mark.asyncio()
    async def test_out_of_range_answer_writes_nothing(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_lead_repo: AsyncMock,
    ) -> None:
        responses = uniform_responses(small_model, 3)
        responses["Q2"] = 6

        with pytest.raises(ValidationFailedError) as exc_info:
            await assessment_service.submit_assessment(lead_data, responses)

        assert exc_info.value.errors == [OutOfRangeAnswer("Q2", 6)]
        mock_lead_repo.create_lead.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_invalid_lead_rejected_before_responses(
        self,
        assessment_service: AssessmentService,
        lead_data: dict[str, Any],
        mock_lead_repo: AsyncMock,
        mock_model_loader: MagicMock,
    ) -> None:
        with pytest.raises(LeadRejectedError) as exc_info:
            await assessment_service.submit_assessment({**lead_data, "consent": False}, {})

        assert "consent" in exc_info.value.field_errors
        mock_model_loader.load.assert_not_called()
        mock_lead_repo.create_lead.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_model_unavailable_propagates(
        self,
        assessment_service: AssessmentService,
        lead_data: dict[str, Any],
        mock_model_loader: MagicMock,
        mock_lead_repo: AsyncMock,
    ) -> None:
        mock_model_loader.load.side_effect = ModelUnavailableError("gone")

        with pytest.raises(ModelUnavailableError):
            await assessment_service.submit_assessment(lead_data, {})

        mock_lead_repo.create_lead.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_persistence_failure_rolls_back(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_assessment_repo: AsyncMock,
        mock_uow: AsyncMock,
        mock_notifier: AsyncMock,
    ) -> None:
        """A failed assessment insert discards the lead written before it."""
        mock_assessment_repo.create_assessment.side_effect = RuntimeError("duplicate token")

        with pytest.raises(RuntimeError, match="duplicate token"):
            await assessment_service.submit_assessment(lead_data, uniform_responses(small_model, 3))

        mock_uow.rollback.assert_awaited_once()
        mock_uow.commit.assert_not_awaited()
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_commit_failure_rolls_back(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_uow: AsyncMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_uow.commit.side_effect = RuntimeError("connection lost")

        with pytest.raises(RuntimeError):
            await assessment_service.submit_assessment(lead_data, uniform_responses(small_model, 3))

        mock_uow.rollback.assert_awaited_once()
        mock_notifier.notify.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_notify_failure_is_swallowed(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_uow: AsyncMock,
        mock_notifier: AsyncMock,
    ) -> None:
        mock_notifier.notify.side_effect = NotifyFailedError("mail API down")

        result = await assessment_service.submit_assessment(lead_data, uniform_responses(small_model, 3))

        assert result.report_token == _TOKEN
        mock_uow.commit.assert_awaited_once()
        mock_uow.rollback.assert_not_awaited()

    @pytest.mark.asyncio()
    async def test_unexpected_notifier_error_is_swallowed(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        lead_data: dict[str, Any],
        mock_notifier: AsyncMock,
    ) -> None:
        mock_notifier.notify.side_effect = ValueError("bad template")

        result = await assessment_service.submit_assessment(lead_data, uniform_responses(small_model, 5))

        assert result.overall_level == 5


# ---------------------------------------------------------------------------
# get_report / list_assessments
# ---------------------------------------------------------------------------


class TestGetReport:
    """Tests for AssessmentService.get_report."""

    @pytest.mark.asyncio()
    async def test_unknown_token(
        self,
        assessment_service: AssessmentService,
        mock_assessment_repo: AsyncMock,
    ) -> None:
        mock_assessment_repo.get_assessment_by_token.return_value = None

        with pytest.raises(TokenNotFoundError, match="^Report not found$"):
            await assessment_service.get_report("never-issued")

    @pytest.mark.asyncio()
    async def test_report_bundle(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        mock_assessment_repo: AsyncMock,
    ) -> None:
        record = make_assessment_record(small_model, rating=2)
        mock_assessment_repo.get_assessment_by_token.return_value = record

        bundle = await assessment_service.get_report(record.report_token)

        mock_assessment_repo.get_assessment_by_token.assert_awaited_once_with(record.report_token)
        assert bundle.assessment is record
        assert bundle.lead is record.lead
        assert bundle.model is small_model
        assert bundle.report.overall_level == 2
        assert bundle.report.level_info.name == "Stage 2"
        assert len(bundle.report.opportunities) == 3


class TestListAssessments:
    """Tests for AssessmentService.list_assessments."""

    @pytest.mark.asyncio()
    async def test_returns_repository_rows(
        self,
        assessment_service: AssessmentService,
        small_model: MaturityModel,
        mock_assessment_repo: AsyncMock,
    ) -> None:
        rows = [make_assessment_record(small_model), make_assessment_record(small_model, rating=5)]
        mock_assessment_repo.list_all_assessments.return_value = rows

        assert await assessment_service.list_assessments() == rows


def test_score_result_from_assessment(small_model: MaturityModel) -> None:
    record = make_assessment_record(small_model, rating=4)

    result = score_result_from_assessment(record)

    assert result.overall_score == 4.0
    assert result.overall_level == 4
    assert result.area_scores == {"Strategy": 4.0, "Automation": 4.0}
