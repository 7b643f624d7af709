"""Service layer orchestrating the testing maturity assessment workflow.

Implements the self-service flow:
    1. get_model()           - returns the questionnaire and rubric
    2. submit_assessment()   - validates, scores, persists and notifies
    3. get_report()          - resolves a report token into the report view
    4. list_assessments()    - admin listing of every submission

All database access goes through repository interfaces. No SQLAlchemy or
FastAPI imports belong here; those live in the adapters and routes layers.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from testing_maturity.core.interfaces import (
    IAssessmentRepository,
    ILeadRepository,
    INotifier,
    IUnitOfWork,
)
from testing_maturity.core.lead import LeadContact, parse_lead
from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.core.model_loader import ModelLoader
from testing_maturity.core.models import Assessment, Lead
from testing_maturity.core.report import MaturityReport, assemble_report
from testing_maturity.core.scoring import AssessmentScorer, ScoreResult
from testing_maturity.core.tokens import TokenGenerator
from testing_maturity.core.validation import ensure_valid
from testing_maturity.observability import get_logger

logger = get_logger(__name__)

_TOKEN_LOG_PREFIX = 6


class TokenNotFoundError(Exception):
    """Raised when no assessment exists for a report token.

    The message never says whether the token was malformed, expired or
    never issued.
    """


class NotifyFailedError(Exception):
    """Raised by notifiers when delivery fails. Never reaches the submitter."""


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a successful submission."""

    report_token: str
    overall_score: float
    overall_level: int


@dataclass(frozen=True)
class ReportBundle:
    """Everything needed to render a report."""

    assessment: Assessment
    lead: Lead
    model: MaturityModel
    report: MaturityReport


class AssessmentService:
    """Orchestrates the self-service testing maturity assessment.

    Depends on collaborators injected at construction time.
    Contains no framework-specific code.
    """

    def __init__(
        self,
        model_loader: ModelLoader,
        lead_repository: ILeadRepository,
        assessment_repository: IAssessmentRepository,
        unit_of_work: IUnitOfWork,
        token_generator: TokenGenerator,
        notifier: INotifier,
        scorer: AssessmentScorer | None = None,
    ) -> None:
        """Initialise the service with its dependencies.

        Args:
            model_loader: Process-wide maturity model cache.
            lead_repository: Repository for lead rows.
            assessment_repository: Repository for assessment rows.
            unit_of_work: Transaction boundary shared by both repositories.
            token_generator: Source of report tokens.
            notifier: Delivers the report link after a submission.
            scorer: Scoring engine; defaults to AssessmentScorer().
        """
        self._model_loader = model_loader
        self._lead_repo = lead_repository
        self._assessment_repo = assessment_repository
        self._uow = unit_of_work
        self._token_generator = token_generator
        self._notifier = notifier
        self._scorer = scorer or AssessmentScorer()

    def get_model(self) -> MaturityModel:
        """Return the loaded maturity model.

        Raises:
            ModelUnavailableError: If the model cannot be loaded.
        """
        return self._model_loader.load()

    async def submit_assessment(
        self,
        lead_data: Mapping[str, Any],
        responses: Mapping[str, Any],
    ) -> SubmissionResult:
        """Validate, score and persist one submission, then notify the lead.

        Nothing is written unless both the lead fields and the response set
        are valid. The lead and assessment rows are committed together.

        Args:
            lead_data: Raw contact fields.
            responses: Raw mapping of question id to rating.

        Returns:
            SubmissionResult carrying the report token.

        Raises:
            LeadRejectedError: If contact fields are invalid.
            ModelUnavailableError: If the model cannot be loaded.
            ValidationFailedError: If the response set is incomplete or invalid.
        """
        contact = parse_lead(lead_data)
        model = self._model_loader.load()
        ratings = ensure_valid(responses, model)

        score_result = self._scorer.aggregate(ratings, model)
        report_token = self._token_generator.generate()

        try:
            lead = await self._lead_repo.create_lead(contact)
            await self._assessment_repo.create_assessment(
                lead_id=lead.id,
                model_version=model.version,
                responses=ratings,
                score_result=score_result,
                report_token=report_token,
            )
            await self._uow.commit()
        except Exception:
            await self._uow.rollback()
            logger.exception(
                "Assessment persistence failed",
                report_token_prefix=report_token[:_TOKEN_LOG_PREFIX],
            )
            raise

        logger.info(
            "Assessment submitted",
            lead_id=str(lead.id),
            model_version=model.version,
            overall_score=score_result.overall_score,
            overall_level=score_result.overall_level,
            report_token_prefix=report_token[:_TOKEN_LOG_PREFIX],
        )

        await self._notify(contact, report_token, score_result, model)

        return SubmissionResult(
            report_token=report_token,
            overall_score=score_result.overall_score,
            overall_level=score_result.overall_level,
        )

    async def get_report(self, report_token: str) -> ReportBundle:
        """Resolve a report token into the stored assessment and its report.

        Args:
            report_token: Token issued at submission.

        Returns:
            ReportBundle with assessment, lead, model and assembled report.

        Raises:
            TokenNotFoundError: If no assessment carries this token.
            ModelUnavailableError: If the model cannot be loaded.
        """
        assessment = await self._assessment_repo.get_assessment_by_token(report_token)
        if assessment is None:
            logger.info(
                "Report token not found",
                report_token_prefix=report_token[:_TOKEN_LOG_PREFIX],
            )
            raise TokenNotFoundError("Report not found")

        model = self._model_loader.load()
        report = assemble_report(score_result_from_assessment(assessment), model)
        return ReportBundle(
            assessment=assessment,
            lead=assessment.lead,
            model=model,
            report=report,
        )

    async def list_assessments(self) -> list[Assessment]:
        """Return every assessment joined with its lead, oldest first."""
        assessments = await self._assessment_repo.list_all_assessments()
        logger.debug("Assessments listed", assessment_count=len(assessments))
        return assessments

    async def _notify(
        self,
        contact: LeadContact,
        report_token: str,
        score_result: ScoreResult,
        model: MaturityModel,
    ) -> None:
        level_name = model.level(score_result.overall_level).name
        try:
            await self._notifier.notify(
                lead=contact,
                report_token=report_token,
                overall_score=score_result.overall_score,
                overall_level=score_result.overall_level,
                level_name=level_name,
            )
        except NotifyFailedError as exc:
            logger.warning(
                "Report notification failed",
                error=str(exc),
                report_token_prefix=report_token[:_TOKEN_LOG_PREFIX],
            )
        except Exception:
            # The assessment is already committed and retrievable by token.
            logger.exception(
                "Unexpected error while notifying lead",
                report_token_prefix=report_token[:_TOKEN_LOG_PREFIX],
            )


def score_result_from_assessment(assessment: Assessment) -> ScoreResult:
    """Rebuild the ScoreResult stored on an assessment row."""
    return ScoreResult(
        dimension_scores={key: float(value) for key, value in assessment.dimension_scores.items()},
        area_scores={key: float(value) for key, value in assessment.area_scores.items()},
        overall_score=float(assessment.overall_score),
        overall_level=int(assessment.overall_level),
    )
