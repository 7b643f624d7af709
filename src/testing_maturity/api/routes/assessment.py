"""FastAPI router for the self-service testing maturity assessment.

All routes are thin: they parse inputs, build dependencies, delegate to
AssessmentService, and serialise responses. No business logic lives here.

Auth: none. Reports are protected only by their unguessable token.
"""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from testing_maturity.adapters.notifier import LogNotifier, ResendEmailNotifier, build_notifier
from testing_maturity.adapters.repositories import AssessmentRepository, LeadRepository
from testing_maturity.api.schemas.assessment import (
    AnswerErrorSchema,
    AssessmentSchema,
    LeadSchema,
    MaturityReportSchema,
    ReportResponse,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)
from testing_maturity.core.lead import LeadRejectedError
from testing_maturity.core.maturity_model import MaturityModel
from testing_maturity.core.model_loader import JsonFileModelSource, ModelLoader, ModelUnavailableError
from testing_maturity.core.services.assessment_service import AssessmentService, TokenNotFoundError
from testing_maturity.core.tokens import SecretsTokenGenerator
from testing_maturity.core.validation import ValidationFailedError
from testing_maturity.database import get_db_session
from testing_maturity.observability import get_logger
from testing_maturity.settings import get_settings

logger = get_logger(__name__)

router = APIRouter(tags=["Testing Maturity Assessment"])

_MODEL_UNAVAILABLE_DETAIL = "Failed to load maturity model"


# ---------------------------------------------------------------------------
# Dependency factories
# ---------------------------------------------------------------------------


@lru_cache
def get_model_loader() -> ModelLoader:
    """Process-wide maturity model cache."""
    return ModelLoader(JsonFileModelSource(get_settings().model_path))


@lru_cache
def get_notifier() -> ResendEmailNotifier | LogNotifier:
    """Notifier chosen from settings."""
    return build_notifier(get_settings())


def get_token_generator() -> SecretsTokenGenerator:
    """Report token generator."""
    return SecretsTokenGenerator(get_settings().report_token_bytes)


def get_assessment_service(
    session: AsyncSession = Depends(get_db_session),
    model_loader: ModelLoader = Depends(get_model_loader),
    notifier: ResendEmailNotifier | LogNotifier = Depends(get_notifier),
    token_generator: SecretsTokenGenerator = Depends(get_token_generator),
) -> AssessmentService:
    """Build AssessmentService with injected dependencies.

    Args:
        session: Async SQLAlchemy session for this request.
        model_loader: Process-wide model cache.
        notifier: Report e-mail notifier.
        token_generator: Report token generator.

    Returns:
        Configured AssessmentService instance.
    """
    return AssessmentService(
        model_loader=model_loader,
        lead_repository=LeadRepository(session),
        assessment_repository=AssessmentRepository(session),
        unit_of_work=session,
        token_generator=token_generator,
        notifier=notifier,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get(
    "/model",
    response_model=MaturityModel,
    status_code=status.HTTP_200_OK,
    summary="Retrieve the maturity model and questionnaire",
)
async def get_model(
    model_loader: ModelLoader = Depends(get_model_loader),
) -> MaturityModel:
    """Return the maturity levels, rubric and the questionnaire to render."""
    try:
        return model_loader.load()
    except ModelUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_MODEL_UNAVAILABLE_DETAIL,
        ) from exc


@router.post(
    "/assessments/submit",
    response_model=SubmitAssessmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Submit a completed assessment",
)
async def submit_assessment(
    body: SubmitAssessmentRequest,
    service: AssessmentService = Depends(get_assessment_service),
) -> SubmitAssessmentResponse:
    """Score a complete response set and capture the respondent as a lead.

    Every question must be answered with an integer 1-5. Invalid contact
    fields are reported per field; invalid answers are reported per
    question. Nothing is stored unless the whole submission is valid.
    """
    try:
        result = await service.submit_assessment(
            lead_data=body.lead,
            responses=body.responses,
        )
    except LeadRejectedError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid contact details", "fields": exc.field_errors},
        ) from exc
    except ValidationFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": "Incomplete assessment",
                "details": [
                    AnswerErrorSchema(
                        question_id=error.question_id,
                        kind=error.kind,
                        value=getattr(error, "value", None),
                        message=error.message,
                    ).model_dump(mode="json")
                    for error in exc.errors
                ],
            },
        ) from exc
    except ModelUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=_MODEL_UNAVAILABLE_DETAIL,
        ) from exc
    except SQLAlchemyError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit assessment",
        ) from exc

    return SubmitAssessmentResponse(report_token=result.report_token)


@router.get(
    "/reports/{token}",
    response_model=ReportResponse,
    status_code=status.HTTP_200_OK,
    summary="Retrieve a report by its token",
)
async def get_report(
    token: str = Path(..., min_length=1, max_length=128, description="Report token"),
    service: AssessmentService = Depends(get_assessment_service),
) -> ReportResponse:
    """Return the stored assessment, its lead, the model and the report view."""
    try:
        bundle = await service.get_report(token)
    except TokenNotFoundError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Report not found",
        ) from exc
    except ModelUnavailableError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load report",
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception("Report lookup failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load report",
        ) from exc

    return ReportResponse(
        assessment=AssessmentSchema.model_validate(bundle.assessment),
        lead=LeadSchema.model_validate(bundle.lead),
        model=bundle.model,
        report=MaturityReportSchema.model_validate(bundle.report),
    )
