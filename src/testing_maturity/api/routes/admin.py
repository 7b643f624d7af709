"""FastAPI router for the admin lead listing.

Credentials are checked by an injected CredentialVerifier. Every failure
answers with the same generic 401.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from testing_maturity.api.routes.assessment import get_assessment_service
from testing_maturity.api.schemas.assessment import (
    AdminAssessmentListResponse,
    AdminAssessmentSchema,
    AdminCredentialsRequest,
    AdminVerifyResponse,
)
from testing_maturity.core.auth import CredentialVerifier, StaticCredentialVerifier, UnauthorizedError, require_admin
from testing_maturity.core.services.assessment_service import AssessmentService
from testing_maturity.observability import get_logger
from testing_maturity.settings import get_settings

logger = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


def get_credential_verifier() -> CredentialVerifier:
    """Verifier backed by the configured admin username and password."""
    settings = get_settings()
    return StaticCredentialVerifier(settings.admin_username, settings.admin_password)


def _unauthorized(exc: UnauthorizedError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


@router.post(
    "/verify",
    response_model=AdminVerifyResponse,
    status_code=status.HTTP_200_OK,
    summary="Check admin credentials",
)
async def verify_admin(
    body: AdminCredentialsRequest,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> AdminVerifyResponse:
    """Answer 200 when the credentials match, 401 otherwise."""
    try:
        require_admin(verifier, body.username, body.password)
    except UnauthorizedError as exc:
        logger.warning("Admin login rejected")
        raise _unauthorized(exc) from exc
    return AdminVerifyResponse(success=True)


@router.get(
    "/assessments",
    response_model=AdminAssessmentListResponse,
    status_code=status.HTTP_200_OK,
    summary="List every assessment with its lead",
)
async def list_assessments(
    username: Annotated[str | None, Header(alias="X-Admin-Username")] = None,
    password: Annotated[str | None, Header(alias="X-Admin-Password")] = None,
    verifier: CredentialVerifier = Depends(get_credential_verifier),
    service: AssessmentService = Depends(get_assessment_service),
) -> AdminAssessmentListResponse:
    """Return all submissions ordered by creation time.

    Args:
        username: Admin username from the X-Admin-Username header.
        password: Admin password from the X-Admin-Password header.
        verifier: Credential verification capability.
        service: Injected AssessmentService.

    Returns:
        AdminAssessmentListResponse with the joined rows and their count.
    """
    try:
        require_admin(verifier, username, password)
    except UnauthorizedError as exc:
        logger.warning("Admin listing rejected")
        raise _unauthorized(exc) from exc

    try:
        assessments = await service.list_assessments()
    except SQLAlchemyError as exc:
        logger.exception("Admin listing failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch assessments",
        ) from exc

    return AdminAssessmentListResponse(
        assessments=[AdminAssessmentSchema.model_validate(row) for row in assessments],
        total=len(assessments),
    )
