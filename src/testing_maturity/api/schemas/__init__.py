"""Pydantic request/response schemas for the testing maturity assessment API."""

from testing_maturity.api.schemas.assessment import (
    AdminAssessmentListResponse,
    AdminAssessmentSchema,
    AdminCredentialsRequest,
    AdminVerifyResponse,
    AnswerErrorSchema,
    AreaReportSchema,
    AssessmentSchema,
    DimensionReportSchema,
    LeadSchema,
    LevelInfoSchema,
    MaturityReportSchema,
    ReportResponse,
    SubmitAssessmentRequest,
    SubmitAssessmentResponse,
)

__all__ = [
    "AdminAssessmentListResponse",
    "AdminAssessmentSchema",
    "AdminCredentialsRequest",
    "AdminVerifyResponse",
    "AnswerErrorSchema",
    "AreaReportSchema",
    "AssessmentSchema",
    "DimensionReportSchema",
    "LeadSchema",
    "LevelInfoSchema",
    "MaturityReportSchema",
    "ReportResponse",
    "SubmitAssessmentRequest",
    "SubmitAssessmentResponse",
]
