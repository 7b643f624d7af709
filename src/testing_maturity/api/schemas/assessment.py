"""Pydantic request/response schemas for the testing maturity assessment API.

All API inputs and outputs are strictly typed Pydantic v2 models. The
submission body keeps ``lead`` and ``responses`` loosely typed so that the
service can report lead and answer problems with per-field and per-question
detail instead of a generic request validation error.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from testing_maturity.core.maturity_model import MaturityModel


# ---------------------------------------------------------------------------
# Submission
# ---------------------------------------------------------------------------


class SubmitAssessmentRequest(BaseModel):
    """Request body carrying contact fields and the complete response set.

    Attributes:
        lead: first_name, last_name, email, company, role, consent.
        responses: Question id -> rating 1-5 for every question.
    """

    lead: dict[str, Any]
    responses: dict[str, Any]


class SubmitAssessmentResponse(BaseModel):
    """Response after a successful submission.

    Attributes:
        report_token: Token granting access to the report.
        message: Human-readable confirmation.
    """

    report_token: str
    message: str = "Assessment submitted successfully"


class AnswerErrorSchema(BaseModel):
    """One per-question validation problem."""

    question_id: str
    kind: str
    value: Any = None
    message: str


# ---------------------------------------------------------------------------
# Stored records
# ---------------------------------------------------------------------------


class LeadSchema(BaseModel):
    """Contact identity stored with an assessment."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    company: str
    role: str
    consent: bool
    created_at: datetime


class AssessmentSchema(BaseModel):
    """Stored assessment with raw responses and computed scores."""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    id: uuid.UUID
    lead_id: uuid.UUID
    model_version: str
    responses: dict[str, Any]
    dimension_scores: dict[str, float]
    area_scores: dict[str, float]
    overall_score: float
    overall_level: int
    report_token: str
    created_at: datetime


# ---------------------------------------------------------------------------
# Report view
# ---------------------------------------------------------------------------


class DimensionReportSchema(BaseModel):
    """Dimension score with rubric text for the current and next level."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    area: str
    dimension: str
    score: float
    level: int
    current_text: str
    next_text: str | None


class AreaReportSchema(BaseModel):
    """Area score with its simplified description and dimensions."""

    model_config = ConfigDict(from_attributes=True)

    area: str
    score: float
    level: int
    description: str
    dimensions: list[DimensionReportSchema]


class LevelInfoSchema(BaseModel):
    """Descriptive text of the overall maturity level."""

    model_config = ConfigDict(from_attributes=True)

    level: int
    name: str
    name_full: str
    ai_concepts: str | None
    overview: str
    what_to_expect: str
    human_focus: str


class MaturityReportSchema(BaseModel):
    """Assembled report view."""

    model_config = ConfigDict(from_attributes=True, protected_namespaces=())

    model_version: str
    overall_score: float
    overall_level: int
    level_info: LevelInfoSchema
    areas: list[AreaReportSchema]
    opportunities: list[DimensionReportSchema]


class ReportResponse(BaseModel):
    """Everything the report page needs.

    Attributes:
        assessment: The stored assessment.
        lead: The lead who submitted it.
        model: The maturity model document.
        report: The assembled report view.
    """

    model_config = ConfigDict(protected_namespaces=())

    assessment: AssessmentSchema
    lead: LeadSchema
    model: MaturityModel
    report: MaturityReportSchema


# ---------------------------------------------------------------------------
# Admin
# ---------------------------------------------------------------------------


class AdminCredentialsRequest(BaseModel):
    """Admin login body. Missing fields are checked like wrong ones."""

    username: str = ""
    password: str = ""


class AdminVerifyResponse(BaseModel):
    """Admin login result."""

    success: bool


class AdminAssessmentSchema(AssessmentSchema):
    """Assessment row joined with its lead for the admin listing."""

    lead: LeadSchema


class AdminAssessmentListResponse(BaseModel):
    """All submissions, oldest first.

    Attributes:
        assessments: Assessments joined with their leads.
        total: Number of assessments returned.
    """

    assessments: list[AdminAssessmentSchema]
    total: int
