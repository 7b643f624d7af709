"""Services package for the testing maturity assessment service."""

from testing_maturity.core.services.assessment_service import (
    AssessmentService,
    NotifyFailedError,
    ReportBundle,
    SubmissionResult,
    TokenNotFoundError,
    score_result_from_assessment,
)

__all__ = [
    "AssessmentService",
    "NotifyFailedError",
    "ReportBundle",
    "SubmissionResult",
    "TokenNotFoundError",
    "score_result_from_assessment",
]
