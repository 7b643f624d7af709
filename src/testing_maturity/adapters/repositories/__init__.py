"""Repository sub-package for the testing maturity assessment service."""

from testing_maturity.adapters.repositories.assessment_repository import (
    AssessmentRepository,
    LeadRepository,
)

__all__ = [
    "AssessmentRepository",
    "LeadRepository",
]
