"""ORM models package for the testing maturity assessment service."""

from testing_maturity.core.models.assessment import Assessment, Base, Lead

__all__ = [
    "Assessment",
    "Base",
    "Lead",
]
