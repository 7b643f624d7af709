"""Abstract interfaces (Protocol classes) for the assessment service.

AssessmentService depends on these interfaces, not on concrete
implementations. SQLAlchemy repositories live in
``adapters/repositories/assessment_repository.py``; notifiers live in
``adapters/notifier.py``.
"""

from typing import Any, Protocol, runtime_checkable

from testing_maturity.core.lead import LeadContact
from testing_maturity.core.models import Assessment, Lead
from testing_maturity.core.scoring import ScoreResult


@runtime_checkable
class ILeadRepository(Protocol):
    """Repository interface for Lead persistence."""

    async def create_lead(self, contact: LeadContact) -> Lead:
        """Create a lead row (not committed)."""
        ...


@runtime_checkable
class IAssessmentRepository(Protocol):
    """Repository interface for Assessment persistence."""

    async def create_assessment(
        self,
        lead_id: Any,
        model_version: str,
        responses: dict[str, Any],
        score_result: ScoreResult,
        report_token: str,
    ) -> Assessment:
        """Create an assessment row (not committed)."""
        ...

    async def get_assessment_by_token(self, report_token: str) -> Assessment | None:
        """Retrieve an assessment joined with its lead, or None."""
        ...

    async def list_all_assessments(self) -> list[Assessment]:
        """List every assessment joined with its lead, oldest first."""
        ...


@runtime_checkable
class IUnitOfWork(Protocol):
    """Transaction boundary shared by the repositories of one request."""

    async def commit(self) -> None:
        """Make all pending writes durable."""
        ...

    async def rollback(self) -> None:
        """Discard all pending writes."""
        ...


@runtime_checkable
class INotifier(Protocol):
    """Delivers the report link to the respondent."""

    async def notify(
        self,
        lead: LeadContact,
        report_token: str,
        overall_score: float,
        overall_level: int,
        level_name: str,
    ) -> None:
        """Send the notification.

        Raises:
            NotifyFailedError: If delivery fails.
        """
        ...
