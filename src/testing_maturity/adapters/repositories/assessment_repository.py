"""Repositories for the lead and assessment data layer.

Implements persistence for Lead and Assessment using the SQLAlchemy 2.0
async ORM. Writes are flushed, never committed here: the submission
service commits the lead and its assessment together.
"""

import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from testing_maturity.core.lead import LeadContact
from testing_maturity.core.models import Assessment, Lead
from testing_maturity.core.scoring import ScoreResult
from testing_maturity.observability import get_logger

logger = get_logger(__name__)


class LeadRepository:
    """Repository for Lead persistence."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialise with an async database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create_lead(self, contact: LeadContact) -> Lead:
        """Add a lead row and flush it to obtain its id.

        Args:
            contact: Validated contact fields.

        Returns:
            The pending Lead record.
        """
        record = Lead(
            first_name=contact.first_name,
            last_name=contact.last_name,
            email=str(contact.email),
            company=contact.company,
            role=contact.role,
            consent=contact.consent,
        )
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)

        logger.debug("Lead flushed", lead_id=str(record.id))
        return record


class AssessmentRepository:
    """Repository for Assessment persistence and token lookup."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialise with an async database session.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    async def create_assessment(
        self,
        lead_id: uuid.UUID,
        model_version: str,
        responses: dict[str, Any],
        score_result: ScoreResult,
        report_token: str,
    ) -> Assessment:
        """Add an assessment row for a lead.

        Args:
            lead_id: Id of the lead created in the same transaction.
            model_version: Version of the model the responses were scored with.
            responses: Raw response set.
            score_result: Computed scores.
            report_token: Unique report token.

        Returns:
            The pending Assessment record.
        """
        record = Assessment(
            lead_id=lead_id,
            model_version=model_version,
            responses=responses,
            dimension_scores=dict(score_result.dimension_scores),
            area_scores=dict(score_result.area_scores),
            overall_score=score_result.overall_score,
            overall_level=score_result.overall_level,
            report_token=report_token,
        )
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)

        logger.debug(
            "Assessment flushed",
            assessment_id=str(record.id),
            lead_id=str(lead_id),
            overall_level=score_result.overall_level,
        )
        return record

    async def get_assessment_by_token(self, report_token: str) -> Assessment | None:
        """Retrieve an assessment and its lead by report token.

        Args:
            report_token: Token issued at submission.

        Returns:
            Assessment with ``lead`` loaded, or None.
        """
        result = await self._session.execute(
            select(Assessment)
            .options(joinedload(Assessment.lead))
            .where(Assessment.report_token == report_token)
        )
        return result.scalar_one_or_none()

    async def list_all_assessments(self) -> list[Assessment]:
        """List every assessment with its lead, oldest first.

        Returns:
            Assessments ordered by created_at.
        """
        result = await self._session.execute(
            select(Assessment)
            .options(joinedload(Assessment.lead))
            .order_by(Assessment.created_at)
        )
        return list(result.scalars().all())
