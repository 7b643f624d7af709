"""SQLAlchemy ORM models for leads and scored assessments.

Tables:
    leads       - contact identity captured with each submission
    assessments - raw responses and computed scores, addressed by report token

Both rows of a submission are written in one transaction. Rows are never
updated after creation. Repeat submissions from the same e-mail create new
leads; they are not deduplicated.
"""

import uuid
from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text, Uuid, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

# JSONB on PostgreSQL, plain JSON elsewhere
_JsonColumn = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    """Base class for assessment ORM models."""


class Lead(Base):
    """Contact identity of a respondent.

    Table: leads
    """

    __tablename__ = "leads"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID",
    )
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Contact email the report link is sent to",
    )
    company: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(Text, nullable=False)
    consent: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        comment="Respondent agreed to receive results",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    assessments: Mapped[list["Assessment"]] = relationship(back_populates="lead")


class Assessment(Base):
    """A scored submission, retrievable by its report token.

    Table: assessments
    """

    __tablename__ = "assessments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Primary key UUID",
    )
    lead_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("leads.id"),
        nullable=False,
        index=True,
    )
    model_version: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Version tag of the maturity model the responses were scored against",
    )
    responses: Mapped[dict] = mapped_column(
        _JsonColumn,
        nullable=False,
        comment="Raw response set: question id -> rating 1-5",
    )
    dimension_scores: Mapped[dict] = mapped_column(
        _JsonColumn,
        nullable=False,
        comment="'area::dimension' -> mean rating 1-5",
    )
    area_scores: Mapped[dict] = mapped_column(
        _JsonColumn,
        nullable=False,
        comment="area -> mean of dimension scores 1-5",
    )
    overall_score: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Mean of all dimension scores 1-5",
    )
    overall_level: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Overall maturity level 1-5",
    )
    report_token: Mapped[str] = mapped_column(
        String(128),
        nullable=False,
        unique=True,
        index=True,
        comment="Opaque credential granting read access to this report",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )

    lead: Mapped[Lead] = relationship(back_populates="assessments")
