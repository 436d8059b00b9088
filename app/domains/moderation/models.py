# app/domains/moderation/models.py
from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class ModerationItemRecord(Base, TimestampMixin):
    __tablename__ = "moderation_items"
    __table_args__ = (
        Index("ix_moderation_items_status_content_type", "status", "content_type"),
        Index("ix_moderation_items_submitter_status", "submitter_id", "status"),
        CheckConstraint(
            "(status = 'PENDING' AND reviewed_at IS NULL AND reviewer_id IS NULL) "
            "OR (status <> 'PENDING' AND reviewed_at IS NOT NULL AND reviewer_id IS NOT NULL)",
            name="ck_moderation_items_review_fields",
        ),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    content_type: Mapped[str] = mapped_column(String)  # VIDEO, LOCATION
    content_id: Mapped[str] = mapped_column(String, index=True)
    submitter_id: Mapped[str] = mapped_column(String)
    status: Mapped[str] = mapped_column(String)  # PENDING, APPROVED, REJECTED
    priority: Mapped[int] = mapped_column(Integer, default=0)
    reviewer_id: Mapped[str] = mapped_column(String, nullable=True)
    reviewed_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
    rejection_reason: Mapped[str] = mapped_column(String(1000), nullable=True)
