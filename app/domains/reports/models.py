# app/domains/reports/models.py
from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.mixins import TimestampMixin
from app.shared.models.base import Base


class AbuseReportRecord(Base, TimestampMixin):
    __tablename__ = "moderation_abuse_reports"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    content_type: Mapped[str] = mapped_column(String)
    content_id: Mapped[str] = mapped_column(String, index=True)
    reporter_id: Mapped[str] = mapped_column(String, index=True)
    reason: Mapped[str] = mapped_column(String)  # SPAM, INAPPROPRIATE, COPYRIGHT, ...
    description: Mapped[str] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String, index=True)  # OPEN, RESOLVED, DISMISSED
    resolved_by: Mapped[str] = mapped_column(String, nullable=True)
    resolution: Mapped[str] = mapped_column(Text, nullable=True)
