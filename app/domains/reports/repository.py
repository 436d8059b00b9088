# app/domains/reports/repository.py
from datetime import datetime
from typing import Optional

from sqlalchemy import and_, func, select

from app.core.database import get_db
from app.domains.moderation.entities import ContentType
from app.domains.moderation.models import ModerationItemRecord
from app.domains.reports.entities import AbuseReason, AbuseReport, ReportStatus
from app.domains.reports.models import AbuseReportRecord
from app.shared.utils.pagination import Page, page_offset


def _to_entity(record: AbuseReportRecord) -> AbuseReport:
    return AbuseReport(
        id=record.id,
        content_type=ContentType(record.content_type),
        content_id=record.content_id,
        reporter_id=record.reporter_id,
        reason=AbuseReason(record.reason),
        description=record.description,
        status=ReportStatus(record.status),
        resolved_by=record.resolved_by,
        resolution=record.resolution,
        created_at=record.created_at,
    )


async def save_report(report: AbuseReport) -> AbuseReport:
    """Insert or overwrite; a later resolution replaces an earlier one."""
    async with get_db() as db:
        record = await db.get(AbuseReportRecord, report.id)
        if record is None:
            record = AbuseReportRecord(id=report.id, created_at=report.created_at)
            db.add(record)
        else:
            record.updated_at = datetime.utcnow()
        record.content_type = report.content_type.value
        record.content_id = report.content_id
        record.reporter_id = report.reporter_id
        record.reason = report.reason.value
        record.description = report.description
        record.status = report.status.value
        record.resolved_by = report.resolved_by
        record.resolution = report.resolution
    return report


async def get_report(report_id: str) -> Optional[AbuseReport]:
    async with get_db() as db:
        record = await db.get(AbuseReportRecord, report_id)
        return _to_entity(record) if record else None


async def find_by_status(status: ReportStatus, page: int = 0, size: int = 20) -> Page[AbuseReport]:
    where = AbuseReportRecord.status == status.value
    async with get_db() as db:
        total = await db.scalar(select(func.count()).select_from(AbuseReportRecord).where(where))
        result = await db.execute(
            select(AbuseReportRecord)
            .where(where)
            .order_by(AbuseReportRecord.created_at.asc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        items = [_to_entity(r) for r in result.scalars().all()]
    return Page(items=items, page=page, size=size, total=total or 0)


async def count_by_status(status: ReportStatus) -> int:
    async with get_db() as db:
        count = await db.scalar(
            select(func.count())
            .select_from(AbuseReportRecord)
            .where(AbuseReportRecord.status == status.value)
        )
        return count or 0


async def count_active_reports_against(user_id: str) -> int:
    """OPEN reports on any content the user has submitted for moderation."""
    submitted = select(ModerationItemRecord.content_id).where(
        ModerationItemRecord.submitter_id == user_id
    )
    async with get_db() as db:
        count = await db.scalar(
            select(func.count())
            .select_from(AbuseReportRecord)
            .where(
                and_(
                    AbuseReportRecord.status == ReportStatus.OPEN.value,
                    AbuseReportRecord.content_id.in_(submitted),
                )
            )
        )
        return count or 0
