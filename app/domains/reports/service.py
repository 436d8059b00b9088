# app/domains/reports/service.py
from typing import Optional

from app.core.errors import NotFoundError
from app.domains.audit.service import ABUSE_REPORT, audit_log
from app.domains.moderation.entities import ContentType
from app.domains.reports import repository
from app.domains.reports.entities import (AbuseReason, AbuseReport,
                                          ReportStatus, new_abuse_report)
from app.shared.utils.logger import get_logger
from app.shared.utils.pagination import Page

logger = get_logger(__name__)

ACTION_RESOLVE = "RESOLVE"
ACTION_DISMISS = "DISMISS"


class AbuseReportWorkflow:
    """
    OPEN -> RESOLVED | DISMISSED.

    There is no re-resolution guard: resolving or dismissing an already closed
    report overwrites it, so concurrent resolutions are last-write-wins.
    """

    def __init__(self, store=repository, audit=audit_log):
        self.store = store
        self.audit = audit

    async def submit_report(
        self,
        content_type: ContentType,
        content_id: str,
        reporter_id: str,
        reason: AbuseReason,
        description: Optional[str] = None,
    ) -> AbuseReport:
        report = new_abuse_report(content_type, content_id, reporter_id, reason, description)
        saved = await self.store.save_report(report)
        logger.info(f"Abuse report {saved.id} ({saved.reason.value}) filed against content {content_id}")
        return saved

    async def get_report(self, report_id: str) -> AbuseReport:
        report = await self.store.get_report(report_id)
        if report is None:
            raise NotFoundError(f"Abuse report not found: {report_id}")
        return report

    async def list_reports(
        self, status: ReportStatus = ReportStatus.OPEN, page: int = 0, size: int = 20
    ) -> Page[AbuseReport]:
        return await self.store.find_by_status(status, page, size)

    async def resolve(self, report_id: str, moderator_id: str, resolution: Optional[str]) -> AbuseReport:
        return await self._close(report_id, moderator_id, ReportStatus.RESOLVED, ACTION_RESOLVE, resolution)

    async def dismiss(
        self, report_id: str, moderator_id: str, reason: Optional[str] = None
    ) -> AbuseReport:
        return await self._close(report_id, moderator_id, ReportStatus.DISMISSED, ACTION_DISMISS, reason)

    async def _close(
        self,
        report_id: str,
        moderator_id: str,
        status: ReportStatus,
        action: str,
        resolution: Optional[str],
    ) -> AbuseReport:
        report = await self.get_report(report_id)
        if report.status != ReportStatus.OPEN:
            logger.warning(
                f"Abuse report {report_id} already {report.status.value}, "
                f"overwriting with {status.value} by {moderator_id}"
            )
        report.status = status
        report.resolved_by = moderator_id
        report.resolution = resolution
        saved = await self.store.save_report(report)
        await self.audit.log_action(moderator_id, action, ABUSE_REPORT, report_id, resolution)
        return saved


abuse_report_workflow = AbuseReportWorkflow()
