# app/domains/reports/api.py
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from app.domains.auth.dependencies import get_current_user, require_moderator
from app.domains.moderation.entities import ContentType
from app.domains.reports.entities import AbuseReason, ReportStatus
from app.domains.reports.service import abuse_report_workflow

router = APIRouter()


class SubmitReportRequest(BaseModel):
    content_type: ContentType
    content_id: str
    reason: AbuseReason
    description: Optional[str] = Field(default=None, max_length=2000)


class ResolveReportRequest(BaseModel):
    resolution: str = Field(min_length=1)


class DismissReportRequest(BaseModel):
    reason: Optional[str] = None


class AbuseReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content_type: ContentType
    content_id: str
    reporter_id: str
    reason: AbuseReason
    description: Optional[str] = None
    status: ReportStatus
    resolved_by: Optional[str] = None
    resolution: Optional[str] = None
    created_at: datetime


class AbuseReportListResponse(BaseModel):
    content: List[AbuseReportResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


@router.post("/reports", response_model=AbuseReportResponse, status_code=201)
async def submit_report(request: SubmitReportRequest, user=Depends(get_current_user)):
    """Any signed-in user can report content"""
    report = await abuse_report_workflow.submit_report(
        request.content_type,
        request.content_id,
        user["id"],
        request.reason,
        request.description,
    )
    return AbuseReportResponse.model_validate(report)


@router.get("/reports", response_model=AbuseReportListResponse)
async def list_reports(
    status: ReportStatus = ReportStatus.OPEN,
    page: int = Query(0, ge=0),
    size: int = Query(20, ge=1, le=100),
    user=Depends(require_moderator),
):
    result = await abuse_report_workflow.list_reports(status, page, size)
    return AbuseReportListResponse(
        content=[AbuseReportResponse.model_validate(r) for r in result.items],
        page=result.page,
        size=result.size,
        total_elements=result.total,
        total_pages=result.total_pages,
    )


@router.get("/reports/{report_id}", response_model=AbuseReportResponse)
async def get_report(report_id: str, user=Depends(require_moderator)):
    report = await abuse_report_workflow.get_report(report_id)
    return AbuseReportResponse.model_validate(report)


@router.post("/reports/{report_id}/resolve", response_model=AbuseReportResponse)
async def resolve_report(
    report_id: str, request: ResolveReportRequest, user=Depends(require_moderator)
):
    report = await abuse_report_workflow.resolve(report_id, user["id"], request.resolution)
    return AbuseReportResponse.model_validate(report)


@router.post("/reports/{report_id}/dismiss", response_model=AbuseReportResponse)
async def dismiss_report(
    report_id: str,
    request: Optional[DismissReportRequest] = None,
    user=Depends(require_moderator),
):
    reason = request.reason if request else None
    report = await abuse_report_workflow.dismiss(report_id, user["id"], reason)
    return AbuseReportResponse.model_validate(report)
