from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.domains.moderation.entities import ContentType, ModerationStatus


class ModerationItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content_type: ContentType
    content_id: str
    submitter_id: str
    status: ModerationStatus
    priority: int
    reviewer_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: datetime


class ModerationQueueResponse(BaseModel):
    content: List[ModerationItemResponse]
    page: int
    size: int
    total_elements: int
    total_pages: int


class QueueStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    pending: int
    approved_today: int
    rejected_today: int
    avg_review_time_minutes: Optional[float] = None


class RejectRequest(BaseModel):
    reason: str = Field(min_length=1, max_length=1000)


class UpdateContentRequest(BaseModel):
    amendments: Optional[List[str]] = None
    participants: Optional[List[str]] = None
    video_date: Optional[date] = None

    def to_content_fields(self) -> Dict:
        """Wire shape expected by the video-service."""
        fields = {
            "amendments": self.amendments,
            "participants": self.participants,
            "videoDate": self.video_date.isoformat() if self.video_date else None,
        }
        return {k: v for k, v in fields.items() if v is not None}


class AddLocationRequest(BaseModel):
    location_id: str
    is_primary: bool = False
