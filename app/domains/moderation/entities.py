import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class ContentType(str, Enum):
    VIDEO = "VIDEO"
    LOCATION = "LOCATION"


class ModerationStatus(str, Enum):
    PENDING = "PENDING"  # initial
    APPROVED = "APPROVED"  # terminal
    REJECTED = "REJECTED"  # terminal


@dataclass
class ModerationItem:
    id: str
    content_type: ContentType
    content_id: str
    submitter_id: str
    status: ModerationStatus
    created_at: datetime
    priority: int = 0  # ordering hint for queue consumers only
    reviewer_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ModerationStatus.PENDING


@dataclass(frozen=True)
class QueueStats:
    pending: int
    approved_today: int
    rejected_today: int
    avg_review_time_minutes: Optional[float]


def new_moderation_item(
    content_type: ContentType,
    content_id: str,
    submitter_id: str,
    priority: int = 0,
) -> ModerationItem:
    """Every new item starts PENDING with its id and created_at fixed here."""
    return ModerationItem(
        id=str(uuid.uuid4()),
        content_type=ContentType(content_type),
        content_id=content_id,
        submitter_id=submitter_id,
        status=ModerationStatus.PENDING,
        priority=priority,
        created_at=datetime.utcnow(),
    )
