import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from app.domains.moderation.entities import ContentType


class AbuseReason(str, Enum):
    SPAM = "SPAM"
    INAPPROPRIATE = "INAPPROPRIATE"
    COPYRIGHT = "COPYRIGHT"
    MISINFORMATION = "MISINFORMATION"
    OTHER = "OTHER"


class ReportStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
    DISMISSED = "DISMISSED"


@dataclass
class AbuseReport:
    id: str
    content_type: ContentType
    content_id: str
    reporter_id: str
    reason: AbuseReason
    status: ReportStatus
    created_at: datetime
    description: Optional[str] = None
    resolved_by: Optional[str] = None
    resolution: Optional[str] = None


def new_abuse_report(
    content_type: ContentType,
    content_id: str,
    reporter_id: str,
    reason: AbuseReason,
    description: Optional[str] = None,
) -> AbuseReport:
    return AbuseReport(
        id=str(uuid.uuid4()),
        content_type=ContentType(content_type),
        content_id=content_id,
        reporter_id=reporter_id,
        reason=AbuseReason(reason),
        description=description,
        status=ReportStatus.OPEN,
        created_at=datetime.utcnow(),
    )
