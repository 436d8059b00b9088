from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from app.domains.moderation.entities import ContentType

CONTENT_SUBMITTED = "content:submitted"
USER_TRUST_TIER_CHANGED = "user:trust_tier_changed"
CONTENT_APPROVED = "moderation:content_approved"
CONTENT_REJECTED = "moderation:content_rejected"


# Inbound


class ContentSubmitted(BaseModel):
    event: Literal["content:submitted"] = CONTENT_SUBMITTED
    content_id: str
    content_type: ContentType = ContentType.VIDEO
    submitter_id: str
    submitter_trust_tier: Optional[str] = None
    title: Optional[str] = None
    amendments: List[str] = Field(default_factory=list)
    location_ids: List[str] = Field(default_factory=list)
    timestamp: Optional[datetime] = None

    @field_validator("content_type", mode="before")
    @classmethod
    def _upper_content_type(cls, v):
        return v.upper() if isinstance(v, str) else v


class UserTrustTierChanged(BaseModel):
    event: Literal["user:trust_tier_changed"] = USER_TRUST_TIER_CHANGED
    user_id: str
    old_tier: Optional[str] = None
    new_tier: Optional[str] = None
    reason: Optional[str] = None
    timestamp: Optional[datetime] = None


# Outbound


class ContentApproved(BaseModel):
    event: Literal["moderation:content_approved"] = CONTENT_APPROVED
    content_id: str
    reviewer_id: str
    timestamp: datetime


class ContentRejected(BaseModel):
    event: Literal["moderation:content_rejected"] = CONTENT_REJECTED
    content_id: str
    reviewer_id: str
    reason: Optional[str] = None
    timestamp: datetime
