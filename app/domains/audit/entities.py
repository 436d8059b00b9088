import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AuditLogEntry:
    id: str
    actor_id: str
    action: str  # APPROVE, REJECT, AUTO_APPROVE, RESOLVE, DISMISS
    target_type: str  # MODERATION_ITEM, ABUSE_REPORT
    target_id: str
    details: Optional[str]
    created_at: datetime


def new_audit_entry(
    actor_id: str, action: str, target_type: str, target_id: str, details: Optional[str] = None
) -> AuditLogEntry:
    return AuditLogEntry(
        id=str(uuid.uuid4()),
        actor_id=actor_id,
        action=action,
        target_type=target_type,
        target_id=target_id,
        details=details,
        created_at=datetime.utcnow(),
    )
