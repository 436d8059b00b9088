from typing import Optional

from app.domains.audit import repository
from app.domains.audit.entities import AuditLogEntry, new_audit_entry
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

MODERATION_ITEM = "MODERATION_ITEM"
ABUSE_REPORT = "ABUSE_REPORT"


class AuditLogService:
    def __init__(self, store=repository):
        self.store = store

    async def log_action(
        self,
        actor_id: str,
        action: str,
        target_type: str,
        target_id: str,
        details: Optional[str] = None,
    ) -> Optional[AuditLogEntry]:
        """Append an audit entry. Fire-and-forget: a failed write is logged, never raised."""
        entry = new_audit_entry(actor_id, action, target_type, target_id, details)
        try:
            return await self.store.append_entry(entry)
        except Exception as e:
            logger.error(
                f"Failed to write audit entry {action} on {target_type} {target_id} "
                f"by {actor_id}: {e}"
            )
            return None


audit_log = AuditLogService()
