from typing import Optional

from app.core import event_bus
from app.domains.moderation.entities import ModerationItem
from app.domains.moderation.service import SYSTEM_USER_ID, moderation_workflow
from app.domains.trust.entities import is_promotion_to_trusted
from app.shared.schemas.events import (CONTENT_SUBMITTED,
                                       USER_TRUST_TIER_CHANGED,
                                       ContentSubmitted, UserTrustTierChanged)
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


async def handle_content_submitted(event_data: dict) -> Optional[ModerationItem]:
    event = ContentSubmitted(**event_data)
    logger.info(
        f"Received content submission: content_id={event.content_id}, "
        f"submitter_id={event.submitter_id}, trust_tier={event.submitter_trust_tier}"
    )
    return await moderation_workflow.submit_content(
        event.content_type,
        event.content_id,
        event.submitter_id,
        event.submitter_trust_tier,
    )


async def handle_trust_tier_changed(event_data: dict) -> int:
    event = UserTrustTierChanged(**event_data)
    logger.info(
        f"Received trust tier change: user_id={event.user_id}, "
        f"{event.old_tier} -> {event.new_tier}"
    )
    if not is_promotion_to_trusted(event.old_tier, event.new_tier):
        logger.debug(
            f"Trust tier change for user {event.user_id} ({event.old_tier} -> {event.new_tier}) "
            f"does not trigger auto-approval"
        )
        return 0

    approved = await moderation_workflow.approve_pending_for_user(event.user_id, SYSTEM_USER_ID)
    logger.info(f"Auto-approved {approved} pending items for user {event.user_id}")
    return approved


def register_event_handlers():
    event_bus.event_bus.subscribe(CONTENT_SUBMITTED, handle_content_submitted)
    # The cascade commits item by item and must not be cut off by the bus timeout
    event_bus.event_bus.subscribe(USER_TRUST_TIER_CHANGED, handle_trust_tier_changed, timeout=False)
