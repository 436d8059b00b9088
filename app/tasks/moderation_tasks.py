# app/tasks/moderation_tasks.py
from asgiref.sync import async_to_sync

from app.core.celery import celery_app
from app.domains.moderation.events import (handle_content_submitted,
                                           handle_trust_tier_changed)
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


@celery_app.task(name="moderation.content_submitted")
def content_submitted_task(event_data: dict):
    """Classify a submission: queue it or approve it right away. Not retried, a retry could queue twice."""
    item = async_to_sync(handle_content_submitted)(event_data)
    return item.id if item else None


@celery_app.task(name="moderation.trust_tier_changed", bind=True, max_retries=3)
def trust_tier_changed_task(self, event_data: dict):
    # Safe to retry: items approved by an earlier attempt are no longer PENDING
    try:
        return async_to_sync(handle_trust_tier_changed)(event_data)
    except Exception as e:
        logger.error(f"Trust tier cascade failed for {event_data.get('user_id')}: {e}")
        raise self.retry(exc=e, countdown=60)
