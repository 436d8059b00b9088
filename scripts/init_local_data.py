"""Initialize local development data"""
import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).parent.parent))

from app.core.database import init_db
from app.domains.moderation.entities import ContentType, ModerationStatus
from app.domains.moderation.service import moderation_workflow
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

# (content_id, submitter_id) pairs queued for review on a fresh database
SAMPLE_SUBMISSIONS = [
    ("video-local-1", "user-new-1"),
    ("video-local-2", "user-new-1"),
    ("video-local-3", "user-new-2"),
]


async def init_local_data():
    """Create tables and queue a few sample submissions"""
    await init_db()

    queue = await moderation_workflow.get_queue(ModerationStatus.PENDING, page=0, size=1)
    if queue.total:
        logger.info("Data already exists, skipping initialization")
        return

    logger.info("Initializing local development data...")
    for content_id, submitter_id in SAMPLE_SUBMISSIONS:
        await moderation_workflow.create_item(ContentType.VIDEO, content_id, submitter_id)
    logger.info(f"Queued {len(SAMPLE_SUBMISSIONS)} sample submissions")


if __name__ == "__main__":
    asyncio.run(init_local_data())
