# app/domains/moderation/repository.py
from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, func, select, update

from app.core.database import engine, get_db
from app.domains.moderation.entities import (ContentType, ModerationItem,
                                             ModerationStatus)
from app.domains.moderation.models import ModerationItemRecord
from app.shared.utils.logger import get_logger
from app.shared.utils.pagination import Page, page_offset

logger = get_logger(__name__)


def _to_entity(record: ModerationItemRecord) -> ModerationItem:
    return ModerationItem(
        id=record.id,
        content_type=ContentType(record.content_type),
        content_id=record.content_id,
        submitter_id=record.submitter_id,
        status=ModerationStatus(record.status),
        priority=record.priority,
        reviewer_id=record.reviewer_id,
        reviewed_at=record.reviewed_at,
        rejection_reason=record.rejection_reason,
        created_at=record.created_at,
    )


async def save_item(item: ModerationItem) -> ModerationItem:
    """Insert a freshly created item."""
    async with get_db() as db:
        db.add(
            ModerationItemRecord(
                id=item.id,
                content_type=item.content_type.value,
                content_id=item.content_id,
                submitter_id=item.submitter_id,
                status=item.status.value,
                priority=item.priority,
                reviewer_id=item.reviewer_id,
                reviewed_at=item.reviewed_at,
                rejection_reason=item.rejection_reason,
                created_at=item.created_at,
            )
        )
    return item


async def get_item(item_id: str) -> Optional[ModerationItem]:
    async with get_db() as db:
        record = await db.get(ModerationItemRecord, item_id)
        return _to_entity(record) if record else None


async def mark_reviewed(
    item_id: str,
    status: ModerationStatus,
    reviewer_id: str,
    reviewed_at: datetime,
    rejection_reason: Optional[str] = None,
) -> Optional[ModerationItem]:
    """
    Move a PENDING item to a terminal status in one conditional UPDATE.

    Returns None when the item is no longer PENDING: a concurrent review
    committed first and this one lost the race.
    """
    async with get_db() as db:
        result = await db.execute(
            update(ModerationItemRecord)
            .where(
                and_(
                    ModerationItemRecord.id == item_id,
                    ModerationItemRecord.status == ModerationStatus.PENDING.value,
                )
            )
            .values(
                status=status.value,
                reviewer_id=reviewer_id,
                reviewed_at=reviewed_at,
                rejection_reason=rejection_reason,
                updated_at=reviewed_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.info(f"Item {item_id} is no longer pending, {status.value} not applied")
            return None
        record = await db.get(ModerationItemRecord, item_id)
        return _to_entity(record)


async def find_by_status(
    status: ModerationStatus,
    content_type: Optional[ContentType] = None,
    page: int = 0,
    size: int = 20,
) -> Page[ModerationItem]:
    conditions = [ModerationItemRecord.status == status.value]
    if content_type is not None:
        conditions.append(ModerationItemRecord.content_type == content_type.value)
    where = and_(*conditions)

    async with get_db() as db:
        total = await db.scalar(
            select(func.count()).select_from(ModerationItemRecord).where(where)
        )
        result = await db.execute(
            select(ModerationItemRecord)
            .where(where)
            .order_by(ModerationItemRecord.priority.desc(), ModerationItemRecord.created_at.asc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        items = [_to_entity(r) for r in result.scalars().all()]
    return Page(items=items, page=page, size=size, total=total or 0)


async def find_by_content_id(
    content_id: str, status: ModerationStatus = ModerationStatus.PENDING
) -> Optional[ModerationItem]:
    async with get_db() as db:
        result = await db.execute(
            select(ModerationItemRecord)
            .where(
                and_(
                    ModerationItemRecord.content_id == content_id,
                    ModerationItemRecord.status == status.value,
                )
            )
            .order_by(ModerationItemRecord.created_at.desc())
            .limit(1)
        )
        record = result.scalar_one_or_none()
        return _to_entity(record) if record else None


async def find_by_submitter_and_status(
    submitter_id: str, status: ModerationStatus
) -> List[ModerationItem]:
    async with get_db() as db:
        result = await db.execute(
            select(ModerationItemRecord).where(
                and_(
                    ModerationItemRecord.submitter_id == submitter_id,
                    ModerationItemRecord.status == status.value,
                )
            )
        )
        return [_to_entity(r) for r in result.scalars().all()]


async def count_rejections_since(submitter_id: str, since: datetime) -> int:
    async with get_db() as db:
        count = await db.scalar(
            select(func.count())
            .select_from(ModerationItemRecord)
            .where(
                and_(
                    ModerationItemRecord.submitter_id == submitter_id,
                    ModerationItemRecord.status == ModerationStatus.REJECTED.value,
                    ModerationItemRecord.reviewed_at >= since,
                )
            )
        )
        return count or 0


async def count_by_status(status: ModerationStatus) -> int:
    async with get_db() as db:
        count = await db.scalar(
            select(func.count())
            .select_from(ModerationItemRecord)
            .where(ModerationItemRecord.status == status.value)
        )
        return count or 0


async def count_reviewed_since(status: ModerationStatus, since: datetime) -> int:
    async with get_db() as db:
        count = await db.scalar(
            select(func.count())
            .select_from(ModerationItemRecord)
            .where(
                and_(
                    ModerationItemRecord.status == status.value,
                    ModerationItemRecord.reviewed_at >= since,
                )
            )
        )
        return count or 0


def _review_minutes_expr():
    reviewed_at = ModerationItemRecord.reviewed_at
    created_at = ModerationItemRecord.created_at
    if engine.dialect.name == "sqlite":
        return (func.julianday(reviewed_at) - func.julianday(created_at)) * 1440.0
    return func.extract("epoch", reviewed_at - created_at) / 60.0


async def average_review_minutes() -> Optional[float]:
    """Mean created->reviewed time over reviewed items; None if nothing was reviewed yet."""
    async with get_db() as db:
        avg = await db.scalar(
            select(func.avg(_review_minutes_expr())).where(
                ModerationItemRecord.reviewed_at.is_not(None)
            )
        )
        return float(avg) if avg is not None else None
