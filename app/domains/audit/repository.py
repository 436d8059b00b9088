# app/domains/audit/repository.py
from typing import List

from sqlalchemy import and_, func, select

from app.core.database import get_db
from app.domains.audit.entities import AuditLogEntry
from app.domains.audit.models import AuditLogRecord
from app.shared.utils.pagination import Page, page_offset


def _to_entity(record: AuditLogRecord) -> AuditLogEntry:
    return AuditLogEntry(
        id=record.id,
        actor_id=record.actor_id,
        action=record.action,
        target_type=record.target_type,
        target_id=record.target_id,
        details=record.details,
        created_at=record.created_at,
    )


async def append_entry(entry: AuditLogEntry) -> AuditLogEntry:
    """Entries are only ever inserted, never updated or deleted."""
    async with get_db() as db:
        db.add(
            AuditLogRecord(
                id=entry.id,
                actor_id=entry.actor_id,
                action=entry.action,
                target_type=entry.target_type,
                target_id=entry.target_id,
                details=entry.details,
                created_at=entry.created_at,
            )
        )
    return entry


async def find_by_actor(actor_id: str, page: int = 0, size: int = 20) -> Page[AuditLogEntry]:
    condition = AuditLogRecord.actor_id == actor_id
    return await _page(condition, page, size)


async def find_by_target(
    target_type: str, target_id: str, page: int = 0, size: int = 20
) -> Page[AuditLogEntry]:
    condition = and_(AuditLogRecord.target_type == target_type, AuditLogRecord.target_id == target_id)
    return await _page(condition, page, size)


async def _page(condition, page: int, size: int) -> Page[AuditLogEntry]:
    async with get_db() as db:
        total = await db.scalar(select(func.count()).select_from(AuditLogRecord).where(condition))
        result = await db.execute(
            select(AuditLogRecord)
            .where(condition)
            .order_by(AuditLogRecord.created_at.desc())
            .offset(page_offset(page, size))
            .limit(size)
        )
        items: List[AuditLogEntry] = [_to_entity(r) for r in result.scalars().all()]
    return Page(items=items, page=page, size=size, total=total or 0)
