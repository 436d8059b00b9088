# app/domains/moderation/service.py
"""
Moderation decision workflow.

A disposition is "commit, then notify": the PENDING -> APPROVED/REJECTED write
is the source of truth, and the steps after it (audit entry, content status
push, trust check) are best-effort. Their failures are logged with the item
and content ids for reconciliation and never undo or fail the decision.
"""
from datetime import datetime
from typing import Awaitable, Callable, Dict, Optional

from app.core.errors import (AlreadyReviewedError, NotFoundError,
                             StatusNotAllowedError, ValidationError)
from app.domains.audit.service import MODERATION_ITEM, audit_log
from app.domains.content.client import content_service
from app.domains.moderation import repository
from app.domains.moderation.entities import (ContentType, ModerationItem,
                                             ModerationStatus, QueueStats,
                                             new_moderation_item)
from app.domains.moderation.publisher import moderation_publisher
from app.domains.trust.entities import requires_moderation
from app.domains.trust.service import trust_demotion, trust_promotion
from app.shared.utils.logger import get_logger
from app.shared.utils.pagination import Page

logger = get_logger(__name__)

# Reviewer recorded for automatic actions
SYSTEM_USER_ID = "00000000-0000-0000-0000-000000000000"

ACTION_APPROVE = "APPROVE"
ACTION_REJECT = "REJECT"
ACTION_AUTO_APPROVE = "AUTO_APPROVE"
AUTO_APPROVE_DETAILS = "trust_tier_upgrade"


class ModerationWorkflow:
    def __init__(
        self,
        store=repository,
        content=content_service,
        publisher=moderation_publisher,
        audit=audit_log,
        promotion=trust_promotion,
        demotion=trust_demotion,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.content = content
        self.publisher = publisher
        self.audit = audit
        self.promotion = promotion
        self.demotion = demotion
        self.clock = clock

    # Submission

    async def submit_content(
        self,
        content_type: ContentType,
        content_id: str,
        submitter_id: str,
        trust_tier: Optional[str],
    ) -> Optional[ModerationItem]:
        """Queue the content for review, or approve it outright for trusted submitters."""
        if requires_moderation(trust_tier):
            logger.info(
                f"Queuing content {content_id} for moderation "
                f"(submitter {submitter_id} has trust tier {trust_tier})"
            )
            return await self.create_item(content_type, content_id, submitter_id)

        logger.info(
            f"Auto-approving content {content_id} "
            f"(submitter {submitter_id} has trust tier {trust_tier})"
        )
        await self.content.update_status(content_id, ModerationStatus.APPROVED.value)
        await self.publisher.publish_approved(content_id, submitter_id)
        return None

    async def create_item(
        self, content_type: ContentType, content_id: str, submitter_id: str
    ) -> ModerationItem:
        item = new_moderation_item(content_type, content_id, submitter_id)
        return await self.store.save_item(item)

    # Queries

    async def get_item(self, item_id: str) -> ModerationItem:
        item = await self.store.get_item(item_id)
        if item is None:
            raise NotFoundError(f"Moderation item not found: {item_id}")
        return item

    async def get_queue(
        self,
        status: ModerationStatus = ModerationStatus.PENDING,
        content_type: Optional[ContentType] = None,
        page: int = 0,
        size: int = 20,
    ) -> Page[ModerationItem]:
        return await self.store.find_by_status(status, content_type, page, size)

    async def find_by_content_id(
        self, content_id: str, status: ModerationStatus = ModerationStatus.PENDING
    ) -> Optional[ModerationItem]:
        return await self.store.find_by_content_id(content_id, status)

    async def get_queue_stats(self) -> QueueStats:
        start_of_day = self.clock().replace(hour=0, minute=0, second=0, microsecond=0)
        return QueueStats(
            pending=await self.store.count_by_status(ModerationStatus.PENDING),
            approved_today=await self.store.count_reviewed_since(
                ModerationStatus.APPROVED, start_of_day
            ),
            rejected_today=await self.store.count_reviewed_since(
                ModerationStatus.REJECTED, start_of_day
            ),
            avg_review_time_minutes=await self.store.average_review_minutes(),
        )

    # Dispositions

    async def approve(self, item_id: str, reviewer_id: str) -> ModerationItem:
        item = await self._commit_review(item_id, ModerationStatus.APPROVED, reviewer_id)

        await self.audit.log_action(reviewer_id, ACTION_APPROVE, MODERATION_ITEM, item.id)
        await self._best_effort(
            "content status push",
            item,
            lambda: self.content.update_status(item.content_id, ModerationStatus.APPROVED.value),
        )
        await self.publisher.publish_approved(item.content_id, reviewer_id)
        await self._best_effort("trust promotion check", item, lambda: self._promote(item))
        return item

    async def reject(self, item_id: str, reviewer_id: str, reason: str) -> ModerationItem:
        if not reason or not reason.strip():
            raise ValidationError("Rejection reason is required")

        item = await self._commit_review(
            item_id, ModerationStatus.REJECTED, reviewer_id, rejection_reason=reason
        )

        await self.audit.log_action(reviewer_id, ACTION_REJECT, MODERATION_ITEM, item.id, reason)
        await self._best_effort(
            "content status push",
            item,
            lambda: self.content.update_status(item.content_id, ModerationStatus.REJECTED.value),
        )
        await self.publisher.publish_rejected(item.content_id, reviewer_id, reason)
        await self._best_effort("trust demotion check", item, lambda: self._demote(item))
        return item

    async def approve_pending_for_user(self, submitter_id: str, system_reviewer_id: str) -> int:
        """
        Auto-approve every PENDING item of a submitter after a trust tier upgrade.

        Items are committed one by one, so a failure only skips that item and a
        re-run picks up whatever is still PENDING. Returns the number of items
        whose APPROVED status was committed, even when a later push failed.
        """
        pending = await self.store.find_by_submitter_and_status(
            submitter_id, ModerationStatus.PENDING
        )
        if not pending:
            logger.debug(f"No pending items found for user {submitter_id}")
            return 0

        logger.info(
            f"Auto-approving {len(pending)} pending items for user {submitter_id} "
            f"(trust tier upgraded)"
        )
        approved = 0
        for item in pending:
            try:
                saved = await self.store.mark_reviewed(
                    item.id, ModerationStatus.APPROVED, system_reviewer_id, self.clock()
                )
            except Exception as e:
                logger.error(f"Failed to auto-approve item {item.id}: {e}")
                continue
            if saved is None:
                logger.info(f"Item {item.id} was reviewed meanwhile, skipping auto-approval")
                continue
            approved += 1

            await self.audit.log_action(
                system_reviewer_id, ACTION_AUTO_APPROVE, MODERATION_ITEM, saved.id,
                AUTO_APPROVE_DETAILS,
            )
            await self._best_effort(
                "content status push",
                saved,
                lambda: self.content.update_status(saved.content_id, ModerationStatus.APPROVED.value),
            )
            await self._best_effort(
                "approval event publish",
                saved,
                lambda: self.publisher.publish_approved(saved.content_id, system_reviewer_id),
            )
        return approved

    # Content edits on behalf of a moderator; upstream failures are the result here

    async def update_content_metadata(
        self, item_id: str, fields: Dict, actor_is_admin: bool = False
    ) -> ModerationItem:
        item = await self._editable_item(item_id, actor_is_admin)
        await self.content.update_metadata(item.content_id, fields)
        return item

    async def add_content_location(
        self, item_id: str, location_id: str, is_primary: bool = False, actor_is_admin: bool = False
    ) -> ModerationItem:
        item = await self._editable_item(item_id, actor_is_admin)
        await self.content.add_location(item.content_id, location_id, is_primary)
        return item

    async def remove_content_location(
        self, item_id: str, location_id: str, actor_is_admin: bool = False
    ) -> ModerationItem:
        item = await self._editable_item(item_id, actor_is_admin)
        await self.content.remove_location(item.content_id, location_id)
        return item

    # Internals

    async def _commit_review(
        self,
        item_id: str,
        status: ModerationStatus,
        reviewer_id: str,
        rejection_reason: Optional[str] = None,
    ) -> ModerationItem:
        item = await self.get_item(item_id)
        if not item.is_pending:
            raise AlreadyReviewedError(f"Moderation item already reviewed: {item_id}")

        saved = await self.store.mark_reviewed(
            item_id, status, reviewer_id, self.clock(), rejection_reason
        )
        if saved is None:
            raise AlreadyReviewedError(f"Moderation item already reviewed: {item_id}")
        logger.info(f"Item {item_id} (content {saved.content_id}) {status.value} by {reviewer_id}")
        return saved

    async def _editable_item(self, item_id: str, actor_is_admin: bool) -> ModerationItem:
        """Moderators may only edit PENDING content; admins may edit any."""
        item = await self.get_item(item_id)
        if not item.is_pending and not actor_is_admin:
            raise StatusNotAllowedError(
                f"Content of a {item.status.value} item can only be changed by an admin"
            )
        return item

    async def _promote(self, item: ModerationItem):
        if await self.promotion.check_and_promote(item.submitter_id):
            logger.info(f"User {item.submitter_id} was promoted after approval of item {item.id}")

    async def _demote(self, item: ModerationItem):
        if await self.demotion.check_and_demote(item.submitter_id):
            logger.info(f"User {item.submitter_id} was demoted after rejection of item {item.id}")

    async def _best_effort(self, step: str, item: ModerationItem, call: Callable[[], Awaitable]):
        try:
            await call()
        except Exception as e:
            logger.error(
                f"{step} failed for item {item.id} (content {item.content_id}), "
                f"decision stands: {e}"
            )


moderation_workflow = ModerationWorkflow()
