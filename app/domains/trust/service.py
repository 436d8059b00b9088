# app/domains/trust/service.py
"""
Automatic trust tier changes driven by a submitter's moderation history.

Promotion NEW -> TRUSTED needs every criterion:
  - account age >= 30 days
  - approved submissions >= 10
  - no rejections in the last 30 days
  - no open abuse reports against the user's content

Demotion TRUSTED -> NEW needs either:
  - rejections in the last 30 days >= 3
  - open abuse reports against the user's content >= 3

MODERATOR and ADMIN are never changed automatically. Ineligibility is a
plain False; only directory or storage faults raise.
"""
from datetime import datetime, timedelta
from typing import Callable

from app.domains.moderation import repository as item_repository
from app.domains.reports import repository as report_repository
from app.domains.trust.entities import (AUTO_DEMOTION_REASON,
                                        AUTO_PROMOTION_REASON, TrustTier)
from app.domains.users.client import user_directory
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)

MINIMUM_ACCOUNT_AGE_DAYS = 30
MINIMUM_APPROVED_SUBMISSIONS = 10
REJECTION_LOOKBACK_DAYS = 30
DEMOTION_REJECTION_THRESHOLD = 3
DEMOTION_REPORT_THRESHOLD = 3


class TrustPromotionService:
    def __init__(
        self,
        users=user_directory,
        items=item_repository,
        reports=report_repository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.users = users
        self.items = items
        self.reports = reports
        self.clock = clock

    async def check_and_promote(self, user_id: str) -> bool:
        logger.debug(f"Checking trust promotion eligibility for user {user_id}")

        user = await self.users.get_user(user_id)
        if user is None:
            logger.debug(f"User {user_id} not found, skipping promotion check")
            return False

        if user.trust_tier != TrustTier.NEW.value:
            logger.debug(
                f"User {user_id} has trust tier {user.trust_tier}, "
                f"not eligible for NEW->TRUSTED promotion"
            )
            return False

        now = self.clock()
        account_age_days = (now - user.created_at).days
        if account_age_days < MINIMUM_ACCOUNT_AGE_DAYS:
            logger.debug(
                f"User {user_id} account age {account_age_days} days "
                f"< {MINIMUM_ACCOUNT_AGE_DAYS} required"
            )
            return False

        if user.approved_count < MINIMUM_APPROVED_SUBMISSIONS:
            logger.debug(
                f"User {user_id} has {user.approved_count} approved submissions "
                f"< {MINIMUM_APPROVED_SUBMISSIONS} required"
            )
            return False

        since = now - timedelta(days=REJECTION_LOOKBACK_DAYS)
        recent_rejections = await self.items.count_rejections_since(user_id, since)
        if recent_rejections > 0:
            logger.debug(
                f"User {user_id} has {recent_rejections} rejections in last "
                f"{REJECTION_LOOKBACK_DAYS} days, not eligible for promotion"
            )
            return False

        active_reports = await self.reports.count_active_reports_against(user_id)
        if active_reports > 0:
            logger.debug(
                f"User {user_id} has {active_reports} active abuse reports, "
                f"not eligible for promotion"
            )
            return False

        logger.info(f"User {user_id} meets all promotion criteria, promoting from NEW to TRUSTED")
        await self.users.update_trust_tier(user_id, TrustTier.TRUSTED.value, AUTO_PROMOTION_REASON)
        return True


class TrustDemotionService:
    def __init__(
        self,
        users=user_directory,
        items=item_repository,
        reports=report_repository,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.users = users
        self.items = items
        self.reports = reports
        self.clock = clock

    async def check_and_demote(self, user_id: str) -> bool:
        logger.debug(f"Checking trust demotion eligibility for user {user_id}")

        user = await self.users.get_user(user_id)
        if user is None:
            logger.debug(f"User {user_id} not found, skipping demotion check")
            return False

        if user.trust_tier != TrustTier.TRUSTED.value:
            logger.debug(
                f"User {user_id} has trust tier {user.trust_tier}, "
                f"not eligible for automatic demotion"
            )
            return False

        since = self.clock() - timedelta(days=REJECTION_LOOKBACK_DAYS)
        recent_rejections = await self.items.count_rejections_since(user_id, since)
        active_reports = await self.reports.count_active_reports_against(user_id)

        too_many_rejections = recent_rejections >= DEMOTION_REJECTION_THRESHOLD
        too_many_reports = active_reports >= DEMOTION_REPORT_THRESHOLD
        if not (too_many_rejections or too_many_reports):
            logger.debug(
                f"User {user_id} has {recent_rejections} rejections and {active_reports} "
                f"active reports, below demotion thresholds"
            )
            return False

        reason = describe_demotion(recent_rejections, active_reports)
        logger.info(
            f"User {user_id} meets demotion criteria due to {reason}, demoting from TRUSTED to NEW"
        )
        await self.users.update_trust_tier(user_id, TrustTier.NEW.value, AUTO_DEMOTION_REASON)
        return True


def describe_demotion(recent_rejections: int, active_reports: int) -> str:
    too_many_rejections = recent_rejections >= DEMOTION_REJECTION_THRESHOLD
    too_many_reports = active_reports >= DEMOTION_REPORT_THRESHOLD
    if too_many_rejections and too_many_reports:
        return (
            f"both {recent_rejections} rejections in last {REJECTION_LOOKBACK_DAYS} days "
            f"and {active_reports} active abuse reports"
        )
    if too_many_rejections:
        return (
            f"{recent_rejections} rejections in last {REJECTION_LOOKBACK_DAYS} days "
            f"(threshold: {DEMOTION_REJECTION_THRESHOLD})"
        )
    return f"{active_reports} active abuse reports (threshold: {DEMOTION_REPORT_THRESHOLD})"


trust_promotion = TrustPromotionService()
trust_demotion = TrustDemotionService()
