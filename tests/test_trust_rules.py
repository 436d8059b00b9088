import asyncio
from datetime import timedelta

import pytest

from conftest import NOW, fixed_clock
from app.domains.moderation.entities import (ContentType, ModerationStatus,
                                             new_moderation_item)
from app.domains.trust.entities import is_promotion_to_trusted, requires_moderation
from app.domains.trust.service import (TrustDemotionService,
                                       TrustPromotionService,
                                       describe_demotion)


@pytest.fixture
def promoter(users, item_store, report_store):
    return TrustPromotionService(users=users, items=item_store, reports=report_store, clock=fixed_clock)


@pytest.fixture
def demoter(users, item_store, report_store):
    return TrustDemotionService(users=users, items=item_store, reports=report_store, clock=fixed_clock)


def _rejected(item_store, submitter_id, days_ago):
    item = new_moderation_item(ContentType.VIDEO, f"video-{len(item_store.items)}", submitter_id)
    item.status = ModerationStatus.REJECTED
    item.reviewer_id = "mod-1"
    item.reviewed_at = NOW - timedelta(days=days_ago)
    item_store.items[item.id] = item


def test_requires_moderation():
    assert requires_moderation("NEW")
    assert requires_moderation(None)
    assert requires_moderation("GOLD")
    assert not requires_moderation("TRUSTED")
    assert not requires_moderation("MODERATOR")
    assert not requires_moderation("ADMIN")


def test_only_upgrades_from_new_trigger_the_cascade():
    assert is_promotion_to_trusted("NEW", "TRUSTED")
    assert is_promotion_to_trusted("NEW", "MODERATOR")
    assert not is_promotion_to_trusted("TRUSTED", "MODERATOR")
    assert not is_promotion_to_trusted("TRUSTED", "NEW")
    assert not is_promotion_to_trusted(None, "TRUSTED")


# Promotion

def test_promotes_when_every_criterion_holds(promoter, users):
    users.add("u1", age_days=30, approved=10)
    assert asyncio.run(promoter.check_and_promote("u1")) is True
    assert users.tier_updates == [("u1", "TRUSTED", "AUTO_PROMOTION")]


def test_unknown_user_is_not_promoted(promoter, users):
    assert asyncio.run(promoter.check_and_promote("ghost")) is False
    assert users.tier_updates == []


@pytest.mark.parametrize("tier", ["TRUSTED", "MODERATOR", "ADMIN", None])
def test_only_new_users_are_promoted(promoter, users, tier):
    users.add("u1", trust_tier=tier)
    assert asyncio.run(promoter.check_and_promote("u1")) is False
    assert users.tier_updates == []


def test_account_age_boundary(promoter, users):
    users.add("u1", age_days=29, approved=50)
    assert asyncio.run(promoter.check_and_promote("u1")) is False


def test_approved_count_boundary(promoter, users):
    users.add("u1", age_days=365, approved=9)
    assert asyncio.run(promoter.check_and_promote("u1")) is False


def test_missing_stats_counts_as_zero_approved(promoter, users):
    users.add("u1")
    users.users["u1"].stats = None
    assert asyncio.run(promoter.check_and_promote("u1")) is False


def test_recent_rejection_blocks_promotion(promoter, users, item_store):
    users.add("u1")
    _rejected(item_store, "u1", days_ago=29)
    assert asyncio.run(promoter.check_and_promote("u1")) is False


def test_old_rejection_does_not_block_promotion(promoter, users, item_store):
    users.add("u1")
    _rejected(item_store, "u1", days_ago=31)
    assert asyncio.run(promoter.check_and_promote("u1")) is True


def test_open_report_blocks_promotion(promoter, users, report_store):
    users.add("u1")
    report_store.active_reports["u1"] = 1
    assert asyncio.run(promoter.check_and_promote("u1")) is False
    assert users.tier_updates == []


# Demotion

def test_three_recent_rejections_demote(demoter, users, item_store):
    users.add("u1", trust_tier="TRUSTED")
    for days_ago in (1, 5, 20):
        _rejected(item_store, "u1", days_ago)
    assert asyncio.run(demoter.check_and_demote("u1")) is True
    assert users.tier_updates == [("u1", "NEW", "AUTO_DEMOTION")]


def test_two_rejections_do_not_demote(demoter, users, item_store):
    users.add("u1", trust_tier="TRUSTED")
    for days_ago in (1, 5):
        _rejected(item_store, "u1", days_ago)
    _rejected(item_store, "u1", days_ago=45)
    assert asyncio.run(demoter.check_and_demote("u1")) is False


def test_three_open_reports_demote(demoter, users, report_store):
    users.add("u1", trust_tier="TRUSTED")
    report_store.active_reports["u1"] = 3
    assert asyncio.run(demoter.check_and_demote("u1")) is True


def test_two_rejections_and_two_reports_do_not_demote(demoter, users, item_store, report_store):
    users.add("u1", trust_tier="TRUSTED")
    for days_ago in (2, 9):
        _rejected(item_store, "u1", days_ago)
    report_store.active_reports["u1"] = 2
    assert asyncio.run(demoter.check_and_demote("u1")) is False
    assert users.tier_updates == []


def test_moderator_with_many_rejections_is_not_demoted(demoter, users, item_store):
    users.add("u1", trust_tier="MODERATOR")
    for days_ago in range(1, 11):
        _rejected(item_store, "u1", days_ago)
    assert asyncio.run(demoter.check_and_demote("u1")) is False
    assert users.tier_updates == []


def test_two_open_reports_do_not_demote(demoter, users, report_store):
    users.add("u1", trust_tier="TRUSTED")
    report_store.active_reports["u1"] = 2
    assert asyncio.run(demoter.check_and_demote("u1")) is False


@pytest.mark.parametrize("tier", ["NEW", "MODERATOR", "ADMIN"])
def test_only_trusted_users_are_demoted(demoter, users, report_store, tier):
    users.add("u1", trust_tier=tier)
    report_store.active_reports["u1"] = 10
    assert asyncio.run(demoter.check_and_demote("u1")) is False
    assert users.tier_updates == []


def test_unknown_user_is_not_demoted(demoter):
    assert asyncio.run(demoter.check_and_demote("ghost")) is False


def test_describe_demotion():
    assert describe_demotion(3, 3).startswith("both 3 rejections")
    assert describe_demotion(4, 0) == "4 rejections in last 30 days (threshold: 3)"
    assert describe_demotion(0, 5) == "5 active abuse reports (threshold: 3)"
