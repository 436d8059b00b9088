import asyncio

import pytest

from app.core.event_bus import EventBus
from app.domains.moderation import events
from app.domains.moderation.entities import ContentType, ModerationStatus
from app.domains.moderation.service import SYSTEM_USER_ID
from app.shared.schemas.events import (CONTENT_SUBMITTED,
                                       USER_TRUST_TIER_CHANGED,
                                       UserTrustTierChanged)


@pytest.fixture(autouse=True)
def local_workflow(monkeypatch, workflow):
    monkeypatch.setattr(events, "moderation_workflow", workflow)
    return workflow


def _submitted(tier):
    return {
        "content_id": "video-1",
        "content_type": "VIDEO",
        "submitter_id": "user-1",
        "submitter_trust_tier": tier,
        "title": "Town hall, March",
    }


def test_submission_from_new_user_is_queued(workflow):
    item = asyncio.run(events.handle_content_submitted(_submitted("NEW")))
    assert item.status == ModerationStatus.PENDING
    assert item.content_type == ContentType.VIDEO
    assert workflow.store.items[item.id].submitter_id == "user-1"


def test_submission_without_tier_is_queued(workflow):
    data = _submitted(None)
    del data["submitter_trust_tier"]
    assert asyncio.run(events.handle_content_submitted(data)) is not None


def test_submission_from_trusted_user_is_auto_approved(workflow, content, publisher):
    assert asyncio.run(events.handle_content_submitted(_submitted("TRUSTED"))) is None
    assert content.calls == [("update_status", "video-1", "APPROVED")]
    assert publisher.published == [("approved", "video-1", "user-1")]


def test_upgrade_from_new_runs_cascade(workflow):
    for n in (1, 2):
        asyncio.run(workflow.create_item(ContentType.VIDEO, f"video-{n}", "user-1"))

    approved = asyncio.run(
        events.handle_trust_tier_changed(
            {"user_id": "user-1", "old_tier": "NEW", "new_tier": "TRUSTED", "reason": "AUTO_PROMOTION"}
        )
    )

    assert approved == 2
    assert all(i.reviewer_id == SYSTEM_USER_ID for i in workflow.store.items.values())


@pytest.mark.parametrize(
    "old_tier,new_tier",
    [("TRUSTED", "NEW"), ("TRUSTED", "MODERATOR"), ("NEW", "NEW"), (None, "TRUSTED")],
)
def test_other_tier_changes_are_ignored(workflow, old_tier, new_tier):
    item = asyncio.run(workflow.create_item(ContentType.VIDEO, "video-1", "user-1"))

    approved = asyncio.run(
        events.handle_trust_tier_changed(
            {"user_id": "user-1", "old_tier": old_tier, "new_tier": new_tier}
        )
    )

    assert approved == 0
    assert workflow.store.items[item.id].status == ModerationStatus.PENDING


def test_bus_delivers_registered_handlers(monkeypatch, workflow):
    bus = EventBus(handler_timeout=5)
    monkeypatch.setattr(events.event_bus, "event_bus", bus)
    events.register_event_handlers()
    events.register_event_handlers()

    assert len(bus.subscriptions[CONTENT_SUBMITTED]) == 1
    assert len(bus.subscriptions[USER_TRUST_TIER_CHANGED]) == 1

    asyncio.run(bus.publish(CONTENT_SUBMITTED, _submitted("NEW")))
    assert len(workflow.store.items) == 1

    asyncio.run(
        bus.publish(
            USER_TRUST_TIER_CHANGED,
            UserTrustTierChanged(user_id="user-1", old_tier="NEW", new_tier="TRUSTED"),
        )
    )
    assert all(i.status == ModerationStatus.APPROVED for i in workflow.store.items.values())


def test_bus_swallows_handler_errors():
    bus = EventBus(handler_timeout=5)
    seen = []

    async def broken(data):
        raise RuntimeError("boom")

    async def healthy(data):
        seen.append(data)

    bus.subscribe("demo", broken)
    bus.subscribe("demo", healthy)
    asyncio.run(bus.publish("demo", {"n": 1}))

    assert seen == [{"n": 1}]


def test_unsubscribe_stops_delivery():
    bus = EventBus(handler_timeout=5)
    seen = []

    async def handler(data):
        seen.append(data)

    bus.subscribe("demo", handler)
    bus.unsubscribe("demo", handler)
    asyncio.run(bus.publish("demo", {"n": 1}))

    assert seen == []


@pytest.mark.parametrize("raw,expected", [("video", ContentType.VIDEO), ("Location", ContentType.LOCATION)])
def test_submission_content_type_is_case_insensitive(workflow, raw, expected):
    data = _submitted("NEW")
    data["content_type"] = raw
    item = asyncio.run(events.handle_content_submitted(data))
    assert item.content_type == expected


def test_long_cascade_is_not_cut_off_by_bus_timeout(monkeypatch, workflow, content):
    bus = EventBus(handler_timeout=0.05)
    monkeypatch.setattr(events.event_bus, "event_bus", bus)
    events.register_event_handlers()
    for n in range(5):
        asyncio.run(workflow.create_item(ContentType.VIDEO, f"video-{n}", "user-1"))

    record = content.update_status

    async def slow_update_status(content_id, status):
        await asyncio.sleep(0.03)
        await record(content_id, status)

    content.update_status = slow_update_status

    asyncio.run(
        bus.publish(
            USER_TRUST_TIER_CHANGED,
            {"user_id": "user-1", "old_tier": "NEW", "new_tier": "TRUSTED"},
        )
    )

    assert all(i.status == ModerationStatus.APPROVED for i in workflow.store.items.values())
    assert len(content.calls) == 5


def test_timed_out_handler_is_logged_with_event_ids(caplog):
    bus = EventBus(handler_timeout=0.01)

    async def stuck(data):
        await asyncio.sleep(1)

    bus.subscribe(USER_TRUST_TIER_CHANGED, stuck)
    with caplog.at_level("ERROR"):
        asyncio.run(bus.publish(USER_TRUST_TIER_CHANGED, {"user_id": "user-1"}))

    assert "Handler timed out" in caplog.text
    assert "user_id=user-1" in caplog.text
