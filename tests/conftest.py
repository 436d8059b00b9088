import os
import tempfile
from datetime import datetime, timedelta
from typing import Dict, List

# Must be set before anything under app/ reads settings
_db_dir = tempfile.mkdtemp(prefix="moderation-tests-")
os.environ["ENVIRONMENT"] = "local"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'moderation.db')}"
os.environ["EVENTS_TRANSPORT"] = "local"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ENV_DIR"] = os.path.join(_db_dir, "no-env")

import pytest  # noqa: E402

from app.core.errors import UpstreamServiceError  # noqa: E402
from app.domains.moderation.entities import ModerationStatus  # noqa: E402
from app.domains.users.client import UserStats, UserSummary  # noqa: E402
from app.shared.utils.pagination import Page  # noqa: E402

NOW = datetime(2026, 10, 17, 12, 0, 0)


def fixed_clock():
    return NOW


class FakeItemStore:
    """Same surface as app.domains.moderation.repository, kept in memory."""

    def __init__(self):
        self.items: Dict[str, object] = {}
        self.fail_on_mark = set()

    async def save_item(self, item):
        self.items[item.id] = item
        return item

    async def get_item(self, item_id):
        return self.items.get(item_id)

    async def mark_reviewed(self, item_id, status, reviewer_id, reviewed_at, rejection_reason=None):
        if item_id in self.fail_on_mark:
            raise RuntimeError("database is down")
        item = self.items.get(item_id)
        if item is None or item.status != ModerationStatus.PENDING:
            return None
        item.status = status
        item.reviewer_id = reviewer_id
        item.reviewed_at = reviewed_at
        item.rejection_reason = rejection_reason
        return item

    async def find_by_status(self, status, content_type=None, page=0, size=20):
        matching = [
            i for i in self.items.values()
            if i.status == status and (content_type is None or i.content_type == content_type)
        ]
        matching.sort(key=lambda i: (-i.priority, i.created_at))
        start = page * size
        return Page(items=matching[start:start + size], page=page, size=size, total=len(matching))

    async def find_by_content_id(self, content_id, status=ModerationStatus.PENDING):
        for item in self.items.values():
            if item.content_id == content_id and item.status == status:
                return item
        return None

    async def find_by_submitter_and_status(self, submitter_id, status):
        return [
            i for i in self.items.values() if i.submitter_id == submitter_id and i.status == status
        ]

    async def count_rejections_since(self, submitter_id, since):
        return sum(
            1 for i in self.items.values()
            if i.submitter_id == submitter_id
            and i.status == ModerationStatus.REJECTED
            and i.reviewed_at >= since
        )

    async def count_by_status(self, status):
        return sum(1 for i in self.items.values() if i.status == status)

    async def count_reviewed_since(self, status, since):
        return sum(
            1 for i in self.items.values()
            if i.status == status and i.reviewed_at is not None and i.reviewed_at >= since
        )

    async def average_review_minutes(self):
        reviewed = [i for i in self.items.values() if i.reviewed_at is not None]
        if not reviewed:
            return None
        total = sum((i.reviewed_at - i.created_at).total_seconds() / 60 for i in reviewed)
        return total / len(reviewed)


class FakeReportStore:
    def __init__(self):
        self.reports: Dict[str, object] = {}
        self.active_reports: Dict[str, int] = {}

    async def save_report(self, report):
        self.reports[report.id] = report
        return report

    async def get_report(self, report_id):
        return self.reports.get(report_id)

    async def find_by_status(self, status, page=0, size=20):
        matching = [r for r in self.reports.values() if r.status == status]
        start = page * size
        return Page(items=matching[start:start + size], page=page, size=size, total=len(matching))

    async def count_by_status(self, status):
        return sum(1 for r in self.reports.values() if r.status == status)

    async def count_active_reports_against(self, user_id):
        return self.active_reports.get(user_id, 0)


class FakeUserDirectory:
    def __init__(self):
        self.users: Dict[str, UserSummary] = {}
        self.tier_updates: List[tuple] = []

    def add(self, user_id, trust_tier="NEW", age_days=60, approved=12):
        self.users[user_id] = UserSummary(
            id=user_id,
            trust_tier=trust_tier,
            stats=UserStats(submission_count=approved, approved_count=approved),
            created_at=NOW - timedelta(days=age_days),
        )
        return self.users[user_id]

    async def get_user(self, user_id):
        return self.users.get(user_id)

    async def update_trust_tier(self, user_id, new_tier, reason=None):
        self.tier_updates.append((user_id, new_tier, reason))


class FakeContentService:
    def __init__(self):
        self.calls: List[tuple] = []
        self.fail_on = set()

    async def _record(self, *call):
        content_id = call[1]
        if content_id in self.fail_on:
            raise UpstreamServiceError(f"video-service refused {content_id}", status_code=503)
        self.calls.append(call)

    async def update_status(self, content_id, status):
        await self._record("update_status", content_id, status)

    async def update_metadata(self, content_id, fields):
        await self._record("update_metadata", content_id, fields)

    async def add_location(self, content_id, location_id, is_primary=False):
        await self._record("add_location", content_id, location_id, is_primary)

    async def remove_location(self, content_id, location_id):
        await self._record("remove_location", content_id, location_id)


class FakePublisher:
    def __init__(self):
        self.published: List[tuple] = []
        self.fail = False

    async def publish_approved(self, content_id, reviewer_id):
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.published.append(("approved", content_id, reviewer_id))

    async def publish_rejected(self, content_id, reviewer_id, reason):
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.published.append(("rejected", content_id, reviewer_id, reason))


class FakeAudit:
    def __init__(self):
        self.entries: List[tuple] = []

    async def log_action(self, actor_id, action, target_type, target_id, details=None):
        self.entries.append((actor_id, action, target_type, target_id, details))


class StubTrustCheck:
    """Stands in for both the promotion and the demotion check."""

    def __init__(self, result=False, error=None):
        self.result = result
        self.error = error
        self.checked: List[str] = []

    async def check_and_promote(self, user_id):
        return await self._check(user_id)

    async def check_and_demote(self, user_id):
        return await self._check(user_id)

    async def _check(self, user_id):
        self.checked.append(user_id)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def item_store():
    return FakeItemStore()


@pytest.fixture
def report_store():
    return FakeReportStore()


@pytest.fixture
def users():
    return FakeUserDirectory()


@pytest.fixture
def content():
    return FakeContentService()


@pytest.fixture
def publisher():
    return FakePublisher()


@pytest.fixture
def audit():
    return FakeAudit()


@pytest.fixture
def promotion():
    return StubTrustCheck()


@pytest.fixture
def demotion():
    return StubTrustCheck()


@pytest.fixture
def workflow(item_store, content, publisher, audit, promotion, demotion):
    from app.domains.moderation.service import ModerationWorkflow

    return ModerationWorkflow(
        store=item_store,
        content=content,
        publisher=publisher,
        audit=audit,
        promotion=promotion,
        demotion=demotion,
        clock=fixed_clock,
    )


@pytest.fixture
def report_workflow(report_store, audit):
    from app.domains.reports.service import AbuseReportWorkflow

    return AbuseReportWorkflow(store=report_store, audit=audit)

