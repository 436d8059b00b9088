# app/domains/users/client.py
"""
Client for the user-service: trust tier snapshots and trust tier updates.

A missing user (404) is a normal answer and comes back as ``None``; any other
failure is raised as UpstreamServiceError.
"""
from datetime import datetime, timezone
from typing import Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.config import settings
from app.core.errors import UpstreamServiceError
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


class UserStats(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    submission_count: int = Field(default=0, alias="submissionCount")
    approved_count: int = Field(default=0, alias="approvedCount")


class UserSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    display_name: Optional[str] = Field(default=None, alias="displayName")
    avatar_url: Optional[str] = Field(default=None, alias="avatarUrl")
    trust_tier: Optional[str] = Field(default=None, alias="trustTier")
    stats: Optional[UserStats] = None
    created_at: datetime = Field(alias="createdAt")

    @field_validator("created_at")
    @classmethod
    def _as_naive_utc(cls, v: datetime) -> datetime:
        # Service-side timestamps are naive UTC throughout
        if v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v

    @property
    def approved_count(self) -> int:
        return self.stats.approved_count if self.stats else 0


class UserServiceClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.USER_SERVICE_URL
        self.timeout = timeout or settings.SERVICE_HTTP_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def get_user(self, user_id: str) -> Optional[UserSummary]:
        """Fetch the public profile with stats; None when the user does not exist."""
        logger.debug(f"Fetching user {user_id}")
        try:
            async with self._client() as client:
                response = await client.get(f"/users/{user_id}")
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch user {user_id}: {e}")
            raise UpstreamServiceError(f"Failed to fetch user: {e}") from e

        if response.status_code == 404:
            logger.debug(f"User {user_id} not found")
            return None
        if response.is_error:
            logger.error(f"Failed to fetch user {user_id}: {response.status_code} {response.text}")
            raise UpstreamServiceError(
                f"Failed to fetch user: {response.status_code}", status_code=response.status_code
            )
        return UserSummary.model_validate(response.json())

    async def update_trust_tier(self, user_id: str, new_tier: str, reason: Optional[str] = None):
        logger.info(f"Updating user {user_id} trust tier to {new_tier} (reason: {reason})")
        try:
            async with self._client() as client:
                response = await client.put(
                    f"/users/{user_id}/trust-tier",
                    json={"trustTier": new_tier, "reason": reason},
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to update user {user_id} trust tier: {e}")
            raise UpstreamServiceError(f"Failed to update trust tier: {e}") from e

        if response.is_error:
            logger.error(
                f"Failed to update user {user_id} trust tier: {response.status_code} {response.text}"
            )
            raise UpstreamServiceError(
                f"Failed to update trust tier: {response.status_code}",
                status_code=response.status_code,
            )
        logger.info(f"Updated user {user_id} trust tier to {new_tier}")


user_directory = UserServiceClient()
