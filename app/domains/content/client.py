# app/domains/content/client.py
from typing import Dict, Optional

import httpx

from app.core.config import settings
from app.core.errors import UpstreamServiceError
from app.shared.utils.logger import get_logger

logger = get_logger(__name__)


class ContentServiceClient:
    """Internal API of the video-service: status, metadata and locations of submitted content."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.CONTENT_SERVICE_URL
        self.timeout = timeout or settings.SERVICE_HTTP_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self.transport
        )

    async def _send(self, action: str, method: str, url: str, json: Optional[Dict] = None) -> httpx.Response:
        try:
            async with self._client() as client:
                return await client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.error(f"Failed to {action}: {e}")
            raise UpstreamServiceError(f"Failed to {action}: {e}") from e

    @staticmethod
    def _raise_for_status(action: str, response: httpx.Response):
        if response.is_error:
            logger.error(f"Failed to {action}: {response.status_code} {response.text}")
            raise UpstreamServiceError(
                f"Failed to {action}: {response.status_code}", status_code=response.status_code
            )

    async def update_status(self, content_id: str, status: str):
        action = f"update content {content_id} status to {status}"
        logger.info(f"Updating content {content_id} status to {status}")
        response = await self._send(
            action, "PUT", f"/internal/videos/{content_id}/status", json={"status": status}
        )
        self._raise_for_status(action, response)
        logger.info(f"Updated content {content_id} status to {status}")

    async def update_metadata(self, content_id: str, fields: Dict):
        """Push edited metadata (amendments, participants, videoDate) as-is."""
        action = f"update content {content_id} metadata"
        logger.info(f"Updating content {content_id} metadata: {sorted(fields)}")
        response = await self._send(action, "PUT", f"/internal/videos/{content_id}", json=fields)
        self._raise_for_status(action, response)

    async def add_location(self, content_id: str, location_id: str, is_primary: bool = False):
        action = f"add location {location_id} to content {content_id}"
        logger.info(f"Adding location {location_id} to content {content_id} (primary={is_primary})")
        response = await self._send(
            action,
            "POST",
            f"/internal/videos/{content_id}/locations",
            json={"locationId": location_id, "isPrimary": is_primary},
        )
        self._raise_for_status(action, response)

    async def remove_location(self, content_id: str, location_id: str):
        action = f"remove location {location_id} from content {content_id}"
        logger.info(f"Removing location {location_id} from content {content_id}")
        response = await self._send(
            action, "DELETE", f"/internal/videos/{content_id}/locations/{location_id}"
        )
        if response.status_code == 404:
            logger.info(
                f"Location {location_id} not found on content {content_id}, already removed"
            )
            return
        self._raise_for_status(action, response)


content_service = ContentServiceClient()
