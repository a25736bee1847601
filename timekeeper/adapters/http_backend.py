"""Backend that talks to the Timekeeper REST API over HTTP.

Used by a controller running apart from the server; any transport
failure or error status becomes a PersistenceError so the controller
can fall back to its local snapshot.
"""

import httpx
import structlog

from timekeeper.config import settings
from timekeeper.errors import NotFoundError, PersistenceError
from timekeeper.models.agenda import Template
from timekeeper.models.analytics import AnalyticsLog
from timekeeper.models.meeting import Meeting

logger = structlog.get_logger()


class HttpBackend:
    """TimekeeperBackend over the REST API."""

    name = "http"

    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        """Initialize backend.

        Args:
            base_url: API root, e.g. ``http://localhost:3000/api``.
                      Defaults to settings.
            client: Optional AsyncClient for dependency injection
            timeout: Request timeout in seconds. Defaults to settings.
        """
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._client = client or httpx.AsyncClient(
            timeout=timeout or settings.request_timeout_seconds
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def list_meetings(self) -> list[Meeting]:
        docs = await self._request("GET", "/meetings")
        return [Meeting.model_validate(d) for d in docs]

    async def create_meeting(self, meeting: Meeting) -> Meeting:
        doc = await self._request("POST", "/meetings", json=meeting.to_document())
        return Meeting.model_validate(doc)

    async def update_meeting(self, meeting_id: str, partial: dict) -> Meeting:
        doc = await self._request(
            "PUT", f"/meetings/{meeting_id}", json=partial, entity="Meeting"
        )
        return Meeting.model_validate(doc)

    async def delete_meeting(self, meeting_id: str) -> None:
        await self._request("DELETE", f"/meetings/{meeting_id}")

    async def list_templates(self) -> list[Template]:
        docs = await self._request("GET", "/templates")
        return [Template.model_validate(d) for d in docs]

    async def create_template(self, template: Template) -> Template:
        doc = await self._request("POST", "/templates", json=template.to_document())
        return Template.model_validate(doc)

    async def update_template(self, template_id: str, partial: dict) -> Template:
        doc = await self._request(
            "PUT", f"/templates/{template_id}", json=partial, entity="Template"
        )
        return Template.model_validate(doc)

    async def delete_template(self, template_id: str) -> None:
        await self._request("DELETE", f"/templates/{template_id}")

    async def load_analytics(self) -> AnalyticsLog:
        return AnalyticsLog.model_validate(await self._request("GET", "/analytics"))

    async def save_analytics(self, analytics: AnalyticsLog) -> None:
        await self._request("PUT", "/analytics", json=analytics.to_document())

    async def _request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        entity: str | None = None,
    ):
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.request(method, url, json=json)
        except httpx.HTTPError as e:
            logger.warning(
                "backend request failed", method=method, url=url, error=str(e)
            )
            raise PersistenceError(f"{method} {url} failed: {e}") from e

        if response.status_code == 404 and entity:
            raise NotFoundError(entity, path.rsplit("/", 1)[-1])
        if response.is_error:
            logger.warning(
                "backend error response",
                method=method,
                url=url,
                status=response.status_code,
            )
            raise PersistenceError(
                f"{method} {url} returned {response.status_code}"
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()
