"""
Notekeep Client: HTTP API Wrapper
==================================

What:  Async wrapper around the /notes REST endpoints.
How:   One lazily created httpx.AsyncClient per NotesAPI instance. Each method
       issues exactly one request; there is no retry policy and no request
       cancellation.

Error mapping:
    transport error / timeout   → NetworkError
    400 / 422                   → ValidationError (server message preserved)
    404                         → NotFoundError
    429                         → RateLimitExceededError
    any other non-2xx           → NetworkError

Usage:
    async with NotesAPI("http://localhost:8000") as api:
        notes = await api.list_notes()
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional

import httpx

from app.client.models import ClientNote
from app.exceptions import (
    NetworkError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        if "message" in body:
            return str(body["message"])
        if "detail" in body:
            return str(body["detail"])
    return str(body)


def _retry_after(response: httpx.Response, default: int = 60) -> int:
    """Seconds to wait, from a Retry-After header in delta-seconds or HTTP-date form."""
    value = response.headers.get("Retry-After", "").strip()
    if value.isdigit():
        return int(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return default
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return max(0, int((when - datetime.now(timezone.utc)).total_seconds()))


class NotesAPI:
    """
    Client for the Notekeep REST API.

    Args:
        base_url: Server root, e.g. http://localhost:8000
        timeout: Per-request timeout in seconds
        transport: Optional httpx transport (tests route requests straight to
            the ASGI app or to a MockTransport)
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "NotesAPI":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        note_id: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        client = await self._get_client()
        logger.debug("API request: %s %s", method, path)
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("API request failed: %s %s: %s", method, path, str(e))
            raise NetworkError(
                message="Could not reach the notes server",
                context={"method": method, "path": path, "error_type": type(e).__name__},
            ) from e

        logger.debug("API response: %s %s %d", method, path, response.status_code)
        if response.is_success:
            return response

        message = _error_message(response)
        status = response.status_code
        if status in (400, 422):
            raise ValidationError(message=message, context={"status": status})
        if status == 404:
            raise NotFoundError(resource="note", resource_id=note_id)
        if status == 429:
            retry_after = _retry_after(response)
            raise RateLimitExceededError(retry_after=retry_after)
        raise NetworkError(
            message=f"Notes server error ({status}): {message}",
            context={"method": method, "path": path, "status": status},
        )

    # ── Endpoints ─────────────────────────────────────────────────────────

    async def list_notes(self) -> List[ClientNote]:
        response = await self._request("GET", "/notes")
        return [ClientNote.model_validate(item) for item in response.json()]

    async def get_note(self, note_id: str) -> ClientNote:
        response = await self._request("GET", f"/notes/{note_id}", note_id=note_id)
        return ClientNote.model_validate(response.json())

    async def create_note(self, payload: Dict[str, Any]) -> ClientNote:
        response = await self._request("POST", "/notes", json=payload)
        return ClientNote.model_validate(response.json())

    async def update_note(self, note_id: str, changes: Dict[str, Any]) -> ClientNote:
        response = await self._request(
            "PATCH", f"/notes/{note_id}", note_id=note_id, json=changes
        )
        return ClientNote.model_validate(response.json())

    async def delete_note(self, note_id: str) -> bool:
        await self._request("DELETE", f"/notes/{note_id}", note_id=note_id)
        return True

    async def empty_trash(self) -> int:
        response = await self._request("DELETE", "/notes/trash")
        return int(response.json().get("deleted", 0))
