"""Outbound delivery of relayed events to the configured target URL."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping

import httpx

from hookrelay.errors.exceptions import RelayError

logger = logging.getLogger(__name__)

# Never copied to the target, whatever the allow-list says
_BLOCKED_HEADERS = frozenset({
    "authorization",
    "connection",
    "content-length",
    "content-type",
    "cookie",
    "host",
    "transfer-encoding",
    "x-hub-signature",
    "x-hub-signature-256",
})

# Response headers that describe the target's framing rather than the content
_HOP_BY_HOP_RESPONSE_HEADERS = frozenset({
    "connection",
    "content-encoding",
    "content-length",
    "keep-alive",
    "transfer-encoding",
})

_DISCONNECT_POLL_SECONDS = 0.1


def select_forwarded_headers(
    inbound: Mapping[str, str],
    allowed: Iterable[str],
) -> dict[str, str]:
    """Copy allow-listed inbound headers and set the JSON content type."""
    allowed_lower = {name.lower() for name in allowed} - _BLOCKED_HEADERS
    headers = {
        name: value
        for name, value in inbound.items()
        if name.lower() in allowed_lower
    }
    headers["Content-Type"] = "application/json"
    return headers


def passthrough_response_headers(response: httpx.Response) -> dict[str, str]:
    return {
        name: value
        for name, value in response.headers.items()
        if name.lower() not in _HOP_BY_HOP_RESPONSE_HEADERS
    }


class TargetRelay:
    """Sends one request to the target URL. No retries.

    The ``httpx.AsyncClient`` is owned by the application lifespan and shared
    across requests; its timeout is the only time limit applied.
    """

    def __init__(self, client: httpx.AsyncClient, target_url: str) -> None:
        self._client = client
        self._target_url = target_url

    async def deliver(
        self,
        method: str,
        headers: Mapping[str, str],
        content: bytes,
    ) -> httpx.Response:
        """Send the payload and return the target's response as received.

        Raises:
            RelayError: on any transport failure.
        """
        try:
            response = await self._client.request(
                method,
                self._target_url,
                headers=dict(headers),
                content=content,
            )
        except httpx.HTTPError as exc:
            logger.warning("Relay to %s failed: %s", self._target_url, exc)
            raise RelayError(str(exc) or exc.__class__.__name__) from exc

        logger.info(
            "Relayed event to %s (status=%s)",
            self._target_url,
            response.status_code,
        )
        return response

    async def deliver_unless_disconnected(
        self,
        method: str,
        headers: Mapping[str, str],
        content: bytes,
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> httpx.Response:
        """Like :meth:`deliver`, but abandon the call if the caller goes away."""
        task = asyncio.create_task(self.deliver(method, headers, content))
        try:
            while True:
                done, _ = await asyncio.wait({task}, timeout=_DISCONNECT_POLL_SECONDS)
                if done:
                    return task.result()
                if await is_disconnected():
                    task.cancel()
                    logger.info("Caller disconnected, abandoning relay to %s", self._target_url)
                    raise RelayError("the inbound delivery was cancelled by the caller")
        finally:
            if not task.done():
                task.cancel()
