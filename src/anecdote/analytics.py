"""Analytics sinks - fire-and-forget event tracking."""

import asyncio
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any

import httpx

from anecdote.config import Settings, get_settings

logger = logging.getLogger(__name__)

GA_COLLECT_URL = "https://www.google-analytics.com/mp/collect"


class AnalyticsSink(ABC):
    """Write-only event sink. Implementations must never raise into callers."""

    @abstractmethod
    def track(self, event_name: str, params: dict[str, Any] | None = None) -> None:
        ...


class NullAnalytics(AnalyticsSink):
    """Discards events."""

    def track(self, event_name: str, params: dict[str, Any] | None = None) -> None:
        return None


class LoggingAnalytics(AnalyticsSink):
    """Debug-logs events when no analytics backend is configured."""

    def track(self, event_name: str, params: dict[str, Any] | None = None) -> None:
        logger.debug("[Analytics] %s %s", event_name, params or {})


class GoogleAnalyticsSink(AnalyticsSink):
    """GA4 Measurement Protocol. Sends in a background task on the running loop."""

    def __init__(
        self,
        *,
        measurement_id: str,
        api_secret: str,
        client_id: str | None = None,
    ) -> None:
        self._measurement_id = measurement_id
        self._api_secret = api_secret
        self._client_id = client_id or uuid.uuid4().hex
        self._pending: set[asyncio.Task] = set()

    def track(self, event_name: str, params: dict[str, Any] | None = None) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No event loop, dropping analytics event %s", event_name)
            return
        task = loop.create_task(self._send(event_name, params or {}))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send(self, event_name: str, params: dict[str, Any]) -> None:
        payload = {
            "client_id": self._client_id,
            "events": [{"name": event_name, "params": params}],
        }
        query = {"measurement_id": self._measurement_id, "api_secret": self._api_secret}
        try:
            async with httpx.AsyncClient() as client:
                resp = await client.post(GA_COLLECT_URL, params=query, json=payload, timeout=10.0)
            if resp.status_code >= 400:
                logger.warning("Analytics send failed: %s %s", resp.status_code, resp.text[:200])
        except httpx.HTTPError as e:
            logger.warning("Analytics send error for %s: %s", event_name, e)


def create_analytics(settings: Settings | None = None) -> AnalyticsSink:
    """GA sink when configured, debug logging otherwise."""
    settings = settings or get_settings()
    if settings.ga_measurement_id and settings.ga_api_secret:
        return GoogleAnalyticsSink(
            measurement_id=settings.ga_measurement_id,
            api_secret=settings.ga_api_secret,
        )
    return LoggingAnalytics()
