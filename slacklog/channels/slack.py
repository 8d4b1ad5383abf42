"""Slack incoming-webhook channel implementation."""

import logging
from typing import Any

import httpx

from slacklog.channels.base import BaseChannel, CompletionCallback, DeliveryResult
from slacklog.formatting import build_preamble, format_event
from slacklog.models.event import BaseEvent
from slacklog.models.reporters import ReporterConfig
from slacklog.serialize import safe_dumps

logger = logging.getLogger(__name__)


class SlackChannel(BaseChannel):
    """Slack incoming-webhook channel.

    Sends exactly one POST per event. Nothing is retried or queued; a failed
    delivery is logged and reported to ``on_complete``.
    """

    def __init__(
        self,
        config: ReporterConfig,
        on_complete: CompletionCallback | None = None,
        name: str = "slack",
        timeout: float = 30.0,
    ):
        super().__init__(on_complete)
        self._config = config
        self._name = name
        self._timeout = timeout

    @property
    def name(self) -> str:
        return self._name

    @property
    def enabled(self) -> bool:
        return bool(self._config.url)

    @property
    def config(self) -> ReporterConfig:
        return self._config

    def build_payload(self, event: BaseEvent) -> dict[str, Any]:
        content = format_event(event, self._config)

        if self._config.basic and content.keys() == {"text"}:
            payload = content
        else:
            attachment = {**build_preamble(event, self._config), **content}
            payload = {"attachments": [attachment]}

        # Static fields first: per-event fields win on collision.
        return {**self._config.slack, **payload}

    def serialize(self, event: BaseEvent) -> str:
        return safe_dumps(self.build_payload(event))

    async def send(self, event: BaseEvent) -> DeliveryResult:
        body = self.serialize(event)

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    self._config.url,
                    content=body,
                    headers={"Content-Type": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to deliver {event.event} event to {self.name}: {e}")
            return DeliveryResult(channel=self.name, ok=False, error=str(e))

        if response.is_success:
            logger.debug(f"Delivered {event.event} event to {self.name}")
            return DeliveryResult(channel=self.name, ok=True, status_code=response.status_code)

        logger.warning(
            f"{self.name} returned status {response.status_code}: {response.text[:200]}"
        )
        return DeliveryResult(
            channel=self.name,
            ok=False,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )
