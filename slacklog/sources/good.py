"""Parser for hapi good process events."""

from typing import Any

from slacklog.models.event import (
    BaseEvent,
    ErrorEvent,
    Event,
    LogEvent,
    OpsEvent,
    RequestEvent,
    ResponseEvent,
)
from slacklog.sources.base import BaseSource

EVENT_MODELS: dict[str, type[BaseEvent]] = {
    "ops": OpsEvent,
    "response": ResponseEvent,
    "request": RequestEvent,
    "error": ErrorEvent,
}


class GoodSource(BaseSource):
    """Parser for ``ops``/``response``/``request``/``error``/``log`` records.

    Kinds without a dedicated model are parsed as generic log events.
    """

    @property
    def name(self) -> str:
        return "good"

    def parse(self, payload: dict[str, Any]) -> Event:
        kind = payload.get("event")
        if not isinstance(kind, str) or not kind:
            raise ValueError("Event record has no 'event' kind")

        model = EVENT_MODELS.get(kind, LogEvent)
        return model.model_validate(payload)
