"""Event routing to reporters based on kind and tags."""

import asyncio
import logging
from collections.abc import AsyncIterable, Iterable
from pathlib import Path
from typing import Any

import yaml

from slacklog.channels.base import BaseChannel, CompletionCallback, DeliveryResult
from slacklog.channels.slack import SlackChannel
from slacklog.models.event import BaseEvent
from slacklog.models.reporters import Reporter, ReportersConfig
from slacklog.sources.base import BaseSource

logger = logging.getLogger(__name__)


def load_reporters_config(config_path: str | Path) -> ReportersConfig:
    """Load reporters configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Reporters config not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    return ReportersConfig.model_validate(data)


class EventRouter:
    """Fans each event out to every reporter whose filter accepts it."""

    def __init__(
        self,
        config: ReportersConfig,
        on_complete: CompletionCallback | None = None,
    ):
        self._config = config
        self._channels: list[tuple[Reporter, BaseChannel]] = []

        for i, reporter in enumerate(config.reporters):
            name = reporter.name or f"reporter_{i}"
            channel = SlackChannel(reporter.slack, on_complete=on_complete, name=name)
            self._channels.append((reporter, channel))

        logger.info(f"Router initialized with {len(self._channels)} reporter(s)")

    @property
    def reporters(self) -> list[Reporter]:
        return self._config.reporters

    @property
    def channels(self) -> list[BaseChannel]:
        return [channel for _, channel in self._channels]

    def route_event(self, event: BaseEvent) -> list[asyncio.Task[DeliveryResult]]:
        """Dispatch one event to every matching reporter without waiting."""
        tasks = [
            channel.dispatch(event)
            for reporter, channel in self._channels
            if reporter.matches(event)
        ]

        if not tasks:
            logger.debug(f"No reporter accepts {event.event} event, discarded")
        return tasks

    def route_record(self, source: BaseSource, record: dict[str, Any]) -> int:
        """Parse and route a raw record; returns the number of dispatches."""
        event = source.parse(record)
        return len(self.route_event(event))

    async def consume(
        self,
        records: Iterable[dict[str, Any]] | AsyncIterable[dict[str, Any]],
        source: BaseSource,
    ) -> int:
        """Route every record of a stream in arrival order.

        A record that cannot be parsed is logged and skipped. Returns the
        total number of dispatches issued.
        """
        dispatched = 0

        if isinstance(records, AsyncIterable):
            async for record in records:
                dispatched += self._route_logged(source, record)
        else:
            for record in records:
                dispatched += self._route_logged(source, record)
                # Let in-flight sends progress between records.
                await asyncio.sleep(0)

        return dispatched

    async def drain(self) -> None:
        """Wait for all in-flight deliveries across reporters."""
        await asyncio.gather(*(channel.drain() for channel in self.channels))

    def _route_logged(self, source: BaseSource, record: dict[str, Any]) -> int:
        try:
            return self.route_record(source, record)
        except Exception as e:
            logger.exception(f"Failed to route {source.name} record: {e}")
            return 0
