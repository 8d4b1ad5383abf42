"""Base class for notification channels."""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from slacklog.models.event import BaseEvent

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of a single delivery attempt."""

    channel: str
    ok: bool
    status_code: int | None = None
    error: str | None = None


CompletionCallback = Callable[[DeliveryResult], None]


class BaseChannel(ABC):
    """Abstract base class for notification channels.

    ``dispatch`` is fire-and-forget: it schedules one delivery per call and
    returns immediately. Outcomes are only reported through logging and the
    optional ``on_complete`` callback.
    """

    def __init__(self, on_complete: CompletionCallback | None = None):
        self._on_complete = on_complete
        self._in_flight: set[asyncio.Task[DeliveryResult]] = set()

    @property
    @abstractmethod
    def name(self) -> str:
        """Channel name for logging."""
        ...

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether the channel is enabled."""
        ...

    @abstractmethod
    async def send(self, event: BaseEvent) -> DeliveryResult:
        """Send one event to the channel."""
        ...

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    async def send_safe(self, event: BaseEvent) -> DeliveryResult:
        """Send an event, turning any failure into a failed result."""
        if not self.enabled:
            result = DeliveryResult(channel=self.name, ok=False, error="channel disabled")
        else:
            try:
                result = await self.send(event)
            except Exception as e:
                logger.exception(f"Failed to send {event.event} event to {self.name}: {e}")
                result = DeliveryResult(channel=self.name, ok=False, error=str(e))

        self._complete(result)
        return result

    def dispatch(self, event: BaseEvent) -> asyncio.Task[DeliveryResult]:
        """Start delivering an event without waiting for it.

        Must be called from a running event loop.
        """
        task = asyncio.get_running_loop().create_task(self.send_safe(event))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def drain(self) -> None:
        """Wait for every in-flight delivery to finish."""
        while self._in_flight:
            await asyncio.gather(*self._in_flight, return_exceptions=True)

    def _complete(self, result: DeliveryResult) -> None:
        if self._on_complete is None:
            return
        try:
            self._on_complete(result)
        except Exception as e:
            logger.exception(f"Completion callback failed for {self.name}: {e}")
