"""Base class for event source parsers."""

from abc import ABC, abstractmethod
from typing import Any

from slacklog.models.event import Event


class BaseSource(ABC):
    """Abstract base class for event source parsers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name identifier."""
        ...

    @abstractmethod
    def parse(self, payload: dict[str, Any]) -> Event:
        """Parse a raw event record into a typed event."""
        ...
