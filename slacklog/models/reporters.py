"""Reporter configuration models."""

import socket
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    StrictStr,
    field_serializer,
    field_validator,
)

from slacklog.models.event import BaseEvent

# Resolved once per process; every reporter without an explicit host shares it.
HOSTNAME = socket.gethostname()

DEFAULT_TIME_FORMAT = "%y%m%d/%H%M%S.%f"

WILDCARD = "*"


class EventFilter(RootModel[dict[str, str | list[str]]]):
    """Event subscription: kind -> ``"*"``, a tag, or a list of tags.

    An empty filter accepts every event.
    """

    root: dict[str, str | list[str]] = Field(default_factory=dict)

    def matches(self, event: BaseEvent) -> bool:
        if not self.root:
            return True
        if event.event not in self.root:
            return False

        wanted = self.root[event.event]
        if isinstance(wanted, str):
            if wanted == WILDCARD:
                return True
            wanted = [wanted]
        if not wanted:
            return True

        tags = getattr(event, "tags", None) or []
        return any(tag in tags for tag in wanted)


class ReporterConfig(BaseModel):
    """Slack webhook settings for a single reporter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: StrictStr = Field(min_length=1, description="Slack incoming webhook URL")
    slack: Mapping[str, Any] = Field(
        default_factory=dict,
        validate_default=True,
        description="Static fields merged into every payload (channel, username, ...)",
    )
    format: str = Field(
        default=DEFAULT_TIME_FORMAT,
        description="strftime pattern for event timestamps; %f renders milliseconds",
    )
    host: str = Field(default=HOSTNAME, description="Origin label shown in the pretext")
    basic: bool = Field(default=False, description="Send generic log events as plain text")

    @field_validator("slack")
    @classmethod
    def _read_only_slack(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("slack")
    def _dump_slack(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)


class Reporter(BaseModel):
    """A named reporter: which events to take and where to send them."""

    name: str = ""
    events: EventFilter = Field(default_factory=EventFilter)
    slack: ReporterConfig

    def matches(self, event: BaseEvent) -> bool:
        return self.events.matches(event)


class ReportersConfig(BaseModel):
    """Complete reporters configuration."""

    reporters: list[Reporter] = Field(default_factory=list)
