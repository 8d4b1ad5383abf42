"""Typed process events.

Each inbound record carries an ``event`` discriminator naming its kind.
``ops``, ``response``, ``request`` and ``error`` have dedicated models;
every other kind is treated as a generic log record.
"""

from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BaseEvent(BaseModel):
    """Fields shared by every event kind."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    event: str = Field(description="Event kind discriminator")
    timestamp: datetime = Field(description="When the event was observed")

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


def _integral(value: Any) -> Any:
    # 150.0 from a float-only producer renders as 150.
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class ProcMemory(BaseModel):
    model_config = ConfigDict(extra="allow")

    rss: int


class ProcStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    uptime: int | float
    mem: ProcMemory

    @field_validator("uptime")
    @classmethod
    def _uptime_integral(cls, value: int | float) -> int | float:
        return _integral(value)


class OsStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    load: tuple[float, float, float] = Field(description="1, 5 and 15 minute load averages")


class OpsEvent(BaseEvent):
    """Periodic process and OS metrics snapshot."""

    event: Literal["ops"] = "ops"
    proc: ProcStats
    os: OsStats


class ResponseEvent(BaseEvent):
    """A completed HTTP request/response exchange."""

    event: Literal["response"] = "response"
    method: str
    path: str
    query: dict[str, Any] = Field(default_factory=dict)
    status_code: int = Field(alias="statusCode")
    response_time: int | float = Field(alias="responseTime", description="Milliseconds")

    @field_validator("query", mode="before")
    @classmethod
    def _query_default(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("response_time")
    @classmethod
    def _response_time_integral(cls, value: int | float) -> int | float:
        return _integral(value)


class RequestEvent(BaseEvent):
    """A log line emitted while handling a specific request."""

    event: Literal["request"] = "request"
    method: str
    path: str
    tags: list[str] = Field(default_factory=list)
    data: Any = None
    pid: Any = None
    request_id: Any = Field(default=None, alias="id")

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value


class RequestUrl(BaseModel):
    model_config = ConfigDict(extra="allow")

    pathname: str | None = None
    path: str | None = None


class ErrorInfo(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = "Error"
    message: str = ""
    stack: str = ""


class ErrorEvent(BaseEvent):
    """An unhandled error raised while serving a request."""

    event: Literal["error"] = "error"
    method: str
    url: RequestUrl
    error: ErrorInfo

    @property
    def request_path(self) -> str:
        return self.url.path or self.url.pathname or ""


class LogEvent(BaseEvent):
    """A free-form log record of any other kind."""

    tags: list[str] = Field(default_factory=list)
    data: Any = None

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else value


Event = OpsEvent | ResponseEvent | RequestEvent | ErrorEvent | LogEvent
