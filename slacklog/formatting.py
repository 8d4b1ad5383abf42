"""Event to Slack message formatting.

Every function here is pure: the output depends only on the event and the
reporter configuration, never on the clock or on previous events.
"""

import math
import re
from datetime import datetime, timezone
from typing import Any

from slacklog.models.event import (
    BaseEvent,
    ErrorEvent,
    LogEvent,
    OpsEvent,
    RequestEvent,
    ResponseEvent,
)
from slacklog.models.reporters import ReporterConfig
from slacklog.serialize import code_format, safe_dumps

MEBIBYTE = 1024 * 1024

MRKDWN_IN = ["pretext", "text", "fields"]

# "%f" directives and escaped "%%" pairs, scanned left to right.
_MILLIS_DIRECTIVE = re.compile(r"%[%f]")


def format_timestamp(timestamp: datetime, fmt: str) -> str:
    """Render a timestamp in UTC; ``%f`` yields milliseconds."""
    timestamp = timestamp.astimezone(timezone.utc)
    millis = f"{timestamp.microsecond // 1000:03d}"
    fmt = _MILLIS_DIRECTIVE.sub(lambda m: millis if m.group() == "%f" else "%%", fmt)
    return timestamp.strftime(fmt)


def _render_data(data: Any) -> tuple[Any, str]:
    """Return (field value, fallback text) for a request/log payload."""
    if data is None:
        return None, ""
    if isinstance(data, str):
        return data, data
    return code_format(safe_dumps(data, indent=2)), safe_dumps(data)


def build_preamble(event: BaseEvent, config: ReporterConfig) -> dict[str, Any]:
    time = format_timestamp(event.timestamp, config.format)
    return {
        "pretext": f"`{event.event}` event from *{config.host}* at {time}",
        "mrkdwn_in": list(MRKDWN_IN),
    }


def format_ops(event: OpsEvent) -> dict[str, Any]:
    memory = f"{math.floor(event.proc.mem.rss / MEBIBYTE + 0.5)} Mb."
    load = [f"{value:.2f}" for value in event.os.load]
    uptime = event.proc.uptime

    return {
        "fallback": f"L: {load[1]} | M: {memory} | U: {uptime}",
        "fields": [
            {"title": "Memory", "value": memory, "short": True},
            {"title": "Uptime (seconds)", "value": uptime, "short": True},
            {"title": "Load", "value": " | ".join(load), "short": True},
        ],
    }


def format_response(event: ResponseEvent) -> dict[str, Any]:
    method = event.method.upper()
    query = safe_dumps(event.query)

    return {
        "fallback": f"{event.status_code} {method} {event.path}",
        "color": "danger" if event.status_code >= 400 else "good",
        "text": (
            f"*{method}* {event.path} {query} {event.status_code} "
            f"({event.response_time}ms)"
        ),
    }


def format_error(event: ErrorEvent) -> dict[str, Any]:
    message = f"{event.error.name}: {event.error.message}"

    return {
        "fallback": message,
        "color": "danger",
        "text": f"*{event.method.upper()}* {event.request_path}",
        "fields": [
            {"title": "Error", "value": message},
            {"title": "Stack", "value": code_format(event.error.stack)},
        ],
    }


def format_request(event: RequestEvent) -> dict[str, Any]:
    tags = ", ".join(event.tags)
    data, data_fallback = _render_data(event.data)

    content: dict[str, Any] = {"fallback": f"{tags} {data_fallback}"}
    if "error" in event.tags:
        content["color"] = "danger"
    content["text"] = f"*{event.method.upper()}* {event.path}"
    content["fields"] = [
        {"title": "PID", "value": event.pid},
        {"title": "Request ID", "value": event.request_id},
        {"title": "Tags", "value": tags},
        {"title": "Data", "value": data},
    ]
    return content


def format_log(event: LogEvent, basic: bool = False) -> dict[str, Any]:
    data, data_fallback = _render_data(event.data)

    # Basic mode: plain text only, no attachment. Without data there is no
    # text to send, so the event keeps its attachment.
    if basic and data_fallback:
        return {"text": data_fallback}

    tags = ",".join(event.tags)
    return {
        "fallback": f"{tags} {data_fallback}".strip(),
        "fields": [
            {"title": "Tags", "value": tags},
            {"title": "Data", "value": data},
        ],
    }


def format_event(event: BaseEvent, config: ReporterConfig) -> dict[str, Any]:
    """Map an event to notification content for the given reporter."""
    match event:
        case OpsEvent():
            return format_ops(event)
        case ResponseEvent():
            return format_response(event)
        case ErrorEvent():
            return format_error(event)
        case RequestEvent():
            return format_request(event)
        case LogEvent():
            return format_log(event, basic=config.basic)
        case _:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")
