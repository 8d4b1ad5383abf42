"""Failure-tolerant JSON serialization for outbound payloads."""

import json
from typing import Any

CIRCULAR = "[Circular]"
UNSERIALIZABLE = "[Unserializable]"


def _key(key: Any) -> Any:
    if key is None or isinstance(key, (str, int, float, bool)):
        return key
    return str(key)


def _default(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return UNSERIALIZABLE


def _decycle(value: Any, ancestors: set[int]) -> Any:
    # Only references back to an ancestor are cycles; shared siblings are kept.
    if not isinstance(value, (dict, list, tuple)):
        return value

    marker = id(value)
    if marker in ancestors:
        return CIRCULAR

    ancestors.add(marker)
    try:
        if isinstance(value, dict):
            return {_key(k): _decycle(v, ancestors) for k, v in value.items()}
        return [_decycle(v, ancestors) for v in value]
    finally:
        ancestors.discard(marker)


def safe_dumps(value: Any, indent: int | None = None) -> str:
    """Serialize ``value`` to JSON without ever raising.

    Cyclic references are replaced with ``"[Circular]"`` and objects JSON
    cannot encode are rendered with ``str()``. Without ``indent`` the output
    is compact (no whitespace between tokens).
    """
    separators = (",", ": ") if indent is not None else (",", ":")
    try:
        return json.dumps(
            _decycle(value, set()),
            indent=indent,
            separators=separators,
            ensure_ascii=False,
            default=_default,
        )
    except (TypeError, ValueError, RecursionError):
        return json.dumps(UNSERIALIZABLE)


def code_format(text: str) -> str:
    """Wrap text in a fixed-width code block."""
    return f"```\n{text}\n```"
