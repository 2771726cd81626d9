"""
Strict payload parsing helpers.

MQTT payloads arrive as raw bytes. These helpers decode them strictly:
anything that is not exactly a recognised token raises PayloadError so the
caller can log and drop the message.
"""

from __future__ import annotations

import math

from thermostat.domain.exceptions import PayloadError

_TRUE_TOKENS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_TOKENS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def decode_text(payload: bytes) -> str:
    """Decode a UTF-8 payload."""
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as e:
        raise PayloadError(f"payload is not valid UTF-8: {e}", payload=payload) from None


def parse_bool(payload: bytes) -> bool:
    """Parse a boolean payload such as ``true`` or ``0``."""
    text = decode_text(payload)
    if text in _TRUE_TOKENS:
        return True
    if text in _FALSE_TOKENS:
        return False
    raise PayloadError(f"invalid boolean: {text!r}", payload=payload)


def parse_float(payload: bytes) -> float:
    """Parse a finite decimal float payload such as ``21.5``."""
    text = decode_text(payload)
    if not text or text != text.strip() or "_" in text:
        raise PayloadError(f"invalid float: {text!r}", payload=payload)
    try:
        value = float(text)
    except ValueError:
        raise PayloadError(f"invalid float: {text!r}", payload=payload) from None
    if not math.isfinite(value):
        raise PayloadError(f"non-finite float: {text!r}", payload=payload)
    return value
