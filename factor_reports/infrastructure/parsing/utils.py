"""Shared parsing utilities for uploaded documents."""
from __future__ import annotations

import logging
import re
from decimal import Decimal, InvalidOperation
from io import BytesIO
from pathlib import Path

logger = logging.getLogger(__name__)

_ENCODING_DECLARATION = re.compile(rb"<\?xml\s+.*?encoding\s*=\s*[\"'](.*?)[\"']", re.IGNORECASE | re.DOTALL)
_LINE_BREAK = re.compile(r"\r?\n")

LEGACY_FALLBACK_ENCODING = "windows-1254"


def ensure_bytes(source: BytesIO | Path | bytes | str) -> bytes:
    if isinstance(source, bytes):
        return source
    if isinstance(source, BytesIO):
        return source.getvalue()
    if isinstance(source, (Path, str)):
        return Path(source).read_bytes()
    raise TypeError(f"Unsupported source type: {type(source)!r}")


def decode_text(data: bytes) -> str:
    """Decode uploaded bytes, honouring an XML encoding declaration when present."""
    match = _ENCODING_DECLARATION.search(data[:1024])
    declared = match.group(1).decode("latin-1").strip().lower() if match else None
    encoding = declared or "utf-8"
    try:
        return data.decode(encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        logger.warning("Failed to decode with %r: %s", encoding, exc)
    if declared is None:
        try:
            return data.decode(LEGACY_FALLBACK_ENCODING)
        except UnicodeDecodeError as exc:
            logger.error("Fallback to %r also failed; decoding with lossy UTF-8: %s", LEGACY_FALLBACK_ENCODING, exc)
    else:
        logger.warning("Declared encoding %r seems incorrect; falling back to lossy UTF-8", declared)
    return data.decode("utf-8", errors="replace")


def split_lines(text: str) -> list[str]:
    """Split report text on line feeds only; form feeds stay inside their line."""
    return _LINE_BREAK.split(text)


def parse_number(text: str | None) -> Decimal | None:
    """Lenient numeric field parse: ``None`` when empty, NaN when not a number."""
    if text is None:
        return None
    value = text.strip()
    if not value:
        return None
    try:
        number = Decimal(value)
    except InvalidOperation:
        number = Decimal("sNaN")
    if number.is_snan():
        logger.warning("Non-numeric value %r coerced to NaN", value)
        return Decimal("NaN")
    return number
