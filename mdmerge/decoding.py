"""Byte decoding and newline normalization for Markdown sources."""

from __future__ import annotations

import logging

LOGGER = logging.getLogger(__name__)

# Tried in order. The last entry decodes with ``errors="replace"`` so it
# cannot fail: undecodable bytes become U+FFFD.
#
#   encoding  errors     role
#   utf-8     strict     modern files; a BOM is kept as U+FEFF
#   cp932     replace    legacy Japanese (Windows Shift-JIS) files
DECODE_FALLBACKS: tuple[tuple[str, str], ...] = (
    ("utf-8", "strict"),
    ("cp932", "replace"),
)


def _attempt(raw: bytes, encoding: str, errors: str) -> str | None:
    try:
        return raw.decode(encoding, errors)
    except UnicodeDecodeError:
        return None


def decode(raw: bytes) -> str:
    """Decode ``raw`` using :data:`DECODE_FALLBACKS`; never raises."""

    for encoding, errors in DECODE_FALLBACKS:
        text = _attempt(raw, encoding, errors)
        if text is not None:
            if encoding != DECODE_FALLBACKS[0][0]:
                LOGGER.debug("Decoded %d bytes with fallback encoding %s", len(raw), encoding)
            return text
    raise AssertionError("last fallback decoder must not fail")  # pragma: no cover


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def decode_markdown(raw: bytes) -> str:
    """Decode and normalize one source so it only carries ``\\n`` line endings."""

    return normalize_newlines(decode(raw))
