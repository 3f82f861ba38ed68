"""
Link codec: packs level text into a short URL-safe token and back.

Token layout (version 1):

    v1.<payload>

where <payload> is the zlib-compressed UTF-8 text, base64url encoded with the
padding stripped. The version tag selects the decoder, so tokens shared by
older releases keep working when the encoding changes.
"""

from __future__ import annotations

import base64
import binascii
import logging
import zlib
from typing import Callable
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from level_types import LevelCodecError
from levels import DEFAULT_LEVEL

__all__ = [
    "compress",
    "decompress",
    "load_shared_level",
    "share_link",
    "token_from_link",
    "LINK_PARAM",
    "MAX_DECOMPRESSED_SIZE",
]

logger = logging.getLogger(__name__)

_VERSION_LATEST = "v1"
_VERSION_SEPARATOR = "."

LINK_PARAM = "level"
MAX_DECOMPRESSED_SIZE = 1 << 20


def compress(text: str) -> str:
    """Encode level text as a link token."""
    try:
        raw = text.encode("utf-8")
    except UnicodeEncodeError as e:
        raise LevelCodecError(f"Level text cannot be encoded: {e}") from e

    packed = zlib.compress(raw, 9)
    payload = base64.urlsafe_b64encode(packed).rstrip(b"=").decode("ascii")
    token = f"{_VERSION_LATEST}{_VERSION_SEPARATOR}{payload}"

    logger.info("compress: %d chars -> %d char token", len(text), len(token))
    return token


def decompress(token: str) -> str:
    """
    Decode a link token back to the exact level text.

    Raises:
        LevelCodecError: If the token is malformed, truncated or corrupted
    """
    version, separator, payload = token.strip().partition(_VERSION_SEPARATOR)
    if not separator:
        raise LevelCodecError("Invalid link token: missing version tag")

    decoder = _DECODERS.get(version)
    if decoder is None:
        raise LevelCodecError(f"Unsupported link token version: '{version}'")

    return decoder(payload)


def _decode_v1(payload: str) -> str:
    try:
        padded = payload + "=" * (-len(payload) % 4)
        packed = base64.b64decode(padded, altchars=b"-_", validate=True)
    except (binascii.Error, ValueError) as e:
        raise LevelCodecError(f"Invalid link token payload: {e}") from e

    zobj = zlib.decompressobj()
    try:
        raw = zobj.decompress(packed, MAX_DECOMPRESSED_SIZE)
    except zlib.error as e:
        raise LevelCodecError(f"Corrupted link token: {e}") from e

    if zobj.unconsumed_tail:
        raise LevelCodecError(f"Link token expands beyond {MAX_DECOMPRESSED_SIZE} bytes")
    if not zobj.eof:
        raise LevelCodecError("Truncated link token")
    if zobj.unused_data:
        raise LevelCodecError("Unexpected data after the end of the link token")

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise LevelCodecError(f"Link token does not hold text: {e}") from e


_DECODERS: dict[str, Callable[[str], str]] = {
    "v1": _decode_v1,
}


def load_shared_level(token: str | None, default: str = DEFAULT_LEVEL) -> str:
    """
    Decode a shared level, falling back to `default`.

    A bad link must never stop the game from starting, so decoding errors are
    logged and replaced by the default level.
    """
    if not token:
        return default
    try:
        return decompress(token)
    except LevelCodecError as e:
        logger.warning("Could not load shared level, using default: %s", e)
        return default


def share_link(base_url: str, text: str) -> str:
    """Build a link to `base_url` carrying the level in its query string."""
    parts = urlsplit(base_url)
    query = parse_qs(parts.query, keep_blank_values=True)
    query[LINK_PARAM] = [compress(text)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def token_from_link(url: str) -> str | None:
    """The level token of a shared link, or None if it has none."""
    values = parse_qs(urlsplit(url).query).get(LINK_PARAM)
    return values[0] if values else None
