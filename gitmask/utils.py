"""
Shared utility helpers.

This module contains small, reusable helpers that do not belong
to substitution logic, manifest handling, or CLI orchestration.
"""

from __future__ import annotations

import codecs
from typing import BinaryIO

# Undecodable bytes map to lone surrogates and back, so nothing is lost.
LOSSLESS_ERRORS = "surrogateescape"

ASCII_SAMPLE = "key=value\n"


# ---------------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------------


def check_encoding(encoding: str) -> str:
    """
    Return the canonical codec name for ``encoding``.

    Only ASCII-compatible text codecs that add nothing of their own
    (no byte-order mark) are accepted, so unmatched bytes pass through
    unchanged.

    Raises:
        LookupError: if the codec is unknown or is not a text encoding
        ValueError: if the codec writes a BOM or is not ASCII-compatible
    """
    name = codecs.lookup(encoding).name

    # bytes-to-bytes codecs (hex, rot13, base64) raise LookupError here
    if b"".decode(name) != "" or "".encode(name) != b"":
        raise ValueError(f"Encoding {encoding} writes a byte-order mark")
    if ASCII_SAMPLE.encode(name) != ASCII_SAMPLE.encode("ascii"):
        raise ValueError(f"Encoding {encoding} is not ASCII-compatible")

    return name


def decode_lossless(data: bytes, encoding: str) -> str:
    """Decode bytes so that any byte sequence survives a round trip."""
    return data.decode(encoding, errors=LOSSLESS_ERRORS)


def encode_lossless(text: str, encoding: str) -> bytes:
    """Inverse of decode_lossless()."""
    return text.encode(encoding, errors=LOSSLESS_ERRORS)


# ---------------------------------------------------------------------------
# Stream helpers
# ---------------------------------------------------------------------------


def read_all(stream: BinaryIO) -> bytes:
    """Read a binary stream to EOF."""
    return stream.read()


def write_all(stream: BinaryIO, data: bytes) -> int:
    """Write all of ``data`` to a binary stream and flush it."""
    stream.write(data)
    stream.flush()
    return len(data)
