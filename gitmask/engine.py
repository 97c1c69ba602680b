"""
Content transformation: token substitution.

This module performs the actual clean/smudge rewriting of file content.
It is intentionally dumb about where the mapping comes from and about
which files get filtered; the caller decides both.

Substitution is literal. Entries run in declaration order and each one
sees the output of the previous entry, so the order of a Mapping is part
of its meaning.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from collections.abc import Mapping as MappingType
from typing import BinaryIO, Dict, Iterable, Iterator, Tuple, Union

from .config import DEFAULT_ENCODING
from .utils import check_encoding, decode_lossless, encode_lossless, read_all, write_all


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class GitmaskError(Exception):
    """Base class for all gitmask errors."""


class InvalidDirection(GitmaskError, ValueError):
    """Direction argument is missing or is not 'clean' / 'smudge'."""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid direction: {value!r} (expected 'clean' or 'smudge')")


class InvalidMapping(GitmaskError, ValueError):
    """Mapping entries violate uniqueness or disjointness."""


# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------


class Direction(str, Enum):
    CLEAN = "clean"
    SMUDGE = "smudge"

    @classmethod
    def parse(cls, value: Union["Direction", str, None]) -> "Direction":
        """
        Resolve a direction argument.

        Only the exact literals "clean" and "smudge" are accepted.

        Raises:
            InvalidDirection: for anything else, including None
        """

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise InvalidDirection(value)


@dataclass(frozen=True)
class MappingEntry:
    plaintext: str
    obfuscated: str

    def search_and_replacement(self, direction: Direction) -> Tuple[str, str]:
        if direction is Direction.CLEAN:
            return self.plaintext, self.obfuscated
        return self.obfuscated, self.plaintext


@dataclass(frozen=True)
class Mapping:
    """
    Ordered, immutable collection of MappingEntry.

    Invariants checked on construction:
    - every token is a non-empty string
    - plaintext tokens are unique
    - obfuscated tokens are unique
    - no plaintext token equals any obfuscated token
    """

    entries: Tuple[MappingEntry, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable but store a tuple
        object.__setattr__(self, "entries", tuple(self.entries))
        self._validate()

    # ------------------------------------------------------------------
    # Construction API
    # ------------------------------------------------------------------

    @classmethod
    def from_pairs(
        cls,
        pairs: Union[MappingType[str, str], Iterable[Tuple[str, str]]],
    ) -> "Mapping":
        """
        Build a mapping from (plaintext, obfuscated) pairs or a dict.

        Dict insertion order becomes substitution order.
        """

        if isinstance(pairs, MappingType):
            pairs = pairs.items()

        entries = []
        for pair in pairs:
            try:
                plaintext, obfuscated = pair
            except (TypeError, ValueError):
                raise InvalidMapping(f"Mapping entry must be a pair, got {pair!r}")
            entries.append(MappingEntry(plaintext=plaintext, obfuscated=obfuscated))

        return cls(tuple(entries))

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _validate(self) -> None:
        seen_plain: Dict[str, int] = {}
        seen_obf: Dict[str, int] = {}

        for idx, entry in enumerate(self.entries):
            if not isinstance(entry, MappingEntry):
                raise InvalidMapping(f"Entry #{idx} is not a MappingEntry: {entry!r}")

            for side in ("plaintext", "obfuscated"):
                token = getattr(entry, side)
                if not isinstance(token, str) or not token:
                    raise InvalidMapping(
                        f"Entry #{idx}: {side} must be a non-empty string, got {token!r}"
                    )

            if entry.plaintext in seen_plain:
                raise InvalidMapping(
                    f"Duplicate plaintext {entry.plaintext!r} "
                    f"(entries #{seen_plain[entry.plaintext]} and #{idx})"
                )
            if entry.obfuscated in seen_obf:
                raise InvalidMapping(
                    f"Duplicate obfuscated token {entry.obfuscated!r} "
                    f"(entries #{seen_obf[entry.obfuscated]} and #{idx})"
                )

            seen_plain[entry.plaintext] = idx
            seen_obf[entry.obfuscated] = idx

        overlap = set(seen_plain) & set(seen_obf)
        if overlap:
            raise InvalidMapping(
                "Tokens used as both plaintext and obfuscated: "
                + ", ".join(repr(t) for t in sorted(overlap))
            )

    # ------------------------------------------------------------------
    # Public helpers
    # ------------------------------------------------------------------

    def pairs(self, direction: Union[Direction, str]) -> Iterator[Tuple[str, str]]:
        """Yield (search, replacement) for each entry in declaration order."""

        direction = Direction.parse(direction)
        for entry in self.entries:
            yield entry.search_and_replacement(direction)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[MappingEntry]:
        return iter(self.entries)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def transform(text: str, direction: Union[Direction, str, None], mapping: Mapping) -> str:
    """
    Apply every mapping entry to ``text`` in the given direction.

    Each entry replaces all non-overlapping occurrences, left to right,
    of its search token in the output of the previous entry.

    Raises:
        InvalidDirection: before any substitution, if direction is invalid
    """

    direction = Direction.parse(direction)

    for search, replacement in mapping.pairs(direction):
        text = text.replace(search, replacement)

    return text


def count_occurrences(
    text: str,
    direction: Union[Direction, str, None],
    mapping: Mapping,
) -> Tuple[int, ...]:
    """
    Return how many replacements each entry makes when ``text`` is
    transformed, in entry order.

    Counts are positional so that diagnostics never echo the tokens.
    """

    direction = Direction.parse(direction)
    counts = []

    for search, replacement in mapping.pairs(direction):
        counts.append(text.count(search))
        text = text.replace(search, replacement)

    return tuple(counts)


def transform_bytes(
    data: bytes,
    direction: Union[Direction, str, None],
    mapping: Mapping,
    encoding: str = DEFAULT_ENCODING,
) -> bytes:
    """
    Byte-level variant of transform().

    Bytes that do not decode under ``encoding`` pass through unchanged.

    Raises:
        LookupError: if ``encoding`` is not a text encoding
        ValueError: if ``encoding`` writes a BOM or is not ASCII-compatible
    """

    direction = Direction.parse(direction)
    encoding = check_encoding(encoding)
    text = decode_lossless(data, encoding)
    return encode_lossless(transform(text, direction, mapping), encoding)


def transform_stream(
    source: BinaryIO,
    sink: BinaryIO,
    direction: Union[Direction, str, None],
    mapping: Mapping,
    encoding: str = DEFAULT_ENCODING,
) -> int:
    """
    Read all of ``source``, transform it, and write the full result to ``sink``.

    Nothing is read or written when the direction is invalid.

    Returns:
        int: number of bytes written
    """

    direction = Direction.parse(direction)
    output = transform_bytes(read_all(source), direction, mapping, encoding)
    return write_all(sink, output)
