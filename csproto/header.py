"""Headers of the 1.0 protocol: their kinds, values and wire encoding."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from csproto.codes import Control
from csproto.errors import ParseError, ParseErrorId
from csproto.parser import AsyncParser, Parser
from csproto.version import Version

__all__ = ["HeaderKind", "Header", "HeaderValue"]

HeaderValue = Union[int, str, bool]

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


class HeaderKind(Enum):
    """The kind of a header; the value is the byte that announces it."""

    SERVER = 32
    LENGTH = 33
    IDENTITY = 34
    CLIENT = 35
    UPDATE = 36
    ID = 37
    RECONNECT = 38
    COMPRESSED = 39

    @classmethod
    def from_byte(cls, byte: int) -> Optional["HeaderKind"]:
        """Return the kind announced by ``byte``, or None if it is unknown."""
        try:
            return cls(byte)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: object) -> Optional["HeaderKind"]:
        """Return the kind named ``name`` case-insensitively, or None."""
        wanted = str(name).lower()
        return next((kind for kind in cls if str(kind) == wanted), None)

    def __str__(self) -> str:
        return self.name.lower()


_U32_KINDS = frozenset({HeaderKind.SERVER})
_U64_KINDS = frozenset({HeaderKind.LENGTH, HeaderKind.ID})
_STR_KINDS = frozenset({HeaderKind.IDENTITY, HeaderKind.CLIENT})
_BOOL_KINDS = frozenset(
    {HeaderKind.UPDATE, HeaderKind.RECONNECT, HeaderKind.COMPRESSED}
)


def _default_value(kind: HeaderKind) -> HeaderValue:
    if kind in _STR_KINDS:
        return ""
    if kind in _BOOL_KINDS:
        return False
    return 0


@dataclass(frozen=True)
class Header:
    """A header of a packet: its kind and the value it carries."""

    kind: HeaderKind
    value: HeaderValue = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.value is None:
            object.__setattr__(self, "value", _default_value(self.kind))
        value = self.value
        if self.kind in _BOOL_KINDS:
            if not isinstance(value, bool):
                raise TypeError(f"header {self.kind} takes a bool, got {value!r}")
        elif self.kind in _STR_KINDS:
            if not isinstance(value, str):
                raise TypeError(f"header {self.kind} takes a str, got {value!r}")
        else:
            if isinstance(value, bool) or not isinstance(value, int):
                raise TypeError(f"header {self.kind} takes an int, got {value!r}")
            bits = 32 if self.kind in _U32_KINDS else 64
            if not 0 <= value < (1 << bits):
                raise ValueError(
                    f"header {self.kind} takes an unsigned {bits}-bit int, "
                    f"got {value!r}"
                )

    @classmethod
    def from_name(cls, name: object) -> Optional["Header"]:
        """Return a header with a default value for the kind named ``name``."""
        kind = HeaderKind.from_name(name)
        return None if kind is None else cls(kind)

    @classmethod
    def from_byte(cls, byte: int) -> Optional["Header"]:
        """Return a header with a default value for the kind announced by ``byte``."""
        kind = HeaderKind.from_byte(byte)
        return None if kind is None else cls(kind)

    def matches(self, other: "Header") -> bool:
        """Tell whether ``other`` is of the same kind, regardless of value."""
        return self.kind is other.kind

    def version(self) -> Version:
        """Return the protocol version this header belongs to."""
        return Version.V10

    def name(self) -> str:
        """Return the lower-case name of this header's kind."""
        return str(self.kind)

    def to_byte(self) -> int:
        """Return the byte that announces this header's kind."""
        return self.kind.value

    def to_bytes(self) -> bytes:
        """Encode the header and its value; a false flag encodes to nothing."""
        tag = bytes([self.to_byte()])
        if self.kind in _STR_KINDS:
            return (
                tag
                + bytes([Control.STRING_START.to_byte()])
                + str(self.value).encode("utf-8")
                + bytes([Control.STRING_END.to_byte()])
            )
        if self.kind in _U32_KINDS:
            return tag + _U32.pack(self.value)
        if self.kind in _U64_KINDS:
            return tag + _U64.pack(self.value)
        return tag if self.value else b""

    @staticmethod
    def _kind_at(byte: int, pos: int) -> HeaderKind:
        kind = HeaderKind.from_byte(byte)
        if kind is None:
            error = ParseError(ParseErrorId.UKWN_HEADER, pos)
            error.set_desc("{1}", f"{byte:03}")
            raise error
        return kind

    @classmethod
    def from_parser(cls, parser: Parser) -> "Header":
        """Read one header and its value from a blocking parser."""
        kind = cls._kind_at(parser.read_byte(), parser.pos())
        if kind in _U32_KINDS:
            return cls(kind, parser.read_u32())
        if kind in _U64_KINDS:
            return cls(kind, parser.read_u64())
        if kind in _STR_KINDS:
            return cls(kind, parser.read_string())
        return cls(kind, True)

    @classmethod
    async def from_parser_async(cls, parser: AsyncParser) -> "Header":
        """Read one header and its value from an asynchronous parser."""
        kind = cls._kind_at(await parser.read_byte(), parser.pos())
        if kind in _U32_KINDS:
            return cls(kind, await parser.read_u32())
        if kind in _U64_KINDS:
            return cls(kind, await parser.read_u64())
        if kind in _STR_KINDS:
            return cls(kind, await parser.read_string())
        return cls(kind, True)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __str__(self) -> str:
        return self.name()