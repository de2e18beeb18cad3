"""Parse error identifiers and the exception raised while reading packets."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ParseErrorId(Enum):
    """What went wrong while parsing; the value is the name sent to peers."""

    DUP_HEADER = "DUP_HEADER"
    UKWN_HEADER = "UKWN_HEADER"
    UKWN_HEADER_VAL = "UKWN_HEADER_VAL"
    UKWN_CTRL = "UKWN_CTRL"
    MISS_CTRL = "MISS_CTRL"
    MISS_HEADER = "MISS_HEADER"
    UNXPT_CTRL = "UNXPT_CTRL"
    INV_NUM = "INV_NUM"
    INV_DATA_LEN = "INV_DATA_LEN"
    INV_DATA_COMP = "INV_DATA_COMP"
    INV_STR = "INV_STR"
    TIMED_OUT = "TIMEDOUT"
    UNKNOWN = "UNKNOWN"
    # internal only, never sent to a peer
    CONNECTION_CLOSED = "CON_CLOSED"

    def description(self) -> str:
        """Return the description template, with ``{1}``/``{2}`` placeholders."""
        return _DESCRIPTIONS[self]

    @classmethod
    def from_name(cls, name: object) -> Optional["ParseErrorId"]:
        """Return the id whose wire name matches ``name`` case-insensitively."""
        wanted = str(name).upper()
        for error_id in cls:
            if error_id.value == wanted:
                return error_id
        return None

    @property
    def label(self) -> str:
        """A CamelCase label for the id, used in error messages."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    def __str__(self) -> str:
        return self.value


_DESCRIPTIONS = {
    ParseErrorId.DUP_HEADER: "Duplicated header: {1}.",
    ParseErrorId.UKWN_HEADER: "Unknown header: {1}.",
    ParseErrorId.UKWN_HEADER_VAL: "Unknown value for [{1}]: {2}.",
    ParseErrorId.UKWN_CTRL: "Unknown control: {1}.",
    ParseErrorId.MISS_CTRL: "Missing control: {1}.",
    ParseErrorId.MISS_HEADER: "Missing header: {1}",
    ParseErrorId.UNXPT_CTRL: "Unexpected control: {1}.",
    ParseErrorId.INV_NUM: "Invalid number: expected {1} bytes, found {2}.",
    ParseErrorId.INV_DATA_LEN: "Invalid length header, data length mismatch it.",
    ParseErrorId.INV_DATA_COMP: "Invalid data compression: {1}",
    ParseErrorId.INV_STR: "Invalid utf-8 string.",
    ParseErrorId.TIMED_OUT: (
        "Took to long to gather the rest of the packet, "
        "usually means that it's corrupted"
    ),
    ParseErrorId.CONNECTION_CLOSED: "Connection closed",
    ParseErrorId.UNKNOWN: "{1}",
}


class ParseError(Exception):
    """Raised when a packet or one of its parts cannot be parsed."""

    def __init__(self, id: ParseErrorId, pos: int) -> None:
        super().__init__(id, pos)
        self.id = id
        self.pos = pos
        self.description = id.description()

    def set_desc(self, placeholder: str, value: object) -> None:
        """Replace the first occurrence of ``placeholder`` in the description."""
        self.description = self.description.replace(placeholder, str(value), 1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (self.id, self.description, self.pos) == (
            other.id,
            other.description,
            other.pos,
        )

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return f"{self.id.label}: At position {self.pos} {self.description}"