"""Methods and control bytes of the 1.0 protocol."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from csproto.version import Version


class Method(Enum):
    """What a packet asks the other end to do; the value is its wire byte."""

    CONNECT = 32
    AUTH = 33
    DISCONNECT = 34
    ADMIN = 35
    UPDATE = 36
    ACTION = 37
    ERROR = 38
    STATE = 39

    @classmethod
    def from_byte(cls, byte: int) -> Optional["Method"]:
        """Return the method sent as ``byte``, or None if it is unknown."""
        try:
            return cls(byte)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: object) -> Optional["Method"]:
        """Return the method named ``name`` case-insensitively, or None."""
        wanted = str(name).lower()
        return next((method for method in cls if method.to_str() == wanted), None)

    def to_byte(self) -> int:
        """Return the byte that represents this method on the wire."""
        return self.value

    def to_str(self) -> str:
        """Return the lower-case name of this method."""
        return self.name.lower()

    def version(self) -> Version:
        """Return the protocol version this method belongs to."""
        return Version.V10

    def __str__(self) -> str:
        return self.to_str()


class Control(Enum):
    """Control bytes that structure a packet; the value is its wire byte."""

    HEADER_END = 1
    STRING_START = 2
    STRING_END = 3

    @classmethod
    def from_byte(cls, byte: int) -> Optional["Control"]:
        """Return the control sent as ``byte``, or None if it is unknown."""
        try:
            return cls(byte)
        except ValueError:
            return None

    @classmethod
    def from_name(cls, name: object) -> Optional["Control"]:
        """Return the control named ``name`` case-insensitively, or None."""
        wanted = str(name).lower()
        return next(
            (control for control in cls if control.to_str() == wanted), None
        )

    def to_byte(self) -> int:
        """Return the byte that represents this control on the wire."""
        return self.value

    def to_str(self) -> str:
        """Return the lower-case, underscore separated name of this control."""
        return self.name.lower()

    def version(self) -> Version:
        """Return the protocol version this control belongs to."""
        return Version.V10

    def __str__(self) -> str:
        return self.to_str()