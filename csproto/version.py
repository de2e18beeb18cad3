"""Protocol versions and their wire representation."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Version(Enum):
    """A protocol version, valued by the byte that announces it on the wire."""

    V10 = 32

    @classmethod
    def from_byte(cls, byte: int) -> Optional["Version"]:
        """Return the version announced by ``byte``, or None if it is unknown."""
        for version in cls:
            if version.value == byte:
                return version
        return None

    def to_byte(self) -> int:
        """Return the byte that announces this version."""
        return self.value

    def __str__(self) -> str:
        return _LABELS[self]

    @classmethod
    def default(cls) -> "Version":
        """Return the current version."""
        return cls.V10


_LABELS = {Version.V10: "1.0"}