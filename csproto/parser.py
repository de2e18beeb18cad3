"""Byte-level readers for protocol packets, blocking and asynchronous."""

from __future__ import annotations

import logging
import struct
from typing import Any, Optional

from csproto.codes import Control
from csproto.errors import ParseError, ParseErrorId
from csproto.version import Version

__all__ = ["Parser", "AsyncParser"]

_log = logging.getLogger(__name__)

_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")


def _string_controls(version: Version) -> tuple[Control, Control]:
    """Return the start and end controls of a string for ``version``."""
    if version is Version.V10:
        return Control.STRING_START, Control.STRING_END
    raise ValueError(f"unsupported protocol version: {version!r}")


def _missing_control(control: Control, pos: int) -> ParseError:
    error = ParseError(ParseErrorId.MISS_CTRL, pos)
    error.set_desc("{1}", control.to_str())
    return error


def _decode(raw: bytes, pos: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise ParseError(ParseErrorId.INV_STR, pos) from None


def _unpack(layout: struct.Struct, buf: bytes, pos: int) -> int:
    if len(buf) < layout.size:
        error = ParseError(ParseErrorId.INV_NUM, pos)
        error.set_desc("{1}", layout.size)
        error.set_desc("{2}", len(buf))
        raise error
    return layout.unpack(buf[: layout.size])[0]


class _Stream:
    """State shared by both parsers: reader, version, position and peeked bytes."""

    def __init__(self, reader: Any, version: Version) -> None:
        self._reader = reader
        self.version = version
        self._cursor = 0
        self._pending = bytearray()

    def _take_pending(self, size: int) -> bytearray:
        taken = self._pending[:size]
        del self._pending[:size]
        self._cursor += len(taken)
        return taken


class Parser(_Stream):
    """Reads protocol values from a blocking binary stream."""

    def __init__(self, reader: Any, version: Version) -> None:
        super().__init__(reader, version)

    def pos(self) -> int:
        """Return how many bytes were consumed since the last reset."""
        return self._cursor

    def reset(self) -> int:
        """Reset the position to zero and return the previous position."""
        previous, self._cursor = self._cursor, 0
        return previous

    def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer only when the stream is exhausted.

        An empty result means the stream has no more data (for a socket,
        the connection was closed).
        """
        gathered = self._take_pending(size)
        while len(gathered) < size:
            try:
                data = self._reader.read(size - len(gathered))
            except InterruptedError:
                continue
            except (BlockingIOError, TimeoutError):
                raise ParseError(ParseErrorId.TIMED_OUT, self.pos()) from None
            except ConnectionResetError:
                raise ParseError(ParseErrorId.CONNECTION_CLOSED, self.pos()) from None
            except OSError as exc:
                _log.error("got %r when attempting to read the stream", exc)
                gathered.clear()
                break
            if data is None:
                raise ParseError(ParseErrorId.TIMED_OUT, self.pos())
            if not data:
                break
            gathered += data
            self._cursor += len(data)
        return bytes(gathered)

    def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or None if there is none."""
        if not self._pending:
            try:
                data = self._reader.read(1)
            except OSError:
                return None
            if not data:
                return None
            self._pending += data
        return self._pending[0]

    def read_byte(self) -> int:
        """Read exactly one byte."""
        buf = self.read(1)
        if not buf:
            raise ParseError(ParseErrorId.CONNECTION_CLOSED, self.pos())
        return buf[0]

    def read_string(self) -> str:
        """Read a UTF-8 string framed by the string start and end controls."""
        start, end = _string_controls(self.version)
        raw = bytearray()
        started = False
        while True:
            buf = self.read(1)
            if not buf:
                raise _missing_control(end if raw else start, self.pos())
            byte = buf[0]
            if started:
                if byte == end.to_byte():
                    break
                raw.append(byte)
            elif byte == start.to_byte():
                started = True
            else:
                raise _missing_control(start, self.pos())
        return _decode(bytes(raw), self.pos())

    def read_u32(self) -> int:
        """Read a little-endian unsigned 32-bit integer."""
        return _unpack(_U32, self.read(_U32.size), self.pos())

    def read_u64(self) -> int:
        """Read a little-endian unsigned 64-bit integer."""
        return _unpack(_U64, self.read(_U64.size), self.pos())


class AsyncParser(_Stream):
    """Reads protocol values from a stream whose ``read`` is a coroutine."""

    def __init__(self, reader: Any, version: Version) -> None:
        super().__init__(reader, version)

    def pos(self) -> int:
        """Return how many bytes were consumed since the last reset."""
        return self._cursor

    def reset(self) -> int:
        """Reset the position to zero and return the previous position."""
        previous, self._cursor = self._cursor, 0
        return previous

    async def read(self, size: int) -> bytes:
        """Read up to ``size`` bytes; fewer only when the stream is exhausted."""
        gathered = self._take_pending(size)
        while len(gathered) < size:
            try:
                data = await self._reader.read(size - len(gathered))
            except InterruptedError:
                continue
            except ConnectionResetError:
                raise ParseError(ParseErrorId.CONNECTION_CLOSED, self.pos()) from None
            except OSError as exc:
                _log.error("got %r when attempting to read the stream", exc)
                gathered.clear()
                break
            if not data:
                break
            gathered += data
            self._cursor += len(data)
        return bytes(gathered)

    async def peek(self) -> Optional[int]:
        """Return the next byte without consuming it, or None if there is none."""
        if not self._pending:
            try:
                data = await self._reader.read(1)
            except OSError:
                return None
            if not data:
                return None
            self._pending += data
        return self._pending[0]

    async def read_byte(self) -> int:
        """Read exactly one byte."""
        buf = await self.read(1)
        if not buf:
            raise ParseError(ParseErrorId.CONNECTION_CLOSED, self.pos())
        return buf[0]

    async def read_string(self) -> str:
        """Read a UTF-8 string framed by the string start and end controls."""
        start, end = _string_controls(self.version)
        raw = bytearray()
        started = False
        while True:
            buf = await self.read(1)
            if not buf:
                raise _missing_control(end if raw else start, self.pos())
            byte = buf[0]
            if started:
                if byte == end.to_byte():
                    break
                raw.append(byte)
            elif byte == start.to_byte():
                started = True
            else:
                raise _missing_control(start, self.pos())
        return _decode(bytes(raw), self.pos())

    async def read_u32(self) -> int:
        """Read a little-endian unsigned 32-bit integer."""
        return _unpack(_U32, await self.read(_U32.size), self.pos())

    async def read_u64(self) -> int:
        """Read a little-endian unsigned 64-bit integer."""
        return _unpack(_U64, await self.read(_U64.size), self.pos())