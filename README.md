# csproto

Building blocks for a small binary client/server protocol (version 1.0):
the version byte, method and control codes, typed headers with their wire
encoding, and byte-level parsers for blocking and asynchronous streams.

It has no third-party dependencies.

## Install

```
pip install csproto
```

For running the tests:

```
pip install "csproto[test]"
pytest
```

## Modules

- `csproto.version`: `Version`, an enum of protocol versions. `Version.V10`
  is announced by the byte 32; `str(Version.V10)` is `"1.0"`.
  `Version.from_byte(byte)` returns the version or `None`,
  `Version.default()` returns `Version.V10`.
- `csproto.codes`: `Method` and `Control` enums, valued by their wire byte.
  Both have `from_byte`, `from_name` (case-insensitive, `None` when unknown),
  `to_byte`, `to_str` and `version`.
- `csproto.header`: `HeaderKind` and the frozen dataclass `Header(kind, value)`.
- `csproto.parser`: `Parser` and `AsyncParser`.
- `csproto.errors`: `ParseErrorId` and the `ParseError` exception.

## Headers

```python
from csproto.header import Header, HeaderKind

Header(HeaderKind.ID, 65545).to_bytes()
# b'%\t\x00\x01\x00\x00\x00\x00\x00'   (37, 9, 0, 1, 0, 0, 0, 0, 0)

Header(HeaderKind.IDENTITY, "hello").to_bytes()
# bytes 34, 2, 104, 101, 108, 108, 111, 3

Header(HeaderKind.COMPRESSED, True).to_bytes()   # b"'"  (39)
Header(HeaderKind.COMPRESSED, False).to_bytes()  # b""
```

`Header(kind)` gets a default value (`0`, `""` or `False`).
`Header.from_name("Server")` and `Header.from_byte(32)` build such defaults,
or return `None` for an unknown name or byte. Values are checked on creation:
a wrong type raises `TypeError`, and an integer outside the unsigned 32-bit
(`server`) or 64-bit (`length`, `id`) range raises `ValueError`.
`matches(other)` compares kinds only; `name()` and `str()` give the
lower-case kind name; `bytes(header)` is the same as `to_bytes()`.

## Parsing

```python
import io

from csproto.header import Header
from csproto.parser import Parser
from csproto.version import Version

stream = io.BytesIO(bytes([37, 9, 0, 1, 0, 0, 0, 0, 0, 39, 34, 2, 104, 105, 3]))
parser = Parser(stream, Version.default())

Header.from_parser(parser)  # Header(kind=HeaderKind.ID, value=65545)
Header.from_parser(parser)  # Header(kind=HeaderKind.COMPRESSED, value=True)
Header.from_parser(parser)  # Header(kind=HeaderKind.IDENTITY, value='hi')
parser.pos()                # 15
```

`Parser` wraps any object with a blocking `read(n)`. It offers:

- `read(size)`: up to `size` bytes, fewer only at end of stream; `b""`
  means the stream is exhausted.
- `peek()`: the next byte without consuming it, or `None`.
- `read_byte()`, `read_string()`, `read_u32()`, `read_u64()` (little endian).
- `pos()` and `reset()`: the number of bytes consumed, and resetting it to 0
  (returning the previous value).

`AsyncParser` has the same methods, with the reads as coroutines over an
object whose `read(n)` is awaitable; headers are read from it with
`await Header.from_parser_async(parser)`.

## Errors

Every parsing failure raises `csproto.errors.ParseError`, with:

- `id`: a `ParseErrorId`, such as `MISS_CTRL` (string not framed by its
  controls), `INV_STR` (invalid UTF-8), `INV_NUM` (stream ended inside a
  number), `UKWN_HEADER`, `TIMED_OUT` or `CONNECTION_CLOSED`
  (`str()` gives the wire names, e.g. `"CON_CLOSED"`);
- `pos`: the parser position where it happened;
- `description`: a readable message.

`ParseErrorId.from_name("inv_num")` looks an id up by its wire name.

## Wire values

| Method      | byte |   | Header      | byte | value             |
|-------------|------|---|-------------|------|-------------------|
| connect     | 32   |   | server      | 32   | u32 little endian |
| auth        | 33   |   | length      | 33   | u64 little endian |
| disconnect  | 34   |   | identity    | 34   | string            |
| admin       | 35   |   | client      | 35   | string            |
| update      | 36   |   | update      | 36   | flag              |
| action      | 37   |   | id          | 37   | u64 little endian |
| error       | 38   |   | reconnect   | 38   | flag              |
| state       | 39   |   | compressed  | 39   | flag              |

Controls: `header_end` = 1, `string_start` = 2, `string_end` = 3. Strings are
UTF-8 bytes framed by `string_start` and `string_end`. Flag headers are sent
only when true, as the header byte alone.

## What it does not do

The package encodes and reads the individual parts of a packet. It does not
assemble or parse whole packets (version, method, header set, `header_end`
and payload together), it does not serialize or compress payloads, and it
opens no connections: streams are supplied by the caller.