import io

import pytest

from csproto.errors import ParseError, ParseErrorId
from csproto.header import Header, HeaderKind
from csproto.parser import AsyncParser, Parser
from csproto.version import Version

PARSE_BYTES = bytes(
    [
        32, 44, 1, 0, 0,  # Server 300
        33, 0, 4, 0, 0, 0, 0, 0, 0,  # Length 1024
        34, 2, 97, 50, 99, 52, 101, 54, 3,  # Identity a2c4e6
        35, 2, 49, 46, 48, 46, 51, 45, 98, 101, 118, 121, 45, 108, 105, 110,
        117, 120, 3,  # Client 1.0.3-bevy-linux
        36,  # Update
        37, 255, 0, 0, 0, 0, 0, 0, 0,  # Id 255
        38,  # Reconnect
        39,  # Compressed
        40,  # unknown
    ]
)

EXPECTED_PARSED = [
    Header(HeaderKind.SERVER, 300),
    Header(HeaderKind.LENGTH, 1024),
    Header(HeaderKind.IDENTITY, "a2c4e6"),
    Header(HeaderKind.CLIENT, "1.0.3-bevy-linux"),
    Header(HeaderKind.UPDATE, True),
    Header(HeaderKind.ID, 255),
    Header(HeaderKind.RECONNECT, True),
    Header(HeaderKind.COMPRESSED, True),
]

VALUES = {
    HeaderKind.SERVER: Header(HeaderKind.SERVER, 500),
    HeaderKind.LENGTH: Header(HeaderKind.LENGTH, 1024),
    HeaderKind.IDENTITY: Header(HeaderKind.IDENTITY, "a2c4e6"),
    HeaderKind.CLIENT: Header(HeaderKind.CLIENT, "1.0.3-bevy-linux"),
    HeaderKind.UPDATE: Header(HeaderKind.UPDATE, True),
    HeaderKind.ID: Header(HeaderKind.ID, 255),
    HeaderKind.RECONNECT: Header(HeaderKind.RECONNECT, True),
    HeaderKind.COMPRESSED: Header(HeaderKind.COMPRESSED, False),
}

BUFFERS = {
    HeaderKind.SERVER: [32, 244, 1, 0, 0],
    HeaderKind.LENGTH: [33, 0, 4, 0, 0, 0, 0, 0, 0],
    HeaderKind.IDENTITY: [34, 2, 97, 50, 99, 52, 101, 54, 3],
    HeaderKind.CLIENT: [
        35, 2, 49, 46, 48, 46, 51, 45, 98, 101, 118, 121, 45, 108, 105, 110,
        117, 120, 3,
    ],
    HeaderKind.UPDATE: [36],
    HeaderKind.ID: [37, 255, 0, 0, 0, 0, 0, 0, 0],
    HeaderKind.RECONNECT: [38],
    HeaderKind.COMPRESSED: [],
}


class _AsyncBytes:
    def __init__(self, data: bytes) -> None:
        self._stream = io.BytesIO(data)

    async def read(self, size: int) -> bytes:
        return self._stream.read(size)


def test_version():
    assert Header(HeaderKind.RECONNECT, False).version() == Version.V10


@pytest.mark.parametrize("byte", range(32, 40))
def test_header_roundtrips(byte):
    header = Header.from_byte(byte)
    assert header is not None
    value = VALUES[header.kind]
    assert header.matches(value)
    assert header.to_byte() == byte
    assert Header.from_name(header.name()) == header
    assert list(value.to_bytes()) == BUFFERS[header.kind]


def test_from_byte_defaults():
    assert Header.from_byte(32) == Header(HeaderKind.SERVER, 0)
    assert Header.from_byte(38) == Header(HeaderKind.RECONNECT, False)
    assert Header.from_byte(99) is None


def test_from_name_case_insensitive():
    assert Header(HeaderKind.SERVER, 0).matches(Header.from_name("ServEr"))
    assert Header(HeaderKind.RECONNECT, True).matches(Header.from_name("reconnect"))
    assert Header(HeaderKind.IDENTITY, "").matches(Header.from_name("IDENTITY"))
    assert Header.from_name("nope") is None


def test_names():
    assert Header(HeaderKind.SERVER, 0).name() == "server"
    assert str(Header(HeaderKind.RECONNECT, True)) == "reconnect"
    assert Header(HeaderKind.IDENTITY, "").name() == "identity"
    assert str(HeaderKind.COMPRESSED) == "compressed"
    assert HeaderKind.from_name("Id") is HeaderKind.ID
    assert HeaderKind.from_byte(40) is None


def test_to_bytes_examples():
    assert list(Header(HeaderKind.ID, 65545).to_bytes()) == [37, 9, 0, 1, 0, 0, 0, 0, 0]
    assert list(Header(HeaderKind.COMPRESSED, True).to_bytes()) == [39]
    assert list(Header(HeaderKind.IDENTITY, "hello").to_bytes()) == [
        34, 2, 104, 101, 108, 108, 111, 3,
    ]


def test_matches_ignores_value():
    assert Header(HeaderKind.ID, 1).matches(Header(HeaderKind.ID, 2))
    assert not Header(HeaderKind.ID, 1).matches(Header(HeaderKind.LENGTH, 1))


def test_invalid_values_rejected():
    with pytest.raises(TypeError):
        Header(HeaderKind.UPDATE, 1)
    with pytest.raises(TypeError):
        Header(HeaderKind.SERVER, "x")
    with pytest.raises(ValueError):
        Header(HeaderKind.SERVER, 1 << 32)


def test_header_parse():
    parser = Parser(io.BytesIO(PARSE_BYTES), Version.V10)
    for expected in EXPECTED_PARSED:
        assert Header.from_parser(parser) == expected
    with pytest.raises(ParseError) as info:
        Header.from_parser(parser)
    assert info.value.id is ParseErrorId.UKWN_HEADER
    assert "040" in info.value.description


def test_header_parse_example():
    data = bytes([37, 9, 0, 1, 0, 0, 0, 0, 0, 39, 34, 2, 104, 101, 108, 108, 111, 3])
    parser = Parser(io.BytesIO(data), Version.V10)
    assert Header.from_parser(parser) == Header(HeaderKind.ID, 65545)
    assert Header.from_parser(parser) == Header(HeaderKind.COMPRESSED, True)
    assert Header.from_parser(parser) == Header(HeaderKind.IDENTITY, "hello")


@pytest.mark.asyncio
async def test_header_async_parse():
    parser = AsyncParser(_AsyncBytes(PARSE_BYTES), Version.V10)
    for expected in EXPECTED_PARSED:
        assert await Header.from_parser_async(parser) == expected
    with pytest.raises(ParseError) as info:
        await Header.from_parser_async(parser)
    assert info.value.id is ParseErrorId.UKWN_HEADER