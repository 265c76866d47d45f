import io

import pytest

from mimecodec.exceptions import BufferContractError
from mimecodec.sources import BytesSource, StreamSource, read_all


def test_bytes_source_reads_in_order():
    source = BytesSource(b"abcdef")

    assert source.read(4) == b"abcd"
    assert source.read(4) == b"ef"
    assert source.read(4) == b""


def test_bytes_source_reset():
    source = BytesSource(bytearray(b"abc"))
    assert source.read() == b"abc"

    source.reset()

    assert source.read() == b"abc"


def test_bytes_source_copies_input():
    data = bytearray(b"abc")
    source = BytesSource(data)
    data[0] = ord("z")

    assert source.read() == b"abc"


def test_read_into_default_length_fills_rest_of_buffer():
    buf = bytearray(6)

    assert BytesSource(b"xyz123456").read_into(buf, 2) == 4
    assert buf == bytearray(b"\0\0xyz1")


def test_read_into_accepts_memoryview():
    buf = bytearray(4)

    assert BytesSource(b"ab").read_into(memoryview(buf)[1:]) == 2
    assert buf == bytearray(b"\0ab\0")


def test_stream_source_with_readinto():
    source = StreamSource(io.BytesIO(b"stream data"))

    assert read_all(source, chunk_size=3) == b"stream data"


def test_stream_source_with_read_only():
    class ReadOnlyStream:
        def __init__(self, data: bytes):
            self._data = io.BytesIO(data)

        def read(self, size: int) -> bytes:
            return self._data.read(size)

    assert read_all(StreamSource(ReadOnlyStream(b"plain read")), chunk_size=4) == b"plain read"


def test_stream_source_rejects_non_blocking_empty_read(mocker):
    stream = mocker.Mock()
    stream.readinto.return_value = None

    with pytest.raises(BufferContractError):
        StreamSource(stream).read(4)


def test_iter_chunks():
    assert list(BytesSource(b"abcdefg").iter_chunks(3)) == [b"abc", b"def", b"g"]


def test_iter_chunks_rejects_non_positive_size():
    with pytest.raises(BufferContractError):
        list(BytesSource(b"abc").iter_chunks(0))


def test_read_all_empty():
    assert read_all(BytesSource(b"")) == b""
