import random

import pytest

from mimecodec.sources import ByteSource, BytesSource


class ChunkedSource(ByteSource):
    """Hands out at most ``chunk`` bytes per read, whatever the caller asks for."""

    def __init__(self, data: bytes, chunk: int = 1):
        self._inner = BytesSource(data)
        self._chunk = chunk
        self.reads_after_end = 0
        self._ended = False

    def _read(self, out: memoryview) -> int:
        if self._ended:
            self.reads_after_end += 1
        count = self._inner.read_into(out, 0, min(len(out), self._chunk))
        if count == 0:
            self._ended = True
        return count


@pytest.fixture
def chunked_source():
    def _make(data: bytes, chunk: int = 1) -> ChunkedSource:
        return ChunkedSource(data, chunk)

    return _make


@pytest.fixture
def random_bytes():
    rng = random.Random(20450)

    def _make(length: int) -> bytes:
        return bytes(rng.getrandbits(8) for _ in range(length))

    return _make
