"""Pull-based byte source contract and adapters for memory buffers and binary streams."""

import abc
from typing import BinaryIO, Iterator

from mimecodec.config import DEFAULT_CHUNK_SIZE
from mimecodec.exceptions import BufferContractError


def writable_view(buffer: bytearray | memoryview, offset: int = 0, length: int | None = None) -> memoryview:
    """Validate a caller-owned buffer and return a byte view of the requested window.

    Args:
        buffer: Writable bytes-like object to fill.
        offset: Index of the first byte to fill.
        length: Number of bytes requested. Defaults to the rest of the buffer.

    Returns:
        memoryview: Unsigned byte view covering ``buffer[offset:offset + length]``.

    Raises:
        BufferContractError: If the buffer is read-only or not byte-addressable, or the window
            falls outside of it.
    """
    try:
        view = memoryview(buffer)
    except TypeError as e:
        raise BufferContractError(f"Unsupported buffer type: {type(buffer).__name__}") from e

    if view.readonly:
        raise BufferContractError("Buffer is read-only")
    if view.format != "B" or view.ndim != 1:
        try:
            view = view.cast("B")
        except TypeError as e:
            raise BufferContractError("Buffer is not byte-addressable") from e

    if length is None:
        length = len(view) - offset
    if offset < 0 or length < 0:
        raise BufferContractError(f"Negative offset or length: offset={offset}, length={length}")
    if offset + length > len(view):
        raise BufferContractError(
            f"Requested range [{offset}, {offset + length}) exceeds buffer of {len(view)} bytes"
        )
    return view[offset : offset + length]


class ByteSource(abc.ABC):
    """Something that fills caller-owned buffers with bytes on demand.

    A ``read_into`` call may return fewer bytes than requested even when more data remains.
    Only a return value of 0 for a non-empty request means the end of data.
    """

    def read_into(self, buffer: bytearray | memoryview, offset: int = 0, length: int | None = None) -> int:
        """Fill up to ``length`` bytes of ``buffer`` starting at ``offset``.

        Args:
            buffer: Writable bytes-like object owned by the caller.
            offset: Index of the first byte to fill.
            length: Maximum number of bytes to fill. Defaults to the rest of the buffer.

        Returns:
            int: Number of bytes filled, 0 at end of data.

        Raises:
            BufferContractError: If the buffer window is invalid.
        """
        view = writable_view(buffer, offset, length)
        if not view:
            return 0
        return self._read(view)

    @abc.abstractmethod
    def _read(self, out: memoryview) -> int:
        """Fill a validated, non-empty byte view and return the number of bytes written."""
        pass

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` bytes, or everything that is left when ``size`` is negative."""
        if size < 0:
            return read_all(self)
        buf = bytearray(size)
        count = self.read_into(buf)
        return bytes(buf[:count])

    def iter_chunks(self, chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[bytes]:
        """Yield successive chunks until the source is exhausted."""
        if chunk_size <= 0:
            raise BufferContractError(f"Chunk size must be positive, got {chunk_size}")
        buf = bytearray(chunk_size)
        while count := self.read_into(buf):
            yield bytes(buf[:count])


class BytesSource(ByteSource):
    """Memory buffer exposed as a byte source."""

    def __init__(self, data: bytes | bytearray | memoryview):
        self._data = memoryview(bytes(data))
        self._offset = 0

    def _read(self, out: memoryview) -> int:
        count = min(len(out), len(self._data) - self._offset)
        out[:count] = self._data[self._offset : self._offset + count]
        self._offset += count
        return count

    def reset(self) -> None:
        """Rewind to the first byte."""
        self._offset = 0


class StreamSource(ByteSource):
    """Binary file-like object exposed as a byte source.

    Objects providing ``readinto`` are filled in place, anything else is read with ``read``.
    """

    def __init__(self, stream: BinaryIO):
        self._stream = stream

    def _read(self, out: memoryview) -> int:
        if hasattr(self._stream, "readinto"):
            count = self._stream.readinto(out)
            if count is None:
                raise BufferContractError("Stream is non-blocking and has no data available")
            return count

        data = self._stream.read(len(out))
        out[: len(data)] = data
        return len(data)


def read_all(source: ByteSource, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Drain a byte source into a single bytes object.

    Args:
        source: Source to drain.
        chunk_size: Number of bytes requested per read.

    Returns:
        bytes: Everything the source produced until its end of data.
    """
    return b"".join(source.iter_chunks(chunk_size))
