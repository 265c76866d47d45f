"""Common plumbing for codecs that wrap exactly one inner byte source."""

import abc

from mimecodec.config import DEFAULT_BUFFER_SIZE
from mimecodec.exceptions import BufferContractError, MalformedInputError
from mimecodec.sources import ByteSource
from mimecodec.utils.logger import logger

CR = 13
LF = 10
CRLF = b"\r\n"


class Codec(ByteSource):
    """Byte source that transforms the bytes of an inner source it exclusively owns.

    Subclasses implement ``_transform`` and pull input through ``_read_in``, which refills
    ``_in_buf`` and never touches the inner source again once it has reported end of data.
    A codec that raised ``MalformedInputError`` re-raises it on every later read.
    """

    def __init__(self, source: ByteSource, buffer_size: int = DEFAULT_BUFFER_SIZE):
        if buffer_size <= 0:
            raise BufferContractError(f"Buffer size must be positive, got {buffer_size}", codec=self.name)
        self._source = source
        self._in_buf = bytearray(buffer_size)
        self._in_offset = 0
        self._in_end = 0
        self._source_exhausted = False
        self._error: MalformedInputError | None = None
        self._produced = 0
        self._ended = False

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @property
    def source(self) -> ByteSource:
        return self._source

    def _read(self, out: memoryview) -> int:
        if self._error is not None:
            raise self._error
        try:
            count = self._transform(out)
        except MalformedInputError as e:
            self._error = e
            logger.debug(f"{self.name}: failed after {self._produced} bytes: {e.message}")
            raise
        self._produced += count
        if count < len(out) and not self._ended:
            self._ended = True
            logger.debug(f"{self.name}: end of data after {self._produced} bytes")
        return count

    @abc.abstractmethod
    def _transform(self, out: memoryview) -> int:
        """Fill ``out`` completely unless the data ends first; return the number of bytes written."""
        pass

    def _read_in(self) -> bool:
        """Refill the input buffer from the inner source.

        Returns:
            bool: False once the inner source has no more data.
        """
        if self._source_exhausted:
            return False
        self._in_offset = 0
        self._in_end = self._source.read_into(self._in_buf, 0, len(self._in_buf))
        if self._in_end == 0:
            self._source_exhausted = True
            return False
        return True
