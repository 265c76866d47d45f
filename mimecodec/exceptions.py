class MimeCodecError(Exception):
    """Base exception for transfer-encoding operations."""

    def __init__(self, message: str, codec: str = None):
        self.message = message
        self.codec = codec
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.codec:
            return f"{self.codec}: {self.message}"
        return self.message


class MalformedInputError(MimeCodecError):
    """Raised when encoded stream content cannot be decoded.

    The stream is unusable after this error. Bytes already delivered to the caller stay valid,
    but the codec will not produce any more.
    """

    pass


class Base64DecodeError(MalformedInputError):
    """Raised for illegal padding, data after padding, or a truncated base64 group."""

    def __init__(self, message: str, state: int | None = None):
        self.state = state
        super().__init__(message, codec="Base64Decoder")


class QuotedPrintableDecodeError(MalformedInputError):
    """Raised for invalid characters, bad escapes, or broken line terminators in quoted-printable text."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(message, codec="QuotedPrintableDecoder")

    def _format_message(self) -> str:
        message = super()._format_message()
        if self.line is not None:
            return f"{message} (line {self.line})"
        return message


class BufferContractError(MimeCodecError, ValueError):
    """Raised when a caller passes a buffer, offset, or length that violates the read contract."""

    pass
