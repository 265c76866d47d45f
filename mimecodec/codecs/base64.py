"""Base64 Content-Transfer-Encoding (RFC 2045, RFC 4648 standard alphabet)."""

from mimecodec.codecs.base import CR, LF, Codec
from mimecodec.config import DEFAULT_BUFFER_SIZE
from mimecodec.exceptions import Base64DecodeError, BufferContractError
from mimecodec.sources import ByteSource

ENCODE_TABLE = b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"
PADDING = ord("=")

ENCODED_CHARACTERS_PER_LINE = 76
RAW_BYTES_PER_LINE = ENCODED_CHARACTERS_PER_LINE // 4 * 3  # 57
CRLF_LENGTH = 2

_IGNORE = 0xFF
_PAD = 0x40

# 4 = one padding character seen, a second one must follow
_EXPECT_PADDING = 4
_EOF = 5


def _make_decode_table() -> bytes:
    table = bytearray([_IGNORE]) * 256
    for value, char in enumerate(ENCODE_TABLE):
        table[char] = value
    table[PADDING] = _PAD
    return bytes(table)


DECODE_TABLE = _make_decode_table()


def predicted_base64_length(input_length: int) -> int:
    """Compute the exact size of the base64 encoding of ``input_length`` raw bytes.

    Every line, including a shorter final one, carries a CRLF terminator.

    Args:
        input_length: Number of raw bytes.

    Returns:
        int: Number of encoded bytes, line terminators included.

    Raises:
        BufferContractError: If ``input_length`` is negative.

    Examples:
        >>> predicted_base64_length(3)
        6
        >>> predicted_base64_length(57)
        78
        >>> predicted_base64_length(58)
        84
    """
    if input_length < 0:
        raise BufferContractError(f"Input length must not be negative, got {input_length}")
    encoded_characters = (input_length + 2) // 3 * 4
    lines = (encoded_characters + ENCODED_CHARACTERS_PER_LINE - 1) // ENCODED_CHARACTERS_PER_LINE
    return encoded_characters + lines * CRLF_LENGTH


class Base64Decoder(Codec):
    """Decodes base64 text into raw bytes.

    Bytes outside of the alphabet, line breaks included, are skipped. Padding ends the data;
    anything after a complete padding sequence is never read.
    """

    def __init__(self, source: ByteSource, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(source, buffer_size)
        self._bits = 0
        # number of sextets held for the current group, or _EXPECT_PADDING / _EOF
        self._state = 0

    def _transform(self, out: memoryview) -> int:
        if self._state == _EOF:
            return 0

        written = 0
        end = len(out)
        in_buf = self._in_buf

        while written != end:
            if self._in_offset == self._in_end and not self._read_in():
                if self._state != 0:
                    raise Base64DecodeError(
                        f"invalid end of file, base64 decoding state: {self._state}", state=self._state
                    )
                return written

            decoded = DECODE_TABLE[in_buf[self._in_offset]]
            self._in_offset += 1

            if decoded == _IGNORE:
                continue

            state = self._state
            if decoded == _PAD:
                if state in (0, 1):
                    raise Base64DecodeError(
                        f"invalid base64 decoding state {state} when received padding, data malformed",
                        state=state,
                    )
                if state == 2:
                    self._state = _EXPECT_PADDING
                    continue
                self._state = _EOF
                return written

            if state == 0:
                self._bits = decoded
                self._state = 1
            elif state == 1:
                out[written] = (self._bits << 2 | decoded >> 4) & 0xFF
                written += 1
                self._bits = decoded
                self._state = 2
            elif state == 2:
                out[written] = (self._bits << 4 | decoded >> 2) & 0xFF
                written += 1
                self._bits = decoded
                self._state = 3
            elif state == 3:
                out[written] = (self._bits << 6 | decoded) & 0xFF
                written += 1
                self._state = 0
            else:
                raise Base64DecodeError("seen base64 encoded bits after padding, expected '='", state=state)

        return written


class Base64Encoder(Codec):
    """Encodes raw bytes into padded base64 text, 76 characters per CRLF-terminated line."""

    def __init__(self, source: ByteSource, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(source, buffer_size)
        self._raw_line = bytearray(RAW_BYTES_PER_LINE)
        self._line = bytearray(ENCODED_CHARACTERS_PER_LINE + CRLF_LENGTH)
        self._line_offset = 0
        self._line_end = 0

    def _transform(self, out: memoryview) -> int:
        written = 0
        end = len(out)

        while written != end:
            if self._line_offset == self._line_end and not self._encode_line():
                return written

            count = min(end - written, self._line_end - self._line_offset)
            out[written : written + count] = self._line[self._line_offset : self._line_offset + count]
            self._line_offset += count
            written += count

        return written

    def _encode_line(self) -> bool:
        raw_length = self._fill_raw_line()
        if raw_length == 0:
            return False

        raw = self._raw_line
        line = self._line
        trailing = raw_length % 3
        target = 0

        for src in range(0, raw_length - trailing, 3):
            a, b, c = raw[src], raw[src + 1], raw[src + 2]
            line[target] = ENCODE_TABLE[a >> 2]
            line[target + 1] = ENCODE_TABLE[(a << 4 | b >> 4) & 0x3F]
            line[target + 2] = ENCODE_TABLE[(b << 2 | c >> 6) & 0x3F]
            line[target + 3] = ENCODE_TABLE[c & 0x3F]
            target += 4

        src = raw_length - trailing
        if trailing == 1:
            a = raw[src]
            line[target] = ENCODE_TABLE[a >> 2]
            line[target + 1] = ENCODE_TABLE[a << 4 & 0x3F]
            line[target + 2] = PADDING
            line[target + 3] = PADDING
            target += 4
        elif trailing == 2:
            a, b = raw[src], raw[src + 1]
            line[target] = ENCODE_TABLE[a >> 2]
            line[target + 1] = ENCODE_TABLE[(a << 4 | b >> 4) & 0x3F]
            line[target + 2] = ENCODE_TABLE[b << 2 & 0x3F]
            line[target + 3] = PADDING
            target += 4

        line[target] = CR
        line[target + 1] = LF

        self._line_offset = 0
        self._line_end = target + CRLF_LENGTH
        return True

    def _fill_raw_line(self) -> int:
        """Collect up to one line worth of raw bytes; fewer only at end of data."""
        filled = 0
        while filled != RAW_BYTES_PER_LINE:
            if self._in_offset == self._in_end and not self._read_in():
                break
            count = min(RAW_BYTES_PER_LINE - filled, self._in_end - self._in_offset)
            self._raw_line[filled : filled + count] = self._in_buf[self._in_offset : self._in_offset + count]
            self._in_offset += count
            filled += count
        return filled
