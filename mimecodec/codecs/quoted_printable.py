"""Quoted-Printable Content-Transfer-Encoding (RFC 2045, section 6.7).

Bare CR and bare LF bytes are treated as binary and escaped on encode; only a CR LF pair is
passed through as a hard line break.
"""

import enum
from typing import NamedTuple

from mimecodec.codecs.base import CR, CRLF, LF, Codec
from mimecodec.config import DEFAULT_BUFFER_SIZE
from mimecodec.exceptions import QuotedPrintableDecodeError
from mimecodec.sources import ByteSource
from mimecodec.utils.logger import logger

MAX_ENCODED_CHARACTERS_PER_LINE = 76
# Some producers emit 77-79 characters per line; tolerated on decode.
MAX_DECODED_LINE_INPUT = 79

ESCAPE = ord("=")
SPACE = 32
TAB = 9
HEX_DIGITS = b"0123456789ABCDEF"
SOFT_BREAK = b"=\r\n"


class TokenCode(enum.IntEnum):
    """Classes of input bytes; ``CR`` and ``LF`` never leave the tokenizer."""

    LITERAL = 0
    ENCODED = 1
    SPACE = 2
    CRLF = 3
    CR = 4
    LF = 5


class Token(NamedTuple):
    code: TokenCode
    value: int = 0


def _make_code_table() -> tuple[TokenCode, ...]:
    codes = [TokenCode.ENCODED] * 256
    for i in range(33, 127):
        codes[i] = TokenCode.LITERAL
    codes[ESCAPE] = TokenCode.ENCODED
    codes[TAB] = TokenCode.SPACE
    codes[SPACE] = TokenCode.SPACE
    codes[LF] = TokenCode.LF
    codes[CR] = TokenCode.CR
    return tuple(codes)


def _make_hex_values() -> tuple[int, ...]:
    values = [-1] * 256
    for value, char in enumerate(HEX_DIGITS):
        values[char] = value
    return tuple(values)


CODE_TABLE = _make_code_table()
HEX_VALUES = _make_hex_values()


class QuotedPrintableEncoder(Codec):
    """Encodes raw bytes into quoted-printable text.

    Input is classified into tokens one at a time by ``_next_token`` and packed into lines by
    ``_pack_line``. Lines never exceed 76 characters before their CRLF; a line that would is
    closed with a soft break and the pending token is retried on the next line.
    """

    def __init__(self, source: ByteSource, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(source, buffer_size)
        # longest line: 75 characters, then "=" and CRLF
        self._line = bytearray(MAX_ENCODED_CHARACTERS_PER_LINE + len(CRLF))
        self._line_offset = 0
        self._line_end = 0
        self._seen_cr = False
        self._retry: Token | None = None
        self._finished = False

    def _transform(self, out: memoryview) -> int:
        written = 0
        end = len(out)

        while written != end:
            if self._line_offset == self._line_end:
                if self._finished:
                    return written
                self._line_offset = 0
                self._line_end = self._pack_line()
                if self._line_end == 0:
                    self._finished = True
                    return written

            count = min(end - written, self._line_end - self._line_offset)
            out[written : written + count] = self._line[self._line_offset : self._line_offset + count]
            self._line_offset += count
            written += count

        return written

    def _next_token(self) -> Token | None:
        """Classify the next input byte, joining CR LF pairs; None at end of input."""
        while True:
            if self._in_offset == self._in_end and not self._read_in():
                if self._seen_cr:
                    self._seen_cr = False
                    return Token(TokenCode.ENCODED, CR)
                return None

            c = self._in_buf[self._in_offset]
            self._in_offset += 1
            code = CODE_TABLE[c]

            if self._seen_cr:
                self._seen_cr = False
                if code is TokenCode.LF:
                    return Token(TokenCode.CRLF)
                # lone CR: emit it escaped, classify c on the next call
                self._in_offset -= 1
                return Token(TokenCode.ENCODED, CR)

            if code is TokenCode.CR:
                self._seen_cr = True
            elif code is TokenCode.LF:
                return Token(TokenCode.ENCODED, LF)
            else:
                return Token(code, c)

    def _pack_line(self) -> int:
        """Fill ``_line`` with the next encoded line and return its length; 0 at end of input."""
        line = self._line
        encoded = 0

        while True:
            token = self._retry
            if token is None:
                token = self._next_token()
                if token is None:
                    if encoded and self._ends_with_space(encoded):
                        # trailing whitespace would be stripped by a decoder
                        line[encoded] = ESCAPE
                        encoded += 1
                    return encoded
            else:
                self._retry = None

            if token.code is TokenCode.CRLF:
                if not self._ends_with_space(encoded):
                    line[encoded : encoded + 2] = CRLF
                    return encoded + 2
            elif token.code is TokenCode.ENCODED:
                if encoded + 3 < MAX_ENCODED_CHARACTERS_PER_LINE:
                    line[encoded] = ESCAPE
                    line[encoded + 1] = HEX_DIGITS[token.value >> 4]
                    line[encoded + 2] = HEX_DIGITS[token.value & 0xF]
                    encoded += 3
                    continue
            elif encoded + 1 < MAX_ENCODED_CHARACTERS_PER_LINE:
                line[encoded] = token.value
                encoded += 1
                continue

            line[encoded : encoded + 3] = SOFT_BREAK
            self._retry = token
            return encoded + 3

    def _ends_with_space(self, encoded: int) -> bool:
        return encoded != 0 and CODE_TABLE[self._line[encoded - 1]] is TokenCode.SPACE


class QuotedPrintableDecoder(Codec):
    """Decodes quoted-printable text into raw bytes, one encoded line at a time."""

    def __init__(self, source: ByteSource, buffer_size: int = DEFAULT_BUFFER_SIZE):
        super().__init__(source, buffer_size)
        self._encoded_line = bytearray(MAX_DECODED_LINE_INPUT)
        self._decoded_line = bytearray(MAX_DECODED_LINE_INPUT + len(CRLF))
        self._line_offset = 0
        self._line_length = 0
        self._line_number = 0
        self._reported_long_line = False

    def _transform(self, out: memoryview) -> int:
        written = 0
        end = len(out)

        while written != end:
            if self._line_offset == self._line_length and not self._decode_next_line():
                return written

            count = min(end - written, self._line_length - self._line_offset)
            out[written : written + count] = self._decoded_line[self._line_offset : self._line_offset + count]
            self._line_offset += count
            written += count

        return written

    def _decode_next_line(self) -> bool:
        """Decode encoded lines until one yields bytes; False at end of input."""
        while True:
            line = self._read_encoded_line()
            if line is None:
                return False
            length, seen_eol = line
            self._line_offset = 0
            self._line_length = self._decode_line(length, seen_eol)
            if self._line_length:
                return True

    def _read_encoded_line(self) -> tuple[int, bool] | None:
        """Copy the next encoded line, without its CRLF, into ``_encoded_line``.

        Returns:
            tuple[int, bool] | None: Line length and whether it ended with CRLF, or None if the
                input ended before any byte of a new line.
        """
        read = 0
        self._line_number += 1

        while read != MAX_DECODED_LINE_INPUT:
            if self._in_offset == self._in_end and not self._read_in():
                return (read, False) if read else None

            c = self._in_buf[self._in_offset]
            self._in_offset += 1
            if c == CR:
                self._expect_lf()
                return read, True

            self._encoded_line[read] = c
            read += 1

        if self._in_offset == self._in_end and not self._read_in():
            return read, False

        c = self._in_buf[self._in_offset]
        self._in_offset += 1
        if c != CR:
            raise QuotedPrintableDecodeError(
                f"line exceeds {MAX_DECODED_LINE_INPUT} characters, expecting CR", line=self._line_number
            )
        self._expect_lf()
        return read, True

    def _expect_lf(self) -> None:
        if self._in_offset == self._in_end and not self._read_in():
            raise QuotedPrintableDecodeError("end of file before line end (LF)", line=self._line_number)

        c = self._in_buf[self._in_offset]
        self._in_offset += 1
        if c != LF:
            raise QuotedPrintableDecodeError(f"expecting LF after CR, got {c:02x}", line=self._line_number)

    def _decode_line(self, length: int, seen_eol: bool) -> int:
        encoded = self._encoded_line
        decoded = self._decoded_line

        # trailing whitespace is transport padding
        while length and encoded[length - 1] in (SPACE, TAB):
            length -= 1

        if length > MAX_ENCODED_CHARACTERS_PER_LINE and not self._reported_long_line:
            self._reported_long_line = True
            logger.warning(
                f"{self.name}: line {self._line_number} has {length} characters, "
                f"more than the {MAX_ENCODED_CHARACTERS_PER_LINE} allowed by RFC 2045"
            )

        count = 0
        state = 0  # 0: normal, 1: seen '=', 2: seen '=X'
        high = 0

        for i in range(length):
            b = encoded[i]
            if state == 0:
                if b == ESCAPE:
                    state = 1
                elif b == TAB or 32 <= b <= 126:
                    decoded[count] = b
                    count += 1
                else:
                    raise QuotedPrintableDecodeError(f"invalid character: {b:02x}", line=self._line_number)
            elif state == 1:
                high = self._hex_value(b)
                state = 2
            else:
                decoded[count] = high << 4 | self._hex_value(b)
                count += 1
                state = 0

        if state == 0:
            if seen_eol:
                decoded[count : count + 2] = CRLF
                count += 2
        elif state == 2:
            raise QuotedPrintableDecodeError("seen line break in partial '=' escape", line=self._line_number)
        # state 1: soft line break

        return count

    def _hex_value(self, b: int) -> int:
        value = HEX_VALUES[b]
        if value < 0:
            raise QuotedPrintableDecodeError(f"invalid hex character: {b:02x}", line=self._line_number)
        return value
