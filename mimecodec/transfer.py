"""Dispatch from Content-Transfer-Encoding tokens to streaming codecs."""

from mimecodec.codecs import Base64Decoder, Base64Encoder, QuotedPrintableDecoder, QuotedPrintableEncoder
from mimecodec.config import CodecConfig, EncodingType
from mimecodec.sources import ByteSource, BytesSource, read_all
from mimecodec.utils.logger import logger

ENCODERS: dict[EncodingType, type[ByteSource]] = {
    EncodingType.BASE64: Base64Encoder,
    EncodingType.QUOTED_PRINTABLE: QuotedPrintableEncoder,
}

DECODERS: dict[EncodingType, type[ByteSource]] = {
    EncodingType.BASE64: Base64Decoder,
    EncodingType.QUOTED_PRINTABLE: QuotedPrintableDecoder,
}


def _wrap(
    source: ByteSource,
    encoding: EncodingType | str,
    codecs: dict[EncodingType, type[ByteSource]],
    config: CodecConfig | None,
) -> ByteSource:
    encoding = EncodingType(encoding)
    codec_cls = codecs.get(encoding)
    if codec_cls is None:
        logger.debug(f"Encoding '{encoding.value}' is an identity transform, source passed through")
        return source

    config = config or CodecConfig()
    return codec_cls(source, buffer_size=config.buffer_size)


def encoder_for(source: ByteSource, encoding: EncodingType | str, config: CodecConfig | None = None) -> ByteSource:
    """Wrap ``source`` so that reading yields its bytes in the given transfer encoding.

    Args:
        source (ByteSource): Raw data.
        encoding (EncodingType | str): Target encoding, e.g. ``"base64"``.
        config (CodecConfig | None): Codec settings. Defaults to ``CodecConfig()``.

    Returns:
        ByteSource: Encoding codec, or ``source`` itself for identity encodings.

    Raises:
        ValueError: If ``encoding`` is not a known transfer encoding.
    """
    return _wrap(source, encoding, ENCODERS, config)


def decoder_for(source: ByteSource, encoding: EncodingType | str, config: CodecConfig | None = None) -> ByteSource:
    """Wrap ``source`` so that reading yields the raw bytes of its transfer-encoded content.

    Args:
        source (ByteSource): Encoded data.
        encoding (EncodingType | str): Encoding of ``source``.
        config (CodecConfig | None): Codec settings. Defaults to ``CodecConfig()``.

    Returns:
        ByteSource: Decoding codec, or ``source`` itself for identity encodings.

    Raises:
        ValueError: If ``encoding`` is not a known transfer encoding.
    """
    return _wrap(source, encoding, DECODERS, config)


def encode_bytes(data: bytes, encoding: EncodingType | str, config: CodecConfig | None = None) -> bytes:
    """Encode a whole payload held in memory."""
    config = config or CodecConfig()
    return read_all(encoder_for(BytesSource(data), encoding, config), config.chunk_size)


def decode_bytes(data: bytes, encoding: EncodingType | str, config: CodecConfig | None = None) -> bytes:
    """Decode a whole payload held in memory.

    Raises:
        MalformedInputError: If ``data`` is not valid in the given encoding.
    """
    config = config or CodecConfig()
    return read_all(decoder_for(BytesSource(data), encoding, config), config.chunk_size)
