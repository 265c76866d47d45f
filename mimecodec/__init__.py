from mimecodec.codecs import (
    Base64Decoder,
    Base64Encoder,
    Codec,
    QuotedPrintableDecoder,
    QuotedPrintableEncoder,
    predicted_base64_length,
)
from mimecodec.config import CodecConfig, EncodingType
from mimecodec.exceptions import (
    Base64DecodeError,
    BufferContractError,
    MalformedInputError,
    MimeCodecError,
    QuotedPrintableDecodeError,
)
from mimecodec.sources import ByteSource, BytesSource, StreamSource, read_all
from mimecodec.transfer import decode_bytes, decoder_for, encode_bytes, encoder_for

__version__ = "0.1.0"

__all__ = [
    "Base64DecodeError",
    "Base64Decoder",
    "Base64Encoder",
    "BufferContractError",
    "ByteSource",
    "BytesSource",
    "Codec",
    "CodecConfig",
    "EncodingType",
    "MalformedInputError",
    "MimeCodecError",
    "QuotedPrintableDecodeError",
    "QuotedPrintableDecoder",
    "QuotedPrintableEncoder",
    "StreamSource",
    "decode_bytes",
    "decoder_for",
    "encode_bytes",
    "encoder_for",
    "predicted_base64_length",
    "read_all",
]
