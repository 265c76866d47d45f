import pytest

from mimecodec import (
    Base64Decoder,
    Base64Encoder,
    BytesSource,
    CodecConfig,
    EncodingType,
    MalformedInputError,
    QuotedPrintableDecoder,
    QuotedPrintableEncoder,
    decode_bytes,
    decoder_for,
    encode_bytes,
    encoder_for,
    read_all,
)


@pytest.mark.parametrize(
    "encoding, encoder_cls, decoder_cls",
    [
        (EncodingType.BASE64, Base64Encoder, Base64Decoder),
        ("quoted-printable", QuotedPrintableEncoder, QuotedPrintableDecoder),
    ],
)
def test_factories_pick_codec(encoding, encoder_cls, decoder_cls):
    source = BytesSource(b"")

    encoder = encoder_for(source, encoding)
    decoder = decoder_for(source, encoding)

    assert isinstance(encoder, encoder_cls)
    assert isinstance(decoder, decoder_cls)
    assert encoder.source is source


@pytest.mark.parametrize("encoding", ["7bit", "8bit", "binary", EncodingType.BINARY])
def test_identity_encodings_return_source(encoding):
    source = BytesSource(b"data")

    assert encoder_for(source, encoding) is source
    assert decoder_for(source, encoding) is source


def test_unknown_encoding():
    with pytest.raises(ValueError):
        encoder_for(BytesSource(b""), "x-uuencode")


def test_config_buffer_size_is_applied():
    codec = encoder_for(BytesSource(b""), "base64", CodecConfig(buffer_size=3))

    assert len(codec._in_buf) == 3


def test_encode_and_decode_bytes():
    assert encode_bytes(b"hello", "base64") == b"aGVsbG8=\r\n"
    assert decode_bytes(b"aGVsbG8=\r\n", "BASE64") == b"hello"
    assert encode_bytes(b"A\nB", EncodingType.QUOTED_PRINTABLE) == b"A=0AB"
    assert decode_bytes(b"A=0AB", EncodingType.QUOTED_PRINTABLE) == b"A\nB"
    assert encode_bytes(b"raw\xff", "8bit") == b"raw\xff"


def test_decode_bytes_malformed():
    with pytest.raises(MalformedInputError):
        decode_bytes(b"=", "base64")


def test_pipelines_compose():
    payload = bytes(range(256)) * 4
    config = CodecConfig(buffer_size=7, chunk_size=5)

    encoded = encoder_for(encoder_for(BytesSource(payload), "quoted-printable", config), "base64", config)
    decoded = decoder_for(decoder_for(BytesSource(read_all(encoded)), "base64", config), "quoted-printable", config)

    assert read_all(decoded, 3) == payload
