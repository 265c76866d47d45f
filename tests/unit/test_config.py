import pytest
from pydantic import ValidationError

from mimecodec.config import DEFAULT_BUFFER_SIZE, DEFAULT_CHUNK_SIZE, CodecConfig, EncodingType


def test_defaults():
    config = CodecConfig()

    assert config.buffer_size == DEFAULT_BUFFER_SIZE == 0x8000
    assert config.chunk_size == DEFAULT_CHUNK_SIZE


def test_from_env(monkeypatch):
    monkeypatch.setenv("MIMECODEC_BUFFER_SIZE", "128")
    monkeypatch.setenv("MIMECODEC_CHUNK_SIZE", "16")

    config = CodecConfig.from_env()

    assert config.to_dict() == {"buffer_size": 128, "chunk_size": 16}


def test_from_env_overrides_take_precedence(monkeypatch):
    monkeypatch.setenv("MIMECODEC_BUFFER_SIZE", "128")
    monkeypatch.delenv("MIMECODEC_CHUNK_SIZE", raising=False)

    config = CodecConfig.from_env(buffer_size=4)

    assert config.buffer_size == 4
    assert config.chunk_size == DEFAULT_CHUNK_SIZE


@pytest.mark.parametrize("value", ["0", "-5", "lots"])
def test_from_env_rejects_invalid_values(monkeypatch, value):
    monkeypatch.setenv("MIMECODEC_BUFFER_SIZE", value)

    with pytest.raises(ValidationError):
        CodecConfig.from_env()


def test_unknown_fields_are_rejected():
    with pytest.raises(ValidationError):
        CodecConfig(line_length=80)


@pytest.mark.parametrize(
    "token, expected",
    [
        ("base64", EncodingType.BASE64),
        ("Base64", EncodingType.BASE64),
        (" QUOTED-PRINTABLE ", EncodingType.QUOTED_PRINTABLE),
        ("7BIT", EncodingType.SEVEN_BIT),
        ("binary", EncodingType.BINARY),
    ],
)
def test_encoding_type_lookup_is_case_insensitive(token, expected):
    assert EncodingType(token) is expected


def test_encoding_type_unknown_token():
    with pytest.raises(ValueError):
        EncodingType("uuencode")


def test_identity_encodings():
    assert [e for e in EncodingType if e.is_identity] == [
        EncodingType.SEVEN_BIT,
        EncodingType.EIGHT_BIT,
        EncodingType.BINARY,
    ]
