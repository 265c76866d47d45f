import enum
import os
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BUFFER_SIZE = 0x8000
DEFAULT_CHUNK_SIZE = 8192


class EncodingType(str, enum.Enum):
    """Content-Transfer-Encoding tokens.

    Only ``BASE64`` and ``QUOTED_PRINTABLE`` transform data; the others are identity encodings.
    Lookup by value is case-insensitive, so header tokens such as ``"Base64"`` resolve.
    """

    BASE64 = "base64"
    QUOTED_PRINTABLE = "quoted-printable"
    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"

    @classmethod
    def _missing_(cls, value: object):
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @property
    def is_identity(self) -> bool:
        return self not in (EncodingType.BASE64, EncodingType.QUOTED_PRINTABLE)


class CodecConfig(BaseModel):
    """Configuration for codec pipelines.

    Attributes:
        buffer_size (int): Maximum number of bytes a codec pulls from its inner source per read.
        chunk_size (int): Number of bytes requested per read when a pipeline is materialized.
    """

    buffer_size: int = Field(default=DEFAULT_BUFFER_SIZE, gt=0)
    chunk_size: int = Field(default=DEFAULT_CHUNK_SIZE, gt=0)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def _from_env(cls) -> dict[str, Any]:
        """Pick just the env-vars we care about."""
        return {
            k: v
            for k, v in {
                "buffer_size": os.getenv("MIMECODEC_BUFFER_SIZE"),
                "chunk_size": os.getenv("MIMECODEC_CHUNK_SIZE"),
            }.items()
            if v is not None
        }

    @classmethod
    def from_env(cls, **overrides: Any) -> "CodecConfig":
        """Build a config from environment variables, with explicit overrides taking precedence.

        Raises:
            pydantic.ValidationError: If a value is not a positive integer.
        """
        return cls.model_validate({**cls._from_env(), **overrides})

    def to_dict(self, **kwargs) -> dict:
        return self.model_dump(**kwargs)
