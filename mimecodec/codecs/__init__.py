from .base import Codec
from .base64 import Base64Decoder, Base64Encoder, predicted_base64_length
from .quoted_printable import QuotedPrintableDecoder, QuotedPrintableEncoder

__all__ = [
    "Base64Decoder",
    "Base64Encoder",
    "Codec",
    "QuotedPrintableDecoder",
    "QuotedPrintableEncoder",
    "predicted_base64_length",
]
