from .application import Application, build_signed_message
from .errors import (
    InteractionAuthError,
    KeyFormatError,
    NoSignatureError,
    SignatureFormatError,
    TimestampError,
    TimestampFormatError,
    VerificationError,
)
from .freshness import DEFAULT_TOLERANCE_SECONDS, is_fresh, parse_timestamp, verify_timestamp
from .hexcodec import HexDecodeError, decode_hex, encode_hex
from .middleware import InteractionAuthMiddleware
from .receiver import InteractionReceiver, normalize_handler_result
from .request import (
    HEADER_SIGNATURE,
    HEADER_TIMESTAMP,
    extract_signature_headers,
    get_header,
    verify_request,
)

__all__ = [
    "Application",
    "DEFAULT_TOLERANCE_SECONDS",
    "HEADER_SIGNATURE",
    "HEADER_TIMESTAMP",
    "HexDecodeError",
    "InteractionAuthError",
    "InteractionAuthMiddleware",
    "InteractionReceiver",
    "KeyFormatError",
    "NoSignatureError",
    "SignatureFormatError",
    "TimestampError",
    "TimestampFormatError",
    "VerificationError",
    "build_signed_message",
    "decode_hex",
    "encode_hex",
    "extract_signature_headers",
    "get_header",
    "is_fresh",
    "normalize_handler_result",
    "parse_timestamp",
    "verify_request",
    "verify_timestamp",
]
