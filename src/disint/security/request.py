from typing import Mapping, Optional, Tuple

from .application import Application
from .errors import NoSignatureError
from .freshness import DEFAULT_TOLERANCE_SECONDS, verify_timestamp

HEADER_SIGNATURE = "X-Signature-Ed25519"
HEADER_TIMESTAMP = "X-Signature-Timestamp"


def get_header(headers: Mapping[str, str], key: str) -> Optional[str]:
    key_lower = key.lower()
    for name, value in headers.items():
        if name.lower() == key_lower:
            return value
    return None


def extract_signature_headers(headers: Mapping[str, str]) -> Tuple[str, str]:
    timestamp = get_header(headers, HEADER_TIMESTAMP)
    signature = get_header(headers, HEADER_SIGNATURE)
    if timestamp is None or signature is None:
        raise NoSignatureError()
    return timestamp, signature


def verify_request(
    application: Application,
    headers: Mapping[str, str],
    raw_body: bytes,
    *,
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    now: Optional[int] = None,
) -> None:
    timestamp, signature = extract_signature_headers(headers)
    verify_timestamp(timestamp, tolerance_seconds=tolerance_seconds, now=now)
    application.verify(raw_body, timestamp, signature)
