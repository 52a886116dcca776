from Crypto.PublicKey import ECC
from Crypto.Signature import eddsa

from .errors import KeyFormatError, SignatureFormatError, VerificationError
from .hexcodec import HexDecodeError, decode_hex, encode_hex

_ED25519_PUBLIC_KEY_SIZE = 32


def build_signed_message(timestamp: str, body: bytes) -> bytes:
    return timestamp.encode("utf-8") + bytes(body)


class Application:
    """Holds the Ed25519 public key an interaction sender signs with.

    Instances are immutable and may be shared by any number of concurrent
    request handlers without locking.
    """

    __slots__ = ("_public_key", "_public_key_hex")

    def __init__(self, public_key: ECC.EccKey, public_key_hex: str) -> None:
        self._public_key = public_key
        self._public_key_hex = public_key_hex

    @classmethod
    def from_public_key(cls, public_key: str) -> "Application":
        try:
            key_bytes = decode_hex(public_key)
        except HexDecodeError as exc:
            raise KeyFormatError() from exc
        if len(key_bytes) != _ED25519_PUBLIC_KEY_SIZE:
            raise KeyFormatError()
        try:
            key = eddsa.import_public_key(key_bytes)
        except ValueError as exc:
            raise KeyFormatError() from exc
        return cls(key, encode_hex(key_bytes))

    @property
    def public_key_hex(self) -> str:
        return self._public_key_hex

    def verify(self, body: bytes, timestamp: str, signature: str) -> None:
        try:
            signature_bytes = decode_hex(signature)
        except HexDecodeError as exc:
            raise SignatureFormatError() from exc
        message = build_signed_message(timestamp, body)
        verifier = eddsa.new(self._public_key, "rfc8032")
        try:
            verifier.verify(message, signature_bytes)
        except ValueError:
            raise VerificationError() from None

    def __repr__(self) -> str:
        return "Application(public_key=(...))"
