_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class HexDecodeError(ValueError):
    pass


def decode_hex(text: str) -> bytes:
    """Decode hexadecimal text into bytes.

    Both letter cases are accepted. Anything else, including whitespace,
    ``0x`` prefixes and non-ASCII characters, raises ``HexDecodeError``.
    """
    if not isinstance(text, str):
        raise HexDecodeError("hex input must be a string")
    if len(text) % 2 != 0:
        raise HexDecodeError("hex input has odd length")
    for char in text:
        if char not in _HEX_DIGITS:
            raise HexDecodeError("hex input contains a non-hex character")
    return bytes.fromhex(text)


def encode_hex(data: bytes) -> str:
    return bytes(data).hex()
