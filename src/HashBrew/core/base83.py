"""Base-83 numeral decoding for BlurHash strings."""

ALPHABET = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "abcdefghijklmnopqrstuvwxyz#$%*+,-.:;=?@[]^_{|}~"
)

# Built once at import; read-only afterwards.
_DIGITS = {char: index for index, char in enumerate(ALPHABET)}


def decode_base83(text: str) -> int:
    """Decode a base-83 string into an unsigned integer.

    Characters outside the alphabet are skipped rather than rejected, so
    ``decode_base83("1 2") == decode_base83("12")``.
    """
    value = 0
    for char in text:
        digit = _DIGITS.get(char)
        if digit is None:
            continue
        value = value * 83 + digit
    return value


def is_base83(text: str) -> bool:
    """Return True when every character of ``text`` is in the alphabet."""
    return all(char in _DIGITS for char in text)
