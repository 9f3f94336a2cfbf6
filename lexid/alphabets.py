"""Predefined symbol sets for key generators.

The order of the characters below does not matter: generators sort and
deduplicate their symbols on construction.
"""

# All visible ASCII characters
CHARS_ALL = "!\"#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[\\]^_`abcdefghijklmnopqrstuvwxyz{|}~"

# Visible ASCII without the characters JSON needs escaped (" and \)
CHARS_ALL_NO_ESCAPE = "!#$%&'()*+,-./0123456789:;<=>?@ABCDEFGHIJKLMNOPQRSTUVWXYZ[]^_`abcdefghijklmnopqrstuvwxyz{|}~"

CHARS_ALPHANUMERIC = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
CHARS_ALPHANUMERIC_LOWER = "abcdefghijklmnopqrstuvwxyz0123456789"

# URL-safe base64
CHARS_BASE64 = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

# Base58 (no 0, O, I, l)
CHARS_BASE58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"

ALPHABETS = {
    "all": CHARS_ALL,
    "all_no_escape": CHARS_ALL_NO_ESCAPE,
    "alphanumeric": CHARS_ALPHANUMERIC,
    "alphanumeric_lower": CHARS_ALPHANUMERIC_LOWER,
    "base64": CHARS_BASE64,
    "base58": CHARS_BASE58,
}


def resolve_alphabet(value: str) -> str:
    """Return the predefined alphabet called ``value``, or ``value`` itself."""
    return ALPHABETS.get(value.strip().lower(), value)
