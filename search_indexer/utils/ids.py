"""Base62 encoding of 64-bit store ids.

Ids are kept as integers in the store and rendered as base62 strings in
every public payload, including search documents.
"""

BASE62_CHARS = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def to_base62(num: int) -> str:
    """
    Encode a non-negative integer id as base62.

    Args:
        num: The id to encode

    Returns:
        Base62 string, "0" for zero

    Raises:
        ValueError: If num is negative
    """
    if num < 0:
        raise ValueError(f"id cannot be negative: {num}")
    if num == 0:
        return "0"

    chars = []
    while num > 0:
        num, rem = divmod(num, 62)
        chars.append(BASE62_CHARS[rem])
    return "".join(reversed(chars))


def from_base62(value: str) -> int:
    """
    Decode a base62 id string.

    Raises:
        ValueError: If value is empty or contains a non-base62 character
    """
    if not value:
        raise ValueError("empty base62 id")

    num = 0
    for char in value:
        digit = BASE62_CHARS.find(char)
        if digit == -1:
            raise ValueError(f"invalid base62 character {char!r} in {value!r}")
        num = num * 62 + digit
    return num
