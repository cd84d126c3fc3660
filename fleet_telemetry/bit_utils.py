"""
Bit and byte helpers shared by the P1 and P2 decoders
Positions counted from the end are resolved with explicit length arithmetic
"""

import re
from typing import List

_HEX_PATTERN = re.compile(r'[0-9A-Fa-f]+')
_DIGIT_PATTERN = re.compile(r'[0-9]+')


def is_hex_string(value: str) -> bool:
    """True if value is a non-empty string of hex digits."""
    return bool(value) and _HEX_PATTERN.fullmatch(value) is not None


def is_digit_string(value: str) -> bool:
    """True if value is a non-empty string of ASCII decimal digits."""
    return bool(value) and _DIGIT_PATTERN.fullmatch(value) is not None


def require_length(value: str, length: int) -> str:
    """Ensure a record has the layout length the extraction relies on."""
    if len(value) != length:
        raise ValueError(f"Expected {length} characters, have {len(value)}")
    return value


def hex_to_binary(hex_value: str, length: int = 16) -> str:
    """Render a hex string as a zero-padded binary string of the given width."""
    return format(int(hex_value, 16), 'b').zfill(length)


def bits_to_int(bits: str) -> int:
    """Interpret a binary string as an unsigned integer."""
    return int(bits, 2)


def slice_from_end(value: str, start: int, end: int = 0) -> str:
    """
    Return the characters between two offsets counted from the end

    Args:
        value: Source string
        start: Offset of the first character from the end (e.g. 8 for -8)
        end: Offset one past the last character from the end (0 = to the end)
    """
    length = len(value)
    if start > length or end > start or end < 0:
        raise ValueError(f"Offsets -{start}..-{end} outside of {length} characters")
    return value[length - start:length - end]


def char_from_end(value: str, offset: int) -> str:
    """Return the single character `offset` positions from the end (1 = last)."""
    length = len(value)
    if offset < 1 or offset > length:
        raise ValueError(f"Offset -{offset} outside of {length} characters")
    return value[length - offset]


def split_chunks(value: str, size: int) -> List[str]:
    """Split a string into consecutive chunks of `size` characters."""
    return [value[i:i + size] for i in range(0, len(value), size)]


def split_bytes(chunk: str) -> List[str]:
    """Split a hex chunk into its 2-character bytes."""
    return split_chunks(chunk, 2)


def xor_chunk(chunk: str, key: int, width: int = 8) -> str:
    """XOR a hex chunk with an integer key and render it as uppercase hex."""
    mask = (1 << (width * 4)) - 1
    value = (int(chunk, 16) ^ key) & mask
    return format(value, 'X').zfill(width)


def swap_bytes(first: str, second: str) -> str:
    """Concatenate two hex bytes in swapped order (second, then first)."""
    return second + first


def hex_to_ascii(hex_value: str) -> str:
    """Convert each hex byte to its character and drop NUL characters."""
    chars = [chr(int(byte, 16)) for byte in split_bytes(hex_value)]
    return ''.join(chars).replace('\0', '')
