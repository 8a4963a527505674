"""
Nibble packing utilities for the TD-3 binary pattern format.

The .seq format never stores a full byte value in one byte. Values are
split into 4-bit nibbles, one nibble per byte:

Nibble pair (notes, sequence length):
- byte 0 holds the high nibble, byte 1 the low nibble
- value = b0 * 16 + b1

Swapped-nibble bitmask (tie and rest masks, 16 bits over 4 bytes):
- bits 0-3   live in byte 1
- bits 4-7   live in byte 0
- bits 8-11  live in byte 3
- bits 12-15 live in byte 2
- value = b1 + (b0 << 4) + (b3 << 8) + (b2 << 12)

The swap between the low and high byte pairs is what existing device
software writes, so it has to be reproduced exactly.

Example:
    Mask:   0b0000_0001_0010_0011 (0x0123)
    Stored: [0x02, 0x03, 0x00, 0x01]
"""

from typing import List, Sequence, Tuple, Union


def split_nibbles(value: int) -> Tuple[int, int]:
    """
    Split a byte value into (high, low) nibbles.

    Args:
        value: Value 0-255

    Returns:
        Tuple of (value // 16, value % 16)
    """
    value &= 0xFF
    return value >> 4, value & 0x0F


def join_nibbles(high: int, low: int) -> int:
    """
    Join two stored nibble bytes into one value.

    The stored bytes are used as-is (high * 16 + low), without masking, so
    out-of-range bytes from a damaged file produce out-of-range values the
    caller can clamp.
    """
    return high * 16 + low


def unpack_bitmask(data: Union[bytes, Sequence[int]]) -> int:
    """
    Decode a 16-bit mask stored across four nibble bytes.

    Args:
        data: Exactly four stored bytes (b0, b1, b2, b3)

    Returns:
        16-bit mask value

    Example:
        >>> unpack_bitmask(bytes([0x02, 0x03, 0x00, 0x01]))
        291
    """
    if len(data) != 4:
        raise ValueError(f"Bitmask needs 4 bytes, got {len(data)}")

    b0, b1, b2, b3 = data
    return b1 + (b0 << 4) + (b3 << 8) + (b2 << 12)


def pack_bitmask(mask: int) -> bytes:
    """
    Encode a 16-bit mask into four nibble bytes.

    Inverse of unpack_bitmask for masks that fit in 16 bits.

    Example:
        >>> pack_bitmask(0x0123)
        b'\\x02\\x03\\x00\\x01'
    """
    return bytes(
        [
            (mask >> 4) & 0x0F,
            mask & 0x0F,
            (mask >> 12) & 0x0F,
            (mask >> 8) & 0x0F,
        ]
    )


def flags_to_mask(flags: Sequence[bool]) -> int:
    """Build a bitmask where bit i is set when flags[i] is true."""
    mask = 0
    for i, flag in enumerate(flags):
        if flag:
            mask |= 1 << i
    return mask


def mask_to_flags(mask: int, count: int = 16) -> List[bool]:
    """Expand the lowest `count` bits of a mask into a list of booleans."""
    return [bool(mask & (1 << i)) for i in range(count)]
