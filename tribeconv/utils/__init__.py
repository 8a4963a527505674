"""Utility functions for tribeconv."""

from tribeconv.utils.checksum import calculate_xor_checksum, verify_checksum
from tribeconv.utils.nibbles import join_nibbles, pack_bitmask, split_nibbles, unpack_bitmask

__all__ = [
    "calculate_xor_checksum",
    "verify_checksum",
    "join_nibbles",
    "pack_bitmask",
    "split_nibbles",
    "unpack_bitmask",
]
