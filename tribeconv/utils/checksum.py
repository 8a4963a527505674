"""
SysEx checksum calculation utilities.

The TD-3 pattern dump closes its payload with a single checksum byte:
1. XOR all 32 step payload bytes together
2. Keep the lower 7 bits so the byte is valid MIDI data
"""

from typing import List, Union


def calculate_xor_checksum(data: Union[bytes, List[int]]) -> int:
    """
    Calculate the 7-bit XOR checksum over payload bytes.

    Args:
        data: Payload bytes (note/attribute pairs, without header or F7)

    Returns:
        Checksum value (0-127)
    """
    checksum = 0
    for byte in data:
        checksum ^= byte
    return checksum & 0x7F


def verify_checksum(data: Union[bytes, List[int]], expected_checksum: int) -> bool:
    """
    Verify a payload checksum.

    Args:
        data: Bytes the checksum was calculated over
        expected_checksum: The checksum byte from the message

    Returns:
        True if checksum is valid, False otherwise
    """
    return calculate_xor_checksum(data) == expected_checksum
