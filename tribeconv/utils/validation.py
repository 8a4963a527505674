"""
Data validation utilities for step pattern data.
"""

from dataclasses import dataclass


@dataclass
class ValidationIssue:
    """A single structural problem found in a file."""

    severity: str  # "error", "warning", "info"
    area: str
    offset: int
    message: str
    expected: str = ""
    actual: str = ""


def clamp_midi_value(value: int) -> int:
    """Clamp a value into MIDI data range (0-127)."""
    return max(0, min(127, value))


def clamp_sequence_length(length: int, max_steps: int = 16) -> int:
    """
    Normalize a stored sequence length.

    Zero and anything above max_steps mean "full length".

    Args:
        length: Length as stored in the file
        max_steps: Maximum pattern length

    Returns:
        Length in 1..max_steps
    """
    if length <= 0 or length > max_steps:
        return max_steps
    return length
