"""Data models for step pattern representation."""

from tribeconv.models.pattern import MAX_STEPS, Pattern, Step, note_name

__all__ = [
    "MAX_STEPS",
    "Pattern",
    "Step",
    "note_name",
]
