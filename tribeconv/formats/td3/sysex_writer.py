"""
TD-3 SysEx pattern dump writer.

Writes Pattern objects as a single Behringer pattern dump message.
"""

from pathlib import Path
from typing import Union

from tribeconv.errors import NilPatternError
from tribeconv.formats.td3.sysex_parser import (
    ATTR_ACCENT,
    ATTR_GATE,
    ATTR_SLIDE,
    ATTR_TIE,
    BEHRINGER_ID,
    SYSEX_END,
    SYSEX_START,
)
from tribeconv.models.pattern import MAX_STEPS, Pattern, Step
from tribeconv.utils.checksum import calculate_xor_checksum


def encode_note_byte(note: int) -> int:
    """Shift a MIDI note down two octaves into the 7-bit device range."""
    if note >= 24:
        return (note - 24) & 0x7F
    return note & 0x7F


def encode_attr_byte(step: Step, index: int = 1) -> int:
    """Pack gate/accent/slide/tie into the attribute byte. Step 0 is never tied."""
    attr = 0
    if step.gate:
        attr |= ATTR_GATE
    if step.accent:
        attr |= ATTR_ACCENT
    if step.slide:
        attr |= ATTR_SLIDE
    if step.tie and index > 0:
        attr |= ATTR_TIE
    return attr


class SysExWriter:
    """
    Writer for TD-3 SysEx pattern dumps.

    Message layout: F0 00 20 32 DD MM 40 [16 x (NN AA)] CS F7 (41 bytes).

    Example:
        SysExWriter.write(pattern, "pattern.syx")
    """

    MODEL_ID = 0x01
    PATTERN_DUMP = 0x40

    def __init__(self, device_id: int = 0x00):
        """
        Initialize writer.

        Args:
            device_id: Device ID byte (0-127)
        """
        self.device_id = device_id & 0x7F

    @classmethod
    def write(cls, pattern: Pattern, filepath: Union[str, Path], device_id: int = 0x00) -> None:
        """
        Write a Pattern to a .syx file.

        Args:
            pattern: Pattern to write
            filepath: Output file path
            device_id: Device ID byte
        """
        writer = cls(device_id)
        data = writer.to_bytes(pattern)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            f.write(data)

    def to_bytes(self, pattern: Pattern) -> bytes:
        """
        Convert Pattern to a SysEx pattern dump.

        Args:
            pattern: Pattern to convert

        Returns:
            Complete SysEx message

        Raises:
            NilPatternError: If pattern is None
        """
        if pattern is None:
            raise NilPatternError()

        payload = bytearray()
        for i in range(MAX_STEPS):
            step = pattern.steps[i] if i < len(pattern.steps) else Step()
            payload.append(encode_note_byte(step.note))
            payload.append(encode_attr_byte(step, i))

        msg = bytearray([SYSEX_START])
        msg.extend(BEHRINGER_ID)
        msg.extend([self.device_id, self.MODEL_ID, self.PATTERN_DUMP])
        msg.extend(payload)
        msg.append(calculate_xor_checksum(payload))
        msg.append(SYSEX_END)

        return bytes(msg)
