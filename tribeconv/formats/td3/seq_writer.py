"""
TD-3 .seq file writer.

Writes Pattern objects to the 146-byte binary pattern format understood
by the device and its editor software.
"""

import logging
from pathlib import Path
from typing import Union

from tribeconv.errors import NilPatternError
from tribeconv.formats.td3.seq_reader import SeqLayout
from tribeconv.models.pattern import MAX_STEPS, Pattern, Step
from tribeconv.utils.nibbles import flags_to_mask, pack_bitmask, split_nibbles

logger = logging.getLogger(__name__)


def encode_string_block(text: str, size: int) -> bytes:
    """
    Encode a length-prefixed 16-bit string block, zero padded to `size`.

    Layout: 4-byte big-endian byte length, then big-endian code units.
    """
    body = text.encode("utf-16-be")
    block = len(body).to_bytes(4, "big") + body
    if len(block) > size:
        raise ValueError(f"String {text!r} does not fit in a {size}-byte block")
    return block.ljust(size, b"\x00")


class SeqWriter:
    """
    Writer for TD-3 .seq pattern files.

    The output is always a full 146-byte file. Steps beyond the pattern's
    own step count are written as rests with note 0.

    Example:
        pattern = Pattern.create_empty("MY LINE")
        SeqWriter.write(pattern, "myline.seq")
    """

    DEVICE_NAME = "TD-3"
    VERSION = "1.3.7"

    # Bytes of structure following the fill field, as the editor writes it
    FILL_LENGTH = 0x70

    def __init__(self):
        self._buffer: bytearray = bytearray()

    @classmethod
    def write(cls, pattern: Pattern, filepath: Union[str, Path]) -> None:
        """
        Write a Pattern to a .seq file.

        Args:
            pattern: Pattern to write
            filepath: Output file path
        """
        writer = cls()
        data = writer.to_bytes(pattern)

        filepath = Path(filepath)
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "wb") as f:
            f.write(data)

    def to_bytes(self, pattern: Pattern) -> bytes:
        """
        Convert Pattern to .seq binary format.

        Args:
            pattern: Pattern to convert

        Returns:
            Complete .seq file data (146 bytes)

        Raises:
            NilPatternError: If pattern is None
        """
        if pattern is None:
            raise NilPatternError()

        self._buffer = bytearray(SeqLayout.FILE_SIZE)

        self._write_header()
        self._write_steps(pattern)
        self._write_length(pattern)

        if pattern.triplet:
            self._buffer[SeqLayout.TRIPLET + 1] = 0x01

        return bytes(self._buffer)

    def _write_header(self) -> None:
        """Write magic, device name, version and fill blocks."""
        buf = self._buffer
        buf[0:4] = SeqLayout.MAGIC
        buf[SeqLayout.DEVICE_NAME : SeqLayout.VERSION] = encode_string_block(
            self.DEVICE_NAME, SeqLayout.VERSION - SeqLayout.DEVICE_NAME
        )
        buf[SeqLayout.VERSION : SeqLayout.FILL] = encode_string_block(
            self.VERSION, SeqLayout.FILL - SeqLayout.VERSION
        )
        buf[SeqLayout.FILL : SeqLayout.NOTES] = self.FILL_LENGTH.to_bytes(2, "big") + b"\x00\x00"

    def _write_steps(self, pattern: Pattern) -> None:
        """Write notes, accents, slides and the tie/rest masks."""
        buf = self._buffer

        if len(pattern.steps) > MAX_STEPS:
            logger.warning(
                "Pattern has %d steps, only the first %d are written", len(pattern.steps), MAX_STEPS
            )

        steps = list(pattern.steps[:MAX_STEPS])
        steps.extend(Step() for _ in range(MAX_STEPS - len(steps)))

        for i, step in enumerate(steps):
            note_value = max(0, step.note - SeqLayout.NOTE_OFFSET)
            high, low = split_nibbles(note_value)
            buf[SeqLayout.NOTES + i * 2] = high
            buf[SeqLayout.NOTES + i * 2 + 1] = low

            if step.accent:
                buf[SeqLayout.ACCENTS + i * 2 + 1] = 0x01
            if step.slide:
                buf[SeqLayout.SLIDES + i * 2 + 1] = 0x01

        # Tie mask: 1 = new note, 0 = sustain. Step 0 always starts a note.
        new_note_mask = flags_to_mask([not s.tie or i == 0 for i, s in enumerate(steps)])
        rest_mask = flags_to_mask([not s.gate for s in steps])

        buf[SeqLayout.TIE : SeqLayout.TIE + 4] = pack_bitmask(new_note_mask)
        buf[SeqLayout.REST : SeqLayout.REST + 4] = pack_bitmask(rest_mask)

    def _write_length(self, pattern: Pattern) -> None:
        seq_length = min(len(pattern.steps), MAX_STEPS)
        self._buffer[SeqLayout.LENGTH] = seq_length // 16
        self._buffer[SeqLayout.LENGTH + 1] = seq_length % 16
