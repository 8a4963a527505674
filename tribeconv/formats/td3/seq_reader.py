"""
TD-3 .seq file reader.

Reads 146-byte binary pattern dumps and converts them to the common
Pattern model.

File layout (all multi-byte values nibble packed, one nibble per byte):

    0x00  4   Magic 23 98 54 76
    0x04  12  Device name block (length-prefixed 16-bit string)
    0x10  16  Version block (length-prefixed 16-bit string)
    0x20  4   Fill/length: bytes of remaining structure
    0x24  32  Notes, 16 x (high nibble, low nibble)
    0x44  32  Accents, 16 x 2 bytes, flag in bit 0 of the 2nd byte
    0x64  32  Slides, 16 x 2 bytes, flag in bit 0 of the 2nd byte
    0x84  2   Triplet flag, bit 0 of the 2nd byte
    0x86  2   Sequence length (high nibble, low nibble)
    0x88  2   Reserved
    0x8A  4   Tie mask (bit = 1 means new note, 0 means sustain)
    0x8E  4   Rest mask (bit = 1 means rest)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from tribeconv.errors import FormatError
from tribeconv.models.pattern import ACCENT_VELOCITY, DEFAULT_VELOCITY, MAX_STEPS, Pattern, Step
from tribeconv.utils.nibbles import join_nibbles, mask_to_flags, unpack_bitmask
from tribeconv.utils.validation import clamp_sequence_length

logger = logging.getLogger(__name__)


class SeqLayout:
    """Byte offsets of the TD-3 .seq format."""

    MAGIC = b"\x23\x98\x54\x76"

    HEADER_SIZE = 32
    FILL_SIZE = 4

    DEVICE_NAME = 0x04
    VERSION = 0x10
    FILL = 0x20
    NOTES = HEADER_SIZE + FILL_SIZE  # 0x24
    ACCENTS = NOTES + 32  # 0x44
    SLIDES = ACCENTS + 32  # 0x64
    TRIPLET = SLIDES + 32  # 0x84
    LENGTH = TRIPLET + 2  # 0x86
    RESERVED = LENGTH + 2  # 0x88
    TIE = RESERVED + 2  # 0x8A
    REST = TIE + 4  # 0x8E

    FILE_SIZE = REST + 4  # 146

    # Device octave 0 is MIDI octave 2
    NOTE_OFFSET = 24


@dataclass
class SeqHeader:
    """Descriptive header fields of a .seq file."""

    device_name: str
    version: str
    fill_length: int
    triplet: bool
    sequence_length: int


def decode_string_block(block: bytes) -> str:
    """
    Decode a length-prefixed 16-bit string block.

    The first four bytes hold the byte length (big-endian), followed by
    16-bit big-endian code units. Damaged lengths are clipped to the block.
    """
    if len(block) < 4:
        return ""

    length = int.from_bytes(block[:4], "big")
    body = block[4 : 4 + min(length, len(block) - 4)]
    body = body[: len(body) - (len(body) % 2)]
    return body.decode("utf-16-be", errors="replace").rstrip("\x00")


class SeqReader:
    """
    Reader for TD-3 .seq pattern files.

    Example:
        pattern = SeqReader.read("pattern.seq")
        print(f"Pattern: {pattern.name}, {pattern.length} steps")
    """

    PATTERN_NAME = "TD-3 Pattern"

    def __init__(self, device_id: int = 0):
        self.device_id = device_id

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> Pattern:
        """
        Read a .seq file and return a Pattern.

        Args:
            filepath: Path to .seq file

        Returns:
            Parsed Pattern object
        """
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> Pattern:
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            data = f.read()

        return self.parse_bytes(data)

    def parse_bytes(self, data: bytes) -> Pattern:
        """
        Parse .seq data from bytes.

        Args:
            data: Raw .seq file contents (at least 146 bytes)

        Returns:
            Parsed Pattern object

        Raises:
            FormatError: If the data is too short or the magic is wrong
        """
        self._check_structure(data)

        raw_length = join_nibbles(data[SeqLayout.LENGTH], data[SeqLayout.LENGTH + 1])
        seq_length = clamp_sequence_length(raw_length, MAX_STEPS)
        if seq_length != raw_length:
            logger.warning("Stored sequence length %d out of range, using %d", raw_length, seq_length)

        tie_mask = unpack_bitmask(data[SeqLayout.TIE : SeqLayout.TIE + 4])
        rest_mask = unpack_bitmask(data[SeqLayout.REST : SeqLayout.REST + 4])

        new_notes = mask_to_flags(tie_mask)
        rests = mask_to_flags(rest_mask)

        steps = [
            self._parse_step(data, i, new_notes[i], rests[i]) for i in range(seq_length)
        ]

        pattern = Pattern(
            name=self.PATTERN_NAME,
            steps=steps,
            length=seq_length,
            device_id=self.device_id,
            triplet=bool(data[SeqLayout.TRIPLET + 1] & 0x01),
            source_format="seq",
        )

        logger.debug(
            "Decoded .seq: %d steps, %d gated, tie=0x%04X rest=0x%04X",
            seq_length,
            len(pattern.active_steps),
            tie_mask,
            rest_mask,
        )
        return pattern

    def _check_structure(self, data: bytes) -> None:
        if len(data) < SeqLayout.FILE_SIZE:
            raise FormatError(
                f"seq data too short: got {len(data)} bytes, need at least {SeqLayout.FILE_SIZE}"
            )

        if data[:4] != SeqLayout.MAGIC:
            raise FormatError(
                f"Invalid TD-3 seq file: wrong magic bytes {data[:4].hex(' ').upper()}"
            )

    def _parse_step(self, data: bytes, index: int, new_note: bool, is_rest: bool) -> Step:
        """
        Decode one step.

        Args:
            data: Complete .seq data
            index: Step index (0-15)
            new_note: Tie mask bit for this step (False means sustain)
            is_rest: Rest mask bit for this step
        """
        note_at = SeqLayout.NOTES + index * 2
        note_value = join_nibbles(data[note_at], data[note_at + 1])
        midi_note = min(127, note_value + SeqLayout.NOTE_OFFSET)

        accent = bool(data[SeqLayout.ACCENTS + index * 2 + 1] & 0x01)
        slide = bool(data[SeqLayout.SLIDES + index * 2 + 1] & 0x01)

        return Step(
            note=midi_note,
            gate=not is_rest,
            accent=accent,
            slide=slide,
            tie=not new_note and index > 0,
            velocity=ACCENT_VELOCITY if accent else DEFAULT_VELOCITY,
        )

    @classmethod
    def read_header(cls, data: bytes) -> SeqHeader:
        """
        Decode the descriptive header fields without building a Pattern.

        Args:
            data: Raw .seq data (at least 146 bytes)

        Returns:
            SeqHeader with device name, version and length fields
        """
        cls()._check_structure(data)

        return SeqHeader(
            device_name=decode_string_block(data[SeqLayout.DEVICE_NAME : SeqLayout.VERSION]),
            version=decode_string_block(data[SeqLayout.VERSION : SeqLayout.FILL]),
            fill_length=int.from_bytes(data[SeqLayout.FILL : SeqLayout.FILL + 2], "big"),
            triplet=bool(data[SeqLayout.TRIPLET + 1] & 0x01),
            sequence_length=join_nibbles(data[SeqLayout.LENGTH], data[SeqLayout.LENGTH + 1]),
        )

    @classmethod
    def can_read(cls, filepath: Union[str, Path]) -> bool:
        """
        Check if a file can be read as a TD-3 .seq file.

        Args:
            filepath: Path to check

        Returns:
            True if file has the .seq magic and minimum size
        """
        filepath = Path(filepath)

        if not filepath.exists():
            return False

        with open(filepath, "rb") as f:
            data = f.read(SeqLayout.FILE_SIZE)

        return len(data) >= SeqLayout.FILE_SIZE and data[:4] == SeqLayout.MAGIC
