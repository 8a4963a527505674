"""
TD-3 SysEx pattern dump parser.

Parses Behringer System Exclusive pattern dumps.

Pattern dump format:
    F0 00 20 32 DD MM CC [16 x (NN AA)] CS F7

Where:
    - 00 20 32: Behringer extended manufacturer ID
    - DD: Device ID
    - MM: Model ID (0x01 = TD-3)
    - CC: Command (0x40 = pattern dump)
    - NN: Note byte, (MIDI note - 24) & 0x7F
    - AA: Attribute bits: bit0 gate, bit1 accent, bit2 slide, bit3 tie
    - CS: XOR of the 32 payload bytes, masked to 7 bits

Dumps sent by the device carry one extra addressing byte after the
command, which moves the payload to offset 8. The compact frame produced
by SysExWriter has no such byte and its payload starts at offset 7.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from tribeconv.errors import FormatError, UnrecognizedFormatError
from tribeconv.models.pattern import ACCENT_VELOCITY, DEFAULT_VELOCITY, MAX_STEPS, Pattern, Step
from tribeconv.utils.checksum import calculate_xor_checksum, verify_checksum
from tribeconv.utils.validation import clamp_midi_value

logger = logging.getLogger(__name__)

SYSEX_START = 0xF0
SYSEX_END = 0xF7

BEHRINGER_ID = b"\x00\x20\x32"

ATTR_GATE = 0x01
ATTR_ACCENT = 0x02
ATTR_SLIDE = 0x04
ATTR_TIE = 0x08


@dataclass
class SysExMessage:
    """
    Parsed pattern dump frame.

    Attributes:
        device_id: Device ID byte
        model_id: Model ID byte
        command: Command byte
        payload: The 32 note/attribute bytes
        checksum: Checksum byte as stored
        checksum_valid: Whether the stored checksum matches the payload
        raw: Original raw message bytes
    """

    device_id: int
    model_id: int
    command: int
    payload: bytes
    checksum: int = 0
    checksum_valid: bool = True
    raw: bytes = b""

    @property
    def step_pairs(self):
        """Iterate (note_byte, attr_byte) pairs."""
        for i in range(0, len(self.payload) - 1, 2):
            yield self.payload[i], self.payload[i + 1]


def extract_manufacturer_id(data: bytes) -> bytes:
    """
    Extract the manufacturer ID from a SysEx message.

    IDs starting with 0x00 are three bytes long, all others one byte.

    Raises:
        FormatError: If the message is too short or not a SysEx message
    """
    if len(data) < 4:
        raise FormatError("syx data too short for manufacturer ID")

    if data[0] != SYSEX_START:
        raise FormatError("invalid SysEx start")

    if data[1] == 0x00:
        if len(data) < 5:
            raise FormatError("syx data too short for extended manufacturer ID")
        return bytes(data[1:4])

    return bytes(data[1:2])


def is_behringer_sysex(data: bytes) -> bool:
    """Check if data is a SysEx message with the Behringer manufacturer ID."""
    return len(data) >= 5 and data[0] == SYSEX_START and bytes(data[1:4]) == BEHRINGER_ID


class SysExParser:
    """
    Parser for TD-3 SysEx pattern dumps.

    Example:
        parser = SysExParser()
        pattern = parser.parse_pattern(data)
    """

    MIN_LENGTH = 10
    PAYLOAD_OFFSET = 8
    COMPACT_PAYLOAD_OFFSET = 7
    PAYLOAD_SIZE = MAX_STEPS * 2

    PATTERN_NAME = "TD-3 SysEx Pattern"

    def __init__(self):
        self.message: Optional[SysExMessage] = None

    def parse_file(self, filepath: Union[str, Path]) -> Pattern:
        with open(filepath, "rb") as f:
            data = f.read()
        return self.parse_pattern(data)

    def parse_message(self, data: bytes) -> SysExMessage:
        """
        Validate a pattern dump frame and split it into fields.

        Args:
            data: Raw message bytes including F0 and F7

        Returns:
            Parsed message

        Raises:
            FormatError: Bad framing, non 7-bit data, or too short for 16 steps
            UnrecognizedFormatError: Manufacturer ID is not Behringer
        """
        data = bytes(data)

        if len(data) < self.MIN_LENGTH:
            raise FormatError(f"syx data too short: got {len(data)} bytes")

        if data[0] != SYSEX_START:
            raise FormatError(
                f"invalid SysEx: expected start byte 0x{SYSEX_START:02X}, got 0x{data[0]:02X}"
            )

        if data[-1] != SYSEX_END:
            raise FormatError(
                f"invalid SysEx: expected end byte 0x{SYSEX_END:02X}, got 0x{data[-1]:02X}"
            )

        if data[1:4] != BEHRINGER_ID:
            raise UnrecognizedFormatError(
                f"unrecognized SysEx format: manufacturer {data[1:4].hex(' ').upper()}"
            )

        for i in range(1, len(data) - 1):
            if data[i] > 0x7F:
                raise FormatError(
                    f"invalid SysEx: byte at position {i} is > 127 (0x{data[i]:02X})"
                )

        offset = self.payload_offset(len(data))
        if offset is None:
            raise FormatError(
                f"syx data too short: got {len(data)}, "
                f"need at least {self.PAYLOAD_OFFSET + self.PAYLOAD_SIZE}"
            )

        payload = data[offset : offset + self.PAYLOAD_SIZE]
        checksum = data[-2]

        message = SysExMessage(
            device_id=data[4],
            model_id=data[5],
            command=data[6],
            payload=payload,
            checksum=checksum,
            checksum_valid=verify_checksum(payload, checksum),
            raw=data,
        )
        self.message = message
        return message

    @classmethod
    def payload_offset(cls, length: int) -> Optional[int]:
        """Locate the step payload from the frame length, None if too short."""
        trailer = 2  # checksum + F7

        if length >= cls.PAYLOAD_OFFSET + cls.PAYLOAD_SIZE + trailer:
            return cls.PAYLOAD_OFFSET

        if length == cls.COMPACT_PAYLOAD_OFFSET + cls.PAYLOAD_SIZE + trailer:
            return cls.COMPACT_PAYLOAD_OFFSET

        return None

    def parse_pattern(self, data: bytes) -> Pattern:
        """
        Parse a pattern dump into a Pattern.

        Args:
            data: Raw SysEx bytes

        Returns:
            Pattern with 16 steps
        """
        message = self.parse_message(data)

        if not message.checksum_valid:
            logger.warning(
                "SysEx checksum mismatch: stored 0x%02X, computed 0x%02X",
                message.checksum,
                calculate_xor_checksum(message.payload),
            )

        steps = []
        for i, (note_byte, attr) in enumerate(message.step_pairs):
            accent = bool(attr & ATTR_ACCENT)
            steps.append(
                Step(
                    note=clamp_midi_value((note_byte & 0x7F) + 24),
                    gate=bool(attr & ATTR_GATE),
                    accent=accent,
                    slide=bool(attr & ATTR_SLIDE),
                    tie=bool(attr & ATTR_TIE) and i > 0,
                    velocity=ACCENT_VELOCITY if accent else DEFAULT_VELOCITY,
                )
            )

        logger.debug(
            "Decoded SysEx dump: device 0x%02X model 0x%02X command 0x%02X, %d gated steps",
            message.device_id,
            message.model_id,
            message.command,
            sum(1 for s in steps if s.gate),
        )

        return Pattern(
            name=self.PATTERN_NAME,
            steps=steps,
            length=MAX_STEPS,
            device_id=message.device_id,
            source_format="syx",
        )
