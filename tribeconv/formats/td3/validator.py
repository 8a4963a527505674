"""
Structural validation of TD-3 .seq and .syx files.

Unlike the readers, which stop at the first fatal problem, the validators
collect every issue they can find so a user can see what is wrong with a
damaged file.
"""

from typing import List

from tribeconv.formats.td3.seq_reader import SeqLayout
from tribeconv.formats.td3.sysex_parser import (
    BEHRINGER_ID,
    SYSEX_END,
    SYSEX_START,
    SysExParser,
)
from tribeconv.models.pattern import MAX_STEPS
from tribeconv.utils.checksum import calculate_xor_checksum
from tribeconv.utils.nibbles import join_nibbles
from tribeconv.utils.validation import ValidationIssue


def _nibble_issues(data: bytes, start: int, size: int, area: str) -> List[ValidationIssue]:
    issues = []
    for offset in range(start, start + size):
        if data[offset] > 0x0F:
            issues.append(
                ValidationIssue(
                    "warning",
                    area,
                    offset,
                    "Nibble field holds a value above 0x0F",
                    expected="0x00-0x0F",
                    actual=f"0x{data[offset]:02X}",
                )
            )
    return issues


def validate_seq(data: bytes) -> List[ValidationIssue]:
    """
    Validate .seq file structure.

    Args:
        data: Raw .seq contents

    Returns:
        List of issues, empty if the file is clean
    """
    issues: List[ValidationIssue] = []

    if len(data) < SeqLayout.FILE_SIZE:
        issues.append(
            ValidationIssue(
                "error",
                "FILE",
                0,
                "File too short",
                expected=f">= {SeqLayout.FILE_SIZE} bytes",
                actual=f"{len(data)} bytes",
            )
        )
        return issues

    if len(data) > SeqLayout.FILE_SIZE:
        issues.append(
            ValidationIssue(
                "info",
                "FILE",
                SeqLayout.FILE_SIZE,
                "Trailing bytes after pattern data are ignored",
                actual=f"{len(data) - SeqLayout.FILE_SIZE} bytes",
            )
        )

    if data[:4] != SeqLayout.MAGIC:
        issues.append(
            ValidationIssue(
                "error",
                "MAGIC",
                0,
                "Wrong magic bytes",
                expected=SeqLayout.MAGIC.hex(" ").upper(),
                actual=bytes(data[:4]).hex(" ").upper(),
            )
        )

    length = join_nibbles(data[SeqLayout.LENGTH], data[SeqLayout.LENGTH + 1])
    if not 1 <= length <= MAX_STEPS:
        issues.append(
            ValidationIssue(
                "warning",
                "LENGTH",
                SeqLayout.LENGTH,
                f"Sequence length out of range, {MAX_STEPS} steps will be used",
                expected=f"1-{MAX_STEPS}",
                actual=str(length),
            )
        )

    issues.extend(_nibble_issues(data, SeqLayout.NOTES, 32, "NOTES"))
    issues.extend(_nibble_issues(data, SeqLayout.LENGTH, 2, "LENGTH"))
    issues.extend(_nibble_issues(data, SeqLayout.TIE, 4, "TIE"))
    issues.extend(_nibble_issues(data, SeqLayout.REST, 4, "REST"))

    if data[SeqLayout.RESERVED : SeqLayout.RESERVED + 2] != b"\x00\x00":
        issues.append(
            ValidationIssue(
                "info",
                "RESERVED",
                SeqLayout.RESERVED,
                "Reserved bytes are not zero",
                expected="00 00",
                actual=bytes(data[SeqLayout.RESERVED : SeqLayout.RESERVED + 2]).hex(" ").upper(),
            )
        )

    return issues


def validate_syx(data: bytes) -> List[ValidationIssue]:
    """
    Validate a SysEx pattern dump.

    Args:
        data: Raw .syx contents

    Returns:
        List of issues, empty if the dump is clean
    """
    issues: List[ValidationIssue] = []

    if len(data) < SysExParser.MIN_LENGTH:
        issues.append(
            ValidationIssue("error", "FRAME", 0, "Message too short", actual=f"{len(data)} bytes")
        )
        return issues

    if data[0] != SYSEX_START:
        issues.append(
            ValidationIssue(
                "error", "FRAME", 0, "Missing SysEx start", expected="F0", actual=f"{data[0]:02X}"
            )
        )

    if data[-1] != SYSEX_END:
        issues.append(
            ValidationIssue(
                "error",
                "FRAME",
                len(data) - 1,
                "Missing SysEx end",
                expected="F7",
                actual=f"{data[-1]:02X}",
            )
        )

    if bytes(data[1:4]) != BEHRINGER_ID:
        issues.append(
            ValidationIssue(
                "error",
                "MANUFACTURER",
                1,
                "Unrecognized manufacturer ID",
                expected=BEHRINGER_ID.hex(" ").upper(),
                actual=bytes(data[1:4]).hex(" ").upper(),
            )
        )

    for i in range(1, len(data) - 1):
        if data[i] > 0x7F:
            issues.append(
                ValidationIssue(
                    "error", "DATA", i, "Data byte has the high bit set", actual=f"{data[i]:02X}"
                )
            )

    offset = SysExParser.payload_offset(len(data))
    if offset is None:
        issues.append(
            ValidationIssue(
                "error",
                "PAYLOAD",
                SysExParser.PAYLOAD_OFFSET,
                f"Too short for {MAX_STEPS} steps",
                actual=f"{len(data)} bytes",
            )
        )
        return issues

    payload = bytes(data[offset : offset + SysExParser.PAYLOAD_SIZE])
    expected = calculate_xor_checksum(payload)
    if expected != data[-2]:
        issues.append(
            ValidationIssue(
                "warning",
                "CHECKSUM",
                len(data) - 2,
                "Checksum mismatch",
                expected=f"{expected:02X}",
                actual=f"{data[-2]:02X}",
            )
        )

    return issues
