"""
File format detection from file names and raw contents.
"""

from enum import Enum
from pathlib import Path
from typing import Union

MIDI_HEADER = b"MThd"
SYSEX_START = 0xF0


class FileFormat(str, Enum):
    """Supported file formats."""

    MIDI = "midi"
    SEQ = "seq"
    SYX = "syx"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

    @property
    def extension(self) -> str:
        """Default file extension for this format."""
        return EXTENSIONS.get(self, "")


SUFFIX_MAP = {
    ".mid": FileFormat.MIDI,
    ".midi": FileFormat.MIDI,
    ".seq": FileFormat.SEQ,
    ".syx": FileFormat.SYX,
}

EXTENSIONS = {
    FileFormat.MIDI: ".mid",
    FileFormat.SEQ: ".seq",
    FileFormat.SYX: ".syx",
}


def detect_format(filename: Union[str, Path]) -> FileFormat:
    """
    Detect a file format from its extension.

    Args:
        filename: File name or path

    Returns:
        Detected format, FileFormat.UNKNOWN for unrecognized extensions
    """
    return SUFFIX_MAP.get(Path(filename).suffix.lower(), FileFormat.UNKNOWN)


def detect_format_from_content(data: bytes) -> FileFormat:
    """
    Detect a file format from its first bytes.

    MIDI files start with "MThd", SysEx dumps with F0. Any other buffer of
    at least 4 bytes is assumed to be a binary pattern.

    Args:
        data: Raw file contents

    Returns:
        Detected format
    """
    if len(data) < 4:
        return FileFormat.UNKNOWN

    if data[:4] == MIDI_HEADER:
        return FileFormat.MIDI

    if data[0] == SYSEX_START:
        return FileFormat.SYX

    return FileFormat.SEQ


def parse_format(value: Union[str, FileFormat]) -> FileFormat:
    """Coerce a format name such as "midi" or ".syx" into a FileFormat."""
    if isinstance(value, FileFormat):
        return value

    name = value.strip().lower().lstrip(".")
    if name == "mid":
        name = "midi"

    try:
        return FileFormat(name)
    except ValueError:
        return FileFormat.UNKNOWN


def detect_file_format(filename: Union[str, Path], data: bytes) -> FileFormat:
    """Detect from the extension, falling back to the contents."""
    fmt = detect_format(filename)
    if fmt == FileFormat.UNKNOWN:
        fmt = detect_format_from_content(data)
    return fmt
