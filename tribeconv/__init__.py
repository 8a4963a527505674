"""
TribeConv - Converter between MIDI files and Behringer TD-3 pattern files.

This library provides tools to:
- Read and write TD-3 binary pattern files (.seq)
- Read and write TD-3 SysEx pattern dumps (.syx)
- Quantize MIDI files onto a 16-step grid and render patterns as MIDI

Example usage:
    from tribeconv import Converter, SeqReader

    pattern = SeqReader.read("pattern.seq")
    print(pattern.active_steps)

    Converter().convert_file("pattern.seq", "pattern.mid")
"""

__version__ = "0.3.0"
__author__ = "TribeConv Contributors"

from tribeconv.converters import (
    Converter,
    convert,
    convert_file,
    decode_binary_pattern,
    decode_midi,
    decode_sysex,
    encode_binary_pattern,
    encode_midi,
    encode_sysex,
    get_supported_conversions,
)
from tribeconv.errors import (
    FormatError,
    NilPatternError,
    ParseError,
    TribeConvError,
    UnknownDeviceError,
    UnrecognizedFormatError,
    UnsupportedConversionError,
)
from tribeconv.formats import (
    TD3,
    FileFormat,
    MidiReader,
    MidiWriter,
    detect_format,
    detect_format_from_content,
    get_device,
    list_devices,
)
from tribeconv.formats.td3 import SeqReader, SeqWriter, SysExParser, SysExWriter
from tribeconv.models import Pattern, Step

__all__ = [
    "Converter",
    "convert",
    "convert_file",
    "decode_binary_pattern",
    "decode_midi",
    "decode_sysex",
    "encode_binary_pattern",
    "encode_midi",
    "encode_sysex",
    "get_supported_conversions",
    "FormatError",
    "NilPatternError",
    "ParseError",
    "TribeConvError",
    "UnknownDeviceError",
    "UnrecognizedFormatError",
    "UnsupportedConversionError",
    "TD3",
    "FileFormat",
    "MidiReader",
    "MidiWriter",
    "detect_format",
    "detect_format_from_content",
    "get_device",
    "list_devices",
    "SeqReader",
    "SeqWriter",
    "SysExParser",
    "SysExWriter",
    "Pattern",
    "Step",
]
