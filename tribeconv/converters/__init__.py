"""
Pattern conversion between MIDI, TD-3 .seq and TD-3 SysEx.

Example:
    from tribeconv.converters import convert_file

    convert_file("bassline.mid", "bassline.seq")
"""

from tribeconv.converters.converter import (
    SUPPORTED_CONVERSIONS,
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

__all__ = [
    "SUPPORTED_CONVERSIONS",
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
]
