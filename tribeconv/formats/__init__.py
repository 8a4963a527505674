"""
File format handlers.

Importing this package registers the built-in device codecs.
"""

from tribeconv.formats.detection import (
    FileFormat,
    detect_file_format,
    detect_format,
    detect_format_from_content,
    parse_format,
)
from tribeconv.formats.device import Device, get_device, list_devices, register_device
from tribeconv.formats.midi import MidiReader, MidiWriter
from tribeconv.formats.td3 import TD3

__all__ = [
    "FileFormat",
    "detect_file_format",
    "detect_format",
    "detect_format_from_content",
    "parse_format",
    "Device",
    "get_device",
    "list_devices",
    "register_device",
    "MidiReader",
    "MidiWriter",
    "TD3",
]
