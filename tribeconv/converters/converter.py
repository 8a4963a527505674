"""
Pattern conversion between MIDI, .seq and .syx.

Every conversion decodes the source into a Pattern and encodes it to the
destination format. The device codec handles .seq and .syx; MIDI is
device independent.

Supported pairs:
    midi -> seq, midi -> syx
    seq -> midi, seq -> syx
    syx -> midi, syx -> seq
"""

import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple, Union

from tribeconv.errors import UnsupportedConversionError
from tribeconv.formats.detection import (
    FileFormat,
    detect_file_format,
    detect_format,
    parse_format,
)
from tribeconv.formats.device import Device, get_device
from tribeconv.formats.midi.reader import MidiReader
from tribeconv.formats.midi.writer import MidiWriter
from tribeconv.models.pattern import Pattern

logger = logging.getLogger(__name__)

FormatLike = Union[str, FileFormat]

SUPPORTED_CONVERSIONS: List[Tuple[FileFormat, FileFormat]] = [
    (FileFormat.MIDI, FileFormat.SEQ),
    (FileFormat.MIDI, FileFormat.SYX),
    (FileFormat.SEQ, FileFormat.MIDI),
    (FileFormat.SEQ, FileFormat.SYX),
    (FileFormat.SYX, FileFormat.MIDI),
    (FileFormat.SYX, FileFormat.SEQ),
]


class Converter:
    """
    Conversion orchestrator bound to one device codec.

    The device may be swapped between conversions. A Converter is not safe
    to share between threads while doing so; use one instance per thread.

    Example:
        converter = Converter()
        syx = converter.convert(midi_data, "midi", "syx")
        converter.convert_file("bassline.mid", "bassline.seq")
    """

    def __init__(self, device: Optional[Device] = None, ticks_per_quarter: int = 480):
        """
        Initialize converter.

        Args:
            device: Device codec, TD-3 when omitted
            ticks_per_quarter: Resolution of generated MIDI files
        """
        self._device = device if device is not None else get_device()
        self.midi_reader = MidiReader()
        self.midi_writer = MidiWriter(ticks_per_quarter=ticks_per_quarter)

        self._dispatch: Dict[Tuple[FileFormat, FileFormat], Callable[[bytes], bytes]] = {
            (FileFormat.MIDI, FileFormat.SEQ): self.midi_to_seq,
            (FileFormat.MIDI, FileFormat.SYX): self.midi_to_syx,
            (FileFormat.SEQ, FileFormat.MIDI): self.seq_to_midi,
            (FileFormat.SEQ, FileFormat.SYX): self.seq_to_syx,
            (FileFormat.SYX, FileFormat.MIDI): self.syx_to_midi,
            (FileFormat.SYX, FileFormat.SEQ): self.syx_to_seq,
        }

    @property
    def device(self) -> Device:
        return self._device

    @device.setter
    def device(self, device: Device) -> None:
        logger.debug("Switching device codec to %s", device.name)
        self._device = device

    def decode(self, data: bytes, source: FormatLike) -> Pattern:
        """Decode data of the given format into a Pattern."""
        fmt = parse_format(source)
        if fmt == FileFormat.MIDI:
            return self.midi_reader.parse_bytes(data)
        if fmt == FileFormat.SEQ:
            return self._device.parse_seq(data)
        if fmt == FileFormat.SYX:
            return self._device.parse_syx(data)
        raise UnsupportedConversionError(str(source), "pattern")

    def encode(self, pattern: Pattern, dest: FormatLike) -> bytes:
        """Encode a Pattern into the given format."""
        fmt = parse_format(dest)
        if fmt == FileFormat.MIDI:
            return self.midi_writer.to_bytes(pattern)
        if fmt == FileFormat.SEQ:
            return self._device.generate_seq(pattern)
        if fmt == FileFormat.SYX:
            return self._device.generate_syx(pattern)
        raise UnsupportedConversionError("pattern", str(dest))

    def midi_to_seq(self, data: bytes) -> bytes:
        return self._device.generate_seq(self.midi_reader.parse_bytes(data))

    def midi_to_syx(self, data: bytes) -> bytes:
        return self._device.generate_syx(self.midi_reader.parse_bytes(data))

    def seq_to_midi(self, data: bytes) -> bytes:
        return self.midi_writer.to_bytes(self._device.parse_seq(data))

    def seq_to_syx(self, data: bytes) -> bytes:
        return self._device.generate_syx(self._device.parse_seq(data))

    def syx_to_midi(self, data: bytes) -> bytes:
        return self.midi_writer.to_bytes(self._device.parse_syx(data))

    def syx_to_seq(self, data: bytes) -> bytes:
        return self._device.generate_seq(self._device.parse_syx(data))

    def convert(self, data: bytes, source: FormatLike, dest: FormatLike) -> bytes:
        """
        Convert data between two formats.

        Args:
            data: Source file contents
            source: Source format ("midi", "seq", "syx" or FileFormat)
            dest: Destination format

        Returns:
            Encoded destination data

        Raises:
            UnsupportedConversionError: If the pair is not supported
        """
        pair = (parse_format(source), parse_format(dest))
        handler = self._dispatch.get(pair)
        if handler is None:
            raise UnsupportedConversionError(str(source), str(dest))

        logger.debug("Converting %d bytes: %s -> %s", len(data), pair[0], pair[1])
        return handler(data)

    def convert_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path],
        source: Optional[FormatLike] = None,
        dest: Optional[FormatLike] = None,
    ) -> Tuple[FileFormat, FileFormat]:
        """
        Convert a file, detecting formats from the file names.

        A source with an unrecognized extension is detected from its
        contents.

        Args:
            input_path: Source file
            output_path: Destination file, parent directories are created
            source: Source format override
            dest: Destination format override

        Returns:
            The (source, destination) formats used

        Raises:
            UnsupportedConversionError: If the formats cannot be converted
        """
        input_path = Path(input_path)
        output_path = Path(output_path)

        with open(input_path, "rb") as f:
            data = f.read()

        if source is not None:
            src = parse_format(source)
        else:
            src = detect_file_format(input_path, data)

        dst = parse_format(dest) if dest is not None else detect_format(output_path)

        result = self.convert(data, src, dst)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "wb") as f:
            f.write(result)

        logger.info("Wrote %s (%d bytes)", output_path, len(result))
        return src, dst


def get_supported_conversions() -> List[Tuple[FileFormat, FileFormat]]:
    """Return the six supported (source, destination) pairs in order."""
    return list(SUPPORTED_CONVERSIONS)


def decode_binary_pattern(data: bytes) -> Pattern:
    """Decode a TD-3 .seq file."""
    return get_device().parse_seq(data)


def encode_binary_pattern(pattern: Pattern) -> bytes:
    """Encode a Pattern as a TD-3 .seq file."""
    return get_device().generate_seq(pattern)


def decode_sysex(data: bytes) -> Pattern:
    """Decode a TD-3 SysEx pattern dump."""
    return get_device().parse_syx(data)


def encode_sysex(pattern: Pattern) -> bytes:
    """Encode a Pattern as a TD-3 SysEx pattern dump."""
    return get_device().generate_syx(pattern)


def decode_midi(data: bytes) -> Pattern:
    """Quantize a MIDI file into a 16-step Pattern."""
    return MidiReader().parse_bytes(data)


def encode_midi(pattern: Pattern) -> bytes:
    """Render a Pattern as a MIDI file."""
    return MidiWriter().to_bytes(pattern)


def convert(data: bytes, source: FormatLike, dest: FormatLike) -> bytes:
    """
    Convert data between two formats with the default device.

    Example:
        syx = convert(midi_data, "midi", "syx")
    """
    return Converter().convert(data, source, dest)


def convert_file(
    input_path: Union[str, Path], output_path: Union[str, Path], device: str = "td3"
) -> Tuple[FileFormat, FileFormat]:
    """
    Convert a file, detecting formats from the file names.

    Example:
        convert_file("bassline.mid", "bassline.syx")
    """
    return Converter(get_device(device)).convert_file(input_path, output_path)
