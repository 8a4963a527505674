"""
Exceptions raised by the codec layer.

Format-level errors also derive from ValueError so that callers catching
ValueError around a parser keep working.
"""


class TribeConvError(Exception):
    """Base class for all conversion errors."""

    pass


class FormatError(TribeConvError, ValueError):
    """Buffer too short, bad magic/signature, or malformed frame."""

    pass


class UnrecognizedFormatError(FormatError):
    """Well-formed SysEx frame with an unknown manufacturer signature."""

    pass


class NilPatternError(TribeConvError, ValueError):
    """Encode called without a pattern."""

    def __init__(self, message: str = "nil pattern"):
        super().__init__(message)


class ParseError(TribeConvError, ValueError):
    """Malformed MIDI container."""

    pass


class UnsupportedConversionError(TribeConvError, ValueError):
    """Format pair outside the supported conversion matrix."""

    def __init__(self, source, dest):
        self.source = source
        self.dest = dest
        super().__init__(f"Unsupported conversion: {source} to {dest}")


class UnknownDeviceError(TribeConvError, ValueError):
    """No device codec registered under the requested name."""

    pass
