"""Behringer TD-3 format handlers."""

from tribeconv.formats.td3.device import TD3
from tribeconv.formats.td3.seq_reader import SeqHeader, SeqLayout, SeqReader
from tribeconv.formats.td3.seq_writer import SeqWriter
from tribeconv.formats.td3.sysex_parser import (
    SysExMessage,
    SysExParser,
    extract_manufacturer_id,
    is_behringer_sysex,
)
from tribeconv.formats.td3.sysex_writer import SysExWriter
from tribeconv.formats.td3.validator import validate_seq, validate_syx

__all__ = [
    "TD3",
    "SeqHeader",
    "SeqLayout",
    "SeqReader",
    "SeqWriter",
    "SysExMessage",
    "SysExParser",
    "SysExWriter",
    "extract_manufacturer_id",
    "is_behringer_sysex",
    "validate_seq",
    "validate_syx",
]
