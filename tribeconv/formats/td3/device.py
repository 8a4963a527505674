"""
Behringer TD-3 device codec.
"""

from tribeconv.formats.device import register_device
from tribeconv.formats.td3.seq_reader import SeqReader
from tribeconv.formats.td3.seq_writer import SeqWriter
from tribeconv.formats.td3.sysex_parser import SysExParser
from tribeconv.formats.td3.sysex_writer import SysExWriter
from tribeconv.models.pattern import Pattern


class TD3:
    """
    Device codec for the Behringer TD-3 (TB-303 clone).

    Bundles the .seq and .syx readers and writers behind the Device
    capability set used by the Converter.

    Example:
        td3 = TD3()
        pattern = td3.parse_seq(data)
        syx = td3.generate_syx(pattern)
    """

    name = "Behringer TD-3"
    device_id = 0x00
    description = "TB-303 clone"

    def parse_seq(self, data: bytes) -> Pattern:
        return SeqReader(self.device_id).parse_bytes(data)

    def generate_seq(self, pattern: Pattern) -> bytes:
        return SeqWriter().to_bytes(pattern)

    def parse_syx(self, data: bytes) -> Pattern:
        return SysExParser().parse_pattern(data)

    def generate_syx(self, pattern: Pattern) -> bytes:
        return SysExWriter(self.device_id).to_bytes(pattern)

    def __repr__(self) -> str:
        return f"TD3(name={self.name!r}, device_id=0x{self.device_id:02X})"


register_device("td3", TD3, TD3.description, aliases=("td-3",))
