"""
CLI display modules.
"""

from cli.display.tables import (
    create_step_table,
    display_devices,
    display_formats,
    display_pattern_info,
)
from cli.display.hex_view import display_hex_dump

__all__ = [
    "create_step_table",
    "display_devices",
    "display_formats",
    "display_pattern_info",
    "display_hex_dump",
]
