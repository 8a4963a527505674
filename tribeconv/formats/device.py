"""
Device codec protocol and registry.

A device codec is a capability set: it decodes and encodes the two
device-specific binary formats (.seq pattern dumps and .syx SysEx dumps).
One concrete class exists per hardware family.
"""

from typing import Callable, Dict, List, Protocol, Tuple

from tribeconv.errors import UnknownDeviceError
from tribeconv.models.pattern import Pattern


class Device(Protocol):
    """Capabilities every device codec provides."""

    name: str
    device_id: int

    def parse_seq(self, data: bytes) -> Pattern: ...

    def generate_seq(self, pattern: Pattern) -> bytes: ...

    def parse_syx(self, data: bytes) -> Pattern: ...

    def generate_syx(self, pattern: Pattern) -> bytes: ...


# key -> (factory, description)
_REGISTRY: Dict[str, Tuple[Callable[[], Device], str]] = {}
_ALIASES: Dict[str, str] = {}


def register_device(key: str, factory: Callable[[], Device], description: str = "", aliases=()):
    """
    Register a device codec factory.

    Args:
        key: Canonical lookup key (e.g. "td3")
        factory: Zero-argument callable returning a Device
        description: Short human readable description
        aliases: Extra keys resolving to the same device
    """
    key = key.lower()
    _REGISTRY[key] = (factory, description)
    for alias in aliases:
        _ALIASES[alias.lower()] = key


def get_device(name: str = "td3") -> Device:
    """
    Create a device codec by name.

    Args:
        name: Device key or alias, case-insensitive

    Returns:
        New Device instance

    Raises:
        UnknownDeviceError: If no device is registered under that name
    """
    key = name.strip().lower()
    key = _ALIASES.get(key, key)

    if key not in _REGISTRY:
        known = ", ".join(sorted(_REGISTRY))
        raise UnknownDeviceError(f"Unknown device: {name!r} (known: {known})")

    factory, _ = _REGISTRY[key]
    return factory()


def list_devices() -> List[Tuple[str, str, str]]:
    """Return (key, device name, description) for every registered device."""
    rows = []
    for key, (factory, description) in sorted(_REGISTRY.items()):
        rows.append((key, factory().name, description))
    return rows
