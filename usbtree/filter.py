"""
Device filtering.

A :class:`DeviceFilter` matches devices on any combination of vendor/product
id, bus, device number and name/serial substrings. Filtering a tree keeps the
ancestors of matching devices so the tree stays drawable; filtering a
flattened tree simply drops devices that do not match.
"""

from dataclasses import dataclass
from typing import Optional

from .model import Bus, Device


@dataclass
class DeviceFilter:
    """
    Criteria a device must meet to be kept. Unset criteria match anything.

    Attributes:
        vid: Vendor id
        pid: Product id
        bus: Bus number
        number: Bus-assigned device number
        name: Substring of the device name, case-insensitive
        serial: Substring of the serial number, case-insensitive
        exclude_empty_hub: Hubs without attached devices never match
    """
    vid: Optional[int] = None
    pid: Optional[int] = None
    bus: Optional[int] = None
    number: Optional[int] = None
    name: Optional[str] = None
    serial: Optional[str] = None
    exclude_empty_hub: bool = False

    def is_match(self, device: Device) -> bool:
        """Check if `device` meets every set criterion."""
        if self.vid is not None and device.vendor_id != self.vid:
            return False
        if self.pid is not None and device.product_id != self.pid:
            return False
        if self.bus is not None and device.location.bus != self.bus:
            return False
        if self.number is not None and device.location.number != self.number:
            return False
        if self.name is not None and self.name.lower() not in device.name.lower():
            return False
        if self.serial is not None:
            if device.serial is None or self.serial.lower() not in device.serial.lower():
                return False
        if self.exclude_empty_hub and device.is_hub and not device.has_devices():
            return False
        return True

    def retain_devices(self, devices: list[Device]) -> list[Device]:
        """
        Filter `devices` and everything attached to them.

        Children are filtered first; a device is kept if it matches or if any
        device below it was kept.

        Args:
            devices: Sibling devices; their child lists are replaced in place

        Returns:
            The retained devices in their original order
        """
        ret = []
        for device in devices:
            device.devices = self.retain_devices(device.devices)
            if device.has_devices() or self.is_match(device):
                ret.append(device)
        return ret

    def retain_buses(self, buses: list[Bus]) -> None:
        """Filter the devices of every bus in place; buses themselves stay."""
        for bus in buses:
            bus.devices = self.retain_devices(bus.devices)
