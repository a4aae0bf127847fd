"""
Data model for a USB bus/device tree.

This module defines dataclasses representing the hierarchy produced by a
device enumeration: buses own devices, devices own child devices (hub ports)
and, when deep enumeration succeeded, an extra block holding configurations,
interfaces and endpoints.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Optional


class ClassCode(IntEnum):
    """USB-IF base class codes (device or interface)."""
    USE_INTERFACE_DESCRIPTOR = 0x00
    AUDIO = 0x01
    CDC_COMMUNICATIONS = 0x02
    HID = 0x03
    PHYSICAL = 0x05
    IMAGE = 0x06
    PRINTER = 0x07
    MASS_STORAGE = 0x08
    HUB = 0x09
    CDC_DATA = 0x0A
    SMART_CARD = 0x0B
    CONTENT_SECURITY = 0x0D
    VIDEO = 0x0E
    PERSONAL_HEALTHCARE = 0x0F
    AUDIO_VIDEO = 0x10
    BILLBOARD = 0x11
    USB_TYPE_C_BRIDGE = 0x12
    I3C_DEVICE = 0x3C
    DIAGNOSTIC = 0xDC
    WIRELESS_CONTROLLER = 0xE0
    MISCELLANEOUS = 0xEF
    APPLICATION_SPECIFIC = 0xFE
    VENDOR_SPECIFIC = 0xFF


# Mapping of class codes to human-readable descriptions
CLASS_CODE_NAMES: dict[int, str] = {
    0x00: "Use Interface Descriptor",
    0x01: "Audio",
    0x02: "CDC Communications",
    0x03: "HID",
    0x05: "Physical",
    0x06: "Image",
    0x07: "Printer",
    0x08: "Mass Storage",
    0x09: "Hub",
    0x0A: "CDC Data",
    0x0B: "Smart Card",
    0x0D: "Content Security",
    0x0E: "Video",
    0x0F: "Personal Healthcare",
    0x10: "Audio/Video",
    0x11: "Billboard",
    0x12: "USB Type-C Bridge",
    0x3C: "I3C Device",
    0xDC: "Diagnostic",
    0xE0: "Wireless Controller",
    0xEF: "Miscellaneous",
    0xFE: "Application Specific",
    0xFF: "Vendor Specific",
}


def get_class_name(code: int) -> str:
    """Get human-readable name for a class code."""
    if code in CLASS_CODE_NAMES:
        return CLASS_CODE_NAMES[code]
    return f"Reserved (0x{code:02X})"


class Speed(Enum):
    """Negotiated or advertised device speed."""
    LOW = "low_speed"
    FULL = "full_speed"
    HIGH = "high_speed"
    SUPER = "super_speed"
    SUPER_PLUS = "super_speed_plus"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return SPEED_NAMES[self]


SPEED_NAMES: dict[Speed, str] = {
    Speed.LOW: "1.5 Mb/s",
    Speed.FULL: "12.0 Mb/s",
    Speed.HIGH: "480.0 Mb/s",
    Speed.SUPER: "5.0 Gb/s",
    Speed.SUPER_PLUS: "10.0 Gb/s",
    Speed.UNKNOWN: "Unknown",
}


class Direction(Enum):
    """Endpoint data direction relative to the host."""
    OUT = "OUT"
    IN = "IN"

    def __str__(self) -> str:
        return self.value


class TransferType(Enum):
    """Endpoint transfer type."""
    CONTROL = "Control"
    ISOCHRONOUS = "Isochronous"
    BULK = "Bulk"
    INTERRUPT = "Interrupt"

    def __str__(self) -> str:
        return self.value


class SyncType(Enum):
    """Endpoint synchronization type (isochronous only)."""
    NONE = "None"
    ASYNCHRONOUS = "Asynchronous"
    ADAPTIVE = "Adaptive"
    SYNCHRONOUS = "Synchronous"

    def __str__(self) -> str:
        return self.value


class UsageType(Enum):
    """Endpoint usage type (isochronous only)."""
    DATA = "Data"
    FEEDBACK = "Feedback"
    FEEDBACK_DATA = "FeedbackData"
    RESERVED = "Reserved"

    def __str__(self) -> str:
        return self.value


class ConfigAttributes(Enum):
    """Flags from a configuration's bmAttributes."""
    SELF_POWERED = "SelfPowered"
    REMOTE_WAKEUP = "RemoteWakeup"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Version:
    """Binary-coded decimal version, as found in bcdUSB and bcdDevice."""
    major: int = 0
    minor: int = 0
    sub_minor: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}{self.sub_minor}"

    @classmethod
    def from_bcd(cls, value: int) -> "Version":
        """Build from a 16-bit BCD value, e.g. 0x0210 -> 2.10."""
        major = ((value >> 12) & 0x0F) * 10 + ((value >> 8) & 0x0F)
        return cls(major, (value >> 4) & 0x0F, value & 0x0F)

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse a version string like '2.00' or '1.1'."""
        major, _, rest = text.strip().partition(".")
        rest = (rest + "00")[:2]
        return cls(int(major or 0), int(rest[0]), int(rest[1]))


# ============================================================================
# Descriptors below the device
# ============================================================================

@dataclass
class Endpoint:
    """USB Endpoint."""
    address: int = 0
    transfer_type: TransferType = TransferType.CONTROL
    sync_type: SyncType = SyncType.NONE
    usage_type: UsageType = UsageType.DATA
    max_packet_size: int = 0
    interval: int = 0

    @property
    def number(self) -> int:
        """Get endpoint number (address without direction bit)."""
        return self.address & 0x0F

    @property
    def direction(self) -> Direction:
        """Get endpoint direction from the address direction bit."""
        return Direction.IN if self.address & 0x80 else Direction.OUT

    def max_packet_string(self) -> str:
        """Packet size with high-bandwidth transactions, e.g. '3x 1024'."""
        transactions = ((self.max_packet_size >> 11) & 0x03) + 1
        return f"{transactions}x {self.max_packet_size & 0x7FF}"


@dataclass
class Interface:
    """USB Interface (one alternate setting)."""
    name: str = ""
    number: int = 0
    path: str = ""
    class_code: int = 0
    sub_class: int = 0
    protocol: int = 0
    alt_setting: int = 0
    driver: Optional[str] = None
    syspath: Optional[str] = None
    endpoints: list[Endpoint] = field(default_factory=list)

    @property
    def class_name(self) -> str:
        """Get human-readable class name."""
        return get_class_name(self.class_code)


@dataclass
class Configuration:
    """USB Configuration."""
    name: str = ""
    number: int = 0
    attributes: list[ConfigAttributes] = field(default_factory=list)
    max_power: int = 0  # mA
    interfaces: list[Interface] = field(default_factory=list)

    def attributes_string(self) -> str:
        """Attributes joined for display, e.g. 'SelfPowered, RemoteWakeup'."""
        return ", ".join(str(a) for a in self.attributes)


# ============================================================================
# Devices and buses
# ============================================================================

@dataclass
class Location:
    """Where a device sits: bus, bus-assigned number and port at each tier."""
    bus: int = 0
    number: int = 0
    tree_positions: list[int] = field(default_factory=list)


def get_port_path(bus: int, tree_positions: list[int]) -> str:
    """Linux style port path, e.g. '1-2.3'; a bus with no positions is '1-0'."""
    if not tree_positions:
        return f"{bus}-0"
    return f"{bus}-" + ".".join(str(p) for p in tree_positions)


@dataclass
class DeviceExtra:
    """Information only present when deep enumeration succeeded."""
    max_packet_size: int = 0
    driver: Optional[str] = None
    syspath: Optional[str] = None
    vendor: Optional[str] = None
    product_name: Optional[str] = None
    configurations: list[Configuration] = field(default_factory=list)


@dataclass
class Device:
    """USB Device; hubs own further devices on their ports."""
    name: str = ""
    vendor_id: Optional[int] = None
    product_id: Optional[int] = None
    location: Location = field(default_factory=Location)
    serial: Optional[str] = None
    manufacturer: Optional[str] = None
    bcd_device: Optional[Version] = None
    bcd_usb: Optional[Version] = None
    bus_power: Optional[int] = None
    bus_power_used: Optional[int] = None
    extra_current_used: Optional[int] = None
    speed: Optional[Speed] = None
    class_code: Optional[int] = None
    sub_class: Optional[int] = None
    protocol: Optional[int] = None
    devices: list["Device"] = field(default_factory=list)
    extra: Optional[DeviceExtra] = None

    def __str__(self) -> str:
        vid = f"{self.vendor_id:04x}" if self.vendor_id is not None else "----"
        pid = f"{self.product_id:04x}" if self.product_id is not None else "----"
        return (f"Bus {self.location.bus:03} Device {self.location.number:03}: "
                f"ID {vid}:{pid} {self.name}")

    @property
    def branch_position(self) -> int:
        """Port number on the parent hub (0 for a device on the root)."""
        if self.location.tree_positions:
            return self.location.tree_positions[-1]
        return 0

    @property
    def depth(self) -> int:
        """Number of hub tiers between the device and its bus."""
        return len(self.location.tree_positions)

    @property
    def port_path(self) -> str:
        """Linux style port path of the device."""
        return get_port_path(self.location.bus, self.location.tree_positions)

    @property
    def class_name(self) -> Optional[str]:
        """Get human-readable class name, if the class is known."""
        if self.class_code is None:
            return None
        return get_class_name(self.class_code)

    @property
    def is_hub(self) -> bool:
        """Check if the device is a hub."""
        return self.class_code == ClassCode.HUB

    @property
    def is_trunk_device(self) -> bool:
        """Check if the device sits directly on the root hub."""
        return self.depth <= 1

    def has_devices(self) -> bool:
        """Check if any device is attached below this one."""
        return bool(self.devices)

    def flatten(self) -> list["Device"]:
        """All descendants, depth-first in encounter order."""
        ret = []
        for device in self.devices:
            ret.append(device)
            ret.extend(device.flatten())
        return ret


@dataclass
class Bus:
    """USB Bus (host controller root)."""
    name: str = ""
    host_controller: str = ""
    pci_vendor: Optional[int] = None
    pci_device: Optional[int] = None
    pci_revision: Optional[int] = None
    number: Optional[int] = None
    devices: list[Device] = field(default_factory=list)

    @property
    def bus_number(self) -> int:
        """Bus number; falls back to the first device's bus, else 0xFF."""
        if self.number is not None:
            return self.number
        if self.devices:
            return self.devices[0].location.bus
        return 0xFF

    @property
    def path(self) -> str:
        """Linux style port path of the bus root."""
        return get_port_path(self.bus_number, [])

    def has_devices(self) -> bool:
        """Check if the bus has any device attached."""
        return bool(self.devices)

    def flatten_devices(self) -> list[Device]:
        """All devices on the bus, depth-first in encounter order."""
        ret = []
        for device in self.devices:
            ret.append(device)
            ret.extend(device.flatten())
        return ret

    def flatten(self) -> None:
        """Collapse the bus's device tree into a single list of leafless devices."""
        flattened = self.flatten_devices()
        for device in flattened:
            device.devices = []
        self.devices = flattened


@dataclass
class DeviceTree:
    """Complete enumeration result: ordered buses."""
    buses: list[Bus] = field(default_factory=list)

    def flatten(self) -> None:
        """Hard flatten every bus; parent/child relations are lost."""
        for bus in self.buses:
            bus.flatten()

    def flatten_devices(self) -> list[Device]:
        """All devices on all buses, depth-first in encounter order."""
        ret = []
        for bus in self.buses:
            ret.extend(bus.flatten_devices())
        return ret

    def get_bus(self, number: int) -> Optional[Bus]:
        """Look up a bus by its number."""
        for bus in self.buses:
            if bus.bus_number == number:
                return bus
        return None
