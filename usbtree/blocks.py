"""
Blocks: the selectable, orderable display columns of each entity type.

Every entity type has its own :class:`Block` enum. A block knows its heading,
its colour role, whether it is a variable width text column and how to render
its value for an entity. Each enum is backed by a :class:`BlockTable` that
must handle every member; this is checked when the module is imported so that
adding a block without a heading, colour or value fails immediately.

Text columns are left aligned and padded to the widest value of the batch
being printed (see :meth:`Block.generate_padding`). Fixed columns format to a
constant width and take no part in padding.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

from rich.cells import cell_len

from .colour import ColourTheme
from .model import (
    Bus,
    ConfigAttributes,
    Configuration,
    Device,
    Interface,
    get_class_name,
)
from .settings import PrintSettings

ICON_HEADING = "I"
# Nerd font glyphs for configuration attributes
SELF_POWERED_ICON = "ﮤ"
REMOTE_WAKEUP_ICON = ""

Padding = dict["Block", int]


def format_base_u16(value: int, settings: PrintSettings) -> str:
    """Format a 16-bit id as 0xXXXX, or right aligned base 10 in 6 chars."""
    if settings.decimal:
        return f"{value:6}"
    return f"0x{value:04x}"


def format_base_u8(value: int, settings: PrintSettings) -> str:
    """Format an 8-bit code as 0xXX, or right aligned base 10 in 3 chars."""
    if settings.decimal:
        return f"{value:3}"
    return f"0x{value:02x}"


def pad_text(text: str, width: int) -> str:
    """Left align `text` in `width` terminal cells."""
    return text + " " * max(width - cell_len(text), 0)


def centre(text: str, width: int) -> str:
    """Centre `text` in `width`; odd spare space goes to the right."""
    gap = max(width - cell_len(text), 0)
    left = gap // 2
    return " " * left + text + " " * (gap - left)


@dataclass(frozen=True)
class BlockTable:
    """
    Dispatch table for one block enum.

    Attributes:
        headings: Heading label of every block
        colours: ColourTheme role of every block
        text: Unpadded text value of each variable width text block
        fixed: Formatted value of each fixed width block; None if not applicable
    """
    headings: dict[Any, str]
    colours: dict[Any, str]
    text: dict[Any, Callable[[Any], Optional[str]]]
    fixed: dict[Any, Callable[[Any, PrintSettings], Optional[str]]]


_TABLES: dict[type, BlockTable] = {}


class Block(Enum):
    """Base of the per-entity block enums."""

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list:
        """Canonical blocks for the entity type; a richer set if `verbose`."""
        raise NotImplementedError

    @classmethod
    def table(cls) -> BlockTable:
        return _TABLES[cls]

    @classmethod
    def generate_padding(cls, entities: list) -> Padding:
        """
        Width of every text block over a batch of sibling entities.

        The width is the longest of the block's heading and every entity's
        unpadded value. Fixed width blocks are not included.
        """
        pad = {}
        for block in cls:
            if not block.value_is_string():
                continue
            widths = [cell_len(block.heading({}))]
            widths.extend(cell_len(block.text_value(e) or "") for e in entities)
            pad[block] = max(widths)
        return pad

    def value_is_string(self) -> bool:
        """Whether the block is a variable width text column."""
        return self in self.table().text

    def heading(self, pad: Padding) -> str:
        """Heading label, centred to the padding width for text blocks."""
        label = self.table().headings[self]
        if self.value_is_string():
            return centre(label, pad.get(self, 0))
        return label

    def text_value(self, entity) -> Optional[str]:
        """Unpadded value of a text block; None if the entity lacks it."""
        return self.table().text[self](entity)

    def format_value(self, entity, pad: Padding, settings: PrintSettings) -> Optional[str]:
        """
        Render the value of the block for `entity`.

        Absent data renders as '-'. Returns None only when the block does not
        apply at all, e.g. icons without an icon theme.
        """
        table = self.table()
        if self in table.text:
            value = table.text[self](entity) or "-"
            return pad_text(value, pad.get(self, 0))
        return table.fixed[self](entity, settings)

    def colour(self, text: str, theme: ColourTheme) -> str:
        """Colour `text` with the theme colour of the block's role."""
        return theme.apply(self.table().colours[self], text)


def render_value(entity, blocks: list, pad: Padding, settings: PrintSettings) -> list[str]:
    """Format each block value shown for `entity`, coloured if themed."""
    ret = []
    for block in blocks:
        value = block.format_value(entity, pad, settings)
        if value is None:
            continue
        if settings.colours is not None:
            value = block.colour(value, settings.colours)
        ret.append(value)
    return ret


def render_heading(blocks: list, pad: Padding) -> list[str]:
    """Headings for each block being shown."""
    return [block.heading(pad) for block in blocks]


def _u16_or_dash(value: Optional[int], settings: PrintSettings) -> str:
    if value is None:
        return f"{'-':>6}"
    return format_base_u16(value, settings)


def _u8_or_dash(value: Optional[int], settings: PrintSettings) -> str:
    if value is None:
        return f"{'-':>3}" if settings.decimal else f"{'-':>4}"
    return format_base_u8(value, settings)


def _current_or_dash(value: Optional[int]) -> str:
    if value is None:
        return f"{'-':>6}"
    return f"{value:3} mA"


def _extra(attr: str) -> Callable[[Device], Optional[str]]:
    def get(device: Device) -> Optional[str]:
        if device.extra is None:
            return None
        return getattr(device.extra, attr)
    return get


# ============================================================================
# Bus
# ============================================================================

class BusBlocks(Block):
    """Information that can be printed about a Bus."""
    BUS_NUMBER = "bus-number"
    ICON = "icon"
    NAME = "name"
    HOST_CONTROLLER = "host-controller"
    PCI_VENDOR = "pci-vendor"
    PCI_DEVICE = "pci-device"
    PCI_REVISION = "pci-revision"
    PORT_PATH = "port-path"

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list["BusBlocks"]:
        if verbose:
            return [
                cls.ICON,
                cls.PORT_PATH,
                cls.NAME,
                cls.HOST_CONTROLLER,
                cls.PCI_VENDOR,
                cls.PCI_DEVICE,
                cls.PCI_REVISION,
            ]
        return [cls.NAME, cls.HOST_CONTROLLER]


def _bus_icon(bus: Bus, settings: PrintSettings) -> Optional[str]:
    if settings.icons is None:
        return None
    return settings.icons.get_bus_icon(bus)


_TABLES[BusBlocks] = BlockTable(
    headings={
        BusBlocks.BUS_NUMBER: "Bus",
        BusBlocks.ICON: ICON_HEADING,
        BusBlocks.NAME: "Name",
        BusBlocks.HOST_CONTROLLER: "Host Controller",
        BusBlocks.PCI_VENDOR: " VID  ",
        BusBlocks.PCI_DEVICE: " PID  ",
        BusBlocks.PCI_REVISION: " Rev  ",
        BusBlocks.PORT_PATH: "PortPath",
    },
    colours={
        BusBlocks.BUS_NUMBER: "location",
        BusBlocks.ICON: "icon",
        BusBlocks.NAME: "name",
        BusBlocks.HOST_CONTROLLER: "serial",
        BusBlocks.PCI_VENDOR: "vid",
        BusBlocks.PCI_DEVICE: "pid",
        BusBlocks.PCI_REVISION: "number",
        BusBlocks.PORT_PATH: "path",
    },
    text={
        BusBlocks.NAME: lambda b: b.name,
        BusBlocks.HOST_CONTROLLER: lambda b: b.host_controller,
        BusBlocks.PORT_PATH: lambda b: b.path,
    },
    fixed={
        BusBlocks.BUS_NUMBER: lambda b, s: f"{b.bus_number:3}",
        BusBlocks.ICON: _bus_icon,
        BusBlocks.PCI_VENDOR: lambda b, s: _u16_or_dash(b.pci_vendor, s),
        BusBlocks.PCI_DEVICE: lambda b, s: _u16_or_dash(b.pci_device, s),
        BusBlocks.PCI_REVISION: lambda b, s: _u16_or_dash(b.pci_revision, s),
    },
)


# ============================================================================
# Device
# ============================================================================

class DeviceBlocks(Block):
    """Information that can be printed about a Device."""
    BUS_NUMBER = "bus-number"
    DEVICE_NUMBER = "device-number"
    BRANCH_POSITION = "branch-position"
    PORT_PATH = "port-path"
    SYS_PATH = "sys-path"
    DRIVER = "driver"
    ICON = "icon"
    VENDOR_ID = "vendor-id"
    PRODUCT_ID = "product-id"
    NAME = "name"
    MANUFACTURER = "manufacturer"
    PRODUCT_NAME = "product-name"
    VENDOR_NAME = "vendor-name"
    SERIAL = "serial"
    SPEED = "speed"
    TREE_POSITIONS = "tree-positions"
    BUS_POWER = "bus-power"
    BUS_POWER_USED = "bus-power-used"
    EXTRA_CURRENT_USED = "extra-current-used"
    BCD_DEVICE = "bcd-device"
    BCD_USB = "bcd-usb"
    CLASS_CODE = "class-code"
    SUB_CLASS = "sub-class"
    PROTOCOL = "protocol"

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list["DeviceBlocks"]:
        if verbose:
            return [
                cls.BUS_NUMBER,
                cls.DEVICE_NUMBER,
                cls.TREE_POSITIONS,
                cls.PORT_PATH,
                cls.ICON,
                cls.VENDOR_ID,
                cls.PRODUCT_ID,
                cls.BCD_DEVICE,
                cls.BCD_USB,
                cls.CLASS_CODE,
                cls.SUB_CLASS,
                cls.PROTOCOL,
                cls.NAME,
                cls.MANUFACTURER,
                cls.SERIAL,
                cls.DRIVER,
                cls.SPEED,
            ]
        return [
            cls.BUS_NUMBER,
            cls.DEVICE_NUMBER,
            cls.ICON,
            cls.VENDOR_ID,
            cls.PRODUCT_ID,
            cls.NAME,
            cls.SERIAL,
            cls.SPEED,
        ]

    @classmethod
    def default_device_tree_blocks(cls) -> list["DeviceBlocks"]:
        """Tree printing shows location through the tree itself."""
        return [
            cls.ICON,
            cls.DEVICE_NUMBER,
            cls.VENDOR_ID,
            cls.PRODUCT_ID,
            cls.NAME,
            cls.SERIAL,
        ]


def _device_icon(device: Device, settings: PrintSettings) -> Optional[str]:
    if settings.icons is None:
        return None
    return settings.icons.get_device_icon(device)


def _device_speed(device: Device, settings: PrintSettings) -> str:
    if device.speed is None:
        return f"{'-':>10}"
    return f"{str(device.speed):>10}"


def _device_version(value) -> str:
    if value is None:
        return f"{'-':>5}"
    return f"{str(value):5}"


_TABLES[DeviceBlocks] = BlockTable(
    headings={
        DeviceBlocks.BUS_NUMBER: "Bus",
        DeviceBlocks.DEVICE_NUMBER: " # ",
        DeviceBlocks.BRANCH_POSITION: "Prt",
        DeviceBlocks.PORT_PATH: "PPath",
        DeviceBlocks.SYS_PATH: "SPath",
        DeviceBlocks.DRIVER: "Driver",
        DeviceBlocks.ICON: ICON_HEADING,
        DeviceBlocks.VENDOR_ID: " VID  ",
        DeviceBlocks.PRODUCT_ID: " PID  ",
        DeviceBlocks.NAME: "Name",
        DeviceBlocks.MANUFACTURER: "Manufacturer",
        DeviceBlocks.PRODUCT_NAME: "PName",
        DeviceBlocks.VENDOR_NAME: "VName",
        DeviceBlocks.SERIAL: "Serial",
        DeviceBlocks.SPEED: "  Speed   ",
        DeviceBlocks.TREE_POSITIONS: "TPos",
        # 000 mA
        DeviceBlocks.BUS_POWER: "PBus  ",
        DeviceBlocks.BUS_POWER_USED: "PUsd  ",
        DeviceBlocks.EXTRA_CURRENT_USED: "PExr  ",
        # 00.00
        DeviceBlocks.BCD_DEVICE: "Dev V",
        DeviceBlocks.BCD_USB: "USB V",
        DeviceBlocks.CLASS_CODE: "Class",
        DeviceBlocks.SUB_CLASS: "SubC",
        DeviceBlocks.PROTOCOL: "Pcol",
    },
    colours={
        DeviceBlocks.BUS_NUMBER: "location",
        DeviceBlocks.DEVICE_NUMBER: "number",
        DeviceBlocks.BRANCH_POSITION: "location",
        DeviceBlocks.PORT_PATH: "path",
        DeviceBlocks.SYS_PATH: "path",
        DeviceBlocks.DRIVER: "driver",
        DeviceBlocks.ICON: "icon",
        DeviceBlocks.VENDOR_ID: "vid",
        DeviceBlocks.PRODUCT_ID: "pid",
        DeviceBlocks.NAME: "name",
        DeviceBlocks.MANUFACTURER: "manufacturer",
        DeviceBlocks.PRODUCT_NAME: "name",
        DeviceBlocks.VENDOR_NAME: "manufacturer",
        DeviceBlocks.SERIAL: "serial",
        DeviceBlocks.SPEED: "speed",
        DeviceBlocks.TREE_POSITIONS: "location",
        DeviceBlocks.BUS_POWER: "power",
        DeviceBlocks.BUS_POWER_USED: "power",
        DeviceBlocks.EXTRA_CURRENT_USED: "power",
        DeviceBlocks.BCD_DEVICE: "number",
        DeviceBlocks.BCD_USB: "number",
        DeviceBlocks.CLASS_CODE: "class_code",
        DeviceBlocks.SUB_CLASS: "sub_code",
        DeviceBlocks.PROTOCOL: "protocol",
    },
    text={
        DeviceBlocks.PORT_PATH: lambda d: d.port_path,
        DeviceBlocks.SYS_PATH: _extra("syspath"),
        DeviceBlocks.DRIVER: _extra("driver"),
        DeviceBlocks.NAME: lambda d: d.name,
        DeviceBlocks.MANUFACTURER: lambda d: d.manufacturer,
        DeviceBlocks.PRODUCT_NAME: _extra("product_name"),
        DeviceBlocks.VENDOR_NAME: _extra("vendor"),
        DeviceBlocks.SERIAL: lambda d: d.serial,
        DeviceBlocks.TREE_POSITIONS: lambda d: "-".join(str(p) for p in d.location.tree_positions),
        DeviceBlocks.CLASS_CODE: lambda d: d.class_name,
    },
    fixed={
        DeviceBlocks.BUS_NUMBER: lambda d, s: f"{d.location.bus:3}",
        DeviceBlocks.DEVICE_NUMBER: lambda d, s: f"{d.location.number:3}",
        DeviceBlocks.BRANCH_POSITION: lambda d, s: f"{d.branch_position:3}",
        DeviceBlocks.ICON: _device_icon,
        DeviceBlocks.VENDOR_ID: lambda d, s: _u16_or_dash(d.vendor_id, s),
        DeviceBlocks.PRODUCT_ID: lambda d, s: _u16_or_dash(d.product_id, s),
        DeviceBlocks.SPEED: _device_speed,
        DeviceBlocks.BUS_POWER: lambda d, s: _current_or_dash(d.bus_power),
        DeviceBlocks.BUS_POWER_USED: lambda d, s: _current_or_dash(d.bus_power_used),
        DeviceBlocks.EXTRA_CURRENT_USED: lambda d, s: _current_or_dash(d.extra_current_used),
        DeviceBlocks.BCD_DEVICE: lambda d, s: _device_version(d.bcd_device),
        DeviceBlocks.BCD_USB: lambda d, s: _device_version(d.bcd_usb),
        DeviceBlocks.SUB_CLASS: lambda d, s: _u8_or_dash(d.sub_class, s),
        DeviceBlocks.PROTOCOL: lambda d, s: _u8_or_dash(d.protocol, s),
    },
)


# ============================================================================
# Configuration
# ============================================================================

class ConfigurationBlocks(Block):
    """Information that can be printed about a Configuration."""
    NAME = "name"
    NUMBER = "number"
    NUM_INTERFACES = "num-interfaces"
    ATTRIBUTES = "attributes"
    ICON_ATTRIBUTES = "icon-attributes"
    MAX_POWER = "max-power"

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list["ConfigurationBlocks"]:
        if verbose:
            return [
                cls.NUMBER,
                cls.ICON_ATTRIBUTES,
                cls.ATTRIBUTES,
                cls.NUM_INTERFACES,
                cls.MAX_POWER,
                cls.NAME,
            ]
        return [cls.NUMBER, cls.ICON_ATTRIBUTES, cls.MAX_POWER, cls.NAME]


def attributes_to_icons(config: Configuration) -> str:
    """Nerd font icons of the configuration attributes."""
    icons = []
    for attribute in config.attributes:
        if attribute == ConfigAttributes.SELF_POWERED:
            icons.append(SELF_POWERED_ICON)
        elif attribute == ConfigAttributes.REMOTE_WAKEUP:
            icons.append(REMOTE_WAKEUP_ICON)
    return " ".join(icons)


def _config_icons(config: Configuration, settings: PrintSettings) -> Optional[str]:
    if settings.icons is None:
        return None
    # icon widths are not reliable so a fixed 3 is used
    return centre(attributes_to_icons(config), 3)


_TABLES[ConfigurationBlocks] = BlockTable(
    headings={
        ConfigurationBlocks.NAME: "Name",
        ConfigurationBlocks.NUMBER: " #",
        ConfigurationBlocks.NUM_INTERFACES: "I#",
        ConfigurationBlocks.ATTRIBUTES: "Attributes",
        ConfigurationBlocks.ICON_ATTRIBUTES: centre(ICON_HEADING, 3),
        ConfigurationBlocks.MAX_POWER: "PMax ",
    },
    colours={
        ConfigurationBlocks.NAME: "name",
        ConfigurationBlocks.NUMBER: "location",
        ConfigurationBlocks.NUM_INTERFACES: "number",
        ConfigurationBlocks.ATTRIBUTES: "attributes",
        ConfigurationBlocks.ICON_ATTRIBUTES: "icon",
        ConfigurationBlocks.MAX_POWER: "power",
    },
    text={
        ConfigurationBlocks.NAME: lambda c: c.name,
        ConfigurationBlocks.ATTRIBUTES: lambda c: c.attributes_string(),
    },
    fixed={
        ConfigurationBlocks.NUMBER: lambda c, s: f"{c.number:2}",
        ConfigurationBlocks.NUM_INTERFACES: lambda c, s: f"{len(c.interfaces):2}",
        ConfigurationBlocks.ICON_ATTRIBUTES: _config_icons,
        ConfigurationBlocks.MAX_POWER: lambda c, s: f"{c.max_power:3}mA",
    },
)


# ============================================================================
# Interface
# ============================================================================

class InterfaceBlocks(Block):
    """Information that can be printed about an Interface."""
    NAME = "name"
    NUMBER = "number"
    PORT_PATH = "port-path"
    CLASS_CODE = "class-code"
    SUB_CLASS = "sub-class"
    PROTOCOL = "protocol"
    ALT_SETTING = "alt-setting"
    DRIVER = "driver"
    SYS_PATH = "sys-path"
    NUM_ENDPOINTS = "num-endpoints"
    ICON = "icon"

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list["InterfaceBlocks"]:
        blocks = [
            cls.PORT_PATH,
            cls.ICON,
            cls.ALT_SETTING,
            cls.CLASS_CODE,
            cls.SUB_CLASS,
            cls.PROTOCOL,
            cls.NAME,
        ]
        if verbose:
            blocks.extend([cls.DRIVER, cls.NUM_ENDPOINTS])
        return blocks


def _interface_icon(interface: Interface, settings: PrintSettings) -> Optional[str]:
    if settings.icons is None:
        return None
    return settings.icons.get_classifier_icon(
        interface.class_code, interface.sub_class, interface.protocol)


_TABLES[InterfaceBlocks] = BlockTable(
    headings={
        InterfaceBlocks.NAME: "Name",
        InterfaceBlocks.NUMBER: " #",
        InterfaceBlocks.PORT_PATH: "PortPath",
        InterfaceBlocks.CLASS_CODE: "Class",
        InterfaceBlocks.SUB_CLASS: "SubC",
        InterfaceBlocks.PROTOCOL: "Pcol",
        InterfaceBlocks.ALT_SETTING: "Alt#",
        InterfaceBlocks.DRIVER: "Driver",
        InterfaceBlocks.SYS_PATH: "SysPath",
        InterfaceBlocks.NUM_ENDPOINTS: "E#",
        InterfaceBlocks.ICON: ICON_HEADING,
    },
    colours={
        InterfaceBlocks.NAME: "name",
        InterfaceBlocks.NUMBER: "number",
        InterfaceBlocks.PORT_PATH: "path",
        InterfaceBlocks.CLASS_CODE: "class_code",
        InterfaceBlocks.SUB_CLASS: "sub_code",
        InterfaceBlocks.PROTOCOL: "protocol",
        InterfaceBlocks.ALT_SETTING: "number",
        InterfaceBlocks.DRIVER: "driver",
        InterfaceBlocks.SYS_PATH: "path",
        InterfaceBlocks.NUM_ENDPOINTS: "number",
        InterfaceBlocks.ICON: "icon",
    },
    text={
        InterfaceBlocks.NAME: lambda i: i.name,
        InterfaceBlocks.PORT_PATH: lambda i: i.path,
        InterfaceBlocks.CLASS_CODE: lambda i: get_class_name(i.class_code),
        InterfaceBlocks.DRIVER: lambda i: i.driver,
        InterfaceBlocks.SYS_PATH: lambda i: i.syspath,
    },
    fixed={
        InterfaceBlocks.NUMBER: lambda i, s: f"{i.number:2}",
        InterfaceBlocks.SUB_CLASS: lambda i, s: format_base_u8(i.sub_class, s),
        InterfaceBlocks.PROTOCOL: lambda i, s: format_base_u8(i.protocol, s),
        InterfaceBlocks.ALT_SETTING: lambda i, s: format_base_u8(i.alt_setting, s),
        InterfaceBlocks.NUM_ENDPOINTS: lambda i, s: f"{len(i.endpoints):2}",
        InterfaceBlocks.ICON: _interface_icon,
    },
)


# ============================================================================
# Endpoint
# ============================================================================

class EndpointBlocks(Block):
    """Information that can be printed about an Endpoint."""
    NUMBER = "number"
    DIRECTION = "direction"
    TRANSFER_TYPE = "transfer-type"
    SYNC_TYPE = "sync-type"
    USAGE_TYPE = "usage-type"
    MAX_PACKET_SIZE = "max-packet-size"
    INTERVAL = "interval"

    @classmethod
    def default_blocks(cls, verbose: bool = False) -> list["EndpointBlocks"]:
        if verbose:
            return [
                cls.NUMBER,
                cls.DIRECTION,
                cls.TRANSFER_TYPE,
                cls.SYNC_TYPE,
                cls.USAGE_TYPE,
                cls.INTERVAL,
                cls.MAX_PACKET_SIZE,
            ]
        return [
            cls.NUMBER,
            cls.DIRECTION,
            cls.TRANSFER_TYPE,
            cls.SYNC_TYPE,
            cls.USAGE_TYPE,
            cls.MAX_PACKET_SIZE,
        ]


_TABLES[EndpointBlocks] = BlockTable(
    headings={
        EndpointBlocks.NUMBER: " #",
        EndpointBlocks.DIRECTION: "Dir",
        EndpointBlocks.TRANSFER_TYPE: "TransferT",
        EndpointBlocks.SYNC_TYPE: "SyncT",
        EndpointBlocks.USAGE_TYPE: "UsageT",
        EndpointBlocks.MAX_PACKET_SIZE: "MaxPkB",
        EndpointBlocks.INTERVAL: "Iv",
    },
    colours={
        EndpointBlocks.NUMBER: "number",
        EndpointBlocks.DIRECTION: "attributes",
        EndpointBlocks.TRANSFER_TYPE: "attributes",
        EndpointBlocks.SYNC_TYPE: "attributes",
        EndpointBlocks.USAGE_TYPE: "attributes",
        EndpointBlocks.MAX_PACKET_SIZE: "number",
        EndpointBlocks.INTERVAL: "number",
    },
    text={
        EndpointBlocks.DIRECTION: lambda e: str(e.direction),
        EndpointBlocks.TRANSFER_TYPE: lambda e: str(e.transfer_type),
        EndpointBlocks.SYNC_TYPE: lambda e: str(e.sync_type),
        EndpointBlocks.USAGE_TYPE: lambda e: str(e.usage_type),
        EndpointBlocks.MAX_PACKET_SIZE: lambda e: e.max_packet_string(),
    },
    fixed={
        EndpointBlocks.NUMBER: lambda e, s: f"{e.number:2}",
        EndpointBlocks.INTERVAL: lambda e, s: f"{e.interval:2}",
    },
)


def _check_tables() -> None:
    """Every member of every block enum must be handled by its table."""
    roles = set(ColourTheme.roles())
    for cls, table in _TABLES.items():
        members = set(cls)
        overlap = set(table.text) & set(table.fixed)
        if overlap:
            raise TypeError(f"{cls.__name__} blocks both text and fixed: {overlap}")
        for name, handled in (("heading", table.headings),
                              ("colour", table.colours),
                              ("value", {**table.text, **table.fixed})):
            missing = members - set(handled)
            if missing:
                raise TypeError(f"{cls.__name__} blocks without a {name}: {missing}")
        unknown = set(table.colours.values()) - roles
        if unknown:
            raise TypeError(f"{cls.__name__} uses unknown colour roles: {unknown}")


_check_tables()

BLOCK_TYPES: dict[str, type] = {
    "bus": BusBlocks,
    "device": DeviceBlocks,
    "configuration": ConfigurationBlocks,
    "interface": InterfaceBlocks,
    "endpoint": EndpointBlocks,
}


def parse_blocks(cls: type, names: list[str]) -> list:
    """
    Blocks of enum `cls` from their kebab-case names.

    Raises:
        ValueError: if a name is not a block of `cls`
    """
    ret = []
    for name in names:
        try:
            ret.append(cls(name))
        except ValueError:
            valid = ", ".join(b.value for b in cls)
            raise ValueError(f"Unknown {cls.__name__} '{name}' (valid: {valid})") from None
    return ret
