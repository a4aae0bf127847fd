"""
Icons for devices, buses, classes and tree drawing.

Icon lookups are keyed by strings so that user themes can be loaded from a
config file: ``vid-pid#1d6b:0003``, ``vid#1d6b``, ``classifier#09``,
``classifier-sub-protocol#03:01:02`` and the tree glyph names of
:class:`TreeIcon`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .model import Bus, Device, Direction


class TreeIcon(Enum):
    """Glyphs used when drawing a tree."""
    EDGE = "tree-edge"
    LINE = "tree-line"
    CORNER = "tree-corner"
    BLANK = "tree-blank"
    BUS_START = "tree-bus-start"
    DEVICE_TERMINATOR = "tree-device-terminator"
    CONFIGURATION_TERMINATOR = "tree-configuration-terminator"
    INTERFACE_TERMINATOR = "tree-interface-terminator"
    ENDPOINT_IN = "endpoint_in"
    ENDPOINT_OUT = "endpoint_out"

    @classmethod
    def endpoint(cls, direction: Direction) -> "TreeIcon":
        """Terminator for an endpoint of the given direction."""
        return cls.ENDPOINT_IN if direction == Direction.IN else cls.ENDPOINT_OUT


DEFAULT_UTF8_TREE: dict[TreeIcon, str] = {
    TreeIcon.EDGE: "├──",
    TreeIcon.LINE: "│  ",
    TreeIcon.CORNER: "└──",
    TreeIcon.BLANK: "   ",
    TreeIcon.BUS_START: "●",
    TreeIcon.DEVICE_TERMINATOR: "○",
    TreeIcon.CONFIGURATION_TERMINATOR: "•",
    TreeIcon.INTERFACE_TERMINATOR: "◦",
    TreeIcon.ENDPOINT_IN: "→",
    TreeIcon.ENDPOINT_OUT: "←",
}

DEFAULT_ASCII_TREE: dict[TreeIcon, str] = {
    TreeIcon.EDGE: "|__",
    TreeIcon.LINE: "|  ",
    TreeIcon.CORNER: "`__",
    TreeIcon.BLANK: "   ",
    TreeIcon.BUS_START: "/:",
    TreeIcon.DEVICE_TERMINATOR: "O",
    TreeIcon.CONFIGURATION_TERMINATOR: "o",
    TreeIcon.INTERFACE_TERMINATOR: ".",
    TreeIcon.ENDPOINT_IN: ">",
    TreeIcon.ENDPOINT_OUT: "<",
}

UNKNOWN_VENDOR = "unknown-vendor"
UNDEFINED_CLASSIFIER = "undefined-classifier"

# Nerd font glyphs; a small set only, users extend through their config
DEFAULT_ICONS: dict[str, str] = {
    UNKNOWN_VENDOR: "",  # usb
    UNDEFINED_CLASSIFIER: "☶",
    "vid#1d6b": "",  # linux foundation
    "vid#05ac": "",  # apple
    "vid#045e": "",  # microsoft
    "classifier#01": "",  # audio
    "classifier#03": "",  # hid
    "classifier#08": "",  # mass storage
    "classifier#09": "",  # hub
    "classifier#0e": "",  # video
    "classifier#e0": "",  # wireless
}


def get_ascii_tree_icon(icon: TreeIcon) -> str:
    """ASCII glyph for a tree icon."""
    return DEFAULT_ASCII_TREE[icon]


def vid_key(vid: int) -> str:
    return f"vid#{vid:04x}"


def vid_pid_key(vid: int, pid: int) -> str:
    return f"vid-pid#{vid:04x}:{pid:04x}"


def classifier_key(class_code: int) -> str:
    return f"classifier#{class_code:02x}"


def classifier_sub_protocol_key(class_code: int, sub_class: int, protocol: int) -> str:
    return f"classifier-sub-protocol#{class_code:02x}:{sub_class:02x}:{protocol:02x}"


@dataclass
class IconTheme:
    """
    Icon lookup with user overrides merged over defaults.

    Attributes:
        user: User supplied icons keyed like DEFAULT_ICONS; checked first
        tree: User supplied tree glyphs; missing ones use DEFAULT_UTF8_TREE
    """
    user: dict[str, str] = field(default_factory=dict)
    tree: dict[TreeIcon, str] = field(default_factory=dict)

    def _lookup(self, key: str) -> Optional[str]:
        if key in self.user:
            return self.user[key]
        return DEFAULT_ICONS.get(key)

    def get_device_icon(self, device: Device) -> str:
        """Icon for a device by VID:PID, then VID, then device class."""
        keys = []
        if device.vendor_id is not None:
            if device.product_id is not None:
                keys.append(vid_pid_key(device.vendor_id, device.product_id))
            keys.append(vid_key(device.vendor_id))
        if device.class_code is not None:
            keys.append(classifier_key(device.class_code))
        for key in keys:
            icon = self._lookup(key)
            if icon is not None:
                return icon
        return self._lookup(UNKNOWN_VENDOR) or ""

    def get_bus_icon(self, bus: Bus) -> str:
        """Icon for a bus by its PCI vendor/device."""
        if bus.pci_vendor is not None:
            if bus.pci_device is not None:
                icon = self._lookup(vid_pid_key(bus.pci_vendor, bus.pci_device))
                if icon is not None:
                    return icon
            icon = self._lookup(vid_key(bus.pci_vendor))
            if icon is not None:
                return icon
        return self._lookup(UNKNOWN_VENDOR) or ""

    def get_classifier_icon(self, class_code: int, sub_class: int, protocol: int) -> str:
        """Icon for an interface class triple."""
        for key in (classifier_sub_protocol_key(class_code, sub_class, protocol),
                    classifier_key(class_code)):
            icon = self._lookup(key)
            if icon is not None:
                return icon
        return self._lookup(UNDEFINED_CLASSIFIER) or ""

    def get_tree_icon(self, icon: TreeIcon) -> str:
        """Glyph for drawing a tree, user override first."""
        return self.tree.get(icon, DEFAULT_UTF8_TREE[icon])

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "IconTheme":
        """Build from a config mapping; tree glyph names go to `tree`."""
        tree_names = {icon.value: icon for icon in TreeIcon}
        theme = cls()
        for key, value in data.items():
            if key in tree_names:
                theme.tree[tree_names[key]] = value
            else:
                theme.user[key] = value
        return theme

    def to_dict(self) -> dict[str, str]:
        data = dict(self.user)
        data.update({icon.value: glyph for icon, glyph in self.tree.items()})
        return data


def example_theme() -> IconTheme:
    """Theme showing the override keys, used for example configs."""
    return IconTheme(
        user={
            vid_pid_key(0x1d50, 0x6018): "",  # bug
            vid_key(0x1915): "",
            classifier_sub_protocol_key(0x03, 0x01, 0x02): "",  # mouse
        },
        tree={TreeIcon.BUS_START: "◉"},
    )
