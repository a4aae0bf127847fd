"""
Print settings and the policies applied before printing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from .colour import ColourTheme
from .icon import IconTheme
from .model import Device

if TYPE_CHECKING:
    from .blocks import (
        BusBlocks,
        ConfigurationBlocks,
        DeviceBlocks,
        EndpointBlocks,
        InterfaceBlocks,
    )

# Verbosity at which every block is shown
MAX_VERBOSITY = 4


class Sort(Enum):
    """How devices are ordered within each sibling batch."""
    BRANCH_POSITION = "branch-position"
    DEVICE_NUMBER = "device-number"
    NO_SORT = "no-sort"

    def sort_devices(self, devices: list[Device]) -> list[Device]:
        """Return a new, stably sorted list; `devices` is not modified."""
        if self == Sort.BRANCH_POSITION:
            return sorted(devices, key=lambda d: d.branch_position)
        if self == Sort.DEVICE_NUMBER:
            return sorted(devices, key=lambda d: d.location.number)
        return list(devices)


class Group(Enum):
    """How devices are grouped when listing."""
    NO_GROUP = "no-group"
    BUS = "bus"


class MaskSerial(Enum):
    """How serial numbers are masked."""
    HIDE = "hide"
    SCRAMBLE = "scramble"
    REPLACE = "replace"


@dataclass(frozen=True)
class PrintSettings:
    """
    Everything a render pass needs to know; read-only for the pass.

    Attributes:
        no_padding: Don't pad values to align blocks
        decimal: Print 16-bit ids and 8-bit codes in base 10
        tree: Draw the device hierarchy as a tree
        hide_buses: Hide buses without devices
        hide_hubs: Hide hubs left without devices after filtering
        sort_devices: Order of devices in each batch
        sort_buses: Order buses by bus number
        group_devices: Group listed devices under their bus
        headings: Print a heading row for each batch
        verbosity: 1 configurations, 2 interfaces, 3 endpoints, 4 all blocks
        more: Print the verbose block sets at any verbosity
        json: Print the tree as JSON instead of text
        mask_serials: Mask serial numbers with this method
        device_blocks: Blocks for devices, default set if None
        bus_blocks: Blocks for buses, default set if None
        config_blocks: Blocks for configurations, default set if None
        interface_blocks: Blocks for interfaces, default set if None
        endpoint_blocks: Blocks for endpoints, default set if None
        icons: Icon theme; no icons are printed if None
        colours: Colour theme; output is not coloured if None
        ascii: Use ASCII tree glyphs even when an icon theme is set
    """
    no_padding: bool = False
    decimal: bool = False
    tree: bool = False
    hide_buses: bool = False
    hide_hubs: bool = False
    sort_devices: Sort = Sort.BRANCH_POSITION
    sort_buses: bool = False
    group_devices: Group = Group.NO_GROUP
    headings: bool = False
    verbosity: int = 0
    more: bool = False
    json: bool = False
    mask_serials: Optional[MaskSerial] = None
    device_blocks: Optional[list["DeviceBlocks"]] = None
    bus_blocks: Optional[list["BusBlocks"]] = None
    config_blocks: Optional[list["ConfigurationBlocks"]] = None
    interface_blocks: Optional[list["InterfaceBlocks"]] = None
    endpoint_blocks: Optional[list["EndpointBlocks"]] = None
    icons: Optional[IconTheme] = None
    colours: Optional[ColourTheme] = None
    ascii: bool = False

    @property
    def verbose_blocks(self) -> bool:
        """Whether the richer default block sets are used."""
        return self.verbosity >= MAX_VERBOSITY or self.more
