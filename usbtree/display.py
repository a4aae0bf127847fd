"""
Text rendering of a bus/device tree.

The tree is printed one entity level at a time (bus, device, configuration,
interface, endpoint). Every level follows the same pattern: pad the sibling
batch, print a heading for the first row when asked, then print each row and
descend into its children when the verbosity allows it. In tree mode each row
is drawn behind a prefix of box-drawing glyphs; otherwise deeper levels are
indented by a fixed number of spaces.

Before printing, :func:`prepare` applies the policies that edit the tree
(flatten, filter, hide, sort buses, mask serials). Printing itself never
modifies the tree.
"""

import logging
import random
import string
import sys
from dataclasses import dataclass, replace
from typing import Optional, TextIO

from .blocks import (
    BusBlocks,
    ConfigurationBlocks,
    DeviceBlocks,
    EndpointBlocks,
    InterfaceBlocks,
    render_heading,
    render_value,
)
from .colour import ColourTheme
from .filter import DeviceFilter
from .icon import TreeIcon, get_ascii_tree_icon
from .model import Bus, Configuration, Device, DeviceTree, Endpoint, Interface
from .serialize import dumps
from .settings import Group, MaskSerial, PrintSettings

logger = logging.getLogger(__name__)

# Flat mode indent of each level below a device
CONFIGURATION_INDENT = 2
INTERFACE_INDENT = 4
ENDPOINT_INDENT = 6

# Colour role of each row terminator glyph
TERMINATOR_ROLES: dict[TreeIcon, str] = {
    TreeIcon.BUS_START: "tree_bus_start",
    TreeIcon.DEVICE_TERMINATOR: "tree_device_terminator",
    TreeIcon.CONFIGURATION_TERMINATOR: "tree_configuration_terminator",
    TreeIcon.INTERFACE_TERMINATOR: "tree_interface_terminator",
    TreeIcon.ENDPOINT_IN: "tree_endpoint_in",
    TreeIcon.ENDPOINT_OUT: "tree_endpoint_out",
}


# ============================================================================
# Tree drawing
# ============================================================================

@dataclass(frozen=True)
class TreeData:
    """
    Draw state handed down to a sibling batch.

    Attributes:
        branch_length: Number of rows drawn on the branch the batch sits on
        trunk_index: Position of the parent row on its own branch
        depth: Recursion depth; 0 is the bus level
        prefix: Glyphs of all ancestor levels, drawn before each row
        offset: Position of the batch's first row on the branch
    """
    branch_length: int = 0
    trunk_index: int = 0
    depth: int = 0
    prefix: str = ""
    offset: int = 0


def get_tree_icon(icon: TreeIcon, settings: PrintSettings) -> str:
    """Glyph for `icon`; ASCII when there is no icon theme or ASCII is forced."""
    if settings.icons is None or settings.ascii:
        return get_ascii_tree_icon(icon)
    return settings.icons.get_tree_icon(icon)


def generate_tree_data(parent: TreeData, branch_length: int, index: int,
                       settings: PrintSettings) -> TreeData:
    """
    Draw state for the children of the row at `index` of `parent`'s branch.

    The prefix grows by a continuation line when more rows follow the parent
    row on its branch, or by a blank when it was the last one. Rows directly
    below the bus level add nothing to the prefix.

    Args:
        parent: Draw state of the batch holding the parent row
        branch_length: Number of rows on the new branch
        index: Position of the parent row on its branch
        settings: Print settings of the pass

    Returns:
        New draw state one level deeper
    """
    prefix = parent.prefix
    if settings.tree and parent.depth > 0:
        if index + 1 == parent.branch_length:
            prefix += get_tree_icon(TreeIcon.BLANK, settings)
        else:
            prefix += get_tree_icon(TreeIcon.LINE, settings)

    return TreeData(
        branch_length=branch_length,
        trunk_index=index,
        depth=parent.depth + 1,
        prefix=prefix,
    )


def get_row_prefix(tree: TreeData, position: int, settings: PrintSettings) -> str:
    """Prefix of one row: the branch prefix plus an edge, or a corner if last."""
    if tree.depth == 0:
        return tree.prefix
    if position + 1 == tree.branch_length:
        return tree.prefix + get_tree_icon(TreeIcon.CORNER, settings)
    return tree.prefix + get_tree_icon(TreeIcon.EDGE, settings)


def _draw(prefix: str, terminator: TreeIcon, settings: PrintSettings) -> tuple[str, str]:
    """Coloured prefix and terminator glyph of a tree row."""
    glyph = get_tree_icon(terminator, settings)
    if settings.colours is not None:
        prefix = settings.colours.apply("tree", prefix)
        glyph = settings.colours.apply(TERMINATOR_ROLES[terminator], glyph)
    return prefix, glyph


def _heading_line(blocks: list, pad: dict, settings: PrintSettings) -> str:
    heading = " ".join(render_heading(blocks, pad))
    if settings.colours is not None:
        return ColourTheme.heading(heading)
    return heading


def _write_row(out: TextIO, row: str, lead: str, first: bool, blocks: list,
               pad: dict, settings: PrintSettings, tree_prefix: Optional[str] = None) -> None:
    """
    Write one entity row, preceded by a heading row for the first of a batch.

    In tree mode `lead` is the prefix with the terminator glyph and the
    heading sits two spaces after `tree_prefix`; in flat mode `lead` is the
    indent shared by heading and row.
    """
    if settings.headings and first:
        heading = _heading_line(blocks, pad, settings)
        if tree_prefix is not None:
            print(f"{tree_prefix}  {heading}", file=out)
        else:
            print(f"{lead}{heading}", file=out)
    if tree_prefix is not None:
        print(f"{lead} {row}", file=out)
    else:
        print(f"{lead}{row}", file=out)


# ============================================================================
# Block selection
# ============================================================================

def get_bus_blocks(settings: PrintSettings) -> list[BusBlocks]:
    if settings.bus_blocks is not None:
        return settings.bus_blocks
    return BusBlocks.default_blocks(settings.verbose_blocks)


def get_device_blocks(settings: PrintSettings) -> list[DeviceBlocks]:
    """Device blocks; tree printing has its own shorter default set."""
    if settings.device_blocks is not None:
        return settings.device_blocks
    if settings.verbose_blocks:
        return DeviceBlocks.default_blocks(True)
    if settings.tree:
        return DeviceBlocks.default_device_tree_blocks()
    return DeviceBlocks.default_blocks(False)


def get_config_blocks(settings: PrintSettings) -> list[ConfigurationBlocks]:
    if settings.config_blocks is not None:
        return settings.config_blocks
    return ConfigurationBlocks.default_blocks(settings.verbose_blocks)


def get_interface_blocks(settings: PrintSettings) -> list[InterfaceBlocks]:
    if settings.interface_blocks is not None:
        return settings.interface_blocks
    return InterfaceBlocks.default_blocks(settings.verbose_blocks)


def get_endpoint_blocks(settings: PrintSettings) -> list[EndpointBlocks]:
    if settings.endpoint_blocks is not None:
        return settings.endpoint_blocks
    return EndpointBlocks.default_blocks(settings.verbose_blocks)


def _padding(cls, entities: list, settings: PrintSettings) -> dict:
    if settings.no_padding:
        return {}
    return cls.generate_padding(entities)


# ============================================================================
# Printers
# ============================================================================

def print_endpoints(endpoints: list[Endpoint], settings: PrintSettings,
                    tree: TreeData = TreeData(), out: TextIO = sys.stdout) -> None:
    """Print the endpoints of an interface."""
    blocks = get_endpoint_blocks(settings)
    pad = _padding(EndpointBlocks, endpoints, settings)
    logger.debug("Print endpoints padding %s, tree %s", pad, tree)

    for i, endpoint in enumerate(endpoints):
        row = " ".join(render_value(endpoint, blocks, pad, settings))
        if settings.tree:
            prefix, glyph = _draw(get_row_prefix(tree, tree.offset + i, settings),
                                  TreeIcon.endpoint(endpoint.direction), settings)
            _write_row(out, row, prefix + glyph, i == 0, blocks, pad, settings, prefix)
        else:
            _write_row(out, row, " " * ENDPOINT_INDENT, i == 0, blocks, pad, settings)


def print_interfaces(interfaces: list[Interface], settings: PrintSettings,
                     tree: TreeData = TreeData(), out: TextIO = sys.stdout) -> None:
    """Print the interfaces of a configuration, with endpoints at verbosity 3."""
    blocks = get_interface_blocks(settings)
    pad = _padding(InterfaceBlocks, interfaces, settings)
    logger.debug("Print interfaces padding %s, tree %s", pad, tree)

    for i, interface in enumerate(interfaces):
        position = tree.offset + i
        row = " ".join(render_value(interface, blocks, pad, settings))
        if settings.tree:
            prefix, glyph = _draw(get_row_prefix(tree, position, settings),
                                  TreeIcon.INTERFACE_TERMINATOR, settings)
            _write_row(out, row, prefix + glyph, i == 0, blocks, pad, settings, prefix)
        else:
            _write_row(out, row, " " * INTERFACE_INDENT, i == 0, blocks, pad, settings)

        if settings.verbosity >= 3:
            print_endpoints(
                interface.endpoints,
                settings,
                generate_tree_data(tree, len(interface.endpoints), position, settings),
                out,
            )


def print_configurations(configs: list[Configuration], settings: PrintSettings,
                         tree: TreeData = TreeData(), out: TextIO = sys.stdout) -> None:
    """Print the configurations of a device, with interfaces at verbosity 2."""
    blocks = get_config_blocks(settings)
    pad = _padding(ConfigurationBlocks, configs, settings)
    logger.debug("Print configurations padding %s, tree %s", pad, tree)

    for i, config in enumerate(configs):
        position = tree.offset + i
        row = " ".join(render_value(config, blocks, pad, settings))
        if settings.tree:
            prefix, glyph = _draw(get_row_prefix(tree, position, settings),
                                  TreeIcon.CONFIGURATION_TERMINATOR, settings)
            _write_row(out, row, prefix + glyph, i == 0, blocks, pad, settings, prefix)
        else:
            _write_row(out, row, " " * CONFIGURATION_INDENT, i == 0, blocks, pad, settings)

        if settings.verbosity >= 2:
            print_interfaces(
                config.interfaces,
                settings,
                generate_tree_data(tree, len(config.interfaces), position, settings),
                out,
            )


def _drawn_configurations(device: Device, settings: PrintSettings) -> list[Configuration]:
    """Configurations printed below `device` at the current verbosity."""
    if settings.verbosity < 1:
        return []
    if device.extra is None:
        logger.warning("Unable to print verbose information for %s because "
                       "extended device information is missing", device)
        return []
    return device.extra.configurations


def print_devices(devices: list[Device], settings: PrintSettings,
                  tree: TreeData = TreeData(), out: TextIO = sys.stdout) -> None:
    """
    Recursively print `devices` and the devices attached to them.

    Below each device come its configurations and then its child devices.
    Both share one branch so that the last configuration is only drawn with
    a corner when no child device follows it.

    Args:
        devices: Sibling devices to print
        settings: Print settings of the pass
        tree: Draw state of the batch
        out: Stream to write to
    """
    blocks = get_device_blocks(settings)
    pad = _padding(DeviceBlocks, devices, settings)
    logger.debug("Print devices padding %s, tree %s", pad, tree)

    for i, device in enumerate(settings.sort_devices.sort_devices(devices)):
        position = tree.offset + i
        row = " ".join(render_value(device, blocks, pad, settings))
        if settings.tree:
            prefix, glyph = _draw(get_row_prefix(tree, position, settings),
                                  TreeIcon.DEVICE_TERMINATOR, settings)
            _write_row(out, row, prefix + glyph, i == 0, blocks, pad, settings, prefix)
        else:
            _write_row(out, row, "", i == 0, blocks, pad, settings)

        configs = _drawn_configurations(device, settings)
        branch = generate_tree_data(tree, len(configs) + len(device.devices),
                                    position, settings)
        if configs:
            print_configurations(configs, settings, branch, out)
        if device.devices:
            print_devices(device.devices, settings, replace(branch, offset=len(configs)), out)


def print_flattened_devices(devices: list[Device], settings: PrintSettings,
                            out: TextIO = sys.stdout) -> None:
    """Print `devices` as one list, without descending into child devices."""
    blocks = settings.device_blocks
    if blocks is None:
        blocks = DeviceBlocks.default_blocks(settings.verbose_blocks)
    pad = _padding(DeviceBlocks, devices, settings)
    logger.debug("Flattened devices padding %s", pad)

    if settings.headings:
        print(_heading_line(blocks, pad, settings), file=out)

    for device in settings.sort_devices.sort_devices(devices):
        print(" ".join(render_value(device, blocks, pad, settings)), file=out)
        configs = _drawn_configurations(device, settings)
        if configs:
            print_configurations(configs, settings, TreeData(), out)


def print_bus_grouped(bus_devices: list[tuple[Bus, list[Device]]], settings: PrintSettings,
                      out: TextIO = sys.stdout) -> None:
    """Print each bus followed by its device list, one group per bus."""
    blocks = get_bus_blocks(settings)
    pad = _padding(BusBlocks, [bus for bus, _ in bus_devices], settings)

    for bus, devices in bus_devices:
        if settings.headings:
            print(_heading_line(blocks, pad, settings), file=out)
        print(" ".join(render_value(bus, blocks, pad, settings)), file=out)
        print_flattened_devices(devices, settings, out)
        # new line for each group
        print(file=out)


def print_buses(buses: list[Bus], settings: PrintSettings, out: TextIO = sys.stdout) -> None:
    """Print every bus and its device tree, separated by blank lines."""
    blocks = get_bus_blocks(settings)
    pad = _padding(BusBlocks, buses, settings)
    base = TreeData()
    logger.debug("Print buses padding %s", pad)

    for i, bus in enumerate(buses):
        row = " ".join(render_value(bus, blocks, pad, settings))
        if settings.tree:
            prefix, start = _draw(base.prefix, TreeIcon.BUS_START, settings)
            if settings.headings:
                # room for the bus start glyph
                print(f"  {_heading_line(blocks, pad, settings)}", file=out)
            print(f"{prefix}{start} {row}", file=out)
        else:
            if settings.headings:
                print(_heading_line(blocks, pad, settings), file=out)
            print(row, file=out)

        if bus.devices:
            print_devices(bus.devices, settings,
                          generate_tree_data(base, len(bus.devices), i, settings), out)
        print(file=out)


# ============================================================================
# Preparation
# ============================================================================

SERIAL_REPLACE_CHARS = string.ascii_uppercase + string.digits


def mask_serial(device: Device, method: MaskSerial, recursive: bool = True) -> None:
    """
    Mask the serial of `device` in place, keeping its length.

    Args:
        device: Device to mask; nothing happens if it has no serial
        method: Asterisks, characters drawn from the serial, or random
            uppercase alphanumerics
        recursive: Also mask every device attached below
    """
    serial = device.serial
    if serial is not None:
        if method == MaskSerial.HIDE:
            device.serial = "*" * len(serial)
        elif method == MaskSerial.SCRAMBLE:
            device.serial = "".join(random.choice(serial) for _ in serial)
        else:
            device.serial = "".join(random.choices(SERIAL_REPLACE_CHARS, k=len(serial)))

    if recursive:
        for child in device.devices:
            mask_serial(child, method, recursive)


def _has_non_hub(device: Device) -> bool:
    return any(not d.is_hub or _has_non_hub(d) for d in device.devices)


def remove_empty_hubs(devices: list[Device]) -> list[Device]:
    """Drop hubs with nothing but other hubs (or nothing) below them."""
    ret = []
    for device in devices:
        if device.is_hub and not _has_non_hub(device):
            continue
        device.devices = remove_empty_hubs(device.devices)
        ret.append(device)
    return ret


def prepare(tree: DeviceTree, device_filter: Optional[DeviceFilter],
            settings: PrintSettings) -> None:
    """
    Apply the tree editing policies in place, ahead of printing.

    When not printing a tree and a filter, bus grouping or JSON output is
    active, the tree is flattened first so filtering drops non-matching
    devices instead of keeping their matching descendants' parents.

    Args:
        tree: Tree to edit
        device_filter: Filter to retain matching devices with, if any
        settings: Print settings of the pass
    """
    if not settings.tree and (device_filter is not None
                              or settings.group_devices == Group.BUS
                              or settings.json):
        tree.flatten()

    if device_filter is not None:
        device_filter.retain_buses(tree.buses)

    if settings.hide_hubs:
        for bus in tree.buses:
            bus.devices = remove_empty_hubs(bus.devices)

    if settings.hide_buses:
        tree.buses = [bus for bus in tree.buses if bus.has_devices()]

    if settings.sort_buses:
        tree.buses.sort(key=lambda b: b.bus_number)

    if settings.mask_serials is not None:
        for bus in tree.buses:
            for device in bus.devices:
                mask_serial(device, settings.mask_serials, recursive=True)

    logger.debug("Tree post filter and sort: %d buses, %d devices",
                 len(tree.buses), len(tree.flatten_devices()))


def print_tree(tree: DeviceTree, settings: PrintSettings, out: TextIO = sys.stdout) -> None:
    """
    Print a prepared tree in the form `settings` asks for.

    JSON output dumps the whole tree when printing a tree or grouping by bus,
    otherwise the flat device list.

    Raises:
        SerializationError: if JSON output could not be produced
    """
    logger.debug("Printing with %s", settings)

    if settings.json:
        if settings.tree or settings.group_devices == Group.BUS:
            print(dumps(tree), file=out)
        else:
            print(dumps(tree.flatten_devices()), file=out)
    elif settings.tree:
        print_buses(tree.buses, settings, out)
    elif settings.group_devices == Group.BUS:
        print_bus_grouped([(bus, bus.flatten_devices()) for bus in tree.buses], settings, out)
    else:
        print_flattened_devices(tree.flatten_devices(), settings, out)
