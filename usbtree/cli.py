"""
Command-line interface for usbtree.

Usage:
    usbtree [options] [file]
    cat dump.json | usbtree [options]
"""

import argparse
import json
import logging
import sys
from typing import Optional

from .blocks import (
    BusBlocks,
    ConfigurationBlocks,
    DeviceBlocks,
    EndpointBlocks,
    InterfaceBlocks,
    parse_blocks,
)
from .config import Config, ConfigError
from .display import prepare, print_tree
from .filter import DeviceFilter
from .serialize import LoadError, SerializationError, load_tree
from .settings import Group, MaskSerial, PrintSettings, Sort


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="usbtree",
        description="List USB buses and devices from a JSON dump, as a list or a tree.",
        epilog="Example: usbtree --tree -v dump.json",
    )

    parser.add_argument(
        "file",
        nargs="?",
        help="Input file containing a JSON dump (default: stdin)",
    )

    display = parser.add_argument_group("display")
    display.add_argument(
        "-t", "--tree",
        action="store_true",
        help="Print the device hierarchy as a tree",
    )
    display.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="1 configurations, 2 interfaces, 3 endpoints, 4 every block; may be repeated",
    )
    display.add_argument(
        "-b", "--blocks",
        help="Comma separated device blocks to show",
    )
    display.add_argument("--bus-blocks", help="Comma separated bus blocks to show")
    display.add_argument("--config-blocks", help="Comma separated configuration blocks to show")
    display.add_argument("--interface-blocks", help="Comma separated interface blocks to show")
    display.add_argument("--endpoint-blocks", help="Comma separated endpoint blocks to show")
    display.add_argument(
        "-m", "--more",
        action="store_true",
        help="Show more blocks at every verbosity",
    )
    display.add_argument(
        "--sort-devices",
        choices=[s.value for s in Sort],
        default=Sort.BRANCH_POSITION.value,
        help="Order of devices (default: branch-position)",
    )
    display.add_argument(
        "--sort-buses",
        action="store_true",
        help="Order buses by bus number",
    )
    display.add_argument(
        "--group-devices",
        choices=[g.value for g in Group],
        default=Group.NO_GROUP.value,
        help="Group listed devices under their bus (default: no-group)",
    )
    display.add_argument("--hide-buses", action="store_true", help="Hide buses without devices")
    display.add_argument("--hide-hubs", action="store_true", help="Hide hubs without devices")
    display.add_argument("--decimal", action="store_true", help="Show ids and codes in base 10")
    display.add_argument(
        "-z", "--no-padding",
        action="store_true",
        help="Don't pad values to align blocks",
    )
    display.add_argument("--ascii", action="store_true", help="Draw the tree with ASCII only")
    display.add_argument("--headings", action="store_true", help="Show block headings")
    display.add_argument("--json", action="store_true", help="Print JSON instead of text")
    display.add_argument(
        "--mask-serials",
        choices=[m.value for m in MaskSerial],
        help="Mask serial numbers",
    )
    display.add_argument("--no-colour", action="store_true", help="Disable coloured output")
    display.add_argument("--no-icons", action="store_true", help="Disable icons")

    filtering = parser.add_argument_group("filter")
    filtering.add_argument(
        "--vidpid",
        metavar="VID[:PID]",
        help="Only show devices with this vendor and product id (hex)",
    )
    filtering.add_argument(
        "-s", "--show",
        metavar="[BUS]:[DEVNUM]",
        help="Only show devices with this bus and device number (decimal)",
    )
    filtering.add_argument("--filter-name", help="Only show devices whose name contains this")
    filtering.add_argument("--filter-serial", help="Only show devices whose serial contains this")

    parser.add_argument(
        "-c", "--config",
        help="Config file to use instead of the system one",
    )
    parser.add_argument(
        "--gen",
        action="store_true",
        help="Print an example config and exit",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress warnings and non-essential output",
    )
    parser.add_argument(
        "-d", "--debug",
        action="count",
        default=0,
        help="Log more; -d for info, -dd for debug",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser


def setup_logging(debug: int, quiet: bool) -> None:
    """Log to stderr at a level chosen by the debug count."""
    if quiet:
        level = logging.ERROR
    elif debug >= 2:
        level = logging.DEBUG
    elif debug == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def read_input(file_path: Optional[str]) -> str:
    """Read input from file or stdin."""
    if file_path:
        try:
            with open(file_path, "r") as f:
                return f.read()
        except FileNotFoundError:
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            sys.exit(1)
        except IOError as e:
            print(f"Error reading file: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        # Check if stdin has data
        if sys.stdin.isatty():
            print("Error: No input provided. Pipe a JSON dump or specify a file.",
                  file=sys.stderr)
            print("Usage: cat dump.json | usbtree", file=sys.stderr)
            print("       usbtree dump.json", file=sys.stderr)
            sys.exit(1)
        return sys.stdin.read()


def parse_vidpid(value: str) -> tuple[Optional[int], Optional[int]]:
    """
    Parse 'VID[:PID]' given in hex.

    Raises:
        ValueError: If either part is not hex
    """
    vid, _, pid = value.partition(":")
    return (int(vid, 16) if vid else None, int(pid, 16) if pid else None)


def parse_show(value: str) -> tuple[Optional[int], Optional[int]]:
    """
    Parse '[BUS]:[DEVNUM]'; a value without ':' is a bus number.

    Raises:
        ValueError: If either part is not a number
    """
    bus, _, number = value.partition(":")
    return (int(bus) if bus else None, int(number) if number else None)


def build_filter(args: argparse.Namespace) -> Optional[DeviceFilter]:
    """Device filter from the filter options; None if none was given."""
    if not (args.vidpid or args.show or args.filter_name or args.filter_serial):
        return None

    device_filter = DeviceFilter(
        name=args.filter_name,
        serial=args.filter_serial,
        exclude_empty_hub=args.hide_hubs,
    )
    if args.vidpid:
        device_filter.vid, device_filter.pid = parse_vidpid(args.vidpid)
    if args.show:
        device_filter.bus, device_filter.number = parse_show(args.show)
    return device_filter


def _blocks(cls, arg: Optional[str], default: Optional[list]) -> Optional[list]:
    if arg is None:
        return default
    return parse_blocks(cls, [name.strip() for name in arg.split(",") if name.strip()])


def build_settings(args: argparse.Namespace, config: Config) -> PrintSettings:
    """
    Merge the command line with the config.

    Flags are on if either turns them on, verbosity is the higher of the two
    and block lists given on the command line replace the config's.

    Raises:
        ValueError: If a block name is unknown
    """
    ascii_only = args.ascii or config.ascii
    icons = None if (args.no_icons or ascii_only) else config.icons
    mask = MaskSerial(args.mask_serials) if args.mask_serials else config.mask_serials

    return PrintSettings(
        no_padding=args.no_padding or config.no_padding,
        decimal=args.decimal or config.decimal,
        tree=args.tree or config.tree,
        hide_buses=args.hide_buses or config.hide_buses,
        hide_hubs=args.hide_hubs or config.hide_hubs,
        sort_devices=Sort(args.sort_devices),
        sort_buses=args.sort_buses,
        group_devices=Group(args.group_devices),
        headings=args.headings or config.headings,
        verbosity=max(args.verbose, config.verbose),
        more=args.more or config.more,
        json=args.json,
        mask_serials=mask,
        device_blocks=_blocks(DeviceBlocks, args.blocks, config.blocks),
        bus_blocks=_blocks(BusBlocks, args.bus_blocks, config.bus_blocks),
        config_blocks=_blocks(ConfigurationBlocks, args.config_blocks, config.config_blocks),
        interface_blocks=_blocks(InterfaceBlocks, args.interface_blocks,
                                 config.interface_blocks),
        endpoint_blocks=_blocks(EndpointBlocks, args.endpoint_blocks, config.endpoint_blocks),
        icons=icons,
        colours=None if args.no_colour else config.colours,
        ascii=ascii_only,
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"usbtree {__version__}")
        return 0

    setup_logging(args.debug, args.quiet)

    if args.gen:
        print(json.dumps(Config.example().to_dict(), indent=2))
        return 0

    try:
        config = Config.from_file(args.config) if args.config else Config.sys()
    except (ConfigError, OSError) as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    try:
        settings = build_settings(args, config)
        device_filter = build_filter(args)
    except ValueError as e:
        parser.error(str(e))

    # Read input
    text = read_input(args.file)

    if not text.strip():
        print("Error: Empty input", file=sys.stderr)
        return 1

    try:
        tree = load_tree(text)
    except LoadError as e:
        print(f"Load error: {e}", file=sys.stderr)
        return 1

    try:
        prepare(tree, device_filter, settings)
        print_tree(tree, settings, sys.stdout)
    except SerializationError as e:
        print(f"Serialization error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error generating output: {e}", file=sys.stderr)
        if not args.quiet:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
