"""
JSON serialization of a bus/device tree.

Dumps are lossless: every field of every entity is written, enum members as
their values and versions as strings such as ``"2.10"``. The same format is
read back by :func:`load_tree`, which is how the command line tool receives
its input.
"""

import json
from typing import Any, Optional, TextIO, Union

from .model import (
    Bus,
    ConfigAttributes,
    Configuration,
    Device,
    DeviceExtra,
    DeviceTree,
    Endpoint,
    Interface,
    Location,
    Speed,
    SyncType,
    TransferType,
    UsageType,
    Version,
)


class SerializationError(Exception):
    """Exception raised when a tree cannot be written as JSON."""
    pass


class LoadError(Exception):
    """Exception raised when a dump cannot be read back into a tree."""
    pass


# ============================================================================
# Entity to dict
# ============================================================================

def _version_str(version: Optional[Version]) -> Optional[str]:
    return str(version) if version is not None else None


def endpoint_to_dict(endpoint: Endpoint) -> dict:
    return {
        "address": endpoint.address,
        "transfer_type": endpoint.transfer_type.value,
        "sync_type": endpoint.sync_type.value,
        "usage_type": endpoint.usage_type.value,
        "max_packet_size": endpoint.max_packet_size,
        "interval": endpoint.interval,
    }


def interface_to_dict(interface: Interface) -> dict:
    return {
        "name": interface.name,
        "number": interface.number,
        "path": interface.path,
        "class_code": interface.class_code,
        "sub_class": interface.sub_class,
        "protocol": interface.protocol,
        "alt_setting": interface.alt_setting,
        "driver": interface.driver,
        "syspath": interface.syspath,
        "endpoints": [endpoint_to_dict(e) for e in interface.endpoints],
    }


def configuration_to_dict(config: Configuration) -> dict:
    return {
        "name": config.name,
        "number": config.number,
        "attributes": [a.value for a in config.attributes],
        "max_power": config.max_power,
        "interfaces": [interface_to_dict(i) for i in config.interfaces],
    }


def device_to_dict(device: Device) -> dict:
    """Convert a Device, with everything attached below it, to a dict."""
    extra = None
    if device.extra is not None:
        extra = {
            "max_packet_size": device.extra.max_packet_size,
            "driver": device.extra.driver,
            "syspath": device.extra.syspath,
            "vendor": device.extra.vendor,
            "product_name": device.extra.product_name,
            "configurations": [configuration_to_dict(c) for c in device.extra.configurations],
        }
    return {
        "name": device.name,
        "vendor_id": device.vendor_id,
        "product_id": device.product_id,
        "location": {
            "bus": device.location.bus,
            "number": device.location.number,
            "tree_positions": list(device.location.tree_positions),
        },
        "serial": device.serial,
        "manufacturer": device.manufacturer,
        "bcd_device": _version_str(device.bcd_device),
        "bcd_usb": _version_str(device.bcd_usb),
        "bus_power": device.bus_power,
        "bus_power_used": device.bus_power_used,
        "extra_current_used": device.extra_current_used,
        "speed": device.speed.value if device.speed is not None else None,
        "class_code": device.class_code,
        "sub_class": device.sub_class,
        "protocol": device.protocol,
        "devices": [device_to_dict(d) for d in device.devices],
        "extra": extra,
    }


def bus_to_dict(bus: Bus) -> dict:
    return {
        "name": bus.name,
        "host_controller": bus.host_controller,
        "pci_vendor": bus.pci_vendor,
        "pci_device": bus.pci_device,
        "pci_revision": bus.pci_revision,
        "number": bus.number,
        "devices": [device_to_dict(d) for d in bus.devices],
    }


def tree_to_dict(tree: DeviceTree) -> dict:
    return {"buses": [bus_to_dict(b) for b in tree.buses]}


# ============================================================================
# Dict to entity
# ============================================================================

def _version(value: Optional[str]) -> Optional[Version]:
    if value is None:
        return None
    return Version.parse(value)


def endpoint_from_dict(data: dict) -> Endpoint:
    return Endpoint(
        address=data["address"],
        transfer_type=TransferType(data.get("transfer_type", TransferType.CONTROL.value)),
        sync_type=SyncType(data.get("sync_type", SyncType.NONE.value)),
        usage_type=UsageType(data.get("usage_type", UsageType.DATA.value)),
        max_packet_size=data.get("max_packet_size", 0),
        interval=data.get("interval", 0),
    )


def interface_from_dict(data: dict) -> Interface:
    return Interface(
        name=data.get("name", ""),
        number=data["number"],
        path=data.get("path", ""),
        class_code=data.get("class_code", 0),
        sub_class=data.get("sub_class", 0),
        protocol=data.get("protocol", 0),
        alt_setting=data.get("alt_setting", 0),
        driver=data.get("driver"),
        syspath=data.get("syspath"),
        endpoints=[endpoint_from_dict(e) for e in data.get("endpoints", [])],
    )


def configuration_from_dict(data: dict) -> Configuration:
    return Configuration(
        name=data.get("name", ""),
        number=data["number"],
        attributes=[ConfigAttributes(a) for a in data.get("attributes", [])],
        max_power=data.get("max_power", 0),
        interfaces=[interface_from_dict(i) for i in data.get("interfaces", [])],
    )


def device_from_dict(data: dict) -> Device:
    """Build a Device, with everything attached below it, from a dict."""
    extra = None
    extra_data = data.get("extra")
    if extra_data is not None:
        extra = DeviceExtra(
            max_packet_size=extra_data.get("max_packet_size", 0),
            driver=extra_data.get("driver"),
            syspath=extra_data.get("syspath"),
            vendor=extra_data.get("vendor"),
            product_name=extra_data.get("product_name"),
            configurations=[configuration_from_dict(c)
                            for c in extra_data.get("configurations", [])],
        )
    location = data["location"]
    speed = data.get("speed")
    return Device(
        name=data.get("name", ""),
        vendor_id=data.get("vendor_id"),
        product_id=data.get("product_id"),
        location=Location(
            bus=location["bus"],
            number=location["number"],
            tree_positions=list(location.get("tree_positions", [])),
        ),
        serial=data.get("serial"),
        manufacturer=data.get("manufacturer"),
        bcd_device=_version(data.get("bcd_device")),
        bcd_usb=_version(data.get("bcd_usb")),
        bus_power=data.get("bus_power"),
        bus_power_used=data.get("bus_power_used"),
        extra_current_used=data.get("extra_current_used"),
        speed=Speed(speed) if speed is not None else None,
        class_code=data.get("class_code"),
        sub_class=data.get("sub_class"),
        protocol=data.get("protocol"),
        devices=[device_from_dict(d) for d in data.get("devices", [])],
        extra=extra,
    )


def bus_from_dict(data: dict) -> Bus:
    return Bus(
        name=data.get("name", ""),
        host_controller=data.get("host_controller", ""),
        pci_vendor=data.get("pci_vendor"),
        pci_device=data.get("pci_device"),
        pci_revision=data.get("pci_revision"),
        number=data.get("number"),
        devices=[device_from_dict(d) for d in data.get("devices", [])],
    )


def tree_from_dict(data: dict) -> DeviceTree:
    return DeviceTree(buses=[bus_from_dict(b) for b in data["buses"]])


# ============================================================================
# Public interface
# ============================================================================

def dumps(obj: Union[DeviceTree, list[Device]]) -> str:
    """
    Write a tree, or a flat list of devices, as pretty printed JSON.

    Args:
        obj: Tree or device list to write

    Returns:
        JSON text

    Raises:
        SerializationError: If the data cannot be represented as JSON
    """
    try:
        if isinstance(obj, DeviceTree):
            data: Any = tree_to_dict(obj)
        else:
            data = [device_to_dict(d) for d in obj]
        return json.dumps(data, indent=2, allow_nan=False)
    except (TypeError, ValueError, AttributeError) as e:
        raise SerializationError(f"Unable to serialize tree: {e}") from e


def load_tree(text: str) -> DeviceTree:
    """
    Read a tree from a JSON dump.

    Args:
        text: JSON text as written by :func:`dumps` for a tree

    Returns:
        DeviceTree described by the dump

    Raises:
        LoadError: If the text is not JSON or does not describe a tree
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(f"Invalid JSON at line {e.lineno}: {e.msg}") from e

    if not isinstance(data, dict) or "buses" not in data:
        raise LoadError("Dump must be an object with a 'buses' list")

    try:
        return tree_from_dict(data)
    except KeyError as e:
        raise LoadError(f"Missing field {e} in dump") from e
    except (TypeError, ValueError, AttributeError) as e:
        raise LoadError(f"Invalid dump: {e}") from e


def load_tree_file(file_path: str) -> DeviceTree:
    """
    Read a tree from a JSON dump file.

    Args:
        file_path: Path to the dump

    Returns:
        DeviceTree described by the dump
    """
    with open(file_path, 'r') as f:
        return load_tree(f.read())


def load_tree_stream(stream: TextIO) -> DeviceTree:
    """
    Read a tree from a text stream.

    Args:
        stream: Text stream (e.g., sys.stdin)

    Returns:
        DeviceTree described by the dump
    """
    return load_tree(stream.read())
