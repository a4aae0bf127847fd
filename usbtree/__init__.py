"""
usbtree

A Python tool to print USB buses, devices, configurations, interfaces and
endpoints as aligned columns or as a tree.
"""

__version__ = "0.1.0"

from .model import (
    ClassCode,
    Speed,
    Direction,
    TransferType,
    SyncType,
    UsageType,
    ConfigAttributes,
    Version,
    Endpoint,
    Interface,
    Configuration,
    Location,
    DeviceExtra,
    Device,
    Bus,
    DeviceTree,
)
from .blocks import (
    BusBlocks,
    DeviceBlocks,
    ConfigurationBlocks,
    InterfaceBlocks,
    EndpointBlocks,
)
from .settings import PrintSettings, Sort, Group, MaskSerial
from .filter import DeviceFilter
from .serialize import load_tree, dumps, LoadError, SerializationError
from .display import prepare, print_tree

__all__ = [
    "ClassCode",
    "Speed",
    "Direction",
    "TransferType",
    "SyncType",
    "UsageType",
    "ConfigAttributes",
    "Version",
    "Endpoint",
    "Interface",
    "Configuration",
    "Location",
    "DeviceExtra",
    "Device",
    "Bus",
    "DeviceTree",
    "BusBlocks",
    "DeviceBlocks",
    "ConfigurationBlocks",
    "InterfaceBlocks",
    "EndpointBlocks",
    "PrintSettings",
    "Sort",
    "Group",
    "MaskSerial",
    "DeviceFilter",
    "load_tree",
    "dumps",
    "LoadError",
    "SerializationError",
    "prepare",
    "print_tree",
]
