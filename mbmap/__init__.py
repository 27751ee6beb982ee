"""Modbus-style register memory maps, typed register access and address ranges."""

__version__ = "1.0.0"
__all__ = ["memory_map", "typed_map", "ranges", "demo"]