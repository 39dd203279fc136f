"""Printer status indicator service backed by CUPS."""

__version__ = "0.1.0"
