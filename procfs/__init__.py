"""Parsers for system and kernel data in the Linux proc and sys pseudo-filesystems."""

__version__ = "0.1.0"