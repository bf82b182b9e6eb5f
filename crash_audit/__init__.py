"""Audit crash regression tests deleted while their GitHub issue is still open."""

__version__ = "0.1.0"
