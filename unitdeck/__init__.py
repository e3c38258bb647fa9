"""Curses interface and Python API for managing systemd services."""

__version__ = "0.1.0"

__all__ = ["__version__"]