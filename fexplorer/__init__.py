"""Keyboard-driven terminal file manager."""

__version__ = "0.1.0"
