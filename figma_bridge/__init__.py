"""Figma Bridge - local HTTP bridge for real-time design exports."""

__version__ = "0.3.0"
