"""Collab Chat - two-party chat backend with polling-based change notification."""

__version__ = "1.0.0"
