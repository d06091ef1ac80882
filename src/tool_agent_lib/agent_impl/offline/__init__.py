"""Offline stand-in model."""

from .core import OfflineModelClient

__all__ = ["OfflineModelClient"]
