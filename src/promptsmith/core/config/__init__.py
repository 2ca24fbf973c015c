"""Layered configuration for promptsmith."""
from __future__ import annotations

from .manager import ConfigManager
from .settings import CompositionSettings, OutputLayout

__all__ = ["ConfigManager", "CompositionSettings", "OutputLayout"]
