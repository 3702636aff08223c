"""
Core module initialization.
Exports configuration, context and error types.
"""

from tomato.core.config import EnvironmentMode, Settings, get_settings

__all__ = ["get_settings", "Settings", "EnvironmentMode"]
