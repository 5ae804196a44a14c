"""
Configuration Module

Provides centralized configuration management using Pydantic Settings.
Rule files are loaded through cartprice.config.rules.
"""

from cartprice.config.settings import Settings, settings

__all__ = ["Settings", "settings"]
