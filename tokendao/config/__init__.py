"""
tokendao Configuration

Loads config.toml. Environment variables override TOML values.
"""

from .loader import (
    DAOConfig,
    DAOSectionConfig,
    LoggingSectionConfig,
    TokenSectionConfig,
    load_config,
)

__all__ = [
    "DAOConfig",
    "DAOSectionConfig",
    "LoggingSectionConfig",
    "TokenSectionConfig",
    "load_config",
]
