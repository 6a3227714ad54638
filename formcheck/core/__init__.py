"""
Formcheck Core
==============

Configuration management.
"""

from formcheck.core.config import Config, config, get_config

__all__ = [
    "Config",
    "config",
    "get_config",
]
