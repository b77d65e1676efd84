"""
Utility helpers for fieldauth.
"""

from .config import get_config_value, get_bool_config

__all__ = [
    "get_config_value",
    "get_bool_config",
]
