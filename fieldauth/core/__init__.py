"""
Core module initialization
"""

from .config import Config

__all__ = ["Config"]
