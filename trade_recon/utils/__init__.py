"""
Shared utilities: configuration and logging
"""

from .config import ConfigManager
from .structured_logging import configure_structured_logging

__all__ = ['ConfigManager', 'configure_structured_logging']
