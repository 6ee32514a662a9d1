"""
Utility modules for wordharvest.
"""

from .config import Config, ConfigError, ConfigManager, load_config, merge_overrides
from .logger import setup_logging

__all__ = ['Config', 'ConfigError', 'ConfigManager', 'load_config', 'merge_overrides', 'setup_logging']
