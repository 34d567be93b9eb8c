# tagbot/config/__init__.py

from tagbot.config.settings import Settings, settings
from tagbot.config.logging_config import setup_logging

__all__ = ['Settings', 'settings', 'setup_logging']
