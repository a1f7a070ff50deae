"""Core utilities and configuration."""

from .config import Config, ConfigurationError, Credentials, load_config
from .utils import setup_logging

__all__ = ["Config", "ConfigurationError", "Credentials", "load_config", "setup_logging"]
