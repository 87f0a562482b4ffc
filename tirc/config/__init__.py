"""Configuration package exports."""

from .config_loader import ConfigLoader, get_configuration  # noqa: F401
from .model import ClientConfig  # noqa: F401

__all__ = ["ClientConfig", "ConfigLoader", "get_configuration"]
