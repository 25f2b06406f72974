"""Configuration module."""

from tender.core.config.loader import load_config
from tender.core.config.schema import TenderConfig

__all__ = ["TenderConfig", "load_config"]
