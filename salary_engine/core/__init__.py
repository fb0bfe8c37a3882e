"""Core utilities shared across the salary engine."""

from .config import Settings, get_settings  # noqa: F401
from .log import get_logger  # noqa: F401
from .text import Seniority, classify_seniority, normalize  # noqa: F401

__all__ = ["Settings", "get_settings", "get_logger", "Seniority", "classify_seniority", "normalize"]
