"""Logging and visualization utilities."""
from .logger import RoundLogger, setup_logging

__all__ = ["RoundLogger", "setup_logging"]
