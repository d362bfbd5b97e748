"""Utility modules for the image analysis pipeline."""

from .config import Config
from .logger import setup_logging

__all__ = ["Config", "setup_logging"]
