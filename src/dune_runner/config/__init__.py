"""Client configuration."""

from .settings import DuneConfig

__all__ = ["DuneConfig"]
