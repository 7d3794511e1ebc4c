"""Routers module - API endpoints"""

from . import config, review

__all__ = ["config", "review"]
