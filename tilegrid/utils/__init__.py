"""Utility functions for the tiling package."""

from .logging import get_logger

__all__ = ["get_logger"]
