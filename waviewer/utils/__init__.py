"""Utility modules for waviewer."""

from waviewer.utils.logging import setup_logging

__all__ = ["setup_logging"]
