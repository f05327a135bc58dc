"""Text reflow."""

from .text_formatter import TextFormatter

__all__ = ['TextFormatter']
