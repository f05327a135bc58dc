"""Text source loading."""

from .data_loader import LineLoader, SourceUnavailableError

__all__ = ['LineLoader', 'SourceUnavailableError']
