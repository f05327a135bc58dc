"""Utility functions."""

from .query_parser import BooleanQueryParser

__all__ = ['BooleanQueryParser']
