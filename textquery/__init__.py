"""
textquery - line-level inverted index and boolean text queries.
"""

__version__ = "0.1.0"
