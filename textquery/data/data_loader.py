"""
Loading source files into a line store and its inverted index.
"""

import logging
from pathlib import Path
from typing import Iterator, List, Tuple, Union
from tqdm import tqdm

from ..lineindex import InvertedIndex, LineStore, build_index

logger = logging.getLogger(__name__)


class SourceUnavailableError(OSError):
    """The file backing a line store cannot be opened or read."""

    def __init__(self, path, reason: str = ""):
        self.path = Path(path)
        self.reason = reason
        message = f"Unable to open source: {self.path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class LineLoader:
    """Loads text sources line by line."""
    
    def __init__(self, config):
        """
        Initialize line loader.
        
        Args:
            config: Hydra configuration object
        """
        self.config = config
    
    def iter_lines(self, path: Union[str, Path]) -> Iterator[str]:
        """
        Yield the lines of a text file without their line terminators.
        
        Args:
            path: Path to the text file
            
        Yields:
            Line text
        """
        source_path = Path(path)
        encoding = self.config.source.encoding
        
        try:
            with open(source_path, 'r', encoding=encoding) as f:
                with tqdm(
                    desc="Loading lines",
                    unit="line",
                    disable=not self.config.indexing.show_progress
                ) as pbar:
                    for line in f:
                        yield line.rstrip('\n')
                        pbar.update(1)
        except UnicodeDecodeError as e:
            raise SourceUnavailableError(source_path, f"not valid {encoding}") from e
        except OSError as e:
            raise SourceUnavailableError(source_path, e.strerror or str(e)) from e
    
    def load_lines(self, path: Union[str, Path]) -> List[str]:
        """
        Read a whole text file.
        
        Args:
            path: Path to the text file
            
        Returns:
            List of line strings
        """
        logger.info(f"Loading lines from: {path}")
        lines = list(self.iter_lines(path))
        logger.info(f"Loaded {len(lines):,} lines")
        return lines
    
    def load_index(self, path: Union[str, Path]) -> Tuple[LineStore, InvertedIndex]:
        """
        Read a text file and build its index.
        Nothing is built if the file cannot be read completely.
        
        Args:
            path: Path to the text file
            
        Returns:
            Tuple of (LineStore, InvertedIndex)
        """
        lines = self.load_lines(path)
        return build_index(lines)
