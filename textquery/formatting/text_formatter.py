"""
Reflow text files to a maximum line width.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..data import LineLoader

logger = logging.getLogger(__name__)


class TextFormatter:
    """Rewraps every line of a text to a maximum number of characters."""
    
    def __init__(self, config):
        """
        Initialize formatter with configuration.
        
        Args:
            config: Hydra config object with formatter settings
        """
        self.config = config
        self.loader = LineLoader(config)
    
    @staticmethod
    def reflow(lines: Iterable[str], width: int) -> List[str]:
        """
        Rewrap lines so no output line is longer than ``width``.
        
        Each input line is wrapped on its own; words are separated by single
        spaces. A word longer than ``width`` gets a line to itself.
        
        Args:
            lines: Input lines
            width: Maximum characters per output line
            
        Returns:
            List of output lines
        """
        if width <= 0:
            raise ValueError(f"Width must be positive, got {width}")
        
        output = []
        for line in lines:
            current: List[str] = []
            length = 0
            
            for word in line.split():
                needed = len(word) + (1 if current else 0)
                if current and length + needed > width:
                    output.append(' '.join(current))
                    current = []
                    length = 0
                    needed = len(word)
                current.append(word)
                length += needed
            
            output.append(' '.join(current))
        
        return output
    
    def format_file(self, input_path: Union[str, Path], output_path: Union[str, Path],
                    width: Optional[int] = None) -> Path:
        """
        Reflow a file and write the result to ``output_path``.
        
        Args:
            input_path: Source text file
            output_path: Destination file (overwritten)
            width: Maximum line width (default: formatter.max_width)
            
        Returns:
            Path of the written file
        """
        if width is None:
            width = self.config.formatter.max_width
        
        lines = self.loader.load_lines(input_path)
        return self.format_lines(lines, output_path, width)
    
    def format_lines(self, lines: List[str], output_path: Union[str, Path],
                     width: Optional[int] = None) -> Path:
        """
        Reflow already loaded lines and write them to ``output_path``.
        
        Args:
            lines: Input lines
            output_path: Destination file (overwritten)
            width: Maximum line width (default: formatter.max_width)
            
        Returns:
            Path of the written file
        """
        if width is None:
            width = self.config.formatter.max_width
        
        formatted = self.reflow(lines, width)
        
        output_path = Path(output_path)
        with open(output_path, 'w', encoding=self.config.source.encoding) as f:
            for line in formatted:
                f.write(line + '\n')
        
        logger.info(f"Formatted {len(lines)} lines into {len(formatted)} lines: {output_path}")
        return output_path
