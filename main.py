#!/usr/bin/env python
"""
Main entry point for textquery.
Uses Fire for CLI and Hydra for configuration management.
"""

import os
import sys
import logging
from pathlib import Path
import fire
import hydra
from omegaconf import OmegaConf
from dotenv import load_dotenv

# Load .env variables and register resolver
load_dotenv()
if not OmegaConf.has_resolver("env"):
    OmegaConf.register_new_resolver("env", os.getenv)

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from textquery.data import LineLoader, SourceUnavailableError
from textquery.formatting import TextFormatter
from textquery.lineindex import QueryEvaluator, render
from textquery.session import InteractiveSession
from textquery.utils import BooleanQueryParser


class TextQueryCLI:
    """CLI for line-level boolean text queries."""

    def __init__(self, config_path: str = "conf", config_name: str = "config"):
        """
        Initialize CLI with configuration.

        Args:
            config_path: Path to config directory (relative to this file)
            config_name: Name of main config file
        """
        self.config_path = config_path
        self.config_name = config_name
        self.config = None
        self.logger = None

    def _init_config(self, overrides=None):
        """Initialize Hydra configuration."""
        with hydra.initialize(version_base=None, config_path=self.config_path):
            if overrides:
                self.config = hydra.compose(config_name=self.config_name, overrides=overrides)
            else:
                self.config = hydra.compose(config_name=self.config_name)

        # Setup logging
        logging.basicConfig(
            level=getattr(logging, self.config.logging.level),
            format=self.config.logging.format
        )
        self.logger = logging.getLogger(__name__)

    def query(self, source: str, expression: str, memoize: bool = None):
        """
        Answer one boolean query against a text file.

        Args:
            source: Path of the text file
            expression: Query, e.g. "(fox | dog) & ~sleeps"
            memoize: Override evaluation.memoize
        """
        overrides = []
        if memoize is not None:
            overrides.append(f"evaluation.memoize={str(bool(memoize)).lower()}")

        self._init_config(overrides)

        try:
            query = BooleanQueryParser().parse(str(expression))
        except ValueError as e:
            self.logger.error(f"Invalid query '{expression}': {e}")
            return None

        try:
            store, index = LineLoader(self.config).load_index(source)
        except SourceUnavailableError as e:
            self.logger.error(str(e))
            print("Unable to open file!")
            return None

        evaluator = QueryEvaluator(store, index, memoize=self.config.evaluation.memoize)
        output = render(evaluator.evaluate(query))
        print(output)
        return output

    def stats(self, source: str):
        """
        Show index statistics for a text file.

        Args:
            source: Path of the text file
        """
        self._init_config()

        try:
            _, index = LineLoader(self.config).load_index(source)
        except SourceUnavailableError as e:
            self.logger.error(str(e))
            print("Unable to open file!")
            return None

        stats = index.get_statistics()
        print(f"Lines: {stats['num_lines']:,}")
        print(f"Distinct terms: {stats['vocabulary_size']:,}")
        print(f"Total tokens: {stats['total_tokens']:,}")
        print(f"Avg tokens per line: {stats['avg_line_length']:.2f}")
        return stats

    def format_file(self, source: str, output: str, width: int = None, overwrite: bool = False):
        """
        Reflow a text file to a maximum line width.

        Args:
            source: Path of the input file
            output: Path of the file to write
            width: Maximum characters per line (default: formatter.max_width)
            overwrite: Replace ``output`` if it already exists
        """
        overrides = []
        if width is not None:
            overrides.append(f"formatter.max_width={int(width)}")
        if overwrite:
            overrides.append("formatter.overwrite=true")

        self._init_config(overrides)

        output_path = Path(output)
        if output_path.exists() and not self.config.formatter.overwrite:
            self.logger.error(f"{output_path} exists; pass --overwrite to replace it")
            return None

        try:
            written = TextFormatter(self.config).format_file(source, output_path)
        except SourceUnavailableError as e:
            self.logger.error(str(e))
            print("Unable to open file!")
            return None
        except OSError as e:
            self.logger.error(f"Cannot write {output_path}: {e}")
            print("Unable to create new file!")
            return None
        except ValueError as e:
            self.logger.error(str(e))
            return None

        print("File formatting completed!")
        return str(written)

    def interactive(self, variable_mode: str = None):
        """
        Start the interactive menu.

        Args:
            variable_mode: Override variables.mode (text or query)
        """
        overrides = []
        if variable_mode:
            overrides.append(f"variables.mode={variable_mode}")

        self._init_config(overrides)
        try:
            session = InteractiveSession(self.config)
        except ValueError as e:
            self.logger.error(str(e))
            return None
        session.run()

    def show_config(self):
        """Display current configuration."""
        self._init_config()
        print(OmegaConf.to_yaml(self.config, resolve=True))


def main():
    """Main entry point."""
    fire.Fire(TextQueryCLI)


if __name__ == "__main__":
    main()
