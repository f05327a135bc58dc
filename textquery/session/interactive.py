"""
Menu-driven interactive session: file formatting, text queries and variables.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

from ..data import LineLoader, SourceUnavailableError
from ..formatting import TextFormatter
from ..lineindex import Query, QueryEvaluator, render
from ..utils.query_parser import BooleanQueryParser
from .variables import VariableStore

logger = logging.getLogger(__name__)

MAIN_MENU = (
    "Choose the function you need:\n"
    "1. File formatting\n"
    "2. Text query\n"
    "3. Assign variable\n"
    "4. Exit"
)

QUERY_MENU = (
    "Choose the type of query:\n"
    "1. Normal query\n"
    "2. Logical NOT query\n"
    "3. Logical OR query\n"
    "4. Logical AND query\n"
    "5. Back to main menu"
)


class InteractiveSession:
    """
    One interactive session over stdin/stdout (or injected callables).
    Variables bound in the session live as long as the session object.
    """

    def __init__(self, config, input_func: Callable[[str], str] = input,
                 print_func: Callable[..., None] = print):
        """
        Initialize session.

        Args:
            config: Hydra config object
            input_func: Prompts and reads one answer; raises EOFError at end of input
            print_func: Writes one message
        """
        self.config = config
        self.input = input_func
        self.print = print_func
        self.loader = LineLoader(config)
        self.formatter = TextFormatter(config)
        self.variables = VariableStore(config.variables.mode)
        self.parser = BooleanQueryParser(resolve=self.variables.resolve)

    def run(self):
        """Run the main menu until the user exits or input ends."""
        while True:
            self.print(MAIN_MENU)
            try:
                choice = self._read_choice("")
                if choice == 1:
                    self.format_file()
                elif choice == 2:
                    self.text_query()
                elif choice == 3:
                    self.assign_variable()
                elif choice == 4:
                    return
                else:
                    self.print("Invalid choice!")
            except EOFError:
                return

    def format_file(self):
        """Ask for a file, a width and a destination, then reflow the file."""
        file_path = self.input("Please enter file path:").strip()
        try:
            lines = self.loader.load_lines(file_path)
        except SourceUnavailableError as e:
            logger.error(str(e))
            self.print("Unable to open file!")
            return

        width = self._read_choice("Please enter the maximum number of characters per line:")
        if width is None or width <= 0:
            self.print("Invalid width!")
            return

        out_path = self._ask_output_path()
        try:
            self.formatter.format_lines(lines, out_path, width)
        except OSError as e:
            logger.error(f"Cannot write {out_path}: {e}")
            self.print("Unable to create new file!")
            return

        self.print("File formatting completed!")

    def text_query(self):
        """Load a file, then answer queries against it until the user goes back."""
        file_path = self.input("Please enter file path:").strip()
        try:
            store, index = self.loader.load_index(file_path)
        except SourceUnavailableError as e:
            logger.error(str(e))
            self.print("Unable to open file!")
            return

        evaluator = QueryEvaluator(store, index, memoize=self.config.evaluation.memoize)

        while True:
            self.print(QUERY_MENU)
            query_type = self._read_choice("")
            if query_type == 5:
                break
            if query_type not in (1, 2, 3, 4):
                self.print("Invalid choice!")
                continue

            word = self.input("Enter word to look for, or q to quit: ").strip()
            if word == 'q':
                break

            query = self.build_query(query_type, word)
            self.print(render(evaluator.evaluate(query)))

    def build_query(self, query_type: int, word: str) -> Query:
        """
        Build the query for one sub-menu choice.
        OR and AND ask for the second operand.
        """
        first = self.variables.resolve(word)
        if query_type == 1:
            return first
        if query_type == 2:
            return ~first

        other = self.input("Enter another word: ").strip()
        second = self.variables.resolve(other)
        if query_type == 3:
            return first | second
        return first & second

    def assign_variable(self):
        """Bind a name to a word or a query expression."""
        name = self.input("Enter variable name: ").strip()
        expression = self.input("Enter word: ").strip()
        try:
            query = self.parser.parse(expression)
        except ValueError as e:
            logger.warning(f"Cannot parse '{expression}': {e}")
            self.print("Invalid query!")
            return
        self.variables.bind(name, query)

    def _ask_output_path(self) -> Path:
        """Ask for a destination until it is new or the user agrees to replace it."""
        while True:
            out_path = Path(self.input(
                "Please enter the location and filename for the new file:"
            ).strip())
            if not out_path.exists() or self.config.formatter.overwrite:
                return out_path

            answer = self.input(
                "The file already exists. Do you want to replace it? (y/n): "
            ).strip()
            if answer in ('y', 'Y'):
                return out_path

    def _read_choice(self, prompt: str) -> Optional[int]:
        """Read an integer answer; None if the answer is not a number."""
        answer = self.input(prompt).strip()
        try:
            return int(answer)
        except ValueError:
            return None
