"""
Core inverted index data structure for the line index.
"""

from typing import Dict, Iterable, Iterator, List, Sequence, Set, Tuple
import logging

from .postings import EMPTY_POSITIONS, LinePositions, LinePositionsBuilder

logger = logging.getLogger(__name__)


class LineStore:
    """
    Ordered, immutable sequence of text lines.
    Shared by reference between the index and every query result.
    """

    __slots__ = ('_lines',)

    def __init__(self, lines: Iterable[str] = ()):
        """
        Initialize line store.

        Args:
            lines: Text lines, without trailing newlines
        """
        self._lines: Tuple[str, ...] = tuple(lines)

    @property
    def line_count(self) -> int:
        """Number of lines; also the size of the negation universe."""
        return len(self._lines)

    def get_line(self, position: int) -> str:
        """Get the text of a line by its 0-based position."""
        return self._lines[position]

    def __len__(self) -> int:
        return len(self._lines)

    def __getitem__(self, position):
        return self._lines[position]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __repr__(self):
        return f"LineStore({self.line_count} lines)"


class InvertedIndex:
    """
    Core inverted index structure.
    Maps terms to the ordered set of lines containing them.
    """

    def __init__(self):
        """Initialize an empty index in its construction phase."""
        # Term -> LinePositions mapping, populated by finalize()
        self.dictionary: Dict[str, LinePositions] = {}
        self._builders: Dict[str, LinePositionsBuilder] = {}
        self._finalized = False

        # Statistics
        self.num_lines = 0
        self.total_tokens = 0

    @staticmethod
    def tokenize(text: str) -> List[str]:
        """Split a line into whitespace-delimited terms, exactly as written."""
        return text.split()

    def add_line(self, position: int, text: str):
        """
        Add a line to the index.

        Args:
            position: 0-based line position
            text: Line text
        """
        if self._finalized:
            raise RuntimeError("Cannot add lines to a finalized index")

        tokens = self.tokenize(text)
        for token in tokens:
            builder = self._builders.get(token)
            if builder is None:
                builder = LinePositionsBuilder()
                self._builders[token] = builder
            builder.add_line(position)

        self.num_lines = max(self.num_lines, position + 1)
        self.total_tokens += len(tokens)

    def finalize(self):
        """
        Finalize index after all lines are added.
        Freezes every position set; the index is read-only afterwards.
        """
        self.dictionary = {term: builder.build() for term, builder in self._builders.items()}
        self._builders = {}
        self._finalized = True

    @property
    def finalized(self) -> bool:
        return self._finalized

    def get_positions(self, term: str) -> LinePositions:
        """
        Get the position set for a term.

        Args:
            term: The term to look up

        Returns:
            LinePositions of the term, or an empty set if the term never occurs
        """
        return self.dictionary.get(term, EMPTY_POSITIONS)

    def contains_term(self, term: str) -> bool:
        """Check if term exists in vocabulary."""
        return term in self.dictionary

    def get_vocabulary(self) -> Set[str]:
        """Get all terms in the index."""
        return set(self.dictionary.keys())

    def get_vocabulary_size(self) -> int:
        """Get size of vocabulary (number of unique terms)."""
        return len(self.dictionary)

    def get_statistics(self) -> Dict:
        """Get index statistics."""
        return {
            'num_lines': self.num_lines,
            'vocabulary_size': len(self.dictionary),
            'total_tokens': self.total_tokens,
            'avg_line_length': self.total_tokens / self.num_lines if self.num_lines > 0 else 0
        }

    def __repr__(self):
        return f"InvertedIndex({self.get_vocabulary_size()} terms, {self.num_lines} lines)"


def build_index(lines: Sequence[str]) -> Tuple[LineStore, InvertedIndex]:
    """
    Build a line store and its inverted index from a sequence of lines.

    The index is only returned once it is complete and finalized.

    Args:
        lines: Text lines of the source

    Returns:
        Tuple of (LineStore, InvertedIndex)
    """
    store = LineStore(lines)

    index = InvertedIndex()
    for position, text in enumerate(store):
        index.add_line(position, text)

    # Blank trailing lines still belong to the universe
    index.num_lines = store.line_count
    index.finalize()

    logger.info(
        f"Indexed {store.line_count} lines, {index.get_vocabulary_size()} distinct terms"
    )
    return store, index
