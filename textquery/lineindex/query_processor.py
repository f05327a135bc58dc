"""
Query evaluation against a line store and its inverted index.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional
import logging

from .boolean_ops import BooleanOperations
from .inverted_index import InvertedIndex, LineStore
from .postings import LinePositions
from .query import AndQuery, NotQuery, OrQuery, Query, QueryNode, WordQuery, fold_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """
    Outcome of evaluating one query.

    Attributes:
        sought: Representation of the query that produced the result
        lines: Matching line positions, ascending
        file: The line store the positions refer to (shared, not copied)
    """
    sought: str
    lines: LinePositions
    file: LineStore

    @property
    def count(self) -> int:
        """Number of matching lines."""
        return len(self.lines)

    def line_numbers(self) -> List[int]:
        """Matching 0-based positions as a list."""
        return list(self.lines)

    def matched_lines(self) -> Iterator[tuple]:
        """Yield (position, text) for every matching line."""
        for position in self.lines:
            yield position, self.file.get_line(position)

    def __iter__(self) -> Iterator[int]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)


class QueryEvaluator:
    """
    Evaluate query expressions against one store/index pair.

    Evaluation is a pure post-order walk over the expression. With
    ``memoize`` enabled, a sub-expression shared inside one expression is
    evaluated once per ``evaluate`` call; the cache never outlives that call.
    """

    def __init__(self, store: LineStore, index: InvertedIndex, memoize: bool = False):
        """
        Initialize evaluator.

        Args:
            store: LineStore the index was built from
            index: InvertedIndex to query
            memoize: Cache shared sub-expressions by identity within one evaluation
        """
        self.store = store
        self.index = index
        self.memoize = memoize

    def evaluate(self, query: Query) -> QueryResult:
        """
        Evaluate a query.

        Args:
            query: Query handle

        Returns:
            QueryResult with the query representation and matching lines
        """
        cache: Optional[Dict[QueryNode, LinePositions]] = {} if self.memoize else None
        lines = fold_query(query.node, self._combine, cache)
        result = QueryResult(query.rep(), lines, self.store)
        logger.debug(f"{result.sought} -> {result.count} lines")
        return result

    def _combine(self, node: QueryNode, operands: List[LinePositions]) -> LinePositions:
        """Lines of one node, given the lines of its operands."""
        if isinstance(node, WordQuery):
            return self.index.get_positions(node.term)

        elif isinstance(node, NotQuery):
            return BooleanOperations.negate(operands[0], self.store.line_count)

        elif isinstance(node, AndQuery):
            return BooleanOperations.intersect(operands[0], operands[1])

        elif isinstance(node, OrQuery):
            return BooleanOperations.union(operands[0], operands[1])

        raise TypeError(f"Unknown query node: {type(node).__name__}")


def evaluate(query: Query, store: LineStore, index: InvertedIndex,
             memoize: bool = False) -> QueryResult:
    """Evaluate ``query`` against a store/index pair."""
    return QueryEvaluator(store, index, memoize=memoize).evaluate(query)


def render(result: QueryResult) -> str:
    """
    Format a result for display.

    The header is followed by one tab-indented entry per matching line, using
    1-based line numbers.
    """
    out = [f"{result.sought} occurs {result.count} times"]
    for position, text in result.matched_lines():
        out.append(f"\t(line {position + 1}) {text}")
    return "\n".join(out) + "\n"
