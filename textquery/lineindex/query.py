"""
Query expressions: immutable WORD / NOT / AND / OR nodes and the Query handle.

Composite nodes reference their operands directly, so one sub-expression can be
shared by several parents. Nodes compare by identity.

Walks over an expression use an explicit stack, so nesting depth is bounded by
memory rather than by the interpreter's recursion limit.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple


class QueryNode:
    """Base class of the closed set of query node variants."""

    __slots__ = ()

    def children(self) -> Tuple['Query', ...]:
        """Operands of this node, left to right."""
        return ()

    def combine_rep(self, child_reps: List[str]) -> str:
        """Representation of this node given the representations of its operands."""
        raise NotImplementedError

    def rep(self) -> str:
        """Textual representation of the expression."""
        return fold_query(self, lambda node, reps: node.combine_rep(reps), cache={})

    def __repr__(self):
        return f"{type(self).__name__}({self.rep()!r})"


@dataclass(frozen=True, eq=False, repr=False)
class WordQuery(QueryNode):
    """Leaf node: lines containing one exact term."""

    term: str

    def combine_rep(self, child_reps: List[str]) -> str:
        return self.term


@dataclass(frozen=True, eq=False, repr=False)
class NotQuery(QueryNode):
    """Lines of the store that do not match the operand."""

    operand: 'Query'

    def children(self) -> Tuple['Query', ...]:
        return (self.operand,)

    def combine_rep(self, child_reps: List[str]) -> str:
        return f"~({child_reps[0]})"


@dataclass(frozen=True, eq=False, repr=False)
class BinaryQuery(QueryNode):
    """Common shape of the two-operand nodes."""

    left: 'Query'
    right: 'Query'

    op_symbol = ''

    def children(self) -> Tuple['Query', ...]:
        return (self.left, self.right)

    def combine_rep(self, child_reps: List[str]) -> str:
        return f"({child_reps[0]} {self.op_symbol} {child_reps[1]})"


@dataclass(frozen=True, eq=False, repr=False)
class AndQuery(BinaryQuery):
    """Lines matching both operands."""

    op_symbol = '&'


@dataclass(frozen=True, eq=False, repr=False)
class OrQuery(BinaryQuery):
    """Lines matching either operand."""

    op_symbol = '|'


def fold_query(root: QueryNode, combine: Callable[[QueryNode, List[Any]], Any],
               cache: Optional[Dict[QueryNode, Any]] = None) -> Any:
    """
    Post-order fold over an expression without recursion.

    Operands are folded left to right before their parent. Without a cache,
    every occurrence of a shared node is folded again; with one, each node is
    folded once and the cache is filled by identity.

    Args:
        root: Node to fold
        combine: Called as combine(node, operand_values)
        cache: Optional dict of already folded nodes

    Returns:
        Value of ``combine`` for the root
    """
    values: List[Any] = []
    stack: List[Tuple[QueryNode, bool]] = [(root, False)]

    while stack:
        node, expanded = stack.pop()

        if not expanded:
            if cache is not None and node in cache:
                values.append(cache[node])
                continue
            stack.append((node, True))
            for child in reversed(node.children()):
                stack.append((child.node, False))
            continue

        arity = len(node.children())
        if arity:
            operands = values[-arity:]
            del values[-arity:]
        else:
            operands = []

        value = combine(node, operands)
        if cache is not None:
            cache[node] = value
        values.append(value)

    return values[0]


@dataclass(frozen=True, repr=False)
class Query:
    """
    Lightweight handle to a query node.

    Copying a handle never copies the node. The operators build new composite
    nodes around the existing operands:

        q = ~Query.word('fox') & (Query.word('dog') | Query.word('cat'))
    """

    node: QueryNode

    @classmethod
    def word(cls, term: str) -> 'Query':
        """Build a WORD leaf."""
        return cls(WordQuery(term))

    def rep(self) -> str:
        """Textual representation, derivable without any index."""
        return self.node.rep()

    def __invert__(self) -> 'Query':
        return Query(NotQuery(self))

    def __and__(self, other) -> 'Query':
        if not isinstance(other, Query):
            return NotImplemented
        return Query(AndQuery(self, other))

    def __or__(self, other) -> 'Query':
        if not isinstance(other, Query):
            return NotImplemented
        return Query(OrQuery(self, other))

    def __str__(self):
        return self.rep()

    def __repr__(self):
        return f"Query({self.rep()!r})"


def word_query(term: str) -> Query:
    """Build a query matching lines that contain ``term``."""
    return Query.word(term)


def negate(query: Query) -> Query:
    """Build ``~query``."""
    return ~query


def conjoin(left: Query, right: Query) -> Query:
    """Build ``left & right``."""
    return left & right


def disjoin(left: Query, right: Query) -> Query:
    """Build ``left | right``."""
    return left | right


def representation(query: Query) -> str:
    """Get the textual representation of a query."""
    return query.rep()
