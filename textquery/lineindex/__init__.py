"""
Line index - inverted index over the lines of a text with boolean queries.
"""

from .postings import LinePositions, LinePositionsBuilder
from .inverted_index import LineStore, InvertedIndex, build_index
from .boolean_ops import BooleanOperations
from .query import (
    Query,
    QueryNode,
    WordQuery,
    NotQuery,
    BinaryQuery,
    AndQuery,
    OrQuery,
    word_query,
    negate,
    conjoin,
    disjoin,
    representation,
    fold_query
)
from .query_processor import QueryResult, QueryEvaluator, evaluate, render

__all__ = [
    'LinePositions',
    'LinePositionsBuilder',
    'LineStore',
    'InvertedIndex',
    'build_index',

    'BooleanOperations',
    'Query',
    'QueryNode',
    'WordQuery',
    'NotQuery',
    'BinaryQuery',
    'AndQuery',
    'OrQuery',
    'word_query',
    'negate',
    'conjoin',
    'disjoin',
    'representation',
    'fold_query',
    'QueryResult',
    'QueryEvaluator',
    'evaluate',
    'render',
]
