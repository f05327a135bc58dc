#!/usr/bin/env python
"""
Demo script: line index, composed queries and the variable store.

Run with: python examples/query_demo.py
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from textquery.lineindex import (
    build_index, word_query, negate, conjoin, disjoin,
    QueryEvaluator, render
)
from textquery.session import VariableStore
from textquery.utils import BooleanQueryParser


LINES = [
    "Alice was beginning to get very tired of sitting by her sister",
    "on the bank, and of having nothing to do: once or twice she had",
    "peeped into the book her sister was reading, but it had no",
    "pictures or conversations in it, and what is the use of a book,",
    "thought Alice without pictures or conversations?",
]


def demo_index():
    """Demo 1: Build the index."""
    print("=" * 60)
    print("DEMO 1: Line Index")
    print("=" * 60)

    store, index = build_index(LINES)
    stats = index.get_statistics()
    print(f"\nLines: {stats['num_lines']}, distinct terms: {stats['vocabulary_size']}")
    print(f"'book' on lines: {[n + 1 for n in index.get_positions('book')]}")
    print(f"'book,' on lines: {[n + 1 for n in index.get_positions('book,')]}")
    return store, index


def demo_queries(store, index):
    """Demo 2: Compose and evaluate queries."""
    print("\n" + "=" * 60)
    print("DEMO 2: Boolean Queries")
    print("=" * 60)

    evaluator = QueryEvaluator(store, index)
    sister = word_query("sister")
    pictures = word_query("pictures")
    alice = word_query("Alice")

    for query in [
        sister,
        negate(sister),
        conjoin(alice, pictures),
        disjoin(sister, pictures),
        conjoin(negate(alice), disjoin(sister, pictures)),
    ]:
        print()
        print(render(evaluator.evaluate(query)), end="")


def demo_parser(store, index):
    """Demo 3: Parse queries from text."""
    print("\n" + "=" * 60)
    print("DEMO 3: Parsed Queries")
    print("=" * 60)

    parser = BooleanQueryParser()
    evaluator = QueryEvaluator(store, index, memoize=True)
    for text in ["her & ~sister", "(or | and) & ~Alice"]:
        print()
        print(render(evaluator.evaluate(parser.parse(text))), end="")


def demo_variables(store, index):
    """Demo 4: Variable storage modes."""
    print("\n" + "=" * 60)
    print("DEMO 4: Variables")
    print("=" * 60)

    compound = conjoin(word_query("Alice"), word_query("sister"))
    evaluator = QueryEvaluator(store, index)

    for mode in VariableStore.MODES:
        variables = VariableStore(mode)
        variables.bind("x", compound)
        result = evaluator.evaluate(variables.resolve("x"))
        print(f"\n{mode} mode: x -> {result.sought!r}, {result.count} matches")


def main():
    """Run all demos."""
    store, index = demo_index()
    demo_queries(store, index)
    demo_parser(store, index)
    demo_variables(store, index)


if __name__ == "__main__":
    main()
