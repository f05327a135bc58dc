"""
Boolean operations on line position sets (AND, OR, NOT).
Implements linear-merge set operations for query evaluation.
"""

from typing import List
import logging

from .postings import LinePositions

logger = logging.getLogger(__name__)


class BooleanOperations:
    """Implements boolean operations on line position sets."""

    @staticmethod
    def intersect(list1: LinePositions, list2: LinePositions) -> LinePositions:
        """
        Intersect two position sets (AND operation).
        Uses two-pointer algorithm for O(n + m) complexity.

        Args:
            list1: First position set
            list2: Second position set

        Returns:
            New LinePositions containing lines in both sets
        """
        left = list1.positions
        right = list2.positions
        result: List[int] = []

        if not left or not right:
            return LinePositions.from_sorted(result)

        i, j = 0, 0

        while i < len(left) and j < len(right):
            if left[i] == right[j]:
                result.append(left[i])
                i += 1
                j += 1
            elif left[i] < right[j]:
                i += 1
            else:
                j += 1

        return LinePositions.from_sorted(result)

    @staticmethod
    def union(list1: LinePositions, list2: LinePositions) -> LinePositions:
        """
        Union two position sets (OR operation).
        Uses two-pointer merge algorithm for O(n + m) complexity.

        Args:
            list1: First position set
            list2: Second position set

        Returns:
            New LinePositions containing lines in either set
        """
        left = list1.positions
        right = list2.positions
        result: List[int] = []

        i, j = 0, 0

        while i < len(left) or j < len(right):
            if i >= len(left):
                # Only right has remaining items
                result.extend(right[j:])
                break
            elif j >= len(right):
                # Only left has remaining items
                result.extend(left[i:])
                break
            elif left[i] < right[j]:
                result.append(left[i])
                i += 1
            elif left[i] > right[j]:
                result.append(right[j])
                j += 1
            else:
                # Line in both, keep it once
                result.append(left[i])
                i += 1
                j += 1

        return LinePositions.from_sorted(result)

    @staticmethod
    def negate(positions: LinePositions, line_count: int) -> LinePositions:
        """
        Negate a position set (NOT operation) over the universe [0, line_count).
        Walks the universe once, merging against the sorted input.

        Args:
            positions: LinePositions to negate
            line_count: Number of lines in the store

        Returns:
            LinePositions containing every line not in the input
        """
        excluded = positions.positions
        result: List[int] = []
        j = 0

        for n in range(line_count):
            while j < len(excluded) and excluded[j] < n:
                j += 1
            if j < len(excluded) and excluded[j] == n:
                continue
            result.append(n)

        return LinePositions.from_sorted(result)
