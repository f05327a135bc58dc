"""
Line position sets for the line index.
"""

from typing import Iterable, Iterator, List, Tuple
import bisect


class LinePositions:
    """
    Ordered set of 0-based line positions for a single term.
    Positions are kept sorted and unique; the set is immutable once built.
    """

    __slots__ = ('_positions',)

    def __init__(self, positions: Iterable[int] = ()):
        """
        Initialize a position set.

        Args:
            positions: Line positions in any order; duplicates are collapsed
        """
        self._positions: Tuple[int, ...] = tuple(sorted(set(positions)))

    @classmethod
    def from_sorted(cls, positions: List[int]) -> 'LinePositions':
        """
        Create from a list that is already strictly ascending.
        Used by the merge operations, which produce ordered output.
        """
        pl = cls.__new__(cls)
        pl._positions = tuple(positions)
        return pl

    @property
    def positions(self) -> Tuple[int, ...]:
        """Ascending tuple of positions."""
        return self._positions

    def contains(self, position: int) -> bool:
        """Check membership with binary search."""
        idx = bisect.bisect_left(self._positions, position)
        return idx < len(self._positions) and self._positions[idx] == position

    def __contains__(self, position: int) -> bool:
        return self.contains(position)

    def __len__(self) -> int:
        """Number of lines in the set."""
        return len(self._positions)

    def __iter__(self) -> Iterator[int]:
        """Iterate over positions in ascending order."""
        return iter(self._positions)

    def __eq__(self, other):
        if isinstance(other, LinePositions):
            return self._positions == other._positions
        return NotImplemented

    def __hash__(self):
        return hash(self._positions)

    def __repr__(self):
        return f"LinePositions({list(self._positions)})"


class LinePositionsBuilder:
    """
    Mutable accumulator used while an index is being built.
    Lines are fed in ascending order, so appending keeps the list sorted.
    """

    def __init__(self):
        self._positions: List[int] = []

    def add_line(self, position: int):
        """
        Record that the term occurs on a line.

        Args:
            position: 0-based line position
        """
        if self._positions and self._positions[-1] == position:
            # Term repeated on the same line
            return

        if self._positions and self._positions[-1] > position:
            # Out of order, fall back to binary insertion
            idx = bisect.bisect_left(self._positions, position)
            if idx < len(self._positions) and self._positions[idx] == position:
                return
            self._positions.insert(idx, position)
        else:
            self._positions.append(position)

    def build(self) -> LinePositions:
        """Freeze the accumulated positions."""
        return LinePositions.from_sorted(self._positions)


EMPTY_POSITIONS = LinePositions()
