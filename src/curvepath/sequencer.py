"""Resumable cursor over compiled index ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Sequence, Tuple, Union

from curvepath.exceptions import InvalidArgument


@dataclass(frozen=True)
class SequencerState:
    """Snapshot of an IndexSequencer position.

    Attributes:
        pair_cursor: Even index into the flat group array, pointing at the start of a pair.
        offset: Number of steps already taken inside the current pair.
    """

    pair_cursor: int = 0
    offset: int = 0


class IndexSequencer:
    """Turns a list of ``(start, end)`` pairs into an ordered index sequence.

    Both ends of a pair are inclusive. A pair with ``start <= end`` counts up,
    otherwise it counts down, so ``(1, 4), (8, 6)`` yields ``1 2 3 4 8 7 6``.
    The cursor can be saved and restored, which is what the sliding window
    curves use to step back after reading a window.
    """

    def __init__(self, pairs: Union[Sequence[Tuple[int, int]], Sequence[int]]):
        self._group: List[int] = self._compile(pairs)
        self._cursor = 0
        self._offset = 0

    @staticmethod
    def _compile(pairs: Union[Sequence[Tuple[int, int]], Sequence[int]]) -> List[int]:
        if pairs is None:
            raise InvalidArgument("Pairs cannot be None.")
        group: List[int] = []
        for item in pairs:
            if isinstance(item, (tuple, list)):
                if len(item) != 2:
                    raise InvalidArgument(f"Pair must have exactly 2 entries, got {item!r}")
                group.extend(int(v) for v in item)
            else:
                group.append(int(item))
        if not group:
            raise InvalidArgument("At least one pair is required.")
        if len(group) % 2 != 0:
            raise InvalidArgument(f"Flat group array must have even length, got {len(group)}")
        return group

    @classmethod
    def full_range(cls, num_points: int) -> IndexSequencer:
        """Sequencer over ``0 .. num_points - 1``."""
        if num_points <= 0:
            raise InvalidArgument(f"num_points must be > 0, got {num_points}")
        return cls([(0, num_points - 1)])

    # ------------------------------------------------------------------ iteration

    def has_next(self) -> bool:
        return self._cursor < len(self._group)

    def next(self) -> int:
        """Return the next index and advance the cursor.

        Raises:
            IndexError: If the sequence is exhausted.
        """
        if self._cursor >= len(self._group):
            raise IndexError("IndexSequencer is exhausted")
        start = self._group[self._cursor]
        end = self._group[self._cursor + 1]

        if start <= end:
            value = start + self._offset
            if value >= end:
                self._offset = 0
                self._cursor += 2
            else:
                self._offset += 1
        else:
            value = start - self._offset
            if value <= end:
                self._offset = 0
                self._cursor += 2
            else:
                self._offset += 1
        return value

    def __iter__(self) -> Iterator[int]:
        while self.has_next():
            yield self.next()

    def indices(self) -> Iterator[int]:
        """Replay the whole sequence from the start without touching the cursor."""
        for i in range(0, len(self._group), 2):
            start = self._group[i]
            end = self._group[i + 1]
            if start <= end:
                yield from range(start, end + 1)
            else:
                yield from range(start, end - 1, -1)

    def reset(self) -> None:
        self._cursor = 0
        self._offset = 0

    # ------------------------------------------------------------------ state

    def set(self, pair_cursor: int, offset: int) -> None:
        """Move the cursor to an explicit position.

        Raises:
            InvalidArgument: If pair_cursor is negative or odd, or offset is negative.
        """
        if pair_cursor < 0 or pair_cursor % 2 != 0:
            raise InvalidArgument(f"pair_cursor must be even and >= 0, got {pair_cursor}")
        if offset < 0:
            raise InvalidArgument(f"offset must be >= 0, got {offset}")
        self._cursor = pair_cursor
        self._offset = offset

    def save(self) -> SequencerState:
        return SequencerState(self._cursor, self._offset)

    def restore(self, state: SequencerState) -> None:
        self.set(state.pair_cursor, state.offset)

    @property
    def state(self) -> SequencerState:
        return self.save()

    @property
    def pair_cursor(self) -> int:
        return self._cursor

    @property
    def offset(self) -> int:
        return self._offset

    # ------------------------------------------------------------------ queries

    def total_length(self) -> int:
        """Number of indices the full sequence yields."""
        return sum(abs(self._group[i] - self._group[i + 1]) + 1 for i in range(0, len(self._group), 2))

    def __len__(self) -> int:
        return self.total_length()

    def is_in_range(self, min_value: int, max_value: int) -> bool:
        """True if every index of the sequence lies in ``[min_value, max_value)``."""
        return all(min_value <= value < max_value for value in self._group)

    @property
    def group_length(self) -> int:
        """Length of the flat group array (twice the number of pairs)."""
        return len(self._group)

    def group_value(self, index: int) -> int:
        return self._group[index]

    @property
    def pairs(self) -> List[Tuple[int, int]]:
        return [(self._group[i], self._group[i + 1]) for i in range(0, len(self._group), 2)]

    @property
    def control_string(self) -> str:
        """The pairs in ``start:end`` notation joined by commas."""
        return ",".join(f"{start}:{end}" for start, end in self.pairs)

    def __repr__(self) -> str:
        return f"IndexSequencer('{self.control_string}', cursor={self._cursor}, offset={self._offset})"
