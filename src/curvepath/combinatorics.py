"""Binomial coefficients backed by a lazily grown Pascal's triangle."""

from __future__ import annotations

import threading
from typing import List

import numpy as np
from numpy.typing import NDArray


class PascalsTriangle:
    """Cache of binomial coefficients.

    Row ``n`` only stores the entries ``r <= n // 2``; the other half follows
    from symmetry. Rows are computed in float64; from row 1030 on the central
    entries are infinite. The table grows at least by doubling.
    """

    _rows: List[NDArray[np.float64]] = [np.ones(1, dtype=np.float64)]
    _lock = threading.Lock()

    @classmethod
    def ncr(cls, n: int, r: int) -> float:
        """Return n choose r, or 0.0 if ``n < 0``, ``r < 0`` or ``r > n``."""
        if n < 0 or r < 0 or r > n:
            return 0.0
        with cls._lock:
            if n >= len(cls._rows):
                cls._grow(n)
            row = cls._rows[n]
        if 2 * r > n:
            r = n - r
        return float(row[r])

    @classmethod
    def _grow(cls, n: int) -> None:
        rows = cls._rows
        target = max(n, 2 * len(rows))
        for i in range(len(rows), target + 1):
            prev = rows[i - 1]
            row = np.empty(i // 2 + 1, dtype=np.float64)
            row[0] = 1.0
            with np.errstate(over="ignore"):
                for j in range(1, row.shape[0]):
                    if j < prev.shape[0]:
                        row[j] = prev[j - 1] + prev[j]
                    else:
                        # centre of an even row: C(i-1, j-1) == C(i-1, j)
                        row[j] = 2.0 * prev[j - 1]
            rows.append(row)

    @classmethod
    def reset(cls) -> None:
        """Drop every cached row except the first."""
        with cls._lock:
            cls._rows = [np.ones(1, dtype=np.float64)]

    @classmethod
    def num_rows(cls) -> int:
        """Number of rows currently cached."""
        return len(cls._rows)


def ncr(n: int, r: int) -> float:
    """n choose r as float64 (may be ``inf`` for very large n)."""
    return PascalsTriangle.ncr(n, r)
