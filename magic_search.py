"""
Generate-and-test search for ordinary magic squares.

A candidate is a random permutation of 1..n² laid out row-major; the search
keeps drawing candidates until one of them is magic.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

logger = logging.getLogger(__name__)

MIN_ORDER = 3


# --------------------------------------------------------------------------- #
#  Errors
# --------------------------------------------------------------------------- #
class InvalidOrderError(ValueError):
    """Raised by the caller-side check when N is not a usable order."""


class SearchLimitReached(RuntimeError):
    def __init__(self, order: int, attempts: int) -> None:
        super().__init__(f"No magic square of order {order} "
                         f"found in {attempts} attempts")
        self.order = order
        self.attempts = attempts


# --------------------------------------------------------------------------- #
#  Settings bundle
# --------------------------------------------------------------------------- #
@dataclass
class SearchConfig:
    order: int = 3                        # magic-square size N
    max_attempts: Optional[int] = None    # None → search until found
    seed: Optional[int] = None
    runs: int = 1                         # benchmark runs per order
    bench: list[int] = field(default_factory=list)
    plot: bool = False
    csv_path: Optional[str] = None
    menu: bool = False
    verbose: bool = False
    log_file: Optional[str] = None

    def make_rng(self) -> random.Random:
        return random.Random(self.seed)


@dataclass(frozen=True)
class SearchResult:
    grid: np.ndarray
    constant: int
    attempts: int
    elapsed: float = 0.0

    @property
    def order(self) -> int:
        return int(self.grid.shape[0])


# --------------------------------------------------------------------------- #
#  Caller-side validation
# --------------------------------------------------------------------------- #
def validate_order(raw: int | str) -> int:
    """Parse N and reject anything below MIN_ORDER before a search starts."""
    try:
        n = int(str(raw).strip())
    except ValueError:
        raise InvalidOrderError("Please enter a valid integer") from None
    if n < MIN_ORDER:
        raise InvalidOrderError(f"Order N must be at least {MIN_ORDER}")
    return n


def canonical_constant(n: int) -> int:
    """Return the row/col/diag sum of an n×n square built from 1..n²."""
    return n * (n**2 + 1) // 2


# --------------------------------------------------------------------------- #
#  Candidate generator
# --------------------------------------------------------------------------- #
def generate(n: int, rng: random.Random | None = None) -> np.ndarray:
    """Return a uniformly random n×n arrangement of 1..n²."""
    if n < 1:
        raise ValueError(f"order must be positive, got {n}")
    seq = list(range(1, n * n + 1))
    (rng or random).shuffle(seq)
    return np.asarray(seq, dtype=int).reshape(n, n)


# --------------------------------------------------------------------------- #
#  Validator
# --------------------------------------------------------------------------- #
def _reference_sum(board: np.ndarray) -> Optional[int]:
    # Row 0 sets the target; the first mismatching line ends the check.
    ref = board[0].sum()
    for row in board[1:]:
        if row.sum() != ref:
            return None
    for col in board.T:
        if col.sum() != ref:
            return None
    if board.diagonal().sum() != ref:
        return None
    if np.fliplr(board).diagonal().sum() != ref:
        return None
    return int(ref)


def magic_constant(grid) -> Optional[int]:
    """Common line sum of ``grid``, or None when it is not magic."""
    board = np.asarray(grid)
    if board.dtype.kind in "iu":
        # Python ints, so line sums of large entries cannot wrap around
        board = board.astype(object)
    return _reference_sum(board)


def is_magic(grid) -> bool:
    return magic_constant(grid) is not None


# --------------------------------------------------------------------------- #
#  Search loop
# --------------------------------------------------------------------------- #
def search(n: int,
           rng: random.Random | None = None,
           max_attempts: int | None = None,
           on_progress: Callable[[int], None] | None = None,
           progress_every: int = 100_000) -> SearchResult:
    """
    Draw candidates until one is magic.

    Without ``max_attempts`` the loop never gives up; beyond n = 4 that means
    it practically never returns. ``on_progress`` is called on the searching
    thread every ``progress_every`` attempts.
    """
    logger.info("Searching for a magic square of order %d", n)
    start = time.perf_counter()
    attempts = 0
    while True:
        if max_attempts is not None and attempts >= max_attempts:
            logger.warning("Gave up on order %d after %d attempts", n, attempts)
            raise SearchLimitReached(n, attempts)
        attempts += 1
        board = generate(n, rng)
        constant = _reference_sum(board)
        if constant is not None:
            break
        if on_progress is not None and attempts % progress_every == 0:
            on_progress(attempts)

    elapsed = time.perf_counter() - start
    board.setflags(write=False)
    logger.info("Order %d: constant %d after %d attempts (%.3fs)",
                n, constant, attempts, elapsed)
    return SearchResult(grid=board, constant=constant,
                        attempts=attempts, elapsed=elapsed)
