"""Game results and rollout result counting.

A rollout plays a position out to the end many times.  Every finished game
is one :class:`GameResult`, tallied in a :class:`ResultCounter`.  Each worker
owns its own counter; partial counters are combined afterwards with
:meth:`ResultCounter.merge` or :func:`merge_all`, in any order.
"""

from __future__ import annotations

from enum import Enum
from functools import reduce
from numbers import Integral
from typing import Iterable


class GameResult(Enum):
    """Terminal result of one game, from the view of the player on roll.

    Gammons include backgammons.  The values are persisted (counter layout,
    JSON worker results) and must not be renumbered.
    """

    WIN_NORMAL = 0
    WIN_GAMMON = 1
    LOSE_NORMAL = 2
    LOSE_GAMMON = 3

    @property
    def is_win(self) -> bool:
        return self in (GameResult.WIN_NORMAL, GameResult.WIN_GAMMON)

    @property
    def is_gammon(self) -> bool:
        return self in (GameResult.WIN_GAMMON, GameResult.LOSE_GAMMON)

    def reverse(self) -> GameResult:
        """The same result seen from the opponent's side."""
        return _REVERSED[self]

    @classmethod
    def from_game_over(cls, value: int) -> GameResult:
        """Map a signed game-over code to a result.

        The board engine reports +1/-1 for a single game, +2/-2 for a gammon
        and +3/-3 for a backgammon; positive means the player on roll won.
        0 means the game is not over and is rejected.
        """
        try:
            return _GAME_OVER_CODES[value]
        except KeyError:
            raise ValueError(f"Not a finished game result: {value!r}") from None


_REVERSED: dict[GameResult, GameResult] = {
    GameResult.WIN_NORMAL: GameResult.LOSE_NORMAL,
    GameResult.WIN_GAMMON: GameResult.LOSE_GAMMON,
    GameResult.LOSE_NORMAL: GameResult.WIN_NORMAL,
    GameResult.LOSE_GAMMON: GameResult.WIN_GAMMON,
}

_GAME_OVER_CODES: dict[int, GameResult] = {
    1: GameResult.WIN_NORMAL,
    2: GameResult.WIN_GAMMON,
    3: GameResult.WIN_GAMMON,
    -1: GameResult.LOSE_NORMAL,
    -2: GameResult.LOSE_GAMMON,
    -3: GameResult.LOSE_GAMMON,
}

# Counter slot for every result.  Kept as an explicit table so that
# reordering the enum can never silently move counts between slots.
_SLOT: dict[GameResult, int] = {
    GameResult.WIN_NORMAL: 0,
    GameResult.WIN_GAMMON: 1,
    GameResult.LOSE_NORMAL: 2,
    GameResult.LOSE_GAMMON: 3,
}


def _check_count(n: object) -> None:
    """Reject anything but a non-negative integer count."""
    if isinstance(n, bool) or not isinstance(n, Integral):
        raise ValueError(f"Result counts must be integers, got {n!r}")
    if n < 0:
        raise ValueError(f"Result counts must be non-negative, got {n!r}")


class ResultCounter:
    """Counts of the four game results of a rollout batch.

    Not thread-safe: give every worker its own counter and merge them
    afterwards.
    """

    __slots__ = ("_results",)

    def __init__(
        self,
        win_normal: int = 0,
        win_gammon: int = 0,
        lose_normal: int = 0,
        lose_gammon: int = 0,
    ):
        results = [win_normal, win_gammon, lose_normal, lose_gammon]
        for n in results:
            _check_count(n)
        self._results = [int(n) for n in results]

    def record(self, result: GameResult) -> None:
        """Count one finished game."""
        self._results[_SLOT[result]] += 1

    def record_n(self, result: GameResult, amount: int) -> None:
        """Count ``amount`` games that were already tallied elsewhere."""
        _check_count(amount)
        self._results[_SLOT[result]] += int(amount)

    def total(self) -> int:
        return sum(self._results)

    def count_of(self, result: GameResult) -> int:
        return self._results[_SLOT[result]]

    def merge(self, other: ResultCounter) -> ResultCounter:
        """Return a new counter holding the sum of both; neither is modified."""
        return ResultCounter(*(a + b for a, b in zip(self._results, other._results)))

    def to_list(self) -> list[int]:
        """Counts as ``[win_normal, win_gammon, lose_normal, lose_gammon]``."""
        return list(self._results)

    @classmethod
    def from_list(cls, counts: Iterable[int]) -> ResultCounter:
        counts = list(counts)
        if len(counts) != 4:
            raise ValueError(f"Expected 4 result counts, got {len(counts)}")
        return cls(*counts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResultCounter):
            return NotImplemented
        return self._results == other._results

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        wn, wg, ln, lg = self._results
        return (f"ResultCounter(win_normal={wn}, win_gammon={wg}, "
                f"lose_normal={ln}, lose_gammon={lg})")


def merge_all(counters: Iterable[ResultCounter]) -> ResultCounter:
    """Fold any number of per-worker counters into one."""
    return reduce(ResultCounter.merge, counters, ResultCounter())
