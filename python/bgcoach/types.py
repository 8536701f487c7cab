"""Typed data structures for the bgcoach rollout pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .results import GameResult, ResultCounter

#: Tolerance for floating-point drift in every sum-to-one and round-trip check.
EPSILON: float = 1e-5

PROBABILITY_FIELDS: tuple[str, ...] = ("win_normal", "win_gammon", "lose_normal", "lose_gammon")
_CSV_DELIMITER = ";"


@dataclass(frozen=True)
class Probabilities:
    """Cubeless outcome probabilities of a position.

    All four values are from the perspective of the player on roll and are
    mutually exclusive, so a normalized distribution sums to 1.0.  Gammons
    include backgammons.
    """

    win_normal: float    # P(single win)
    win_gammon: float    # P(gammon or backgammon win)
    lose_normal: float   # P(single loss)
    lose_gammon: float   # P(gammon or backgammon loss)

    @classmethod
    def from_counter(cls, counter: ResultCounter) -> Probabilities:
        """Relative frequencies of a rollout's results.

        Raises ValueError for an empty counter; there is nothing to divide by
        and NaN probabilities must never reach training data.
        """
        total = counter.total()
        if total <= 0:
            raise ValueError("Cannot derive probabilities from an empty ResultCounter")
        return cls(
            win_normal=counter.count_of(GameResult.WIN_NORMAL) / total,
            win_gammon=counter.count_of(GameResult.WIN_GAMMON) / total,
            lose_normal=counter.count_of(GameResult.LOSE_NORMAL) / total,
            lose_gammon=counter.count_of(GameResult.LOSE_GAMMON) / total,
        )

    @classmethod
    def from_gnubg(cls, probs: Sequence[float]) -> Probabilities:
        """Convert GNUbg's five outputs.

        ``[P(win), P(gw), P(bw), P(gl), P(bl)]`` where the gammon values
        already include backgammons.  The backgammon values are dropped.
        """
        if len(probs) != 5:
            raise ValueError(f"Expected 5 GNUbg probabilities, got {len(probs)}")
        p_win, p_gw, _, p_gl, _ = (float(p) for p in probs)
        return cls(
            win_normal=p_win - p_gw,
            win_gammon=p_gw,
            lose_normal=1.0 - p_win - p_gl,
            lose_gammon=p_gl,
        )

    def to_list(self) -> list[float]:
        return [self.win_normal, self.win_gammon, self.lose_normal, self.lose_gammon]

    @classmethod
    def from_list(cls, probs: Sequence[float]) -> Probabilities:
        if len(probs) != 4:
            raise ValueError(f"Expected 4 probabilities, got {len(probs)}")
        return cls(*(float(p) for p in probs))

    def win(self) -> float:
        """P(any win), gammons included."""
        return self.win_normal + self.win_gammon

    def equity(self) -> float:
        """Cubeless equity, between -2 and +2."""
        return (self.win_normal - self.lose_normal
                + 2.0 * (self.win_gammon - self.lose_gammon))

    def switch_sides(self) -> Probabilities:
        """The same distribution from the opponent's perspective."""
        return Probabilities(
            win_normal=self.lose_normal,
            win_gammon=self.lose_gammon,
            lose_normal=self.win_normal,
            lose_gammon=self.win_gammon,
        )

    def is_normalized(self, tolerance: float = EPSILON) -> bool:
        values = self.to_list()
        return (all(v >= -tolerance for v in values)
                and abs(sum(values) - 1.0) <= tolerance)

    # ------------------------------------------------------------------
    # CSV serialization
    # ------------------------------------------------------------------

    @staticmethod
    def csv_header() -> str:
        return _CSV_DELIMITER.join(PROBABILITY_FIELDS)

    def to_csv(self) -> str:
        """``win_normal;win_gammon;lose_normal;lose_gammon``, shortest exact floats."""
        return _CSV_DELIMITER.join(repr(v) for v in self.to_list())

    @classmethod
    def from_csv(cls, text: str) -> Probabilities:
        """Inverse of :meth:`to_csv`."""
        fields = text.strip().split(_CSV_DELIMITER)
        if len(fields) != len(PROBABILITY_FIELDS):
            raise ValueError(
                f"Expected {len(PROBABILITY_FIELDS)} probability fields, got {len(fields)}: {text!r}"
            )
        try:
            values = [float(f) for f in fields]
        except ValueError:
            raise ValueError(f"Invalid probability value in {text!r}") from None
        return cls(*values)

    def __str__(self) -> str:
        return (f"Probabilities: wn {100.0 * self.win_normal:.2f}%; "
                f"wg {100.0 * self.win_gammon:.2f}%; "
                f"ln {100.0 * self.lose_normal:.2f}%; "
                f"lg {100.0 * self.lose_gammon:.2f}%")
