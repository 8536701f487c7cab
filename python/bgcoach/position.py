"""
Position identifiers for persisted records.

Records store positions only as opaque strings.  The pipeline talks to the
board representation through a :class:`PositionCodec`; the default codec,
:class:`GnubgPositionIds`, uses GNUbg position IDs for boards in the engine's
26-element list convention:

- [0]: opponent checkers on bar (>= 0)
- [1-24]: board points (positive = player on roll, negative = opponent)
- [25]: player on roll checkers on bar (>= 0)

A GNUbg position ID is an 80-bit key encoded as 14 base64 characters.  The
key holds the opponent's checkers first, then the player on roll's, each from
that side's own point of view.  Every point (24 points, then the bar) is a
run of 1 bits, one per checker, closed by a 0 bit.  Bits fill each byte from
the least significant end.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, Protocol

#: Standard backgammon starting position.
STARTING_BOARD: list[int] = [
    0, -2, 0, 0, 0, 0, 5, 0, 3, 0, 0, 0, -5,
    5, 0, 0, 0, -3, 0, -5, 0, 0, 0, 0, 2, 0,
]

_KEY_BYTES = 10
_ID_LENGTH = 14
_CHECKERS = 15


class PositionCodec(Protocol):
    """Reversible mapping between positions and identifier strings."""

    def to_identifier(self, position: Any) -> str: ...

    def from_identifier(self, identifier: str) -> Any: ...


def flip_board(board: list[int]) -> list[int]:
    """Flip a board to the other player's perspective."""
    flipped = [0] * 26
    flipped[0] = board[25]
    flipped[25] = board[0]
    for i in range(1, 25):
        flipped[i] = -board[25 - i]
    return flipped


def _side_counts(board: list[int]) -> tuple[list[int], list[int]]:
    """Per-side checker counts, slots 0-23 = own points 1-24, slot 24 = bar."""
    opponent = [0] * 25
    player = [0] * 25
    for j in range(24):
        player[j] = max(board[j + 1], 0)
        opponent[j] = max(-board[24 - j], 0)
    player[24] = board[25]
    opponent[24] = board[0]
    return opponent, player


def board_to_position_id(board: list[int]) -> str:
    """Encode a 26-element board as a 14-character GNUbg position ID."""
    if len(board) != 26:
        raise ValueError(f"Board must have 26 elements, got {len(board)}")
    if board[0] < 0 or board[25] < 0:
        raise ValueError(f"Bar counts must be non-negative: {board[0]}, {board[25]}")

    key = bytearray(_KEY_BYTES)
    bit = 0
    for side in _side_counts(board):
        if sum(side) > _CHECKERS:
            raise ValueError(f"More than {_CHECKERS} checkers for one side: {board}")
        for n in side:
            for _ in range(n):
                key[bit >> 3] |= 1 << (bit & 7)
                bit += 1
            bit += 1  # closing 0 bit

    return base64.b64encode(bytes(key)).decode("ascii").rstrip("=")


def board_from_position_id(position_id: str) -> list[int]:
    """
    Decode a 14-character GNUbg position ID into a 26-element board list.

    Raises ValueError for IDs that are not valid base64 or do not describe
    a legal checker layout.
    """
    if len(position_id) != _ID_LENGTH:
        raise ValueError(f'Invalid position ID (length {len(position_id)}): {position_id!r}')
    try:
        key = base64.b64decode(position_id + "==", validate=True)
    except (binascii.Error, ValueError):
        raise ValueError(f'Invalid position ID: {position_id!r}') from None

    checkers = [0] * 26

    # i tracks which side (0 = opponent, 1 = player on roll)
    # j tracks which slot (0-23 for points, 24 for bar)
    i = j = 0
    side_total = 0

    for cur in key:
        for _ in range(8):
            if cur & 0x1:
                if i > 1:
                    raise ValueError(f'Position ID has too many slots: {position_id!r}')
                side_total += 1
                if side_total > _CHECKERS:
                    raise ValueError(f'More than {_CHECKERS} checkers in {position_id!r}')
                if j < 24:
                    if i == 0:
                        checkers[24 - j] -= 1  # opponent checker
                    else:
                        if checkers[j + 1] < 0:
                            raise ValueError(
                                f'Both sides on point {j + 1} in {position_id!r}'
                            )
                        checkers[j + 1] += 1   # player checker
                else:
                    if i == 0:
                        checkers[0] += 1   # opponent on bar
                    else:
                        checkers[25] += 1  # player on bar
            else:
                j += 1
                if j == 25:
                    i += 1
                    j = 0
                    side_total = 0
            cur >>= 1

    return checkers


class GnubgPositionIds:
    """Default :class:`PositionCodec`: boards as GNUbg position IDs."""

    def to_identifier(self, position: list[int]) -> str:
        return board_to_position_id(position)

    def from_identifier(self, identifier: str) -> list[int]:
        return board_from_position_id(identifier)
