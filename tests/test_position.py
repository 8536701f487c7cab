"""
Tests for GNUbg position IDs.

Board convention:
  board[0]    = opponent checkers on bar (always >= 0)
  board[1-24] = board points (positive = player on roll, negative = opponent)
  board[25]   = player on roll checkers on bar (always >= 0)
"""

import os
import random
import sys
import unittest

# Setup paths
script_dir = os.path.dirname(os.path.abspath(__file__))
project_dir = os.path.dirname(script_dir)
sys.path.insert(0, os.path.join(project_dir, "python"))

from bgcoach.position import (
    STARTING_BOARD,
    GnubgPositionIds,
    board_from_position_id,
    board_to_position_id,
    flip_board,
)

STARTING_ID = "4HPwATDgc/ABMA"


def make_board(**kwargs):
    """Create a board as a list of 26 ints. Defaults to all zeros."""
    board = [0] * 26
    for k, v in kwargs.items():
        if k == 'bar1':
            board[25] = v
        elif k == 'bar2':
            board[0] = v
        elif k.startswith('p'):
            board[int(k[1:])] = v
    return board


def random_board(rng):
    """A random legal board: up to 15 checkers per side, no shared points."""
    board = [0] * 26
    for sign in (1, -1):
        for _ in range(rng.randint(0, 15)):
            slot = rng.randint(0, 24)  # 24 = bar
            if slot == 24:
                board[25 if sign > 0 else 0] += 1
                continue
            point = slot + 1
            if board[point] * sign < 0:
                continue
            board[point] += sign
    return board


class TestPositionId(unittest.TestCase):

    def test_starting_position(self):
        self.assertEqual(board_to_position_id(STARTING_BOARD), STARTING_ID)
        self.assertEqual(board_from_position_id(STARTING_ID), STARTING_BOARD)

    def test_empty_board(self):
        position_id = board_to_position_id([0] * 26)
        self.assertEqual(position_id, "AAAAAAAAAAAAAA")
        self.assertEqual(board_from_position_id(position_id), [0] * 26)

    def test_bar_checkers(self):
        board = make_board(bar1=2, bar2=1, p6=3, p19=-4)
        self.assertEqual(board_from_position_id(board_to_position_id(board)), board)

    def test_random_round_trip(self):
        rng = random.Random(2024)
        for _ in range(500):
            board = random_board(rng)
            position_id = board_to_position_id(board)
            self.assertEqual(len(position_id), 14)
            self.assertEqual(board_from_position_id(position_id), board)

    def test_flip_is_involution(self):
        board = make_board(bar1=1, p3=2, p20=-3, bar2=2)
        self.assertEqual(flip_board(flip_board(board)), board)
        self.assertEqual(flip_board(STARTING_BOARD), STARTING_BOARD)

    def test_codec(self):
        codec = GnubgPositionIds()
        self.assertEqual(codec.to_identifier(STARTING_BOARD), STARTING_ID)
        self.assertEqual(codec.from_identifier(STARTING_ID), STARTING_BOARD)


class TestInvalidPositions(unittest.TestCase):

    def test_wrong_board_length(self):
        with self.assertRaises(ValueError):
            board_to_position_id([0] * 25)

    def test_too_many_checkers(self):
        with self.assertRaises(ValueError):
            board_to_position_id(make_board(p6=16))
        with self.assertRaises(ValueError):
            board_to_position_id(make_board(p19=-10, bar2=6))

    def test_negative_bar(self):
        with self.assertRaises(ValueError):
            board_to_position_id(make_board(bar1=-1))

    def test_wrong_id_length(self):
        with self.assertRaises(ValueError):
            board_from_position_id("4HPwATDgc/AB")

    def test_invalid_characters(self):
        with self.assertRaises(ValueError):
            board_from_position_id("4HPwATDgc/AB!A")

    def test_too_many_checkers_in_id(self):
        # all bits set: far more than 15 checkers on the opponent's first point
        with self.assertRaises(ValueError):
            board_from_position_id("//////////////")


if __name__ == "__main__":
    unittest.main()
