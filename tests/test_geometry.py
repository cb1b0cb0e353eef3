"""
Tests for points, movements and the two movement decoders.
"""
import numpy as np
import pytest

from geometry import (Point, HeadedPoint, Movement, forward_only_movement,
                      full_movement, TURN_LEFT, TURN_RIGHT, GO_FORWARD,
                      NORTH, EAST, SOUTH, WEST)


class TestPoint:

    def test_translate_adds_delta(self):
        assert Point(2, 3).translate(1, -1) == Point(3, 2)

    def test_immutable(self):
        with pytest.raises(AttributeError):
            Point(1, 1).x = 5

    def test_distance(self):
        assert Point(0, 0).distance_to(Point(3, 4)) == 5.0

    def test_equality_ignores_heading(self):
        assert Point(1, 2) == HeadedPoint(1, 2, 0, 1)
        assert HeadedPoint(1, 2, 1, 0) == HeadedPoint(1, 2, 0, -1)

    def test_hash_ignores_heading(self):
        cells = {HeadedPoint(1, 2, 0, 1)}
        assert Point(1, 2) in cells

    def test_unpacks(self):
        x, y = Point(4, 7)
        assert (x, y) == (4, 7)


class TestHeadedPoint:
    """Relative turns for a segment heading south from (2, 2)."""

    def test_forward_keeps_heading(self):
        moved = HeadedPoint(2, 2, *SOUTH).translate(*GO_FORWARD)
        assert moved == Point(2, 3)
        assert moved.heading == SOUTH

    def test_right_turn(self):
        moved = HeadedPoint(2, 2, *SOUTH).translate(*TURN_RIGHT)
        assert moved == Point(1, 2)
        assert moved.heading == WEST

    def test_left_turn(self):
        moved = HeadedPoint(2, 2, *SOUTH).translate(*TURN_LEFT)
        assert moved == Point(3, 2)
        assert moved.heading == EAST

    @pytest.mark.parametrize("heading, right", [
        (NORTH, EAST), (EAST, SOUTH), (SOUTH, WEST), (WEST, NORTH),
    ])
    def test_right_turn_is_clockwise(self, heading, right):
        assert HeadedPoint(5, 5, *heading).translate(*TURN_RIGHT).heading == right

    def test_four_left_turns_return_home(self):
        point = HeadedPoint(5, 5, *NORTH)
        for _ in range(4):
            point = point.translate(*TURN_LEFT)
        assert point == Point(5, 5)
        assert point.heading == NORTH


class TestMovement:

    def test_translate_delegates_to_point(self):
        assert Movement(0, -1).translate(Point(3, 3)) == Point(3, 2)
        assert Movement(*TURN_RIGHT).translate(HeadedPoint(3, 3, *NORTH)) == Point(4, 3)

    def test_equals_tuple(self):
        assert Movement(1, 0) == (1, 0)
        assert Movement(1, 0) != Movement(0, 1)


class TestForwardOnlyDecoder:

    def test_forward_wins(self, rng):
        for _ in range(50):
            assert forward_only_movement((1.0, 0.0, 0.0), rng) == GO_FORWARD

    def test_left_wins(self, rng):
        for _ in range(50):
            assert forward_only_movement((0.5, 0.9, 0.2), rng) == TURN_LEFT

    def test_right_wins(self, rng):
        assert forward_only_movement((0.1, 0.2, 0.3), rng) == TURN_RIGHT

    def test_two_way_tie_is_random(self, rng):
        seen = {tuple(forward_only_movement((1.0, 1.0, 0.0), rng)) for _ in range(200)}
        assert seen == {GO_FORWARD, TURN_LEFT}

    def test_three_way_tie_is_random(self, rng):
        seen = {tuple(forward_only_movement((0.0, 0.0, 0.0), rng)) for _ in range(300)}
        assert seen == {GO_FORWARD, TURN_LEFT, TURN_RIGHT}


class TestFullMovementDecoder:

    def test_single_maximum(self, rng):
        assert full_movement((0.0, 0.0, 1.0, 0.0), rng) == (0, -1)
        assert full_movement((0.0, 0.0, 0.0, 1.0), rng) == (0, 1)
        assert full_movement((1.0, 0.0, 0.0, 0.0), rng) == (-1, 0)
        assert full_movement((0.0, 1.0, 0.0, 0.0), rng) == (1, 0)

    def test_left_right_tie(self, rng):
        seen = set()
        for _ in range(200):
            dx, dy = full_movement((1.0, 1.0, 0.0, 0.0), rng)
            assert dy == 0
            seen.add(dx)
        assert seen == {-1, 1}

    def test_never_diagonal(self, rng):
        seen = set()
        for _ in range(200):
            move = tuple(full_movement((1.0, 0.0, 1.0, 0.0), rng))
            assert move in {(-1, 0), (0, -1)}
            seen.add(move)
        assert len(seen) == 2

    def test_all_equal_moves_one_step(self, rng):
        for _ in range(100):
            dx, dy = full_movement(np.zeros(4), rng)
            assert abs(dx) + abs(dy) == 1
