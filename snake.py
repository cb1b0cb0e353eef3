"""
Snake agent for Genetic Snake.

Each snake has:
  - a brain (NeuralNetwork) and a species (sensing + movement decoding)
  - a body, tail first with the head last
  - the hatchling it started as, every movement it made and every food
    location it was given, enough to replay the run exactly

survive() runs the snake until it reaches a terminal SnakeState:
  1. sense → think → decode → candidate head
  2. off the grid      → WALL_COLLISION
  3. onto its own body → SELF_COLLISION
  4. move; eat (grow) or drop the tail
  5. too many moves without food → TIMEOUT
"""

import math
from collections import deque
from enum import Enum

import numpy as np
from geometry import Point
from config import (MOVE_TIMEOUT_INITIAL, MOVE_TIMEOUT_INCREMENT,
                    MOVE_TIMEOUT_LIMIT, FITNESS_AWAY_PENALTY,
                    FITNESS_FOOD_REWARD)


class SnakeState(Enum):
    ALIVE          = "alive"
    TIMEOUT        = "timeout"
    WALL_COLLISION = "wall_collision"
    SELF_COLLISION = "self_collision"
    GRID_FILLED    = "grid_filled"      # no empty cell left for food


class Snake:
    """
    A single agent. The body is a deque (append the head, pop the tail) with a
    matching set of occupied cells for O(1) collision checks.
    """

    def __init__(self, brain, species, rng=None, body=None):
        self.brain   = brain
        self.species = species
        self.rng     = rng if rng is not None else np.random.default_rng()
        self.width   = species.width
        self.height  = species.height

        if body is None:
            body = species.hatch(self.rng)
        self.body      = deque(body)
        self._occupied = set(self.body)
        self.hatchling = tuple(self.body)

        self.food           = None
        self.movements      = []
        self.food_locations = []

        self.moved_closer       = 0
        self.moved_away         = 0
        self.food_count         = 0
        self.move_timeout       = 0
        self.move_timeout_limit = MOVE_TIMEOUT_INITIAL
        self.state = SnakeState.ALIVE

    # ──────────────────────────────────────────────────────────────────────────

    @property
    def head(self) -> Point:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)

    @property
    def alive(self) -> bool:
        return self.state is SnakeState.ALIVE

    @property
    def fitness(self) -> int:
        # round half up, the penalty is never negative
        penalty = math.floor(FITNESS_AWAY_PENALTY * self.moved_away + 0.5)
        return self.moved_closer - penalty + FITNESS_FOOD_REWARD * self.food_count

    def in_bounds(self, point: Point) -> bool:
        return 0 <= point.x < self.width and 0 <= point.y < self.height

    # ──────────────────────────────────────────────────────────────────────────

    def place_food(self, at: Point = None):
        """
        Drop food on a random empty cell, or on `at` when given, and record it.
        Returns None and ends the run with GRID_FILLED when the body covers the
        whole grid.
        """
        if at is None:
            if len(self._occupied) >= self.width * self.height:
                self.food  = None
                self.state = SnakeState.GRID_FILLED
                return None
            while True:
                at = Point(self.rng.integers(self.width), self.rng.integers(self.height))
                if at not in self._occupied:
                    break
        else:
            at = Point(at.x, at.y)

        self.food = at
        self.food_locations.append(at)
        return at

    def step(self) -> SnakeState:
        """Advance the snake by one move and return its state afterwards."""
        if self.state is not SnakeState.ALIVE:
            return self.state
        if self.food is None:
            self.place_food()
            if self.state is not SnakeState.ALIVE:
                return self.state

        self.move_timeout += 1
        if self.move_timeout > self.move_timeout_limit:
            self.state = SnakeState.TIMEOUT
            return self.state

        head = self.body[-1]
        outputs  = self.brain.think(self.species.look(self.body, self.food))
        movement = self.species.decode(outputs, self.rng)
        new_head = movement.translate(head)

        if not self.in_bounds(new_head):
            self.state = SnakeState.WALL_COLLISION
            return self.state
        if new_head in self._occupied:
            self.state = SnakeState.SELF_COLLISION
            return self.state

        if new_head.distance_to(self.food) < head.distance_to(self.food):
            self.moved_closer += 1
        else:
            self.moved_away += 1

        self.body.append(new_head)
        self._occupied.add(new_head)
        self.movements.append(movement)

        if new_head == self.food:
            self.food_count  += 1
            self.move_timeout = 0
            self.move_timeout_limit = min(self.move_timeout_limit + MOVE_TIMEOUT_INCREMENT,
                                          MOVE_TIMEOUT_LIMIT)
            self.place_food()
        else:
            self._occupied.discard(self.body.popleft())

        return self.state

    def survive(self, rng=None) -> int:
        """Run until a terminal state; returns the fitness."""
        if rng is not None:
            self.rng = rng
        while self.step() is SnakeState.ALIVE:
            pass
        return self.fitness

    def replay(self):
        return replay_frames(self.hatchling, self.movements, self.food_locations)

    def __repr__(self):
        return (f"Snake({self.species.name}, length={self.length}, "
                f"moves={len(self.movements)}, fitness={self.fitness}, "
                f"state={self.state.value})")


def replay_frames(hatchling, movements, food_locations):
    """
    Rebuild a run from its record, yielding (body, food) once for the
    hatchling and once after every movement. Bodies are tuples, tail first.
    """
    body  = deque(hatchling)
    foods = iter(food_locations)
    food  = next(foods, None)
    yield tuple(body), food

    for movement in movements:
        head = movement.translate(body[-1])
        body.append(head)
        if head == food:
            food = next(foods, None)
        else:
            body.popleft()
        yield tuple(body), food
