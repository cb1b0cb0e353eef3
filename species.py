"""
Snake species.

A species supplies everything that differs between snake kinds:
  hatch()  – the initial body, built from the species' point variant
  look()   – the sensory input vector fed to the brain
  decode() – turns the brain's output vector into a Movement

ForwardOnly   – 6 inputs / 3 outputs, HeadedPoint body, relative turns
FullMovement  – 24 inputs / 4 outputs, Point body, absolute moves
"""

import math
from itertools import islice
import numpy as np

from errors import ConfigurationError
from geometry import (Point, HeadedPoint, forward_only_movement, full_movement,
                      NORTH, EAST, SOUTH, WEST)
from config import HATCHLING_LENGTH, MIN_GRID_SIZE

ROOT_TWO       = math.sqrt(2.0)
PI_BY_TWO      = math.pi / 2.0
THREE_PI_BY_TWO = 3.0 * math.pi / 2.0
TWO_PI         = 2.0 * math.pi

# compass order used by the full movement sensors
COMPASS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


class _Species:
    """Grid bookkeeping shared by both species."""

    name = ""

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise ConfigurationError(f"Grid must be at least 1x1, got {width}x{height}")
        self.width  = width
        self.height = height
        self.grid_diagonal = math.sqrt((width - 1) ** 2 + (height - 1) ** 2)
        self.normalised_grid_diagonal = (ROOT_TWO / self.grid_diagonal
                                         if self.grid_diagonal else 0.0)

    def make_point(self, x: int, y: int, heading: tuple) -> Point:
        raise NotImplementedError

    def hatch(self, rng) -> list:
        """
        A straight hatchling, tail first, facing a random compass heading with
        HATCHLING_SPAWN_MARGIN free cells between its head and the wall ahead.
        """
        span = MIN_GRID_SIZE
        if self.width < span or self.height < span:
            raise ConfigurationError(
                f"A {self.width}x{self.height} grid is too small to hatch snakes, "
                f"both sides need at least {span} cells")

        L, W, H = HATCHLING_LENGTH, self.width, self.height
        heading = int(rng.integers(4))
        if heading == 0:
            x = int(rng.integers(W))
            y_tail = span + int(rng.integers(H - span + 1)) - 1
            cells, direction = [(x, y_tail - i) for i in range(L)], NORTH
        elif heading == 1:
            y = int(rng.integers(H))
            x_tail = int(rng.integers(W - span + 1))
            cells, direction = [(x_tail + i, y) for i in range(L)], EAST
        elif heading == 2:
            x = int(rng.integers(W))
            y_tail = int(rng.integers(H - span + 1))
            cells, direction = [(x, y_tail + i) for i in range(L)], SOUTH
        else:
            y = int(rng.integers(H))
            x_tail = span + int(rng.integers(W - span + 1)) - 1
            cells, direction = [(x_tail - i, y) for i in range(L)], WEST

        return [self.make_point(x, y, direction) for x, y in cells]

    def _extent(self, direction: tuple) -> int:
        """Grid dimension along a cardinal direction."""
        return self.width if direction[0] != 0 else self.height

    def _to_wall(self, head: Point, direction: tuple) -> int:
        """Free cells between the head and the wall along a cardinal direction."""
        if direction == EAST:
            return self.width - head.x - 1
        if direction == WEST:
            return head.x
        if direction == SOUTH:
            return self.height - head.y - 1
        return head.y


# ──────────────────────────────────────────────────────────────────────────────
# Forward only
# ──────────────────────────────────────────────────────────────────────────────

class ForwardOnly(_Species):
    """Looks ahead, left and right of its heading; can only go forward or turn."""

    name = "forward_only"
    inputs  = 6
    outputs = 3

    def make_point(self, x, y, heading):
        return HeadedPoint(x, y, *heading)

    def look(self, body, food: Point) -> np.ndarray:
        """
        [wall/body ahead, left, right, food ahead, left, right], each scaled by
        the grid dimension along that direction.
        """
        head = body[-1]
        hx, hy = head.x, head.y
        fwd   = head.heading
        left  = (fwd[1], -fwd[0])
        right = (-fwd[1], fwd[0])

        forward_distance = self._to_wall(head, fwd)
        left_distance    = self._to_wall(head, left)
        right_distance   = self._to_wall(head, right)

        # distance to body, the head is excluded (body is tail first)
        for seg in islice(body, len(body) - 1):
            ox, oy = seg.x - hx, seg.y - hy
            if ox == 0 and oy == 0:
                left_distance = right_distance = 0
                break
            along = ox * fwd[0] + oy * fwd[1]
            across = ox * left[0] + oy * left[1]
            if across == 0 and along > 0:
                forward_distance = min(forward_distance, along)
            elif along == 0:
                if across > 0:
                    left_distance = min(left_distance, across)
                else:
                    right_distance = min(right_distance, -across)

        fx, fy = food.x - hx, food.y - hy
        forward_food = max(0, fx * fwd[0] + fy * fwd[1])
        left_food    = max(0, fx * left[0] + fy * left[1])
        right_food   = max(0, fx * right[0] + fy * right[1])

        along_extent  = self._extent(fwd)
        across_extent = self._extent(left)
        return np.array([
            forward_distance / along_extent,
            left_distance / across_extent,
            right_distance / across_extent,
            forward_food / along_extent,
            left_food / across_extent,
            right_food / across_extent,
        ], dtype=np.float64)

    def decode(self, outputs, rng):
        return forward_only_movement(outputs, rng)


# ──────────────────────────────────────────────────────────────────────────────
# Full movement
# ──────────────────────────────────────────────────────────────────────────────

class FullMovement(_Species):
    """Looks along 8 compass rays; moves up, down, left or right."""

    name = "full_movement"
    inputs  = 24
    outputs = 4

    def make_point(self, x, y, heading):
        return Point(x, y)

    def look(self, body, food: Point) -> np.ndarray:
        """
        24 values in COMPASS order: 8 food, 8 wall, 8 body. Directions with
        nothing to report read 1.0 (far).
        """
        head = body[-1]
        return np.concatenate([
            self._look_food(head, food),
            self._look_walls(head),
            self._look_body(body),
        ])

    def _look_food(self, head: Point, food: Point) -> np.ndarray:
        north = head.y - food.y
        east  = food.x - head.x
        distance = math.hypot(north, east)
        if self.grid_diagonal:
            distance /= self.grid_diagonal

        # compass bearing, clockwise from north
        bearing = math.atan2(east, north) % TWO_PI
        sensed = dict.fromkeys(COMPASS, 1.0)
        if bearing < PI_BY_TWO:
            sensed["N"] = distance * math.cos(bearing)
            sensed["E"] = distance * math.sin(bearing)
            sensed["NE"] = (sensed["N"] + sensed["E"]) / ROOT_TWO
        elif bearing < math.pi:
            sensed["E"] = distance * math.cos(bearing - PI_BY_TWO)
            sensed["S"] = distance * math.sin(bearing - PI_BY_TWO)
            sensed["SE"] = (sensed["E"] + sensed["S"]) / ROOT_TWO
        elif bearing < THREE_PI_BY_TWO:
            sensed["S"] = distance * math.cos(bearing - math.pi)
            sensed["W"] = distance * math.sin(bearing - math.pi)
            sensed["SW"] = (sensed["S"] + sensed["W"]) / ROOT_TWO
        else:
            sensed["W"] = distance * math.cos(bearing - THREE_PI_BY_TWO)
            sensed["N"] = distance * math.sin(bearing - THREE_PI_BY_TWO)
            sensed["NW"] = (sensed["W"] + sensed["N"]) / ROOT_TWO
        return np.array([sensed[d] for d in COMPASS], dtype=np.float64)

    def _look_walls(self, head: Point) -> np.ndarray:
        W, H = self.width, self.height
        hx, hy = head.x, head.y
        diag = self.normalised_grid_diagonal

        north, east = hy, W - hx - 1
        south, west = H - hy - 1, hx

        # a 45 degree ray stops at whichever wall it meets first
        return np.array([
            north / H, min(north, east) * diag,
            east / W, min(south, east) * diag,
            south / H, min(south, west) * diag,
            west / W, min(north, west) * diag,
        ], dtype=np.float64)

    def _look_body(self, body) -> np.ndarray:
        head = body[-1]
        hx, hy = head.x, head.y
        diag = self.normalised_grid_diagonal
        sensed = dict.fromkeys(COMPASS, 1.0)

        def nearest(direction, value):
            if value < sensed[direction]:
                sensed[direction] = value

        for seg in islice(body, len(body) - 1):
            sx, sy = seg.x, seg.y
            if sx < hx:
                d = hx - sx
                if sy == hy:
                    nearest("W", d / self.width)
                elif sy == hy - d:
                    nearest("NW", d * diag)
                elif sy == hy + d:
                    nearest("SW", d * diag)
            elif sx > hx:
                d = sx - hx
                if sy == hy:
                    nearest("E", d / self.width)
                elif sy == hy - d:
                    nearest("NE", d * diag)
                elif sy == hy + d:
                    nearest("SE", d * diag)
            # body rays read north towards larger y, south towards smaller y
            elif sy > hy:
                nearest("N", (sy - hy) / self.height)
            elif sy < hy:
                nearest("S", (hy - sy) / self.height)

        return np.array([sensed[d] for d in COMPASS], dtype=np.float64)

    def decode(self, outputs, rng):
        return full_movement(outputs, rng)


# ──────────────────────────────────────────────────────────────────────────────

SPECIES = {
    ForwardOnly.name:  ForwardOnly,
    FullMovement.name: FullMovement,
}


def get_species(name: str, width: int, height: int):
    """Build a species for a width x height grid from its config name."""
    try:
        cls = SPECIES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown snake species {name!r}, expected one of {sorted(SPECIES)}") from None
    return cls(width, height)
