"""
Grid geometry for Genetic Snake.

Grid (0, 0) is the top left cell, (width - 1, height - 1) the bottom right:
+x is east, +y is south.

Two point variants share coordinate-only equality, so a body segment, a food
location and a candidate head can be compared whatever their variant:
  Point       – absolute coordinate, translate() adds an absolute delta
  HeadedPoint – coordinate plus the absolute heading it was laid down with,
                translate() reads the delta as a relative turn
"""

# Relative turns produced by the forward-only decoder
TURN_LEFT    = (-1, 0)
TURN_RIGHT   = (1, 0)
GO_FORWARD   = (0, 1)

# Absolute headings
NORTH = (0, -1)
EAST  = (1, 0)
SOUTH = (0, 1)
WEST  = (-1, 0)


class Point:
    __slots__ = ("x", "y")

    def __init__(self, x: int, y: int):
        object.__setattr__(self, "x", int(x))
        object.__setattr__(self, "y", int(y))

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def translate(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def distance_to(self, other) -> float:
        return ((self.x - other.x) ** 2 + (self.y - other.y) ** 2) ** 0.5

    # required by `in` checks against a body of either variant
    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    def __hash__(self):
        return hash((self.x, self.y))

    def __iter__(self):
        yield self.x
        yield self.y

    def __repr__(self):
        return f"Point({self.x}, {self.y})"


class HeadedPoint(Point):
    __slots__ = ("dx", "dy")

    def __init__(self, x: int, y: int, dx: int, dy: int):
        super().__init__(x, y)
        object.__setattr__(self, "dx", int(dx))
        object.__setattr__(self, "dy", int(dy))

    @property
    def heading(self) -> tuple:
        return (self.dx, self.dy)

    def translate(self, dx: int, dy: int) -> "HeadedPoint":
        """
        (dx, dy) is a relative turn: (1, 0) right, (-1, 0) left, anything else
        carries straight on along this point's heading.
        """
        new_dx, new_dy = self.dx, self.dy
        if dx == 1:
            new_dx, new_dy = -self.dy, self.dx
        elif dx == -1:
            new_dx, new_dy = self.dy, -self.dx
        return HeadedPoint(self.x + new_dx, self.y + new_dy, new_dx, new_dy)

    def __repr__(self):
        return f"HeadedPoint({self.x}, {self.y}, heading=({self.dx}, {self.dy}))"


class Movement:
    """A resolved one-step displacement; the point variant decides how to apply it."""

    __slots__ = ("dx", "dy")

    def __init__(self, dx: int, dy: int):
        self.dx = dx
        self.dy = dy

    def translate(self, point: Point) -> Point:
        return point.translate(self.dx, self.dy)

    def __eq__(self, other):
        if isinstance(other, Movement):
            return (self.dx, self.dy) == (other.dx, other.dy)
        if isinstance(other, tuple):
            return (self.dx, self.dy) == other
        return NotImplemented

    def __hash__(self):
        return hash((self.dx, self.dy))

    def __iter__(self):
        yield self.dx
        yield self.dy

    def __repr__(self):
        return f"Movement(dx={self.dx}, dy={self.dy})"


# ──────────────────────────────────────────────────────────────────────────────
# Decoders: network output vector → Movement
# ──────────────────────────────────────────────────────────────────────────────

def forward_only_movement(outputs, rng) -> Movement:
    """
    outputs = (forward, left, right). The strongest wins; ties between any
    two or all three are resolved uniformly at random.
    """
    forward, left, right = (float(v) for v in outputs)
    strongest = max(forward, left, right)

    tied = [turn for value, turn in ((left, TURN_LEFT), (right, TURN_RIGHT),
                                     (forward, GO_FORWARD))
            if value == strongest]
    if len(tied) == 1:
        return Movement(*tied[0])
    return Movement(*tied[int(rng.integers(len(tied)))])


def full_movement(outputs, rng) -> Movement:
    """
    outputs = (left, right, up, down) as absolute grid directions.
    Opposing maxima are resolved 50/50 and diagonal moves are collapsed onto
    a randomly chosen axis.
    """
    left, right, up, down = (float(v) for v in outputs)
    strongest = max(left, right, up, down)

    dx = dy = 0
    dx_count = dy_count = 0
    if left == strongest:
        dx = -1
        dx_count += 1
    if right == strongest:
        dx = 1
        dx_count += 1
    if dx_count == 2:
        dx = 1 if rng.random() >= 0.5 else -1

    if up == strongest:
        dy = -1
        dy_count += 1
    if down == strongest:
        dy = 1
        dy_count += 1
    if dy_count == 2:
        dy = 1 if rng.random() >= 0.5 else -1

    # no diagonal movement, keep one axis
    if dx_count and dy_count:
        if rng.random() >= 0.5:
            dx = 0
        else:
            dy = 0

    return Movement(dx, dy)
