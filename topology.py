"""
Toroidal grid topology shared by the generator and the solver.
"""
from enum import IntEnum
from typing import List, Tuple


class Direction(IntEnum):
    N = 0  # Up (decreasing row)
    E = 1  # Right (increasing col)
    S = 2  # Down (increasing row)
    W = 3  # Left (decreasing col)

    @property
    def opposite(self) -> 'Direction':
        return Direction((self + 2) % 4)

    @property
    def delta(self) -> Tuple[int, int]:
        """(row, col) offset of one step in this direction."""
        return _DELTAS[self]


_DELTAS = {
    Direction.N: (-1, 0),
    Direction.E: (0, 1),
    Direction.S: (1, 0),
    Direction.W: (0, -1),
}

DIRECTIONS = tuple(Direction)


class Torus:
    """
    A rows x cols lattice that wraps around on both axes.
    Cells are addressed by a flat index: row * cols + col.
    """

    def __init__(self, rows: int, cols: int):
        if rows <= 0 or cols <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.size = rows * cols

        # neighbors[cell][direction] -> cell index
        self.neighbors: List[Tuple[int, ...]] = []
        for cell in range(self.size):
            r, c = self.position(cell)
            self.neighbors.append(tuple(
                self.index(r + d.delta[0], c + d.delta[1]) for d in DIRECTIONS
            ))

    def index(self, row: int, col: int) -> int:
        """Flat index of (row, col), wrapping out-of-range coordinates."""
        return (row % self.rows) * self.cols + (col % self.cols)

    def position(self, cell: int) -> Tuple[int, int]:
        return divmod(cell, self.cols)

    def neighbor(self, cell: int, direction: Direction) -> int:
        return self.neighbors[cell][direction]

    def cells(self) -> range:
        return range(self.size)

    def __repr__(self):
        return f"Torus({self.rows}x{self.cols})"
