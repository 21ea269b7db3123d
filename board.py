"""
Board model for toroidal pipe-rotation puzzles: edge states, tile shapes,
rotation and wiring checks.
"""
import random
from enum import Enum
from typing import List, Optional, Sequence

from disjoint_set import DisjointSet
from topology import DIRECTIONS, Direction, Torus


class EdgeState(Enum):
    ABSENT = -1
    UNKNOWN = 0
    PRESENT = 1

    @classmethod
    def from_sign(cls, value: int) -> 'EdgeState':
        if value > 0:
            return cls.PRESENT
        if value < 0:
            return cls.ABSENT
        return cls.UNKNOWN


class Shape(Enum):
    """Rotation-invariant tile category."""
    DEAD_END = 0  # 1 wire
    BEND = 1      # 2 adjacent wires
    STRAIGHT = 2  # 2 opposite wires
    TEE = 3       # 3 wires

    @property
    def wires(self) -> int:
        """Number of live edges a tile of this shape has."""
        return _WIRE_COUNTS[self]


_WIRE_COUNTS = {
    Shape.DEAD_END: 1,
    Shape.BEND: 2,
    Shape.STRAIGHT: 2,
    Shape.TEE: 3,
}


def classify(states: Sequence[EdgeState]) -> Shape:
    """
    Derive the shape category of a cell from its 4 edge states.

    Scanning starts after the first live edge: every further live edge adds 1,
    or 2 when the edge opposite to it (two positions back) is live as well.
    """
    live = [state is EdgeState.PRESENT for state in states]
    count = sum(live)
    if not 1 <= count <= 3:
        raise ValueError(f"A tile must have 1 to 3 wires, got {count}")

    category = 0
    for i in range(live.index(True) + 1, 4):
        if live[i]:
            category += 2 if i > 1 and live[i - 2] else 1
    return Shape(category)


_BOX_CHARS = {
    (0, 0, 0, 0): ' ',
    (1, 0, 0, 0): '╵', (0, 1, 0, 0): '╶', (0, 0, 1, 0): '╷', (0, 0, 0, 1): '╴',
    (1, 0, 1, 0): '│', (0, 1, 0, 1): '─',
    (1, 1, 0, 0): '└', (0, 1, 1, 0): '┌', (0, 0, 1, 1): '┐', (1, 0, 0, 1): '┘',
    (1, 1, 1, 0): '├', (0, 1, 1, 1): '┬', (1, 0, 1, 1): '┤', (1, 1, 0, 1): '┴',
    (1, 1, 1, 1): '┼',
}


class Board:
    """
    A toroidal grid of tiles.

    edges[cell][direction] holds the current state of each wire stub.
    shapes[cell] is derived once at construction and never changes, since
    rotating a tile does not change its shape.
    """

    def __init__(self, rows: int, cols: int, edges: Sequence[Sequence[EdgeState]]):
        self.torus = Torus(rows, cols)
        if self.torus.size < 2:
            raise ValueError("A board needs at least 2 cells")
        if len(edges) != self.torus.size:
            raise ValueError(f"Expected {self.torus.size} cells, got {len(edges)}")

        self.edges: List[List[EdgeState]] = []
        for cell, states in enumerate(edges):
            states = list(states)
            if len(states) != 4 or EdgeState.UNKNOWN in states:
                raise ValueError(f"Cell {self.torus.position(cell)} needs 4 known edge states")
            self.edges.append(states)

        self.shapes = tuple(classify(states) for states in self.edges)

    @classmethod
    def from_wires(cls, rows: int, cols: int, wires: Sequence[str]) -> 'Board':
        """
        Build a board from one string per cell (row-major) naming its live
        directions, e.g. ["ES", "W", "NE", "W"].
        """
        edges = []
        for spec in wires:
            edges.append([
                EdgeState.PRESENT if d.name in spec.upper() else EdgeState.ABSENT
                for d in DIRECTIONS
            ])
        return cls(rows, cols, edges)

    @property
    def rows(self) -> int:
        return self.torus.rows

    @property
    def cols(self) -> int:
        return self.torus.cols

    def shape(self, row: int, col: int) -> Shape:
        return self.shapes[self.torus.index(row, col)]

    def degree(self, cell: int) -> int:
        return sum(1 for state in self.edges[cell] if state is EdgeState.PRESENT)

    def rotate(self, row: int, col: int, clockwise: bool = True) -> None:
        """Rotate one tile a quarter turn (presentation state only)."""
        states = self.edges[self.torus.index(row, col)]
        if clockwise:
            states.insert(0, states.pop())
        else:
            states.append(states.pop(0))

    def scramble(self, rng: Optional[random.Random] = None) -> None:
        """Rotate every tile a random number of quarter turns."""
        rng = rng or random.Random()
        for cell in self.torus.cells():
            row, col = self.torus.position(cell)
            for _ in range(rng.randrange(4)):
                self.rotate(row, col)

    def is_consistent(self) -> bool:
        """Check that every pair of neighbouring stubs agrees on their shared border."""
        for cell in self.torus.cells():
            for d in DIRECTIONS:
                neighbor = self.torus.neighbor(cell, d)
                if self.edges[cell][d] is not self.edges[neighbor][d.opposite]:
                    return False
        return True

    def is_spanning_tree(self) -> bool:
        """
        Check that the live wires form one connected, cycle-free tree covering
        every cell. This is the solved condition of the puzzle.
        """
        if not self.is_consistent():
            return False

        ds = DisjointSet(self.torus.size)
        links = 0
        for cell in self.torus.cells():
            # Each physical wire is the E or S stub of exactly one cell
            for d in (Direction.E, Direction.S):
                if self.edges[cell][d] is EdgeState.PRESENT:
                    if not ds.union(cell, self.torus.neighbor(cell, d)):
                        return False
                    links += 1
        return links == self.torus.size - 1

    def copy(self) -> 'Board':
        return Board(self.rows, self.cols, [list(states) for states in self.edges])

    def __repr__(self):
        return f"Board({self.rows}x{self.cols})"


def format_board(board: Board) -> str:
    """Draw the board with box-drawing characters, one character per tile."""
    lines = []
    for row in range(board.rows):
        chars = []
        for col in range(board.cols):
            states = board.edges[board.torus.index(row, col)]
            key = tuple(1 if state is EdgeState.PRESENT else 0 for state in states)
            chars.append(_BOX_CHARS[key])
        lines.append(''.join(chars))
    return '\n'.join(lines)
