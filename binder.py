"""
Equivalence binding of grid edges into sign-linked groups.

Every stub of every cell is bound to exactly one group with a sign. Once the
group's orientation is known, the stub is live when orientation * sign > 0.
Physical continuity links the two stubs of a shared border; Bend and Straight
tiles additionally link their stubs to each other, so a single orientation
pins the whole tile.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Set, Tuple
import logging

from board import Board, Shape
from topology import DIRECTIONS, Direction

logger = logging.getLogger(__name__)


class Orientation(Enum):
    UNSET = 0
    LIVE = 1
    DEAD = -1

    @property
    def sign(self) -> int:
        return self.value

    @property
    def flipped(self) -> 'Orientation':
        return Orientation(-self.value)

    @classmethod
    def from_sign(cls, value: int) -> 'Orientation':
        if value > 0:
            return cls.LIVE
        if value < 0:
            return cls.DEAD
        return cls.UNSET


class Binding(NamedTuple):
    group: int
    sign: int


@dataclass
class Group:
    """An equivalence class of stubs sharing one orientation."""
    id: int
    orientation: Orientation = Orientation.UNSET
    # Bend/Straight cells: fully pinned once this group is oriented
    inner_cells: Set[int] = field(default_factory=set)
    # DeadEnd/Tee cells: still depend on their other groups
    outer_cells: Set[int] = field(default_factory=set)
    dead_ends: int = 0
    tees: int = 0

    def size(self) -> int:
        return len(self.inner_cells) + len(self.outer_cells)


class EquivalenceBinder:
    """
    Walks the board once, grouping stubs that must share a truth value.
    """

    def __init__(self, board: Board):
        self.board = board
        self.torus = board.torus
        self.bindings: List[List[Optional[Binding]]] = [
            [None] * 4 for _ in self.torus.cells()
        ]
        self.groups: List[Group] = []
        self.ranking: List[int] = []
        # Set when two relations disagree, i.e. the tiles cannot be wired up
        self.contradiction = False

    def bind(self) -> 'EquivalenceBinder':
        for cell in self.torus.cells():
            for d in DIRECTIONS:
                if self.bindings[cell][d] is None:
                    group = Group(id=len(self.groups))
                    self.groups.append(group)
                    self._bind_group(group, cell, d)

        # Larger groups constrain more of the board per guess
        self.ranking = sorted(range(len(self.groups)), key=lambda g: -self.groups[g].size())

        logger.debug("Bound %d stubs into %d groups%s", self.torus.size * 4,
                     len(self.groups), " (contradictory)" if self.contradiction else "")
        return self

    def _bind_group(self, group: Group, cell: int, direction: Direction) -> None:
        stack: List[Tuple[int, Direction, int]] = [(cell, direction, 1)]

        while stack:
            cell, direction, sign = stack.pop()
            if not self._set(group, cell, direction, sign):
                continue

            neighbor = self.torus.neighbor(cell, direction)
            stack.append((neighbor, direction.opposite, sign))

            for forced, forced_sign in self._forced_relations(group, cell, direction, sign):
                stack.append((cell, forced, forced_sign))

    def _set(self, group: Group, cell: int, direction: Direction, sign: int) -> bool:
        """Bind one stub. Returns False if it was already bound."""
        existing = self.bindings[cell][direction]
        if existing is not None:
            if existing != (group.id, sign):
                self.contradiction = True
            return False
        self.bindings[cell][direction] = Binding(group.id, sign)
        return True

    def _forced_relations(self, group: Group, cell: int, direction: Direction,
                          sign: int) -> List[Tuple[Direction, int]]:
        """Record the cell's membership and return the stubs its shape ties to `direction`."""
        shape = self.board.shapes[cell]
        opposite = direction.opposite

        if shape is Shape.STRAIGHT:
            group.inner_cells.add(cell)
            return [
                (opposite, sign),
                (Direction((direction + 1) % 4), -sign),
                (Direction((direction + 3) % 4), -sign),
            ]
        if shape is Shape.BEND:
            group.inner_cells.add(cell)
            return [(opposite, -sign)]

        if cell not in group.outer_cells:
            group.outer_cells.add(cell)
            if shape is Shape.DEAD_END:
                group.dead_ends += 1
            else:
                group.tees += 1
        return []
