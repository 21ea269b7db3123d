"""
Backtracking solver for toroidal pipe-rotation puzzles.

The solver only looks at tile shapes: it binds stubs into groups, deduces as
many group orientations as it can, and guesses the rest, undoing each failed
guess through the engine's change logs.
"""
from typing import List, Optional, Tuple
from dataclasses import dataclass
import logging

from binder import EquivalenceBinder, Orientation
from board import Board, EdgeState
from engine import ConstraintEngine
from topology import DIRECTIONS

logger = logging.getLogger(__name__)

Solution = Tuple[Orientation, ...]


@dataclass
class SearchStats:
    """Counters for one solve() call."""
    guesses: int = 0
    backtracks: int = 0
    solutions: int = 0


class Solver:
    """
    Finds rotations of every tile so that the wiring is one spanning tree.
    """

    def __init__(self, board: Board, max_solutions: Optional[int] = None):
        self.board = board
        self.max_solutions = max_solutions
        self.binder = EquivalenceBinder(board).bind()
        self.engine = ConstraintEngine(self.binder)
        self.solutions: List[Solution] = []
        self.stats = SearchStats()

    def solve(self, all_solutions: bool = False) -> List[Solution]:
        """
        Solve the board. Returns the first solution found, or every solution
        when all_solutions is set (up to max_solutions, if given).
        """
        self.solutions = []
        self.stats = SearchStats()
        self.engine.reset()

        if self.binder.contradiction:
            logger.debug("Tile shapes are contradictory, no solution")
            return self.solutions

        initial = self.engine.sweep()
        if initial.valid:
            logger.debug("Initial sweep fixed %d of %d groups",
                         len(initial.changes), len(self.engine.groups))
            self._search(all_solutions)

        logger.info("Solved %dx%d board: %d solution(s), %d guesses, %d backtracks",
                    self.board.rows, self.board.cols, len(self.solutions),
                    self.stats.guesses, self.stats.backtracks)
        return self.solutions

    def _search(self, all_solutions: bool) -> bool:
        """Recursive backtracking. Returns True once the search should stop."""
        group_id = self.engine.next_unset_group()

        if group_id is None:
            self.solutions.append(self.get_current_solution())
            self.stats.solutions += 1
            if not all_solutions:
                return True
            return self.max_solutions is not None and len(self.solutions) >= self.max_solutions

        group = self.engine.groups[group_id]
        if all_solutions or group.dead_ends > group.tees:
            first = Orientation.LIVE
        else:
            first = Orientation.DEAD

        for orientation in (first, first.flipped):
            self.stats.guesses += 1
            result = self.engine.assume(group_id, orientation)
            sweep_result = None

            if result.valid:
                sweep_result = self.engine.sweep(self.engine.unset_groups(result.horizon))
                if sweep_result.valid and self._search(all_solutions):
                    return True

            if sweep_result is not None:
                self.engine.revert(sweep_result.changes)
            self.engine.revert(result.changes)
            self.stats.backtracks += 1

        return False

    def get_current_solution(self) -> Solution:
        return tuple(group.orientation for group in self.engine.groups)

    def get_solution(self) -> Optional[Solution]:
        """Return first solution if exists."""
        if self.solutions:
            return self.solutions[0]
        return None

    def is_unique(self) -> bool:
        """Check if puzzle has exactly one solution."""
        return len(self.solutions) == 1

    def load_solution(self, solution: Solution) -> None:
        """Set every group orientation from a solution."""
        if len(solution) != len(self.engine.groups):
            raise ValueError(f"Expected {len(self.engine.groups)} orientations, got {len(solution)}")
        for group, orientation in zip(self.engine.groups, solution):
            group.orientation = orientation

    def export_edges(self, solution: Solution) -> List[List[EdgeState]]:
        """Turn a solution back into per-cell edge states."""
        self.load_solution(solution)
        return [
            [self.engine.edge_state(cell, d) for d in DIRECTIONS]
            for cell in self.board.torus.cells()
        ]

    def solved_board(self, solution: Solution) -> Board:
        return Board(self.board.rows, self.board.cols, self.export_edges(solution))


def verify_board_uniqueness(board: Board) -> Tuple[bool, int]:
    """
    Verify a board has a unique solution.
    Returns (is_unique, solution_count).
    """
    solver = Solver(board, max_solutions=2)
    count = len(solver.solve(all_solutions=True))
    return count == 1, count
