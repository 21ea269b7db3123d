"""
Puzzle generator: builds a random spanning-tree wiring over the torus with
every tile holding 1 to 3 wires, then optionally searches for boards whose
scrambled tiles admit exactly one solution.
"""
from typing import List, Optional
from dataclasses import dataclass
import logging
import random

from board import Board, EdgeState
from topology import Direction, Torus
from solver import verify_board_uniqueness

logger = logging.getLogger(__name__)

# Idle steps (in multiples of the cell count) between checks for a trapped walk
STALL_CHECK_FACTOR = 4


@dataclass
class GenerationStats:
    """Statistics for puzzle generation."""
    attempts: int = 0
    unique_found: int = 0
    no_solution: int = 0
    multiple_solutions: int = 0
    restarts: int = 0


class SpanningTreeGenerator:
    """
    Generates wirings by a random walk that adds an edge whenever it steps
    onto a cell it has not visited yet, refusing steps that would give the
    current tile a fourth wire.
    """

    def __init__(self, rng: Optional[random.Random] = None,
                 stats: Optional[GenerationStats] = None):
        self.rng = rng or random.Random()
        self.stats = stats or GenerationStats()

    def generate(self, rows: int, cols: int) -> Board:
        """Generate a board with a fully wired, unrotated spanning tree."""
        torus = Torus(rows, cols)
        if torus.size < 2:
            raise ValueError("A board needs at least 2 cells")

        edges = self._walk(torus)
        while edges is None:
            self.stats.restarts += 1
            logger.debug("Random walk trapped on %dx%d grid, restarting", rows, cols)
            edges = self._walk(torus)

        for states in edges:
            for d, state in enumerate(states):
                if state is EdgeState.UNKNOWN:
                    states[d] = EdgeState.ABSENT

        return Board(rows, cols, edges)

    def _walk(self, torus: Torus) -> Optional[List[List[EdgeState]]]:
        """
        Run one random walk until every cell is visited.
        Returns None if the walk can no longer reach an unvisited cell.
        """
        edges = [[EdgeState.UNKNOWN] * 4 for _ in torus.cells()]
        visited = [False] * torus.size

        current = self.rng.randrange(torus.size)
        visited[current] = True
        remaining = torus.size - 1
        idle = 0

        while remaining:
            direction = Direction(self.rng.randrange(4))
            neighbor = torus.neighbor(current, direction)

            if visited[neighbor]:
                idle += 1
            else:
                self._set_pair(torus, edges, current, direction, EdgeState.PRESENT)

                if EdgeState.UNKNOWN in edges[current]:
                    visited[neighbor] = True
                    remaining -= 1
                    idle = 0
                else:
                    # A fourth wire would make a cross tile: undo and stay put
                    self._set_pair(torus, edges, current, direction, EdgeState.UNKNOWN)
                    neighbor = current
                    idle += 1

            current = neighbor

            if idle and idle % (STALL_CHECK_FACTOR * torus.size) == 0:
                if self._is_trapped(torus, edges, visited):
                    return None

        return edges

    @staticmethod
    def _set_pair(torus: Torus, edges: List[List[EdgeState]], cell: int,
                  direction: Direction, state: EdgeState) -> None:
        edges[cell][direction] = state
        edges[torus.neighbor(cell, direction)][direction.opposite] = state

    @staticmethod
    def _is_trapped(torus: Torus, edges: List[List[EdgeState]],
                    visited: List[bool]) -> bool:
        """
        True when no visited cell next to an unvisited one has room for
        another wire, so the walk can never finish.
        """
        for cell in torus.cells():
            if visited[cell]:
                continue
            for neighbor in torus.neighbors[cell]:
                if visited[neighbor] and edges[neighbor].count(EdgeState.PRESENT) < 3:
                    return False
        return True


def generate_board(rows: int, cols: int, rng: Optional[random.Random] = None) -> Board:
    """Generate a solved (unrotated) board of the given size."""
    return SpanningTreeGenerator(rng).generate(rows, cols)


def search_for_unique(
    rows: int,
    cols: int,
    rng: Optional[random.Random] = None,
    stats: Optional[GenerationStats] = None,
    max_attempts: int = 100
) -> Optional[Board]:
    """Generate boards until one has exactly one solution."""
    stats = stats if stats is not None else GenerationStats()
    generator = SpanningTreeGenerator(rng, stats)

    for _ in range(max_attempts):
        board = generator.generate(rows, cols)
        stats.attempts += 1

        is_unique, count = verify_board_uniqueness(board)
        if is_unique:
            stats.unique_found += 1
            logger.info("Found unique %dx%d board after %d attempts",
                        rows, cols, stats.attempts)
            return board
        elif count == 0:
            stats.no_solution += 1
        else:
            stats.multiple_solutions += 1

    return None
