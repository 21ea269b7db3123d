"""
Tests for the backtracking solver.
"""

import itertools
import random

import pytest

from binder import Orientation
from board import Board, EdgeState, Shape, classify
from engine import Change
from generator import generate_board
from solver import Solver, verify_board_uniqueness
from topology import Direction


def scrambled(rows: int, cols: int, seed: int) -> Board:
    rng = random.Random(seed)
    board = generate_board(rows, cols, rng)
    board.scramble(rng)
    return board


def edge_grid(edges) -> tuple:
    return tuple(tuple(states) for states in edges)


def brute_force_solutions(board: Board) -> set:
    """Every distinct wiring reachable by rotating tiles that forms a spanning tree."""
    options = []
    for states in board.edges:
        variants = set()
        rotated = list(states)
        for _ in range(4):
            variants.add(tuple(rotated))
            rotated.insert(0, rotated.pop())
        options.append(sorted(variants, key=lambda v: [s.value for s in v]))

    found = set()
    for combo in itertools.product(*options):
        candidate = Board(board.rows, board.cols, combo)
        if candidate.is_spanning_tree():
            found.add(edge_grid(combo))
    return found


# =============================================================================
# Test Solving
# =============================================================================


class TestSolve:
    """Tests for single-solution solving."""

    @pytest.mark.parametrize("rows, cols", [(3, 3), (4, 4), (5, 5), (6, 8), (1, 6), (10, 10)])
    def test_solution_is_spanning_tree(self, rows: int, cols: int) -> None:
        for seed in range(3):
            puzzle = scrambled(rows, cols, seed)
            solver = Solver(puzzle)
            solutions = solver.solve()

            assert len(solutions) == 1
            solved = solver.solved_board(solutions[0])
            assert solved.is_spanning_tree()

    def test_solution_matches_shapes(self) -> None:
        """Exported wiring re-classifies to the puzzle's shapes."""
        puzzle = scrambled(6, 6, 11)
        solver = Solver(puzzle)
        edges = solver.export_edges(solver.solve()[0])

        for cell, states in enumerate(edges):
            shape = puzzle.shapes[cell]
            assert EdgeState.UNKNOWN not in states
            assert states.count(EdgeState.PRESENT) == shape.wires
            assert classify(states) is shape
            if shape is Shape.STRAIGHT:
                assert states[Direction.N] is states[Direction.S]
                assert states[Direction.E] is states[Direction.W]
            elif shape is Shape.BEND:
                assert states[Direction.N] is not states[Direction.S]
                assert states[Direction.E] is not states[Direction.W]

    def test_solution_has_one_orientation_per_group(self) -> None:
        solver = Solver(scrambled(4, 5, 3))
        solution = solver.solve()[0]
        assert len(solution) == len(solver.engine.groups)
        assert Orientation.UNSET not in solution

    def test_solved_state_passes_validation(self) -> None:
        solver = Solver(scrambled(4, 4, 9))
        solver.solve()
        changes = [Change(g.id, g.orientation) for g in solver.engine.groups]
        assert solver.engine.validate(changes)

    def test_solve_can_be_repeated(self) -> None:
        solver = Solver(scrambled(5, 5, 2))
        first = solver.solve()
        second = solver.solve()
        assert first == second

    def test_two_cell_board_needs_no_backtracking(self) -> None:
        """Sweeping settles the self-loops; the first guess completes the tree."""
        solver = Solver(Board.from_wires(2, 1, ["N", "S"]))
        solutions = solver.solve()

        assert len(solutions) == 1
        assert solver.stats.guesses == 1
        assert solver.stats.backtracks == 0
        assert solver.solved_board(solutions[0]).is_spanning_tree()

    def test_unsolvable_board_yields_no_solutions(self) -> None:
        solver = Solver(Board.from_wires(1, 2, ["EW", "EW"]))
        assert solver.solve() == []
        assert solver.solve(all_solutions=True) == []
        assert solver.get_solution() is None

    def test_contradictory_shapes_yield_no_solutions(self) -> None:
        solver = Solver(Board.from_wires(1, 3, ["NE", "NE", "NE"]))
        assert solver.binder.contradiction
        assert solver.solve() == []


class TestAllSolutions:
    """Tests for exhaustive enumeration."""

    @pytest.mark.parametrize("rows, cols", [(2, 2), (1, 4), (2, 3)])
    def test_matches_brute_force(self, rows: int, cols: int) -> None:
        """Every rotation assignment that forms a spanning tree is found, once."""
        for seed in range(6):
            puzzle = scrambled(rows, cols, seed)
            solver = Solver(puzzle)
            solutions = solver.solve(all_solutions=True)

            exported = [edge_grid(solver.export_edges(s)) for s in solutions]
            assert len(exported) == len(set(exported))
            assert set(exported) == brute_force_solutions(puzzle)

    @pytest.mark.parametrize("wires, rows, cols", [
        (["N", "S"], 2, 1),
        (["E", "W"], 1, 2),
    ])
    def test_two_cell_boards_have_two_solutions(self, wires, rows, cols) -> None:
        """The wire can cross either of the two wraparound borders."""
        solver = Solver(Board.from_wires(rows, cols, wires))
        solutions = solver.solve(all_solutions=True)
        assert len(solutions) == 2
        assert len(set(solutions)) == 2

    def test_original_wiring_is_among_solutions(self) -> None:
        rng = random.Random(21)
        original = generate_board(3, 3, rng)
        puzzle = original.copy()
        puzzle.scramble(rng)

        solver = Solver(puzzle)
        exported = {edge_grid(solver.export_edges(s)) for s in solver.solve(all_solutions=True)}
        assert edge_grid(original.edges) in exported

    def test_max_solutions_caps_enumeration(self) -> None:
        solver = Solver(Board.from_wires(2, 1, ["N", "S"]), max_solutions=1)
        assert len(solver.solve(all_solutions=True)) == 1

    def test_uniqueness_check(self) -> None:
        is_unique, count = verify_board_uniqueness(Board.from_wires(2, 1, ["N", "S"]))
        assert not is_unique
        assert count == 2


class TestExport:
    """Tests for turning solutions back into boards."""

    def test_round_trip_reproduces_shapes(self) -> None:
        puzzle = scrambled(5, 4, 17)
        solver = Solver(puzzle)
        solved = solver.solved_board(solver.solve()[0])
        assert solved.shapes == puzzle.shapes

    def test_load_solution_rejects_wrong_length(self) -> None:
        solver = Solver(scrambled(3, 3, 1))
        with pytest.raises(ValueError):
            solver.load_solution((Orientation.LIVE,))
