#!/usr/bin/env python3
"""
Netwalk Puzzle Generator and Solver

Generates pipe-rotation puzzles on a toroidal grid, scrambles the tiles and
solves them again from tile shapes alone.

Usage:
    python main.py                          # Generate, scramble and solve a 10x10 board
    python main.py --rows 4 --cols 4 --all  # Enumerate every solution
    python main.py --find-unique            # Search for a board with one solution
    python main.py --pdf netwalk.pdf        # Also render puzzle and solution to PDF
"""

import argparse
import logging
import random
import time
from typing import Optional, Sequence

from board import format_board
from generator import GenerationStats, SpanningTreeGenerator, search_for_unique
from renderer import BoardRenderer
from solver import Solver


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def solve_and_report(board, all_solutions: bool, max_solutions: Optional[int],
                     rng: random.Random, pdf_path: Optional[str] = None) -> int:
    """Scramble a generated board, solve it and print the outcome."""
    puzzle = board.copy()
    puzzle.scramble(rng)

    print(f"Puzzle ({board.rows}x{board.cols}):")
    print(format_board(puzzle))

    solver = Solver(puzzle, max_solutions=max_solutions)
    begin = time.perf_counter()
    solutions = solver.solve(all_solutions=all_solutions)
    elapsed = time.perf_counter() - begin

    print(f"\nSolutions found: {len(solutions)} "
          f"({solver.stats.guesses} guesses, {solver.stats.backtracks} backtracks, "
          f"{elapsed:.3f}s)")

    if not solutions:
        return 0

    solved = solver.solved_board(solutions[0])
    status = "✓" if solved.is_spanning_tree() else "✗"
    print(f"\nSolution 1 {status}:")
    print(format_board(solved))

    if pdf_path:
        BoardRenderer(puzzle).render(pdf_path, solution=solved)
        print(f"\nSaved puzzle to: {pdf_path}")

    return len(solutions)


def main(argv: Optional[Sequence[str]] = None):
    parser = argparse.ArgumentParser(
        description="Netwalk Puzzle Generator and Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                         # Generate and solve a 10x10 board
  python main.py --rows 3 --cols 3 --all # Enumerate every solution
  python main.py --find-unique           # Search for a uniquely solvable board
  python main.py --seed 7 --pdf out.pdf  # Reproducible board rendered to PDF
        """
    )

    parser.add_argument('--rows', type=int, default=10, help='Grid rows (default: 10)')
    parser.add_argument('--cols', type=int, default=10, help='Grid columns (default: 10)')
    parser.add_argument('--seed', type=int, default=None, help='Random seed')
    parser.add_argument(
        '--all',
        action='store_true',
        help='Find every solution instead of the first one'
    )
    parser.add_argument(
        '--max-solutions',
        type=int,
        default=None,
        help='Stop enumerating after this many solutions'
    )
    parser.add_argument(
        '--find-unique',
        action='store_true',
        help='Generate boards until one has exactly one solution'
    )
    parser.add_argument(
        '--attempts',
        type=int,
        default=100,
        help='Board attempts for --find-unique (default: 100)'
    )
    parser.add_argument('--pdf', help='Render puzzle and solution to this PDF file')
    parser.add_argument(
        '--log-level',
        default='WARNING',
        help='Logging level (default: WARNING)'
    )

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.max_solutions is not None and args.max_solutions < 1:
        parser.error("--max-solutions must be at least 1")

    rng = random.Random(args.seed)

    if args.find_unique:
        stats = GenerationStats()
        try:
            board = search_for_unique(args.rows, args.cols, rng, stats, args.attempts)
        except ValueError as e:
            parser.error(str(e))

        if board is None:
            print(f"✗ No unique board found after {stats.attempts} attempts")
            print(f"  (No solution: {stats.no_solution}, Multiple: {stats.multiple_solutions})")
            return 1

        print(f"✓ Found unique board after {stats.attempts} attempts!")
        print(f"  (No solution: {stats.no_solution}, Multiple: {stats.multiple_solutions})\n")
    else:
        try:
            board = SpanningTreeGenerator(rng).generate(args.rows, args.cols)
        except ValueError as e:
            parser.error(str(e))

    solve_and_report(board, args.all or args.find_unique, args.max_solutions, rng, args.pdf)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
