"""
Tests for the PDF renderer and the command-line entry point.
"""

import random

import pytest

from generator import generate_board
from main import main
from renderer import BoardRenderer


class TestRenderer:
    """Tests for PDF output."""

    def test_writes_pdf_with_solution_page(self, tmp_path) -> None:
        rng = random.Random(4)
        solution = generate_board(4, 6, rng)
        puzzle = solution.copy()
        puzzle.scramble(rng)

        path = tmp_path / "board.pdf"
        BoardRenderer(puzzle).render(str(path), solution=solution)

        data = path.read_bytes()
        assert data.startswith(b"%PDF")

    def test_large_board_fits_page(self) -> None:
        renderer = BoardRenderer(generate_board(30, 40, random.Random(1)))
        page_w, page_h = renderer._page_size()
        cell_size = renderer._fit_cell_size(page_w, page_h, 20)
        assert cell_size * 40 <= page_w - 40 + 1e-6
        assert cell_size * 30 <= page_h - 60 + 1e-6


class TestMain:
    """Smoke tests for the CLI."""

    def test_generate_and_solve(self, capsys) -> None:
        assert main(["--rows", "4", "--cols", "5", "--seed", "3"]) == 0
        out = capsys.readouterr().out
        assert "Puzzle (4x5):" in out
        assert "Solutions found: 1" in out
        assert "Solution 1 ✓:" in out

    def test_all_solutions(self, capsys) -> None:
        assert main(["--rows", "2", "--cols", "1", "--seed", "0", "--all"]) == 0
        assert "Solutions found: 2" in capsys.readouterr().out

    def test_pdf_output(self, tmp_path, capsys) -> None:
        path = tmp_path / "out.pdf"
        assert main(["--rows", "3", "--cols", "3", "--seed", "1", "--pdf", str(path)]) == 0
        assert path.read_bytes().startswith(b"%PDF")
        assert str(path) in capsys.readouterr().out

    def test_find_unique_gives_up(self, capsys) -> None:
        assert main(["--rows", "2", "--cols", "1", "--find-unique", "--attempts", "2"]) == 1
        out = capsys.readouterr().out
        assert "No unique board found after 2 attempts" in out

    @pytest.mark.parametrize("argv", [
        ["--rows", "0"],
        ["--rows", "1", "--cols", "1"],
        ["--max-solutions", "0"],
    ])
    def test_rejects_bad_arguments(self, argv) -> None:
        with pytest.raises(SystemExit):
            main(argv)
