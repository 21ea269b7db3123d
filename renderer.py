"""
PDF renderer for pipe-rotation puzzles using fpdf2.
"""
from typing import Optional, Tuple
from fpdf import FPDF
import logging

from board import Board, EdgeState, Shape
from topology import DIRECTIONS

logger = logging.getLogger(__name__)


class BoardRenderer:
    """Renders a board (and optionally its solution) to PDF."""

    CELL_SIZE = 18  # Largest cell size in mm; shrunk to fit big boards

    TILE_COLOR = (245, 240, 232)     # Warm off-white
    GRID_COLOR = (190, 185, 180)
    WIRE_COLOR = (40, 70, 120)       # Dark blue
    TERMINAL_COLOR = (200, 80, 60)   # Dead-end terminals
    TEXT_COLOR = (40, 40, 40)

    # Unit vector of each direction in page coordinates (y grows downward)
    WIRE_VECTORS = {
        0: (0.0, -1.0),
        1: (1.0, 0.0),
        2: (0.0, 1.0),
        3: (-1.0, 0.0),
    }

    def __init__(self, board: Board):
        self.board = board
        self.pdf = FPDF(orientation='P', unit='mm', format='letter')
        self.pdf.set_auto_page_break(auto=False)

    def _fit_cell_size(self, page_w: float, page_h: float, margin: float) -> float:
        usable_w = page_w - 2 * margin
        usable_h = page_h - 2 * margin - 20  # Room for the title
        return min(self.CELL_SIZE, usable_w / self.board.cols, usable_h / self.board.rows)

    def draw_tile(self, x: float, y: float, cell_size: float,
                  states, shape: Shape):
        """Draw one tile: background, wire stubs and a terminal for dead ends."""
        self.pdf.set_fill_color(*self.TILE_COLOR)
        self.pdf.set_draw_color(*self.GRID_COLOR)
        self.pdf.set_line_width(0.2)
        self.pdf.rect(x, y, cell_size, cell_size, style='DF')

        cx = x + cell_size / 2
        cy = y + cell_size / 2
        half = cell_size / 2

        self.pdf.set_draw_color(*self.WIRE_COLOR)
        self.pdf.set_line_width(cell_size * 0.12)
        for d in DIRECTIONS:
            if states[d] is EdgeState.PRESENT:
                dx, dy = self.WIRE_VECTORS[d]
                self.pdf.line(cx, cy, cx + dx * half, cy + dy * half)

        if shape is Shape.DEAD_END:
            radius = cell_size * 0.18
            self.pdf.set_fill_color(*self.TERMINAL_COLOR)
            self.pdf.ellipse(cx - radius, cy - radius, radius * 2, radius * 2, style='F')
        else:
            # Round off the joint where the stubs meet
            radius = cell_size * 0.06
            self.pdf.set_fill_color(*self.WIRE_COLOR)
            self.pdf.ellipse(cx - radius, cy - radius, radius * 2, radius * 2, style='F')

    def draw_board(self, board: Board, x_start: float, y_start: float, cell_size: float):
        """Draw every tile of a board with its top-left corner at (x_start, y_start)."""
        for cell in board.torus.cells():
            row, col = board.torus.position(cell)
            self.draw_tile(x_start + col * cell_size, y_start + row * cell_size,
                           cell_size, board.edges[cell], board.shapes[cell])

    def _draw_title(self, title: str):
        self.pdf.set_font('Helvetica', 'B', 20)
        self.pdf.set_text_color(*self.TEXT_COLOR)
        self.pdf.set_xy(0, 15)
        self.pdf.cell(0, 10, title, align='C')

    def _page_size(self) -> Tuple[float, float]:
        # Letter size in mm, landscape for wide boards
        if self.board.cols > self.board.rows:
            return 279, 216
        return 216, 279

    def render(self, output_path: str, solution: Optional[Board] = None):
        """Render the puzzle, and the solved wiring on a second page."""
        page_w, page_h = self._page_size()
        orientation = 'L' if page_w > page_h else 'P'
        self.pdf = FPDF(orientation=orientation, unit='mm', format='letter')
        self.pdf.set_auto_page_break(auto=False)

        margin = 20
        cell_size = self._fit_cell_size(page_w, page_h, margin)
        grid_w = cell_size * self.board.cols
        grid_x = (page_w - grid_w) / 2
        grid_y = margin + 20

        self.pdf.add_page()
        self._draw_title(f"NETWALK {self.board.rows}x{self.board.cols}")
        self.draw_board(self.board, grid_x, grid_y, cell_size)

        if solution is not None:
            self.pdf.add_page()
            self._draw_title("SOLUTION")
            self.draw_board(solution, grid_x, grid_y, cell_size)

        self.pdf.output(output_path)
        logger.info("Saved board to: %s", output_path)
