from __future__ import annotations

from typing import Iterable, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError
from .pieces import Piece

EMPTY = 0


class Board:
    """Immutable ``height x width`` grid of cells.

    A cell holds 0 when empty or the positive color id of the piece that
    filled it. Row 0 is the top. Every operation that changes cells returns a
    new board; the underlying array is read-only.
    """

    __slots__ = ("grid",)

    def __init__(self, grid: np.ndarray) -> None:
        if grid.ndim != 2 or grid.shape[0] < 1 or grid.shape[1] < 1:
            raise ConfigurationError(f"board grid must be a non-empty 2-D array, got shape {grid.shape}")
        cells = np.array(grid, dtype=np.int8, copy=True)
        cells.setflags(write=False)
        self.grid = cells

    @classmethod
    def empty(cls, height: int = 20, width: int = 10) -> "Board":
        if height < 1 or width < 1:
            raise ConfigurationError(f"board needs positive dimensions, got {height}x{width}")
        return cls(np.zeros((height, width), dtype=np.int8))

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        widths = {len(row) for row in rows}
        if len(widths) != 1:
            raise ConfigurationError("board rows must all have the same width")
        return cls(np.array(rows, dtype=np.int8))

    @property
    def height(self) -> int:
        return int(self.grid.shape[0])

    @property
    def width(self) -> int:
        return int(self.grid.shape[1])

    def __getitem__(self, index):
        return self.grid[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.grid, other.grid)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Board({self.height}x{self.width}, filled={self.filled_cells()})"

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, x: int, y: int) -> bool:
        return self.grid[y, x] != EMPTY

    def is_row_full(self, row: int) -> bool:
        return bool(np.all(self.grid[row, :] != EMPTY))

    def full_rows(self) -> Tuple[int, ...]:
        return tuple(int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0])

    def top_zone_occupied(self, rows: int = 2) -> bool:
        return bool(np.any(self.grid[:rows, :] != EMPTY))

    def filled_cells(self) -> int:
        return int(np.count_nonzero(self.grid))

    def set_cells(self, cells: Iterable[Tuple[int, int]], value: int) -> "Board":
        grid = self.grid.copy()
        for x, y in cells:
            grid[y, x] = value
        return Board(grid)

    def merge(self, piece: Piece) -> "Board":
        """Write the piece's color into the board; cells above row 0 are dropped."""
        return self.set_cells(((x, y) for x, y in piece.cells() if y >= 0), piece.color_id)

    def clear_full_rows(self) -> Tuple["Board", int]:
        """Remove full rows and pad with empty rows on top.

        Non-full rows keep their relative order, so the result does not
        depend on whether the full rows were adjacent.
        """
        keep = ~np.all(self.grid != EMPTY, axis=1)
        cleared = int(self.height - np.count_nonzero(keep))
        if cleared == 0:
            return self, 0
        padding = np.zeros((cleared, self.width), dtype=np.int8)
        return Board(np.vstack((padding, self.grid[keep]))), cleared


def merge(board: Board, piece: Piece) -> Board:
    return board.merge(piece)


def clear_full_rows(board: Board) -> Tuple[Board, int]:
    return board.clear_full_rows()
