from typing import Iterable, Sequence, Tuple

import numpy as np

from falling_blocks.game import Board


def board_with(cells: Iterable[Tuple[int, int]], height: int = 20, width: int = 10, value: int = 1) -> Board:
    """Board with the given (x, y) cells filled."""
    return Board.empty(height, width).set_cells(cells, value)


def board_with_rows(full_rows: Sequence[int], height: int = 20, width: int = 10,
                    gaps: Sequence[int] = ()) -> Board:
    """Board whose listed rows are filled except for the ``gaps`` columns."""
    grid = np.zeros((height, width), dtype=np.int8)
    for row in full_rows:
        grid[row, :] = 1
        for col in gaps:
            grid[row, col] = 0
    return Board(grid)
