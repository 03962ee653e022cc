from __future__ import annotations

from typing import Optional, Tuple

from .grid import Board
from .pieces import Piece

# Tried in order after a rotation: in place, left, right, up.
KICK_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (-1, 0), (1, 0), (0, -1))


def collides(board: Board, piece: Piece, dx: int = 0, dy: int = 0) -> bool:
    """Return True if the piece shifted by (dx, dy) hits a wall, the floor or a filled cell.

    Cells above the top row are allowed so pieces can spawn and kick upward
    partially outside the visible board.
    """
    for x, y in piece.cells(dx, dy):
        if x < 0 or x >= board.width or y >= board.height:
            return True
        if y >= 0 and board.is_occupied(x, y):
            return True
    return False


def try_rotate(board: Board, piece: Piece) -> Optional[Tuple[Piece, Tuple[int, int]]]:
    """Rotate clockwise with wall kicks.

    Returns the rotated piece and the kick offset that made it fit, or None
    when every offset collides.
    """
    rotated = piece.rotated()
    for dx, dy in KICK_OFFSETS:
        if not collides(board, rotated, dx, dy):
            return rotated.moved(dx, dy), (dx, dy)
    return None


def drop_distance(board: Board, piece: Piece) -> int:
    """Rows the piece can fall before it is blocked (0 when already resting)."""
    distance = 0
    # The floor always blocks, so descent never exceeds the rows below the origin.
    for _ in range(board.height - min(piece.y, 0) + 1):
        if collides(board, piece, 0, distance + 1):
            break
        distance += 1
    return distance


def landing_y(board: Board, piece: Piece) -> int:
    """Origin row the piece would lock at after a hard drop (ghost position)."""
    return piece.y + drop_distance(board, piece)
