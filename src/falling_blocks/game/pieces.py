from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .errors import ConfigurationError


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
Color = Tuple[int, int, int]

MAX_SHAPE_SIDE = 4
# Board cells are int8 color ids
MAX_COLORS = int(np.iinfo(np.int8).max)


def _frozen(shape: Shape) -> Shape:
    out = np.array(shape, dtype=np.bool_, copy=True)
    out.setflags(write=False)
    return out


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise (transpose, then reverse rows)."""
    return _frozen(np.rot90(shape, 1, axes=(1, 0)))


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _frozen([[1, 1, 1, 1]]),
    TetrominoType.O: _frozen([[1, 1], [1, 1]]),
    TetrominoType.T: _frozen([[0, 1, 0], [1, 1, 1]]),
    TetrominoType.S: _frozen([[0, 1, 1], [1, 1, 0]]),
    TetrominoType.Z: _frozen([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.J: _frozen([[1, 0, 0], [1, 1, 1]]),
    TetrominoType.L: _frozen([[0, 0, 1], [1, 1, 1]]),
}

# Color ids are 1-based indices into this palette; 0 is reserved for empty cells.
PALETTE: Tuple[Color, ...] = (
    (255, 0, 0),
    (0, 255, 0),
    (0, 0, 255),
    (255, 255, 0),
    (255, 140, 0),
    (128, 0, 128),
    (0, 255, 255),
)


def spawn_x_for(board_width: int, shape_width: int) -> int:
    return board_width // 2 - shape_width // 2


@dataclass(frozen=True, eq=False)
class Piece:
    """A shape with a color and the board position of its bounding box's top-left."""

    kind: TetrominoType
    shape: Shape
    color_id: int
    x: int = 0
    y: int = 0

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def cells(self, dx: int = 0, dy: int = 0) -> List[Tuple[int, int]]:
        """Board coordinates (x, y) of every occupied cell, shifted by (dx, dy)."""
        cells: List[Tuple[int, int]] = []
        for cy in range(self.height):
            for cx in range(self.width):
                if self.shape[cy, cx]:
                    cells.append((self.x + cx + dx, self.y + cy + dy))
        return cells

    def moved(self, dx: int, dy: int) -> "Piece":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def at(self, x: int, y: int) -> "Piece":
        return replace(self, x=x, y=y)

    def rotated(self) -> "Piece":
        return replace(self, shape=rotate_cw(self.shape))

    def respawned(self, board_width: int, spawn_y: int = 0) -> "Piece":
        return self.at(spawn_x_for(board_width, self.width), spawn_y)

    def same_as(self, other: Optional["Piece"]) -> bool:
        if other is None:
            return False
        return (
            self.kind == other.kind
            and self.color_id == other.color_id
            and self.x == other.x
            and self.y == other.y
            and np.array_equal(self.shape, other.shape)
        )


class PieceCatalog:
    """Static shape and color definitions, and random piece selection."""

    def __init__(
        self,
        shapes: Optional[Mapping[TetrominoType, Sequence[Sequence[int]]]] = None,
        palette: Optional[Sequence[Color]] = None,
    ) -> None:
        source = BASE_SHAPES if shapes is None else shapes
        if not source:
            raise ConfigurationError("piece catalog needs at least one shape")
        self.shapes: Dict[TetrominoType, Shape] = {}
        for kind, rows in source.items():
            self.shapes[TetrominoType(kind)] = self._validated(kind, rows)
        self.palette: Tuple[Color, ...] = tuple(PALETTE if palette is None else palette)
        if not self.palette:
            raise ConfigurationError("piece catalog needs at least one color")
        if len(self.palette) > MAX_COLORS:
            raise ConfigurationError(f"palette has {len(self.palette)} colors, at most {MAX_COLORS} fit a board cell")
        self.kinds: Tuple[TetrominoType, ...] = tuple(self.shapes)

    @staticmethod
    def _validated(kind: TetrominoType, rows: Sequence[Sequence[int]]) -> Shape:
        widths = {len(row) for row in rows}
        if len(rows) == 0 or len(widths) != 1 or 0 in widths:
            raise ConfigurationError(f"shape {kind!r} is not a non-empty rectangle")
        shape = _frozen(rows)
        if max(shape.shape) > MAX_SHAPE_SIDE:
            raise ConfigurationError(f"shape {kind!r} exceeds {MAX_SHAPE_SIDE} cells per side")
        if not shape.any():
            raise ConfigurationError(f"shape {kind!r} has no occupied cell")
        return shape

    def color(self, color_id: int) -> Color:
        return self.palette[color_id - 1]

    def make_piece(self, kind: TetrominoType, color_id: int = 1, x: int = 0, y: int = 0) -> Piece:
        return Piece(kind=kind, shape=self.shapes[kind], color_id=color_id, x=x, y=y)

    def random_piece(
        self,
        rng: random.Random,
        board_width: int,
        spawn_x: Optional[int] = None,
        spawn_y: int = 0,
    ) -> Piece:
        # Shape and color are drawn independently.
        kind = rng.choice(self.kinds)
        color_id = rng.randrange(len(self.palette)) + 1
        piece = self.make_piece(kind, color_id)
        if spawn_x is None:
            return piece.respawned(board_width, spawn_y)
        return piece.at(spawn_x, spawn_y)
