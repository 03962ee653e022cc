import random

import numpy as np
import pytest

from falling_blocks.game import Board, ConfigurationError, PieceCatalog, TetrominoType, rotate_cw
from falling_blocks.game.pieces import BASE_SHAPES, MAX_COLORS


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_restore_shape(kind):
    shape = BASE_SHAPES[kind]
    rotated = shape
    for _ in range(4):
        rotated = rotate_cw(rotated)
    assert np.array_equal(rotated, shape)


def test_o_piece_is_rotation_fixed_point():
    shape = BASE_SHAPES[TetrominoType.O]
    assert np.array_equal(rotate_cw(shape), shape)


def test_rotate_cw_is_clockwise():
    # T pointing up becomes T pointing right
    rotated = rotate_cw(BASE_SHAPES[TetrominoType.T])
    assert rotated.astype(int).tolist() == [[1, 0], [1, 1], [1, 0]]


def test_piece_rotation_keeps_origin_and_color(catalog):
    piece = catalog.make_piece(TetrominoType.I, color_id=3, x=2, y=5)
    rotated = piece.rotated()
    assert (rotated.x, rotated.y, rotated.color_id) == (2, 5, 3)
    assert (rotated.height, rotated.width) == (4, 1)
    assert piece.height == 1  # source piece untouched


def test_cells_are_board_coordinates(catalog):
    piece = catalog.make_piece(TetrominoType.S, x=4, y=2)
    assert sorted(piece.cells()) == [(4, 3), (5, 2), (5, 3), (6, 2)]
    assert sorted(piece.cells(1, 1)) == [(5, 4), (6, 3), (6, 4), (7, 3)]


def test_shapes_are_read_only(catalog):
    piece = catalog.make_piece(TetrominoType.L)
    with pytest.raises(ValueError):
        piece.shape[0, 0] = False


@pytest.mark.parametrize("kind,expected_x", [
    (TetrominoType.I, 3),
    (TetrominoType.O, 4),
    (TetrominoType.T, 4),
])
def test_spawn_is_centered_per_shape_width(catalog, kind, expected_x):
    piece = catalog.make_piece(kind).respawned(10)
    assert (piece.x, piece.y) == (expected_x, 0)


def test_random_piece_fixed_spawn_column(catalog):
    piece = catalog.random_piece(random.Random(1), 10, spawn_x=3)
    assert (piece.x, piece.y) == (3, 0)


def test_random_piece_is_deterministic_for_a_seed(catalog):
    rng_a, rng_b = random.Random(5), random.Random(5)
    seq_a = [catalog.random_piece(rng_a, 10) for _ in range(20)]
    seq_b = [catalog.random_piece(rng_b, 10) for _ in range(20)]
    assert all(p.same_as(q) for p, q in zip(seq_a, seq_b))


def test_random_piece_draws_color_independently_of_shape(catalog):
    rng = random.Random(3)
    pieces = [catalog.random_piece(rng, 10) for _ in range(500)]
    colors_for_i = {p.color_id for p in pieces if p.kind == TetrominoType.I}
    assert len(colors_for_i) > 1
    assert {p.kind for p in pieces} == set(TetrominoType)
    assert all(1 <= p.color_id <= len(catalog.palette) for p in pieces)


def test_empty_catalog_is_rejected():
    with pytest.raises(ConfigurationError):
        PieceCatalog(shapes={})


def test_empty_palette_is_rejected():
    with pytest.raises(ConfigurationError):
        PieceCatalog(palette=[])


def test_palette_must_fit_a_board_cell():
    with pytest.raises(ConfigurationError):
        PieceCatalog(palette=[(i, i, i) for i in range(MAX_COLORS + 1)])


def test_largest_palette_merges_into_board():
    catalog = PieceCatalog(palette=[(i, i, i) for i in range(MAX_COLORS)])
    piece = catalog.make_piece(TetrominoType.O, color_id=MAX_COLORS, x=4, y=18)
    board = Board.empty().merge(piece)
    assert board[19, 4] == MAX_COLORS
    assert board.filled_cells() == 4


@pytest.mark.parametrize("rows", [
    [[1, 1], [1]],
    [[0, 0], [0, 0]],
    [[1, 1, 1, 1, 1]],
    [],
])
def test_malformed_shapes_are_rejected(rows):
    with pytest.raises(ConfigurationError):
        PieceCatalog(shapes={TetrominoType.I: rows})
