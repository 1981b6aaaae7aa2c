import pytest

from fungus_board.piece import (
    BITE_LARGE,
    BITE_SMALL,
    bit_count,
    bite_cost,
    board_offsets,
    full_mask,
    generate_rotations,
    get_size,
    has,
    mask_at,
    placed_cells,
    preview_cells,
    rotate90,
    shift_up,
    to_string,
    to_string_2d,
)
from tests.utils import DOMINO_H, DOMINO_V


@pytest.mark.parametrize("r, c", [(-1, 0), (0, -1), (5, 0), (0, 5), (7, 7)])
def test_has_outside_grid_is_false(r, c):
    assert has(full_mask(), r, c) is False


def test_has_inside_grid():
    assert has(DOMINO_V, 0, 0)
    assert has(DOMINO_V, 1, 0)
    assert not has(DOMINO_V, 0, 1)


def test_mask_at_top_left_is_most_significant_bit():
    assert mask_at(0, 0) == 1 << 24
    assert mask_at(4, 4) == 1
    assert mask_at(0, 0, n=4) == 1 << 15


def test_get_size():
    assert get_size(DOMINO_V) == (2, 1)
    assert get_size(DOMINO_H) == (1, 2)
    assert get_size(BITE_LARGE) == (2, 2)
    assert get_size(0) == (0, 0)


def test_bite_costs():
    assert bite_cost(BITE_SMALL) == 1
    assert bite_cost(BITE_LARGE) == 3
    assert bit_count(BITE_LARGE) == 4


def test_board_offsets_pads_rows_to_board_width():
    assert board_offsets(DOMINO_V, 6) == [1, 0, 0, 0, 0, 0, 1]
    assert board_offsets(DOMINO_H, 6) == [1, 1]
    assert board_offsets(0, 6) == []


@pytest.mark.parametrize("mask", [DOMINO_V, DOMINO_H, BITE_LARGE, mask_at(4, 4) | mask_at(2, 1), full_mask()])
@pytest.mark.parametrize("cols", [5, 6, 9, 20])
def test_board_offsets_keeps_every_bit(mask, cols):
    offsets = board_offsets(mask, cols)
    last = max(i for i, bit in enumerate(offsets) if bit)
    assert len(offsets) == last + 1
    assert sum(offsets) == bit_count(mask)


def test_board_offsets_small_grid():
    mask = mask_at(0, 0, n=4) | mask_at(1, 0, n=4)
    assert board_offsets(mask, 6, n=4) == [1, 0, 0, 0, 0, 0, 1]


def test_preview_cells_do_not_wrap_at_right_edge():
    # index 5 is the last column of the first row on a 6 wide board
    assert preview_cells(5, DOMINO_H, 6, 36) == [5]
    assert preview_cells(4, DOMINO_H, 6, 36) == [4, 5]


def test_preview_and_placed_cells_differ_on_first_column():
    assert preview_cells(0, DOMINO_H, 6, 36) == [0, 1]
    # strict comparison: nothing is painted for an anchor in the first column
    assert placed_cells(0, DOMINO_H, 6, 36) == []
    assert placed_cells(1, DOMINO_H, 6, 36) == [1, 2]
    assert placed_cells(5, DOMINO_H, 6, 36) == [5]
    assert placed_cells(7, DOMINO_V, 6, 36) == [7, 13]


def test_covered_cells_clip_to_board():
    assert preview_cells(32, DOMINO_V, 6, 36) == [32]
    assert preview_cells(-1, DOMINO_V, 6, 36) == []


@pytest.mark.parametrize("cols", range(3, 9))
def test_large_bite_loses_cells_before_right_edge(cols):
    cell_count = cols * 6
    edge = preview_cells(cols - 1, BITE_LARGE, cols, cell_count)
    interior = preview_cells(cols + 1, BITE_LARGE, cols, cell_count)

    assert edge == [cols - 1, 2 * cols - 1]
    assert len(interior) == 4
    assert len(edge) < len(interior)


def test_boards_narrower_than_mask():
    # no padding between rows, so the run does not address the board
    assert board_offsets(BITE_LARGE, 3) == [1, 1, 0, 0, 0, 1, 1]
    assert preview_cells(0, BITE_LARGE, 3, 9) == [0, 1, 3, 4]
    assert placed_cells(1, BITE_LARGE, 3, 9) == [1, 2, 4, 5]
    # mask columns past the board edge are never shown
    assert preview_cells(0, mask_at(0, 4), 3, 9) == []


def test_rotations():
    assert rotate90(DOMINO_V) == DOMINO_H
    assert rotate90(DOMINO_H) == DOMINO_V
    assert generate_rotations(DOMINO_V) == [DOMINO_V, DOMINO_H, DOMINO_V, DOMINO_H]


def test_shift_up_moves_to_top_left():
    assert shift_up(mask_at(2, 3)) == mask_at(0, 0)
    assert shift_up(mask_at(3, 1) | mask_at(4, 1)) == DOMINO_V


def test_to_string():
    assert to_string(BITE_SMALL) == "0b10000_00000_00000_00000_00000"
    assert to_string_2d(BITE_LARGE).splitlines()[:2] == ["1 1 0 0 0", "1 1 0 0 0"]
