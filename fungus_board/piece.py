"""Bitmask helpers for game pieces and bites."""
from __future__ import annotations

from typing import List, Tuple

# A piece must fit in a PIECE_MASK_SIZE x PIECE_MASK_SIZE square.  The server
# encodes every mask on this grid, so the value has to match the server's.
PIECE_MASK_SIZE = 5
MAX_PIECE_ROTATIONS = 4


def mask_at(r: int, c: int, *, n: int = PIECE_MASK_SIZE) -> int:
    """Return the single-bit mask for ``(r, c)``; the top left is ``(0, 0)``."""

    return 1 << ((n - 1 - r) * n + (n - 1 - c))


def _section_mask(n: int) -> int:
    return (1 << n) - 1


def _row_mask(row: int, n: int) -> int:
    return _section_mask(n) << (n * (n - 1 - row))


def _column_mask(col: int, n: int) -> int:
    mask = 0
    for row in range(n):
        mask |= mask_at(row, col, n=n)
    return mask


def full_mask(n: int = PIECE_MASK_SIZE) -> int:
    return (1 << (n * n)) - 1


def has(mask: int, r: int, c: int, *, n: int = PIECE_MASK_SIZE) -> bool:
    """Check if ``mask`` has a bit set at ``(r, c)``.

    Coordinates outside the ``n`` x ``n`` grid are never set.
    """

    if r < 0 or c < 0 or r >= n or c >= n:
        return False
    return (mask & mask_at(r, c, n=n)) != 0


def get_size(mask: int, *, n: int = PIECE_MASK_SIZE) -> Tuple[int, int]:
    """Return ``(rows, cols)`` spanned by ``mask`` measured from the top left."""

    rows = 0
    for i in range(n):
        if mask & _row_mask(i, n):
            rows = i + 1

    cols = 0
    for i in range(n):
        if mask & _column_mask(i, n):
            cols = i + 1

    return rows, cols


def bit_count(mask: int, *, n: int = PIECE_MASK_SIZE) -> int:
    return bin(mask & full_mask(n)).count("1")


def bite_cost(mask: int, *, n: int = PIECE_MASK_SIZE) -> int:
    """Cost of a bite.  Large bites get a slight discount."""

    bits = bit_count(mask, n=n)
    return bits - bits // 4


def board_offsets(mask: int, board_cols: int, *, n: int = PIECE_MASK_SIZE) -> List[int]:
    """Project ``mask`` onto a linear run of a board with ``board_cols`` columns.

    Each of the first ``n - 1`` mask rows is followed by ``board_cols - n``
    zero cells so that ``index + offset`` addresses the board directly.  The
    run stops right after the last set bit.

    Boards narrower than ``n`` get no padding, so the rows of the run overlap
    and it no longer addresses the board; :func:`preview_cells` and
    :func:`placed_cells` place every bit by its row and column instead.
    """

    result: List[int] = []
    last_offset = 0
    for r in range(n):
        for c in range(n):
            if has(mask, r, c, n=n):
                result.append(1)
                last_offset = len(result)
            else:
                result.append(0)
        if r < n - 1:
            result.extend(0 for _ in range(n, board_cols))
    del result[last_offset:]
    return result


def _covered_cells(
    index: int,
    mask: int,
    board_cols: int,
    cell_count: int,
    *,
    inclusive: bool,
    n: int,
) -> List[int]:
    if index < 0 or board_cols <= 0:
        return []
    cells: List[int] = []
    for r in range(n):
        for c in range(min(n, board_cols)):
            if not has(mask, r, c, n=n):
                continue
            i = index + r * board_cols + c
            if i >= cell_count:
                continue
            column = i % board_cols
            # prevent line wrap
            if inclusive:
                visible = column >= c
            else:
                visible = column > c
            if visible:
                cells.append(i)
    return cells


def preview_cells(
    index: int,
    mask: int,
    board_cols: int,
    cell_count: int,
    *,
    n: int = PIECE_MASK_SIZE,
) -> List[int]:
    """Board indexes covered by a hover preview of ``mask`` at ``index``."""

    return _covered_cells(index, mask, board_cols, cell_count, inclusive=True, n=n)


def placed_cells(
    index: int,
    mask: int,
    board_cols: int,
    cell_count: int,
    *,
    n: int = PIECE_MASK_SIZE,
) -> List[int]:
    """Board indexes repainted when a local placement is confirmed.

    Uses a strict column comparison, unlike :func:`preview_cells`: a cell is
    kept only when its board column is greater than its column in the mask.
    A placement anchored in the first column therefore paints nothing and
    is left to the following authoritative repaint.
    """

    return _covered_cells(index, mask, board_cols, cell_count, inclusive=False, n=n)


def to_string(mask: int, *, n: int = PIECE_MASK_SIZE) -> str:
    """Binary literal with bits grouped by row, e.g. ``0b11000_11000_...``."""

    rows = []
    for r in range(n):
        rows.append("".join("1" if has(mask, r, c, n=n) else "0" for c in range(n)))
    return "0b" + "_".join(rows)


def to_string_2d(mask: int, *, n: int = PIECE_MASK_SIZE) -> str:
    lines = []
    for r in range(n):
        lines.append(" ".join("1" if has(mask, r, c, n=n) else "0" for c in range(n)))
    return "\n".join(lines)


def shift_up(mask: int, *, n: int = PIECE_MASK_SIZE) -> int:
    """Move ``mask`` as far to the top left as possible."""

    shifted = mask
    for _ in range(n - 1):
        if shifted & _row_mask(0, n):
            break
        shifted = (shifted << n) & full_mask(n)

    for _ in range(n - 1):
        if shifted & _column_mask(0, n):
            break
        temp = 0
        for row in range(n):
            row_bits = _section_mask(n) << (row * n)
            temp |= ((shifted & row_bits) << 1) & row_bits
        shifted = temp

    return shifted


def rotate90(mask: int, *, n: int = PIECE_MASK_SIZE) -> int:
    """Rotate ``mask`` clockwise and shift it to the top left."""

    rotated = 0
    for r in range(n):
        for c in range(n):
            if has(mask, r, c, n=n):
                rotated |= mask_at(c, n - 1 - r, n=n)
    return shift_up(rotated, n=n)


def generate_rotations(mask: int, *, n: int = PIECE_MASK_SIZE) -> List[int]:
    rotations = [shift_up(mask, n=n)]
    for _ in range(1, MAX_PIECE_ROTATIONS):
        rotations.append(rotate90(rotations[-1], n=n))
    return rotations


def _bite_small(n: int) -> int:
    return mask_at(0, 0, n=n)


def _bite_large(n: int) -> int:
    return mask_at(0, 0, n=n) | mask_at(0, 1, n=n) | mask_at(1, 0, n=n) | mask_at(1, 1, n=n)


BITE_NONE = 0
BITE_SMALL = _bite_small(PIECE_MASK_SIZE)
BITE_LARGE = _bite_large(PIECE_MASK_SIZE)


__all__ = [
    "BITE_LARGE",
    "BITE_NONE",
    "BITE_SMALL",
    "MAX_PIECE_ROTATIONS",
    "PIECE_MASK_SIZE",
    "bit_count",
    "bite_cost",
    "board_offsets",
    "full_mask",
    "generate_rotations",
    "get_size",
    "has",
    "mask_at",
    "placed_cells",
    "preview_cells",
    "rotate90",
    "shift_up",
    "to_string",
    "to_string_2d",
]
