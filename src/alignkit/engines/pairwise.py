"""
Dynamic programming table engine for pairwise alignment.

Tables are ``(len(reference) + 1) x (len(query) + 1)`` int64 arrays indexed by the number of
reference and query letters consumed. Linear gap models fill a single table; affine models fill
three stacked tables ``(M, Ix, Iy)`` of shape ``(3, rows, cols)``, where ``M`` ends in an aligned
pair, ``Ix`` in a gap in the query (a move *up*, consuming reference) and ``Iy`` in a gap in the
reference (a move *left*, consuming query).

Ties between equally scoring moves are always broken diagonal > up > left, and between affine
states M > Ix > Iy.
"""
from enum import IntEnum
from typing import Callable, Optional, Final, Union

import numpy as np

from alignkit.containers.seq import Seq
from alignkit.errors import AlignmentCancelledError
from alignkit.utils.resources import jit


# Constants ------------------------------------------------------------------------------------------------------------
class AlignmentMode(IntEnum):
    """Alignment strategy controlling boundary scores, zero clamping and where traceback starts."""
    LOCAL = 0
    GLOBAL = 1
    FITTED = 2


# Traceback moves and affine table layers, each in tie-break order
DIAG, UP, LEFT = 0, 1, 2
M, IX, IY = 0, 1, 2
_LOCAL, _GLOBAL, _FITTED = int(AlignmentMode.LOCAL), int(AlignmentMode.GLOBAL), int(AlignmentMode.FITTED)
NEG_INF: Final = int(np.iinfo(np.int64).min)
_DTYPE: Final = np.int64
TraceCallback = Callable[[int, np.ndarray], None]


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True, inline='always')
def _add(a, b):
    """Adds a score to a cell value, leaving unreachable cells unreachable."""
    if a == NEG_INF: return NEG_INF
    return a + b


@jit(nopython=True, cache=True, nogil=True, inline='always')
def _max3(a, b, c):
    best = a
    if b > best: best = b
    if c > best: best = c
    return best


@jit(nopython=True, cache=True, nogil=True)
def _init_linear(table, ref, qry, matrix, gap, mode):
    if mode != _LOCAL:
        for j in range(1, table.shape[1]):
            table[0, j] = table[0, j - 1] + matrix[gap, qry[j - 1]]
    if mode == _GLOBAL:
        for i in range(1, table.shape[0]):
            table[i, 0] = table[i - 1, 0] + matrix[ref[i - 1], gap]


@jit(nopython=True, cache=True, nogil=True)
def _fill_linear_row(table, i, ref, qry, matrix, gap, local):
    a = ref[i - 1]
    up_cost = matrix[a, gap]
    for j in range(1, table.shape[1]):
        b = qry[j - 1]
        best = table[i - 1, j - 1] + matrix[a, b]
        up = table[i - 1, j] + up_cost
        if up > best: best = up
        left = table[i, j - 1] + matrix[gap, b]
        if left > best: best = left
        if local and best < 0: best = 0
        table[i, j] = best


@jit(nopython=True, cache=True, nogil=True)
def _init_affine(tables, ref, qry, matrix, gap, gap_open, mode):
    rows, cols = tables.shape[1], tables.shape[2]
    tables[0, 0, 0] = 0
    if mode == _LOCAL:
        for i in range(rows): tables[0, i, 0] = 0
        for j in range(cols): tables[0, 0, j] = 0
        return
    if cols > 1:
        tables[2, 0, 1] = gap_open + matrix[gap, qry[0]]
        for j in range(2, cols):
            tables[2, 0, j] = tables[2, 0, j - 1] + matrix[gap, qry[j - 1]]
    if mode == _FITTED:
        for i in range(rows): tables[0, i, 0] = 0
    elif rows > 1:
        tables[1, 1, 0] = gap_open + matrix[ref[0], gap]
        for i in range(2, rows):
            tables[1, i, 0] = tables[1, i - 1, 0] + matrix[ref[i - 1], gap]


@jit(nopython=True, cache=True, nogil=True)
def _fill_affine_row(tables, i, ref, qry, matrix, gap, gap_open, local):
    a = ref[i - 1]
    up_cost = matrix[a, gap]
    for j in range(1, tables.shape[2]):
        b = qry[j - 1]
        best = _max3(tables[0, i - 1, j - 1], tables[1, i - 1, j - 1], tables[2, i - 1, j - 1])
        if local and best < 0: best = 0
        tables[0, i, j] = _add(best, matrix[a, b])
        left_cost = matrix[gap, b]
        tables[1, i, j] = max(_add(_add(tables[0, i - 1, j], gap_open), up_cost), _add(tables[1, i - 1, j], up_cost))
        tables[2, i, j] = max(_add(_add(tables[0, i, j - 1], gap_open), left_cost), _add(tables[2, i, j - 1], left_cost))


# Functions ------------------------------------------------------------------------------------------------------------
def fill(ref: np.ndarray, qry: np.ndarray, matrix: np.ndarray, gap: int, mode: AlignmentMode,
         gap_open: Optional[int] = None, trace: Optional[TraceCallback] = None, cancel=None) -> np.ndarray:
    """
    Allocates and fills the DP table(s) for two coded sequences.

    Args:
        ref: Reference codes (int64).
        qry: Query codes (int64).
        matrix: Square int64 scoring matrix.
        gap: The gap code, i.e. the row and column holding gap penalties.
        mode: The alignment mode.
        gap_open: Gap-open penalty. ``None`` selects the linear gap model.
        trace: Called as ``trace(i, row)`` after each row ``i`` is filled, with a copy of that row
            (shape ``(cols,)`` for linear, ``(3, cols)`` for affine tables).
        cancel: An object with ``is_set()`` (e.g. ``threading.Event``), checked before each row.

    Returns:
        The ``(rows, cols)`` linear table, or the ``(3, rows, cols)`` affine tables.

    Raises:
        AlignmentCancelledError: If ``cancel`` is set while rows remain to be filled.
    """
    mode = AlignmentMode(mode)
    local = mode == AlignmentMode.LOCAL
    shape = (len(ref) + 1, len(qry) + 1)
    if gap_open is None:
        tables = np.zeros(shape, dtype=_DTYPE)
        _init_linear(tables, ref, qry, matrix, gap, int(mode))
        row = _fill_linear_row
        args = (ref, qry, matrix, gap, local)
    else:
        tables = np.full((3,) + shape, NEG_INF, dtype=_DTYPE)
        _init_affine(tables, ref, qry, matrix, gap, gap_open, int(mode))
        row = _fill_affine_row
        args = (ref, qry, matrix, gap, gap_open, local)

    for i in range(1, shape[0]):
        if cancel is not None and cancel.is_set():
            raise AlignmentCancelledError(f'Alignment cancelled before row {i} of {shape[0] - 1}')
        row(tables, i, *args)
        if trace is not None: trace(i, tables[..., i, :].copy())
    return tables


def cell_scores(tables: np.ndarray, mode: AlignmentMode) -> np.ndarray:
    """Returns the best score of every cell: the table itself, or the state maximum of affine tables."""
    if tables.ndim == 2: return tables
    cells = tables.max(axis=0)
    return np.maximum(cells, 0) if mode == AlignmentMode.LOCAL else cells


def find_start(tables: np.ndarray, mode: AlignmentMode) -> tuple[int, int, int, int]:
    """
    Finds the cell traceback starts from.

    Global alignments start at the bottom-right cell. Local alignments start at the maximum cell,
    taking the last one in row-major order on ties. Fitted alignments start at the maximum of the
    last column, taking the largest reference offset on ties.

    Returns:
        ``(i, j, state, score)``, where ``state`` is the best affine layer at the cell (M > Ix > Iy
        on ties) or -1 for a linear table.
    """
    cells = cell_scores(tables, mode)
    rows, cols = cells.shape
    if mode == AlignmentMode.GLOBAL:
        i, j = rows - 1, cols - 1
    elif mode == AlignmentMode.LOCAL:
        flat = cells.ravel()
        i, j = divmod(flat.size - 1 - int(np.argmax(flat[::-1])), cols)
    else:
        last = cells[:, cols - 1]
        i, j = rows - 1 - int(np.argmax(last[::-1])), cols - 1
    state = -1 if tables.ndim == 2 else int(np.argmax(tables[:, i, j]))
    return i, j, state, int(cells[i, j])


def format_table(reference: Union[str, bytes, Seq], query: Union[str, bytes, Seq], tables: np.ndarray,
                 mode: AlignmentMode = AlignmentMode.GLOBAL) -> str:
    """
    Renders a filled table as text, with the query letters across the top and the reference
    letters down the side. Affine tables are shown as their per-cell best scores and
    unreachable cells as ``-inf``.
    """
    reference, query = (x.decode('ascii') if isinstance(x, bytes) else str(x) for x in (reference, query))
    cells = cell_scores(tables, mode)
    text = [['-inf' if v == NEG_INF else str(v) for v in row] for row in cells.tolist()]
    width = max(max(len(v) for row in text for v in row), 1)
    lines = [' '.join([' ', ' '.rjust(width)] + [c.rjust(width) for c in query])]
    for i, row in enumerate(text):
        label = reference[i - 1] if i else ' '
        lines.append(' '.join([label] + [v.rjust(width) for v in row]))
    return '\n'.join(lines)
