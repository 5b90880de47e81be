"""
Traceback over filled DP tables, coalescing runs of identical moves into scored segments.
"""
from typing import Optional

import numpy as np

from alignkit.containers.feature import Feature, FeaturePair
from alignkit.engines.pairwise import AlignmentMode, DIAG, UP, LEFT, M, IX, IY, NEG_INF, find_start, _max3
from alignkit.errors import TracebackError
from alignkit.utils.protocols import AlphabetSlicer
from alignkit.utils.resources import jit


# Kernels --------------------------------------------------------------------------------------------------------------
@jit(nopython=True, cache=True, nogil=True, inline='always')
def _emit(out, n, i, end_i, j, end_j, score):
    out[n, 0] = i
    out[n, 1] = end_i
    out[n, 2] = j
    out[n, 3] = end_j
    out[n, 4] = score
    return n + 1


@jit(nopython=True, cache=True, nogil=True)
def _linear_traceback(table, ref, qry, matrix, gap, i, j, local):
    """
    Walks a linear table back from ``(i, j)``.

    Returns the segments found, latest first, as rows of ``(a_start, a_end, b_start, b_end, score)``,
    the cell the walk stopped at, and False if a cell had no predecessor.
    """
    out = np.empty((i + j + 1, 5), dtype=np.int64)
    n = 0
    move = -1
    end_i, end_j, score = i, j, 0
    ok = True
    while i > 0 and j > 0:
        v = table[i, j]
        if local and v == 0: break
        a = ref[i - 1]
        b = qry[j - 1]
        step, pi, pj = -1, i, j
        if table[i - 1, j - 1] + matrix[a, b] == v:
            step, pi, pj = DIAG, i - 1, j - 1
        elif table[i - 1, j] + matrix[a, gap] == v:
            step, pi, pj = UP, i - 1, j
        elif table[i, j - 1] + matrix[gap, b] == v:
            step, pi, pj = LEFT, i, j - 1
        else:
            ok = False
            break
        if step != move:
            if move != -1: n = _emit(out, n, i, end_i, j, end_j, score)
            move = step
            end_i, end_j, score = i, j, 0
        score += v - table[pi, pj]
        i, j = pi, pj
    if move != -1: n = _emit(out, n, i, end_i, j, end_j, score)
    return out[:n], i, j, ok


@jit(nopython=True, cache=True, nogil=True)
def _affine_traceback(tables, ref, qry, matrix, gap, gap_open, i, j, state, local):
    """
    Walks affine tables back from layer ``state`` of ``(i, j)``.

    A cell's move is given by its layer: M moves diagonally, Ix up and Iy left. Returns the
    segments latest first, the cell and layer the walk stopped at, and False if a cell had no
    predecessor.
    """
    out = np.empty((i + j + 1, 5), dtype=np.int64)
    n = 0
    move = -1
    end_i, end_j, score = i, j, 0
    ok = True
    floor = False
    while i > 0 and j > 0:
        v = tables[state, i, j]
        a = ref[i - 1]
        b = qry[j - 1]
        pi, pj = i, j
        pv = NEG_INF
        ps = -1
        if state == M:
            pi, pj = i - 1, j - 1
            best = _max3(tables[0, pi, pj], tables[1, pi, pj], tables[2, pi, pj])
            if local and best <= 0:
                floor = True
                ps = M
                pv = 0
            else:
                target = v - matrix[a, b]
                for s in range(3):
                    if tables[s, pi, pj] != NEG_INF and tables[s, pi, pj] == target:
                        ps = s
                        pv = target
                        break
        elif state == IX:
            pi, pj = i - 1, j
            cost = matrix[a, gap]
            if tables[0, pi, pj] != NEG_INF and tables[0, pi, pj] + gap_open + cost == v:
                ps = M
            elif tables[1, pi, pj] != NEG_INF and tables[1, pi, pj] + cost == v:
                ps = IX
            if ps != -1: pv = tables[ps, pi, pj]
        else:
            pi, pj = i, j - 1
            cost = matrix[gap, b]
            if tables[0, pi, pj] != NEG_INF and tables[0, pi, pj] + gap_open + cost == v:
                ps = M
            elif tables[2, pi, pj] != NEG_INF and tables[2, pi, pj] + cost == v:
                ps = IY
            if ps != -1: pv = tables[ps, pi, pj]
        if ps == -1:
            ok = False
            break
        if state != move:
            if move != -1: n = _emit(out, n, i, end_i, j, end_j, score)
            move = state
            end_i, end_j, score = i, j, 0
        score += v - pv
        i, j, state = pi, pj, ps
        if floor: break
    if move != -1: n = _emit(out, n, i, end_i, j, end_j, score)
    return out[:n], i, j, state, ok


# Functions ------------------------------------------------------------------------------------------------------------
def traceback(tables: np.ndarray, ref: np.ndarray, qry: np.ndarray, matrix: np.ndarray, gap: int,
              mode: AlignmentMode, gap_open: Optional[int] = None,
              reference: AlphabetSlicer = None, query: AlphabetSlicer = None) -> list[FeaturePair]:
    """
    Recovers the optimal alignment from filled tables as a list of feature pairs in ascending
    coordinate order.

    Runs of identical moves form one segment whose score is the difference between the table
    values at its ends, so the segment scores sum to the score of the start cell. Global
    alignments that stop on a table edge add one segment for the unconsumed prefix of either
    sequence; fitted alignments add one for an unconsumed query prefix only, and local
    alignments report no flanks.

    Args:
        tables: Tables filled by :func:`alignkit.engines.pairwise.fill`.
        ref: Reference codes.
        qry: Query codes.
        matrix: The scoring matrix used for filling.
        gap: The gap code.
        mode: The alignment mode used for filling.
        gap_open: The gap-open penalty for affine tables.
        reference: Sequence the reference features are located on.
        query: Sequence the query features are located on.

    Raises:
        TracebackError: If a cell on the path cannot be reached by any move.
    """
    mode = AlignmentMode(mode)
    local = mode == AlignmentMode.LOCAL
    i, j, state, best = find_start(tables, mode)
    if local and best <= 0: return []
    if tables.ndim == 2:
        segments, i, j, ok = _linear_traceback(tables, ref, qry, matrix, gap, i, j, local)
        value = tables[i, j]
    else:
        segments, i, j, state, ok = _affine_traceback(tables, ref, qry, matrix, gap, gap_open, i, j, state, local)
        value = tables[state, i, j]
    if not ok:
        raise TracebackError(f'No move reaches cell ({i}, {j}) of a {tables.shape} table')

    rows = segments.tolist()
    if mode == AlignmentMode.GLOBAL and (i > 0 or j > 0):
        rows.append([0, i, 0, j, int(value)])
    elif mode == AlignmentMode.FITTED and j > 0:
        rows.append([i, i, 0, j, int(value)])
    return [FeaturePair(Feature(a0, a1, reference), Feature(b0, b1, query), s) for a0, a1, b0, b1, s in reversed(rows)]
