"""Scoring models: substitution matrices with gap rows, and the affine gap-open layer on top of them."""
from typing import Union, Iterable, Final
from warnings import warn

import numpy as np

from alignkit.core.alphabet import Alphabet, AlphabetError
from alignkit.errors import MatrixNotSquareError, ScoringWarning


# Constants ------------------------------------------------------------------------------------------------------------
_BLOSUM62_ORDER: Final = b'ARNDCQEGHILKMFPSTWYV'
_BLOSUM62: Final = np.array([
    [4, -1, -2, -2, 0, -1, -1, 0, -2, -1, -1, -1, -1, -2, -1, 1, 0, -3, -2, 0],
    [-1, 5, 0, -2, -3, 1, 0, -2, 0, -3, -2, 2, -1, -3, -2, -1, -1, -3, -2, -3],
    [-2, 0, 6, 1, -3, 0, 0, 0, 1, -3, -3, 0, -2, -3, -2, 1, 0, -4, -2, -3],
    [-2, -2, 1, 6, -3, 0, 2, -1, -1, -3, -4, -1, -3, -3, -1, 0, -1, -4, -3, -3],
    [0, -3, -3, -3, 9, -3, -4, -3, -3, -1, -1, -3, -1, -2, -3, -1, -1, -2, -2, -1],
    [-1, 1, 0, 0, -3, 5, 2, -2, 0, -3, -2, 1, 0, -3, -1, 0, -1, -2, -1, -2],
    [-1, 0, 0, 2, -4, 2, 5, -2, 0, -3, -3, 1, -2, -3, -1, 0, -1, -3, -2, -2],
    [0, -2, 0, -1, -3, -2, -2, 6, -2, -4, -4, -2, -3, -3, -2, 0, -2, -2, -3, -3],
    [-2, 0, 1, -1, -3, 0, 0, -2, 8, -3, -3, -1, -2, -1, -2, -1, -2, -2, 2, -3],
    [-1, -3, -3, -3, -1, -3, -3, -4, -3, 4, 2, -3, 1, 0, -3, -2, -1, -3, -1, 3],
    [-1, -2, -3, -4, -1, -2, -3, -4, -3, 2, 4, -2, 2, 0, -3, -2, -1, -2, -1, 1],
    [-1, 2, 0, -1, -3, 1, 1, -2, -1, -3, -2, 5, -1, -3, -1, 0, -1, -3, -2, -2],
    [-1, -1, -2, -3, -1, 0, -2, -3, -2, 1, 2, -1, 5, 0, -2, -1, -1, -1, -1, 1],
    [-2, -3, -3, -3, -2, -3, -3, -3, -1, 0, 0, -3, 0, 6, -4, -2, -2, 1, 3, -1],
    [-1, -2, -2, -1, -3, -1, -1, -2, -2, -3, -3, -1, -2, -4, 7, -1, -1, -4, -3, -2],
    [1, -1, 1, 0, -1, 0, 0, 0, -1, -2, -2, 0, -1, -2, -1, 4, 1, -3, -2, -2],
    [0, -1, 0, -1, -1, -1, -1, -2, -2, -1, -1, -1, -1, -2, -1, 1, 5, -2, -2, 0],
    [-3, -3, -4, -4, -2, -2, -3, -2, -2, -3, -2, -3, -1, 1, -4, -3, -2, 11, 2, -3],
    [-2, -2, -2, -3, -2, -1, -2, -3, 2, -1, -1, -2, -1, 3, -3, -2, -2, 2, 7, -1],
    [0, -3, -3, -3, -1, -2, -2, -3, -3, 3, 1, -2, 1, -1, -2, -2, 0, -3, -1, 4],
], dtype=np.int64)


# Classes --------------------------------------------------------------------------------------------------------------
class Linear:
    """
    A substitution matrix whose gap row and column hold per-residue gap penalties.

    Rows and columns are indexed by alphabet codes. ``matrix[i][gap]`` is the cost of
    reference letter ``i`` against a gap, ``matrix[gap][j]`` that of query letter ``j``
    against a gap; ``matrix[gap][gap]`` is unused. Rows are stored as given and only
    checked for squareness when the matrix is used, so that a ragged matrix is reported
    as an alignment error rather than at construction.

    Examples:
        >>> m = Linear.build(Alphabet.DNA, match=1, mismatch=-1, gap=-2)
        >>> len(m)
        5
    """
    _DTYPE = np.int64
    __slots__ = ('_rows', '_array')
    def __init__(self, rows: Union['Linear', np.ndarray, Iterable[Iterable[int]]]):
        if isinstance(rows, Linear): rows = rows._rows
        self._rows = tuple(tuple(int(v) for v in row) for row in rows)
        self._array = None

    def __len__(self): return len(self._rows)
    def __getitem__(self, item): return self._rows[item]
    def __iter__(self): return iter(self._rows)
    def __repr__(self): return f"Linear({len(self._rows)}x{len(self._rows[0]) if self._rows else 0})"

    def __eq__(self, other):
        if not isinstance(other, Linear): return False
        return self._rows == other._rows

    def __hash__(self): return hash(self._rows)

    @property
    def is_square(self) -> bool:
        n = len(self._rows)
        return n > 0 and all(len(row) == n for row in self._rows)

    def to_array(self) -> np.ndarray:
        """
        Returns the matrix as a read-only, C-contiguous int64 array.

        Raises:
            MatrixNotSquareError: If any row's length differs from the number of rows.
        """
        if self._array is None:
            if not self.is_square:
                raise MatrixNotSquareError(f'Scoring matrix is not square: {len(self._rows)} rows of lengths '
                                           f'{sorted({len(row) for row in self._rows})}')
            array = np.ascontiguousarray(self._rows, dtype=self._DTYPE)
            array.flags.writeable = False
            self._array = array
        return self._array

    @classmethod
    def build(cls, alphabet: Alphabet, match: int = 1, mismatch: int = -1, gap: int = -1) -> 'Linear':
        """Builds a match/mismatch matrix for an alphabet with a uniform per-residue gap penalty."""
        n, g = alphabet.n_codes, alphabet.gap_code
        m = np.full((n, n), mismatch, dtype=cls._DTYPE)
        np.fill_diagonal(m, match)
        m[g, :] = gap
        m[:, g] = gap
        m[g, g] = 0
        return cls(m)

    @classmethod
    def blosum62(cls, alphabet: Alphabet = None, gap: int = -4) -> 'Linear':
        """
        Returns BLOSUM62 laid out on the codes of a protein alphabet.

        Args:
            alphabet: A protein alphabet (defaults to ``Alphabet.AMINO``).
            gap: The per-residue gap penalty.

        Raises:
            AlphabetError: If the alphabet has a letter BLOSUM62 does not score.
        """
        if alphabet is None: alphabet = Alphabet.AMINO
        n, g = alphabet.n_codes, alphabet.gap_code
        index = np.full(n, -1, dtype=np.intp)
        for code in range(n):
            if code == g: continue
            pos = _BLOSUM62_ORDER.find(alphabet.letter(code).upper())
            if pos < 0: raise AlphabetError(f'BLOSUM62 has no score for letter {alphabet.letter(code)!r}')
            index[code] = pos
        letters = index >= 0
        m = np.full((n, n), gap, dtype=cls._DTYPE)
        m[np.ix_(letters, letters)] = _BLOSUM62[np.ix_(index[letters], index[letters])]
        m[g, g] = 0
        return cls(m)


class Affine:
    """
    A linear matrix plus a gap-open penalty charged once at the start of every gap run.

    The extend cost of each gapped residue is the matrix's own gap row or column entry.
    The gap-open penalty always lowers the score; a positive value is taken as the size
    of the penalty and negated with a ``ScoringWarning``.
    """
    __slots__ = ('_matrix', '_gap_open')
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]], gap_open: int):
        self._matrix = matrix if isinstance(matrix, Linear) else Linear(matrix)
        gap_open = int(gap_open)
        if gap_open > 0:
            warn(f'Positive gap open {gap_open} is applied as the penalty {-gap_open}', ScoringWarning)
            gap_open = -gap_open
        self._gap_open = gap_open

    @property
    def matrix(self) -> Linear: return self._matrix
    @property
    def gap_open(self) -> int: return self._gap_open

    def __repr__(self): return f"Affine({self._matrix!r}, gap_open={self._gap_open})"
