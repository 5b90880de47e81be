"""
Pairwise aligners: Needleman-Wunsch (global), Smith-Waterman (local) and fitted (semi-global)
alignment, each with a linear or an affine gap model.

Examples:
    >>> dna = Alphabet.DNA
    >>> aligner = NW(Linear.build(dna, match=2, mismatch=-1, gap=-2))
    >>> pairs = aligner.align(dna.seq_from('ACGTT'), dna.seq_from('ACTT'))
    >>> ' '.join(map(str, pairs))
    '[0,2)/[0,2)=4 [2,3)/-=-2 [3,5)/[2,4)=4'
"""
from concurrent.futures import Executor
from typing import Union, Iterable, Optional

import numpy as np

from alignkit.containers.feature import FeaturePair
from alignkit.containers.seq import kind_of, letters_of
from alignkit.core.alphabet import Alphabet
from alignkit.engines.pairwise import AlignmentMode, TraceCallback, fill, find_start
from alignkit.engines.scoring import Linear, Affine
from alignkit.engines.traceback import traceback
from alignkit.errors import (NoAlphabetError, MismatchedAlphabetsError, NotGappedAlphabetError, MismatchedTypesError,
                             TypeNotHandledError, MatrixWrongSizeError, IllegalLetterError)
from alignkit.utils.protocols import AlphabetSlicer
from alignkit.utils.resources import RESOURCES


# Classes --------------------------------------------------------------------------------------------------------------
class PairwiseAligner:
    """
    Aligns a query sequence against a reference with one scoring model and one alignment mode.

    Each call validates its inputs, fills its own tables and traces back through them, so an
    aligner holds no per-call state and may be shared between threads.

    Args:
        model: A ``Linear`` matrix (or nested rows of one) or an ``Affine`` model.
        mode: The alignment mode, as an ``AlignmentMode`` or its name.
    """
    __slots__ = ('_model', '_mode')
    def __init__(self, model: Union[Linear, Affine, Iterable[Iterable[int]]],
                 mode: Union[str, AlignmentMode] = AlignmentMode.GLOBAL):
        self._model = model if isinstance(model, (Linear, Affine)) else Linear(model)
        self._mode = AlignmentMode[mode.upper()] if isinstance(mode, str) else AlignmentMode(mode)

    def __repr__(self): return f'{type(self).__name__}({self._model!r}, mode={self._mode.name})'

    @property
    def model(self) -> Union[Linear, Affine]: return self._model
    @property
    def mode(self) -> AlignmentMode: return self._mode

    @property
    def matrix(self) -> Linear:
        return self._model.matrix if isinstance(self._model, Affine) else self._model

    @property
    def gap_open(self) -> Optional[int]:
        """The gap-open penalty, or None for a linear gap model."""
        return self._model.gap_open if isinstance(self._model, Affine) else None

    @property
    def requires_gapped(self) -> bool:
        """Linear local and fitted alignment need an alphabet whose gap letter has code 0."""
        return self._mode != AlignmentMode.GLOBAL and isinstance(self._model, Linear)

    def _prepare(self, reference: AlphabetSlicer, query: AlphabetSlicer) -> tuple[Alphabet, np.ndarray, np.ndarray, np.ndarray]:
        """Validates a pair of sequences, in a fixed order, and returns the alphabet, both code arrays and the matrix."""
        alphabet = reference.alphabet
        if alphabet is None: raise NoAlphabetError('Reference sequence has no alphabet')
        if query.alphabet is not alphabet:
            raise MismatchedAlphabetsError(f'Reference alphabet {alphabet!r} is not query alphabet {query.alphabet!r}')
        if self.requires_gapped and (not alphabet.is_gapped or alphabet.gap_code != 0):
            raise NotGappedAlphabetError(f'{type(self).__name__} needs the gap letter at code 0 of {alphabet!r}')
        r_data, q_data = reference.slice(), query.slice()
        kind = kind_of(r_data)
        if kind != kind_of(q_data) or (kind is None and _signature(r_data) != _signature(q_data)):
            raise MismatchedTypesError(f'Cannot align {_describe(r_data)} against {_describe(q_data)}')
        if kind is None: raise TypeNotHandledError(f'Cannot align {_describe(r_data)}')

        matrix = self.matrix.to_array()
        if len(matrix) != alphabet.n_codes:
            raise MatrixWrongSizeError(f'Scoring matrix has {len(matrix)} rows but {alphabet!r} has {alphabet.n_codes} codes')
        ref = _encode(alphabet, letters_of(r_data, kind), 'reference')
        qry = _encode(alphabet, letters_of(q_data, kind), 'query')
        return alphabet, ref, qry, matrix

    def align(self, reference: AlphabetSlicer, query: AlphabetSlicer, trace: TraceCallback = None,
              cancel=None) -> list[FeaturePair]:
        """
        Aligns the query to the reference.

        Args:
            reference: The reference sequence.
            query: The query sequence.
            trace: Optional callback receiving ``(i, row)`` after each table row is filled.
            cancel: Optional cancellation signal with ``is_set()``, checked before each row.

        Returns:
            The alignment as feature pairs in ascending coordinate order; empty when a local
            alignment finds nothing scoring above zero.

        Raises:
            AlignmentError: The subclass naming the first failed check, or
                ``AlignmentCancelledError`` when cancelled.
        """
        alphabet, ref, qry, matrix = self._prepare(reference, query)
        tables = fill(ref, qry, matrix, alphabet.gap_code, self._mode, self.gap_open, trace, cancel)
        return traceback(tables, ref, qry, matrix, alphabet.gap_code, self._mode, self.gap_open, reference, query)

    def score(self, reference: AlphabetSlicer, query: AlphabetSlicer, cancel=None) -> int:
        """Returns the optimal alignment score without tracing back."""
        alphabet, ref, qry, matrix = self._prepare(reference, query)
        tables = fill(ref, qry, matrix, alphabet.gap_code, self._mode, self.gap_open, cancel=cancel)
        return find_start(tables, self._mode)[3]

    def align_many(self, pairs: Iterable[tuple[AlphabetSlicer, AlphabetSlicer]],
                   executor: Executor = None) -> list[list[FeaturePair]]:
        """
        Aligns many (reference, query) pairs concurrently.

        Args:
            pairs: The sequence pairs to align.
            executor: The executor to run on; defaults to the shared ``RESOURCES.pool``.

        Returns:
            The alignments, in the order of ``pairs``.
        """
        if executor is None: executor = RESOURCES.pool
        futures = [executor.submit(self.align, reference, query) for reference, query in pairs]
        return [future.result() for future in futures]


class NW(PairwiseAligner):
    """Needleman-Wunsch global alignment with a linear gap model."""
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]]):
        super().__init__(Linear(matrix), AlignmentMode.GLOBAL)


class SW(PairwiseAligner):
    """Smith-Waterman local alignment with a linear gap model; needs a gapped alphabet."""
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]]):
        super().__init__(Linear(matrix), AlignmentMode.LOCAL)


class Fitted(PairwiseAligner):
    """
    Fitted alignment of the whole query into any part of the reference, with a linear gap model.

    Unaligned reference flanks are free; needs a gapped alphabet.
    """
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]]):
        super().__init__(Linear(matrix), AlignmentMode.FITTED)


class NWAffine(PairwiseAligner):
    """Needleman-Wunsch global alignment with an affine gap model."""
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]], gap_open: int):
        super().__init__(Affine(matrix, gap_open), AlignmentMode.GLOBAL)


class SWAffine(PairwiseAligner):
    """Smith-Waterman local alignment with an affine gap model."""
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]], gap_open: int):
        super().__init__(Affine(matrix, gap_open), AlignmentMode.LOCAL)


class FittedAffine(PairwiseAligner):
    """Fitted alignment of the whole query into any part of the reference, with an affine gap model."""
    __slots__ = ()
    def __init__(self, matrix: Union[Linear, Iterable[Iterable[int]]], gap_open: int):
        super().__init__(Affine(matrix, gap_open), AlignmentMode.FITTED)


# Functions ------------------------------------------------------------------------------------------------------------
def _signature(data) -> tuple:
    return type(data), getattr(data, 'dtype', None)


def _describe(data) -> str:
    dtype = getattr(data, 'dtype', None)
    return f'{type(data).__name__}[{dtype}]' if dtype is not None else type(data).__name__


def _encode(alphabet: Alphabet, letters: np.ndarray, label: str) -> np.ndarray:
    """Codes raw letters as int64, raising on the first letter the alphabet does not know."""
    codes = alphabet.letter_index[letters]
    bad = np.flatnonzero(codes == alphabet.INVALID)
    if len(bad): raise IllegalLetterError(bytes([int(letters[bad[0]])]), int(bad[0]), label)
    return codes.astype(np.int64)
