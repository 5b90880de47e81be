"""
Immutable sequence containers holding raw ASCII letters, optionally with per-letter qualities.
"""
from enum import IntEnum
from typing import Union, Optional, Callable, Final

import numpy as np

from alignkit.utils.protocols import AlphabetSlicer


# Constants ------------------------------------------------------------------------------------------------------------
class SeqKind(IntEnum):
    """The letter representations the aligners understand."""
    LETTERS = 0
    QLETTERS = 1


QLETTER: Final = np.dtype([('l', np.uint8), ('q', np.uint8)])
_LETTER_VIEWS: dict[SeqKind, Callable[[np.ndarray], np.ndarray]] = {}


# Functions ------------------------------------------------------------------------------------------------------------
def letter_view(kind: SeqKind):
    """Registers the function that extracts the raw letters from data of a given kind."""
    def decorator(func):
        _LETTER_VIEWS[kind] = func
        return func
    return decorator


@letter_view(SeqKind.LETTERS)
def _letters_of_letters(data: np.ndarray) -> np.ndarray: return data


@letter_view(SeqKind.QLETTERS)
def _letters_of_qletters(data: np.ndarray) -> np.ndarray: return data['l']


def kind_of(data) -> Optional[SeqKind]:
    """Returns the representation of some letter data, or None if it is not one the aligners can read."""
    if not isinstance(data, np.ndarray) or data.ndim != 1: return None
    if data.dtype == np.uint8: return SeqKind.LETTERS
    if data.dtype == QLETTER: return SeqKind.QLETTERS
    return None


def letters_of(data: np.ndarray, kind: SeqKind = None) -> np.ndarray:
    """Returns the raw uint8 letters of letter data of any supported kind."""
    if kind is None: kind = kind_of(data)
    return _LETTER_VIEWS[kind](data)


def gap_fill(kind: SeqKind, gap: bytes, n: int) -> np.ndarray:
    """Returns ``n`` gap letters in the given representation; gaps carry a quality of zero."""
    if kind == SeqKind.QLETTERS:
        out = np.zeros(n, dtype=QLETTER)
        out['l'] = gap[0]
        return out
    return np.full(n, gap[0], dtype=np.uint8)


# Classes --------------------------------------------------------------------------------------------------------------
class Seq(AlphabetSlicer):
    """
    Immutable sequence of raw ASCII letters tied to an optional ``Alphabet``.

    Letters are stored as given, so a sequence may hold letters its alphabet does not know;
    aligners reject those when the sequence is aligned.

    Args:
        data: The letters as str, bytes or a uint8 array.
        alphabet: The owning ``Alphabet``, or None.
        name: Optional sequence name.

    Examples:
        >>> seq = Seq('ACGT', Alphabet.DNA, name='read1')
        >>> len(seq), str(seq)
        (4, 'ACGT')
    """
    __slots__ = ('_data', '_alphabet', '_name', '_hash')
    KIND: Final = SeqKind.LETTERS
    ENCODING: Final = 'ascii'

    def __init__(self, data: Union[str, bytes, np.ndarray], alphabet: 'Alphabet' = None, name: str = None):
        self._data = self._coerce(data)
        self._data.flags.writeable = False
        self._alphabet = alphabet
        self._name = name
        self._hash = None

    @classmethod
    def _coerce(cls, data) -> np.ndarray:
        if isinstance(data, str): data = data.encode(cls.ENCODING)
        if isinstance(data, (bytes, bytearray)): return np.frombuffer(bytes(data), dtype=np.uint8).copy()
        return np.array(data, dtype=np.uint8).reshape(-1)

    @classmethod
    def from_slice(cls, data: np.ndarray, alphabet: 'Alphabet' = None, name: str = None) -> 'Seq':
        """Builds a sequence of this type from letter data as returned by ``slice()``."""
        return cls(data, alphabet, name)

    @property
    def alphabet(self) -> Optional['Alphabet']: return self._alphabet

    @property
    def name(self) -> Optional[str]: return self._name

    @property
    def letters(self) -> np.ndarray:
        """The raw uint8 letters (zero-copy, read-only)."""
        return self._data

    def slice(self) -> np.ndarray:
        """Returns the underlying letter data in this sequence's representation."""
        return self._data

    def __array__(self, dtype=None, copy=None):
        return self._data.astype(dtype, copy=False) if dtype else self._data

    def __bytes__(self) -> bytes: return self.letters.tobytes()
    def __str__(self): return self.__bytes__().decode(self.ENCODING)
    def __len__(self): return self._data.shape[0]

    def __repr__(self):
        text = str(self) if len(self) <= 14 else f'{str(self[:7])}...{str(self[-7:])}'
        return f'{type(self).__name__}({self._name}: {text})' if self._name else f'{type(self).__name__}({text})'

    def __getitem__(self, item):
        if isinstance(item, slice): return self.from_slice(self._data[item], self._alphabet, self._name)
        return self._data[item]

    def __eq__(self, other):
        if self is other: return True
        if type(self) is not type(other): return False
        if self._alphabet is not other._alphabet: return False
        return np.array_equal(self._data, other._data)

    def __hash__(self):
        if self._hash is None: self._hash = hash((type(self).__name__, self._data.tobytes()))
        return self._hash


class QSeq(Seq):
    """
    Immutable sequence of letters each carrying a Phred quality score.

    Args:
        data: The letters, or a structured array of ``QLETTER`` records.
        alphabet: The owning ``Alphabet``, or None.
        name: Optional sequence name.
        quals: Qualities for each letter when ``data`` holds plain letters. Defaults to zero.

    Examples:
        >>> q = QSeq('ACGT', Alphabet.DNA, quals=[30, 30, 20, 10])
        >>> q.quals.tolist()
        [30, 30, 20, 10]
    """
    __slots__ = ()
    KIND: Final = SeqKind.QLETTERS

    def __init__(self, data: Union[str, bytes, np.ndarray], alphabet: 'Alphabet' = None, name: str = None,
                 quals=None):
        if isinstance(data, np.ndarray) and data.dtype == QLETTER:
            if quals is not None: raise ValueError('Qualities are already part of the structured letter data')
            records = data.reshape(-1).copy()
        else:
            letters = Seq._coerce(data)
            records = np.zeros(len(letters), dtype=QLETTER)
            records['l'] = letters
            if quals is not None:
                quals = np.asarray(quals, dtype=np.uint8).reshape(-1)
                if len(quals) != len(letters): raise ValueError('Qualities must be the same length as the letters')
                records['q'] = quals
        super().__init__(records, alphabet, name)

    @classmethod
    def _coerce(cls, data) -> np.ndarray: return data

    @property
    def letters(self) -> np.ndarray: return self._data['l']

    @property
    def quals(self) -> np.ndarray:
        """The per-letter Phred qualities."""
        return self._data['q']
