"""
Module for representing ASCII biological alphabets
"""
from typing import Union, Final, ClassVar, Optional

import numpy as np

from alignkit.containers.seq import Seq, QSeq
from alignkit.utils.resources import RESOURCES


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlphabetError(Exception):
    """Raised when an alphabet is invalid or an operation is incompatible with the alphabet."""


# Classes --------------------------------------------------------------------------------------------------------------
class Alphabet:
    """
    An ordered set of ASCII symbols mapped to dense integer codes, plus a gap letter.

    Symbols are coded ``0..len-1`` in the order given, case-insensitively. If the gap letter is
    one of the symbols the alphabet is *gapped* and the gap has that symbol's code; otherwise the
    gap takes the code after the last symbol, which is the extra row and column a scoring matrix
    for this alphabet must carry.

    Examples:
        >>> Alphabet.DNA.index_of(b'G')
        2
        >>> Alphabet.DNA.gap_code, Alphabet.DNA_GAPPED.gap_code
        (4, 0)
    """
    __slots__ = ('_data', '_lookup_table', '_decode_table', '_gap', '_name')
    DTYPE: Final = np.uint8
    CODE_DTYPE: Final = np.int16
    INVALID: Final = -1
    MAX_LEN: Final = 255
    ENCODING: Final = 'ascii'

    DNA: ClassVar['Alphabet']
    DNA_GAPPED: ClassVar['Alphabet']
    RNA: ClassVar['Alphabet']
    RNA_GAPPED: ClassVar['Alphabet']
    AMINO: ClassVar['Alphabet']
    AMINO_GAPPED: ClassVar['Alphabet']

    def __init__(self, symbols: bytes, gap: bytes = b'-', name: str = None):
        """
        Initializes an Alphabet.

        Args:
            symbols: The symbols in the alphabet as bytes, in code order.
            gap: The single gap letter. Including it in ``symbols`` makes the alphabet gapped.
            name: Optional display name.

        Raises:
            AlphabetError: If the symbols are empty, not ASCII, too long or contain duplicates,
                or if the gap is not a single ASCII letter.
        """
        if isinstance(symbols, str): symbols = symbols.encode(self.ENCODING)
        if isinstance(gap, str): gap = gap.encode(self.ENCODING)
        if not symbols: raise AlphabetError('Alphabet must contain at least one symbol')
        if not symbols.isascii(): raise AlphabetError('Alphabet symbols must be a valid ASCII string')
        if len(symbols) > self.MAX_LEN:
            raise AlphabetError(f'Alphabet size cannot exceed {self.MAX_LEN} symbols')
        if len(set(symbols.upper())) != len(symbols): raise AlphabetError('Alphabet contains duplicate symbols')
        if len(gap) != 1 or not gap.isascii(): raise AlphabetError('Gap must be a single ASCII letter')

        self._data: np.ndarray = np.frombuffer(symbols, dtype=self.DTYPE)
        self._gap = gap
        self._name = name

        # Raw byte -> code, for both cases
        self._lookup_table = np.full(256, self.INVALID, dtype=self.CODE_DTYPE)
        codes = np.arange(len(symbols), dtype=self.CODE_DTYPE)
        self._lookup_table[np.frombuffer(symbols.upper(), dtype=self.DTYPE)] = codes
        self._lookup_table[np.frombuffer(symbols.lower(), dtype=self.DTYPE)] = codes
        self._lookup_table[self._data] = codes
        self._lookup_table.flags.writeable = False

        # Code -> raw byte, including the implicit gap code of an ungapped alphabet
        self._decode_table = self._data if self.is_gapped else np.append(self._data, self.gap_letter).astype(self.DTYPE)
        self._decode_table.flags.writeable = False

    def __len__(self): return len(self._data)
    def __iter__(self): return iter(self._data)
    def __getitem__(self, item): return self._data[item]
    def __array__(self, dtype=None, copy=None): return self._data.astype(dtype, copy=False) if dtype else self._data
    def __str__(self): return self._data.tobytes().decode(self.ENCODING)

    def __repr__(self):
        if self._name: return f'Alphabet({self._name})'
        return f'Alphabet({self._data.tobytes()!r}, gap={self._gap!r})'

    def __contains__(self, item):
        if isinstance(item, (int, np.integer)): return 0 <= item < 256 and self._lookup_table[item] != self.INVALID
        if isinstance(item, (str, bytes)):
            if len(item) != 1: return False
            return self.index_of(item) != self.INVALID
        return False

    def __eq__(self, other):
        if self is other: return True
        if not isinstance(other, Alphabet): return False
        return self._gap == other._gap and np.array_equal(self._data, other._data)

    def __hash__(self): return hash((self._data.tobytes(), self._gap))

    @property
    def name(self) -> Optional[str]: return self._name

    @property
    def gap(self) -> bytes:
        """The gap letter as a single byte."""
        return self._gap

    @property
    def gap_letter(self) -> int:
        """The gap letter as its raw byte value."""
        return self._gap[0]

    @property
    def is_gapped(self) -> bool:
        """True when the gap letter is one of the alphabet's symbols."""
        return self._lookup_table[self.gap_letter] != self.INVALID

    @property
    def gap_code(self) -> int:
        """
        The code of the gap.

        For a gapped alphabet this is the gap symbol's code; otherwise it is ``len(self)``,
        the row and column after the last letter.
        """
        code = int(self._lookup_table[self.gap_letter])
        return code if code != self.INVALID else len(self._data)

    @property
    def n_codes(self) -> int:
        """Number of rows and columns a scoring matrix for this alphabet needs."""
        return len(self._data) if self.is_gapped else len(self._data) + 1

    @property
    def letter_index(self) -> np.ndarray:
        """The read-only 256-entry table mapping raw letter bytes to codes, ``INVALID`` for foreign letters."""
        return self._lookup_table

    def index_of(self, letter: Union[bytes, str, int]) -> int:
        """Returns the code of a single letter, or ``INVALID`` if the letter is not in the alphabet."""
        if isinstance(letter, str): letter = letter.encode(self.ENCODING)
        if isinstance(letter, bytes):
            if len(letter) != 1: return self.INVALID
            letter = letter[0]
        if not 0 <= letter < 256: return self.INVALID
        return int(self._lookup_table[letter])

    def letter(self, code: int) -> bytes:
        """Returns the letter for a code; the gap code of an ungapped alphabet returns the gap letter."""
        if not 0 <= code < len(self._decode_table): raise AlphabetError(f'Code {code} is not in {self!r}')
        return self._decode_table[code:code + 1].tobytes()

    def encode(self, text: Union[bytes, str, np.ndarray]) -> np.ndarray:
        """
        Codes raw letters without dropping anything.

        Args:
            text: Letters as bytes, str or a uint8 array.

        Returns:
            An int16 array of codes, with ``INVALID`` at letters outside the alphabet.
        """
        if isinstance(text, str): text = text.encode(self.ENCODING)
        if isinstance(text, (bytes, bytearray)): text = np.frombuffer(text, dtype=self.DTYPE)
        return self._lookup_table[text]

    def decode(self, codes: np.ndarray) -> bytes:
        """Decodes an array of codes back to letters."""
        codes = np.asarray(codes)
        if codes.size and (codes.min() < 0 or codes.max() >= len(self._decode_table)):
            raise AlphabetError(f'Codes out of range for {self!r}')
        return self._decode_table[codes].tobytes()

    def seq_from(self, data: Union[Seq, str, bytes, np.ndarray], name: str = None) -> Seq:
        """
        Creates a Seq of this alphabet.

        Args:
            data: Raw letters, or an existing ``Seq`` to re-label with this alphabet.
            name: Optional sequence name.

        Returns:
            A new ``Seq``.
        """
        if isinstance(data, Seq):
            if data.alphabet is self and name is None: return data
            return Seq(data.letters, self, name or data.name)
        return Seq(data, self, name)

    def qseq_from(self, data: Union[str, bytes, np.ndarray], quals=None, name: str = None) -> QSeq:
        """
        Creates a quality-annotated QSeq of this alphabet.

        Args:
            data: Raw letters, or a structured array of (letter, quality) records.
            quals: Phred qualities, one per letter. Defaults to zero.
            name: Optional sequence name.
        """
        return QSeq(data, self, name, quals=quals)

    def random_seq(self, rng: np.random.Generator = None, length: int = None, min_len: int = 5, max_len: int = 5000,
                   weights=None, name: str = None) -> Seq:
        """
        Generates a random sequence of this alphabet's letters, never containing the gap letter.

        Args:
            rng: Random number generator (optional).
            length: Exact length of sequence to generate.
            min_len: Minimum length if length is not specified.
            max_len: Maximum length if length is not specified.
            weights: Weights for each non-gap symbol (optional).
            name: Optional sequence name.

        Returns:
            A random Seq object.

        Examples:
            >>> s = Alphabet.DNA.random_seq(length=10)
            >>> len(s)
            10
        """
        if rng is None: rng = RESOURCES.rng
        if length is None: length = int(rng.integers(min_len, max_len))
        letters = self._data[self._data != self.gap_letter]
        if weights is None:
            indices = rng.integers(0, len(letters), size=length)
        else:
            indices = rng.choice(len(letters), size=length, p=weights)
        return Seq(letters[indices], self, name)


# Constants ------------------------------------------------------------------------------------------------------------
Alphabet.DNA = Alphabet(b'ACGT', name='DNA')
Alphabet.DNA_GAPPED = Alphabet(b'-ACGT', name='DNA_GAPPED')
Alphabet.RNA = Alphabet(b'ACGU', name='RNA')
Alphabet.RNA_GAPPED = Alphabet(b'-ACGU', name='RNA_GAPPED')
Alphabet.AMINO = Alphabet(b'ACDEFGHIKLMNPQRSTVWY', name='AMINO')
Alphabet.AMINO_GAPPED = Alphabet(b'-ACDEFGHIKLMNPQRSTVWY', name='AMINO_GAPPED')
