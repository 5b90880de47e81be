"""
Features locate half-open intervals on a sequence; feature pairs are the segments of an alignment.
"""
from typing import Optional

from alignkit.utils.protocols import AlphabetSlicer


# Classes --------------------------------------------------------------------------------------------------------------
class Feature:
    """
    A half-open, zero-based ``[start, end)`` interval on an optional location sequence.

    A feature with ``start == end`` covers nothing and marks a gap in an alignment.

    Args:
        start: The first position covered.
        end: One past the last position covered.
        loc: The sequence the interval lies on (optional).
    """
    __slots__ = ('_start', '_end', '_loc')
    def __init__(self, start: int, end: int, loc: AlphabetSlicer = None):
        start, end = int(start), int(end)
        if start < 0 or end < start: raise ValueError(f'Invalid feature interval [{start},{end})')
        self._start = start
        self._end = end
        self._loc = loc

    @property
    def start(self) -> int: return self._start
    @property
    def end(self) -> int: return self._end
    @property
    def loc(self) -> Optional[AlphabetSlicer]: return self._loc

    @property
    def name(self) -> str:
        """The name of the location sequence, or an empty string."""
        return getattr(self._loc, 'name', None) or ''

    @property
    def is_gap(self) -> bool: return self._start == self._end

    def __len__(self): return self._end - self._start
    def __str__(self): return f'{self.name}[{self._start},{self._end})'
    def __repr__(self): return f'Feature({self})'

    def __eq__(self, other):
        if not isinstance(other, Feature): return False
        return self._start == other._start and self._end == other._end and self._loc is other._loc

    def __hash__(self): return hash((self._start, self._end, id(self._loc)))


class FeaturePair:
    """
    One segment of a pairwise alignment: an interval of the reference, an interval of the query,
    and the score the segment contributes.

    A zero-length feature on either side marks that side as gapped over the other's length.

    Examples:
        >>> pair = FeaturePair(Feature(1, 4), Feature(0, 3), 26)
        >>> str(pair)
        '[1,4)/[0,3)=26'
        >>> str(FeaturePair(Feature(0, 1), Feature(0, 0), -5))
        '[0,1)/-=-5'
    """
    __slots__ = ('_a', '_b', '_score')
    def __init__(self, a: Feature, b: Feature, score: int):
        self._a = a
        self._b = b
        self._score = int(score)

    @property
    def features(self) -> tuple[Feature, Feature]:
        """The (reference, query) features."""
        return self._a, self._b

    @property
    def score(self) -> int: return self._score

    def invert(self) -> 'FeaturePair':
        """Returns the pair with the reference and query sides swapped."""
        return FeaturePair(self._b, self._a, self._score)

    def __str__(self):
        a = '-' if self._a.is_gap else str(self._a)
        b = '-' if self._b.is_gap else str(self._b)
        return f'{a}/{b}={self._score}'

    def __repr__(self): return f'FeaturePair({self})'

    def __eq__(self, other):
        if not isinstance(other, FeaturePair): return False
        return self._a == other._a and self._b == other._b and self._score == other._score

    def __hash__(self): return hash((self._a, self._b, self._score))
