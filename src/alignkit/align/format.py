"""Rendering of pairwise alignments as two equal-length gapped sequences."""
from typing import Iterable

import numpy as np

from alignkit.containers.feature import FeaturePair
from alignkit.containers.seq import kind_of, gap_fill
from alignkit.errors import TypeNotHandledError
from alignkit.utils.protocols import AlphabetSlicer


# Functions ------------------------------------------------------------------------------------------------------------
def format_alignment(a: AlphabetSlicer, b: AlphabetSlicer, pairs: Iterable[FeaturePair],
                     gap: bytes = b'-') -> tuple[AlphabetSlicer, AlphabetSlicer]:
    """
    Lays out an alignment of ``a`` and ``b`` with gap letters filling the gapped segments.

    Each pair contributes its interval of each sequence, or, where one side is empty, the gap
    letter repeated over the length of the other side. Quality-annotated gaps get a quality of zero.

    Args:
        a: The reference sequence.
        b: The query sequence.
        pairs: The feature pairs of an alignment of ``a`` and ``b``.
        gap: The gap letter.

    Returns:
        The two gapped sequences, of the input types and of equal length.

    Examples:
        >>> ref, qry = format_alignment(reference, query, NW(matrix).align(reference, query))
        >>> str(ref), str(qry)
        ('AGACTAGTTA', '-GAC-AGACG')
    """
    if isinstance(gap, str): gap = gap.encode('ascii')
    seqs = (a, b)
    data = tuple(s.slice() for s in seqs)
    kinds = tuple(kind_of(d) for d in data)
    for d, kind in zip(data, kinds):
        if kind is None: raise TypeNotHandledError(f'Cannot format {type(d).__name__}')

    parts = ([], [])
    for pair in pairs:
        features = pair.features
        for k in range(2):
            own, other = features[k], features[1 - k]
            if own.is_gap:
                parts[k].append(gap_fill(kinds[k], gap, len(other)))
            else:
                parts[k].append(data[k][own.start:own.end])
    return tuple(
        type(s).from_slice(np.concatenate(p) if p else d[:0], s.alphabet, getattr(s, 'name', None))
        for s, d, p in zip(seqs, data, parts)
    )
