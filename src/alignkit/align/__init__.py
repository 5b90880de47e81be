"""
Pairwise aligners and alignment rendering.
"""
from alignkit.align.pairwise import PairwiseAligner, NW, SW, Fitted, NWAffine, SWAffine, FittedAffine
from alignkit.align.format import format_alignment
