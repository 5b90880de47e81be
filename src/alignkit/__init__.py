"""
Pairwise sequence alignment by dynamic programming.

Global (Needleman-Wunsch), local (Smith-Waterman) and fitted aligners, each with a linear or an
affine gap model, over plain or quality-annotated sequences of pluggable alphabets.
"""
from alignkit.errors import (AlignmentError, NoAlphabetError, MismatchedAlphabetsError, NotGappedAlphabetError,
                             MismatchedTypesError, TypeNotHandledError, MatrixNotSquareError, MatrixWrongSizeError,
                             IllegalLetterError, AlignmentCancelledError, TracebackError, AlignkitWarning,
                             ScoringWarning)
from alignkit.core.alphabet import Alphabet, AlphabetError
from alignkit.containers.seq import Seq, QSeq, SeqKind
from alignkit.containers.feature import Feature, FeaturePair
from alignkit.engines.scoring import Linear, Affine
from alignkit.engines.pairwise import AlignmentMode, format_table
from alignkit.align.pairwise import PairwiseAligner, NW, SW, Fitted, NWAffine, SWAffine, FittedAffine
from alignkit.align.format import format_alignment
from alignkit.utils.resources import RESOURCES

__version__ = '0.1.0'
