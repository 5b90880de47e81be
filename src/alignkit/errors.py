"""
Exceptions and warnings raised by the alignment engine.

Every failure of an aligner is raised as a subclass of ``AlignmentError`` so callers can catch the
whole family at once, or a single condition by its own class.
"""


# Exceptions and Warnings ----------------------------------------------------------------------------------------------
class AlignmentError(Exception):
    """Base class for all alignment failures."""


class NoAlphabetError(AlignmentError):
    """Raised when the reference sequence carries no alphabet."""


class MismatchedAlphabetsError(AlignmentError):
    """Raised when the reference and query do not share the same alphabet instance."""


class NotGappedAlphabetError(AlignmentError):
    """Raised when an aligner needs a gapped alphabet with the gap letter at code 0 and the alphabet has none."""


class MismatchedTypesError(AlignmentError):
    """Raised when the reference and query letter data are of different representations."""


class TypeNotHandledError(AlignmentError):
    """Raised when the letter data is of a representation the aligners cannot read."""


class MatrixNotSquareError(AlignmentError):
    """Raised when the rows of a scoring matrix have inconsistent lengths."""


class MatrixWrongSizeError(AlignmentError):
    """Raised when a scoring matrix does not have exactly one row per alphabet code."""


class IllegalLetterError(AlignmentError):
    """
    Raised when a sequence holds a letter that is not part of its alphabet.

    Args:
        letter: The offending letter.
        position: Zero-based position of the letter in its sequence.
        label: Which sequence it was found in.
    """
    def __init__(self, letter: bytes, position: int, label: str = 'sequence'):
        self.letter = letter
        self.position = position
        self.label = label
        super().__init__(f'Illegal letter {letter!r} at position {position} in {label}')


class AlignmentCancelledError(AlignmentError):
    """Raised when the cancellation signal of an alignment is set while the table is being filled."""


class TracebackError(AlignmentError, RuntimeError):
    """Raised when traceback finds a cell that no move can reach; this indicates an inconsistent table."""


class AlignkitWarning(Warning): pass
class ScoringWarning(AlignkitWarning): pass
