from typing import Protocol, runtime_checkable, Optional

import numpy as np


@runtime_checkable
class HasAlphabet(Protocol):
    """Protocol for objects that possess an Alphabet."""
    @property
    def alphabet(self) -> Optional['Alphabet']: ...


@runtime_checkable
class AlphabetSlicer(HasAlphabet, Protocol):
    """Protocol for alignable sequences: an Alphabet plus the raw letter data returned by ``slice()``."""
    def slice(self) -> np.ndarray: ...
