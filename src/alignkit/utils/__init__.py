"""Shared utilities: process resources, the conditional JIT decorator and structural protocols."""
from alignkit.utils.resources import RESOURCES, Resources, jit
from alignkit.utils.protocols import HasAlphabet, AlphabetSlicer
