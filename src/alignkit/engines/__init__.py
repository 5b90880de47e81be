"""
Numerical engines: scoring models, DP table filling and traceback.
"""
from alignkit.engines.scoring import Linear, Affine
from alignkit.engines.pairwise import AlignmentMode, NEG_INF, fill, find_start, cell_scores, format_table
from alignkit.engines.traceback import traceback
