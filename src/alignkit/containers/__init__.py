"""
Containers for sequences and the features an alignment reports on them.
"""
from alignkit.containers.seq import Seq, QSeq, SeqKind, QLETTER, kind_of, letters_of, gap_fill
from alignkit.containers.feature import Feature, FeaturePair
