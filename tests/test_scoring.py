import numpy as np
import pytest
from alignkit.core.alphabet import Alphabet, AlphabetError
from alignkit.engines.scoring import Linear, Affine
from alignkit.errors import MatrixNotSquareError, ScoringWarning


class TestLinear:
    def test_to_array(self, nw_matrix):
        array = nw_matrix.to_array()
        assert array.shape == (5, 5)
        assert array.dtype == np.int64
        assert array[0, 0] == 10
        assert not array.flags.writeable
        assert nw_matrix.to_array() is array

    def test_ragged_is_lazy(self):
        ragged = Linear([[1, 2, 3], [1, 2], [1, 2, 3]])
        assert len(ragged) == 3
        assert not ragged.is_square
        with pytest.raises(MatrixNotSquareError, match="not square"):
            ragged.to_array()

    def test_rectangular(self):
        with pytest.raises(MatrixNotSquareError):
            Linear([[1, 2, 3], [1, 2, 3]]).to_array()

    def test_empty(self):
        with pytest.raises(MatrixNotSquareError):
            Linear([]).to_array()

    def test_copy_and_equality(self, nw_matrix):
        assert Linear(nw_matrix) == nw_matrix
        assert Linear(nw_matrix.to_array()) == nw_matrix
        assert nw_matrix[4][0] == -5

    def test_build_ungapped(self):
        m = Linear.build(Alphabet.DNA, match=2, mismatch=-1, gap=-3).to_array()
        np.testing.assert_array_equal(m[:4, :4], np.where(np.eye(4, dtype=bool), 2, -1))
        np.testing.assert_array_equal(m[4, :4], [-3] * 4)
        np.testing.assert_array_equal(m[:4, 4], [-3] * 4)
        assert m[4, 4] == 0

    def test_build_gapped(self):
        m = Linear.build(Alphabet.DNA_GAPPED, match=1, mismatch=-1, gap=-1).to_array()
        assert m[0, 0] == 0
        np.testing.assert_array_equal(m[0, 1:], [-1] * 4)
        np.testing.assert_array_equal(np.diag(m)[1:], [1] * 4)

    def test_blosum62(self):
        m = Linear.blosum62(gap=-4).to_array()
        amino = Alphabet.AMINO
        assert m.shape == (21, 21)
        assert m[amino.index_of('W'), amino.index_of('W')] == 11
        assert m[amino.index_of('A'), amino.index_of('R')] == -1
        assert m[amino.index_of('E'), amino.index_of('D')] == 2
        np.testing.assert_array_equal(m, m.T)
        assert (m[20, :20] == -4).all()
        assert m[20, 20] == 0

    def test_blosum62_gapped(self):
        plain = Linear.blosum62().to_array()
        gapped = Linear.blosum62(Alphabet.AMINO_GAPPED).to_array()
        np.testing.assert_array_equal(gapped[1:, 1:], plain[:20, :20])
        assert gapped[0, 0] == 0

    def test_blosum62_foreign_letter(self):
        with pytest.raises(AlphabetError, match="BLOSUM62"):
            Linear.blosum62(Alphabet(b'ACDX'))


class TestAffine:
    def test_init(self, unit_matrix):
        model = Affine(unit_matrix, -5)
        assert model.matrix is unit_matrix
        assert model.gap_open == -5

    def test_rows(self):
        model = Affine([[0, -1], [-1, 1]], 0)
        assert isinstance(model.matrix, Linear)
        assert model.gap_open == 0

    def test_positive_gap_open(self, unit_matrix):
        with pytest.warns(ScoringWarning, match="Positive gap open"):
            model = Affine(unit_matrix, 5)
        assert model.gap_open == -5
