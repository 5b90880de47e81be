import pytest
from alignkit.core.alphabet import Alphabet
from alignkit.containers.feature import Feature, FeaturePair


class TestFeature:
    def test_interval(self):
        feat = Feature(2, 5)
        assert (feat.start, feat.end, len(feat)) == (2, 5, 3)
        assert not feat.is_gap
        assert str(feat) == '[2,5)'

    def test_gap(self):
        feat = Feature(4, 4)
        assert feat.is_gap
        assert len(feat) == 0

    @pytest.mark.parametrize('start, end', [(-1, 2), (3, 2)])
    def test_invalid(self, start, end):
        with pytest.raises(ValueError, match="Invalid feature"):
            Feature(start, end)

    def test_name_from_location(self):
        seq = Alphabet.DNA.seq_from('ACGT', name='chr1')
        feat = Feature(0, 2, seq)
        assert feat.loc is seq
        assert feat.name == 'chr1'
        assert str(feat) == 'chr1[0,2)'
        assert Feature(0, 2, Alphabet.DNA.seq_from('ACGT')).name == ''


class TestFeaturePair:
    def test_str(self):
        assert str(FeaturePair(Feature(1, 4), Feature(0, 3), 26)) == '[1,4)/[0,3)=26'
        assert str(FeaturePair(Feature(0, 1), Feature(0, 0), -5)) == '[0,1)/-=-5'
        assert str(FeaturePair(Feature(1, 1), Feature(1, 2), -1)) == '-/[1,2)=-1'

    def test_str_with_names(self):
        ref = Alphabet.DNA.seq_from('ACGT', name='ref')
        qry = Alphabet.DNA.seq_from('ACG', name='qry')
        pair = FeaturePair(Feature(0, 3, ref), Feature(0, 3, qry), 9)
        assert str(pair) == 'ref[0,3)/qry[0,3)=9'
        assert repr(pair) == 'FeaturePair(ref[0,3)/qry[0,3)=9)'

    def test_features_and_score(self):
        a, b = Feature(0, 2), Feature(3, 5)
        pair = FeaturePair(a, b, 4)
        assert pair.features == (a, b)
        assert pair.score == 4

    def test_invert(self):
        pair = FeaturePair(Feature(0, 1), Feature(0, 0), -5)
        inverted = pair.invert()
        assert str(inverted) == '-/[0,1)=-5'
        assert inverted.invert() == pair
        assert str(pair) == '[0,1)/-=-5'

    def test_equality(self):
        assert FeaturePair(Feature(0, 1), Feature(0, 1), 2) == FeaturePair(Feature(0, 1), Feature(0, 1), 2)
        assert FeaturePair(Feature(0, 1), Feature(0, 1), 2) != FeaturePair(Feature(0, 1), Feature(0, 1), 3)
        assert len({FeaturePair(Feature(0, 1), Feature(0, 1), 2), FeaturePair(Feature(0, 1), Feature(0, 1), 2)}) == 1
