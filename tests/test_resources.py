from concurrent.futures import ThreadPoolExecutor

import numpy as np
from alignkit.utils.resources import Resources, RESOURCES, jit


class TestResources:
    def test_has_module(self):
        assert Resources.has_module('numpy')
        assert not Resources.has_module('alignkit_no_such_module')

    def test_rng(self):
        assert isinstance(RESOURCES.rng, np.random.Generator)
        assert RESOURCES.rng is RESOURCES.rng

    def test_pool_is_shared(self):
        assert isinstance(RESOURCES.pool, ThreadPoolExecutor)
        assert RESOURCES.pool is RESOURCES.pool
        assert RESOURCES.available_cpus >= 1

    def test_scoped_pool(self):
        with Resources() as resources:
            pool = resources.pool
            assert pool.submit(sum, [1, 2, 3]).result() == 6
        assert 'pool' not in resources.__dict__
        assert resources.pool is not pool


class TestJit:
    def test_bare_and_configured(self):
        @jit
        def double(x): return x * 2

        @jit(nopython=True, cache=False)
        def triple(x): return x * 3

        assert double(2) == 4
        assert triple(2) == 6
