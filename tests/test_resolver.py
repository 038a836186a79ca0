"""
Closure computation over the implication graph.
"""

import itertools
from concurrent.futures import ThreadPoolExecutor

import pytest

from flagpin.errors import UnknownFlagError
from flagpin.resolver import CapabilitySet, explain, resolve


def _small_subsets(names, max_size=2):
    for size in range(max_size + 1):
        for combo in itertools.combinations(names, size):
            yield set(combo)


class TestResolve:

    def test_empty_request_yields_default_closure(self, registry):
        assert resolve(registry, set()) == {'std', 'mesalock_sgx', 'sgx_tstd'}

    def test_derive_pulls_in_companion(self, registry):
        assert resolve(registry, {'derive'}) == {
            'derive', 'serde_derive', 'std', 'mesalock_sgx', 'sgx_tstd',
        }

    def test_mesalock_sgx_alone(self, registry):
        capabilities = resolve(registry, {'mesalock_sgx'}, default_features=False)
        assert capabilities == {'mesalock_sgx', 'std', 'sgx_tstd'}

    def test_unknown_flag(self, registry):
        with pytest.raises(UnknownFlagError) as exc:
            resolve(registry, {'foo'})
        assert exc.value.name == 'foo'

    def test_unknown_flag_among_known_ones(self, registry):
        with pytest.raises(UnknownFlagError) as exc:
            resolve(registry, {'derive', 'rc', 'serde_json'})
        assert exc.value.name == 'serde_json'

    def test_without_default_features(self, registry):
        assert resolve(registry, {'alloc'}, default_features=False) == {'alloc'}

    def test_default_requested_explicitly(self, registry):
        capabilities = resolve(registry, {'default'}, default_features=False)
        assert capabilities == {'std', 'mesalock_sgx', 'sgx_tstd'}
        assert 'default' not in capabilities

    def test_single_name_string(self, registry):
        assert resolve(registry, 'derive') == resolve(registry, {'derive'})

    def test_single_unknown_name_string(self, registry):
        with pytest.raises(UnknownFlagError) as exc:
            resolve(registry, 'foo')
        assert exc.value.name == 'foo'

    def test_accepts_any_iterable(self, registry):
        assert resolve(registry, ['rc', 'rc']) == resolve(registry, {'rc'})

    def test_result_is_immutable(self, registry):
        capabilities = resolve(registry, {'rc'})
        assert isinstance(capabilities, CapabilitySet)
        assert isinstance(capabilities, frozenset)
        assert not hasattr(capabilities, 'add')

    def test_deep_chain(self, make_registry):
        chain = {f"f{i}": [f"f{i + 1}"] for i in range(50)}
        chain['f50'] = []
        registry = make_registry(chain)
        assert resolve(registry, {'f0'}) == {f"f{i}" for i in range(51)}


class TestResolveProperties:

    def test_idempotent(self, registry):
        for requested in _small_subsets(registry.names):
            assert resolve(registry, requested) == resolve(registry, requested)

    def test_closed_under_implication(self, registry):
        for requested in _small_subsets(registry.names):
            capabilities = resolve(registry, requested)
            for name in capabilities:
                assert registry.implied_by(name) <= capabilities

    @pytest.mark.parametrize('default_features', [True, False])
    def test_monotonic(self, registry, default_features):
        subsets = list(_small_subsets(registry.names))
        for a, b in itertools.product(subsets, repeat=2):
            smaller = resolve(registry, a, default_features)
            larger = resolve(registry, a | b, default_features)
            assert smaller <= larger, f"{sorted(a)} + {sorted(b)}"

    def test_concurrent_resolution_matches_serial(self, registry):
        requests = [frozenset(s) for s in _small_subsets(registry.names)] * 4
        serial = [resolve(registry, r) for r in requests]
        with ThreadPoolExecutor(max_workers=8) as pool:
            parallel = list(pool.map(lambda r: resolve(registry, r), requests))
        assert parallel == serial


class TestExplain:

    def test_reports_impliers(self, registry):
        reasons = explain(registry, resolve(registry, {'derive', 'deserialize_in_place'}))
        assert reasons['serde_derive'] == {'derive', 'deserialize_in_place'}
        assert reasons['std'] == {'mesalock_sgx'}
        assert reasons['derive'] == frozenset()
