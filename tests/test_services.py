"""Tests for the simulated services and the caching proxy."""

import random

import pytest

from retry_kit.retry import BoundedRetryExecutor, OperationFailed
from retry_kit.services import (
    CachingPriceProxy,
    FlakyService,
    PriceAPI,
    ScriptedOperation,
)


class TestFlakyService:
    """FlakyService passes or fails according to its success rate."""

    def test_always_passes_at_rate_one(self):
        service = FlakyService(1.0)
        assert service.call() is True
        assert service.calls == 1

    def test_always_fails_at_rate_zero(self):
        service = FlakyService(0.0)
        with pytest.raises(OperationFailed):
            service.call()

    def test_seeded_runs_are_reproducible(self):
        """Two services with the same seed take the same number of attempts."""
        first = BoundedRetryExecutor(10).execute(FlakyService(0.5, rng=random.Random(7)))
        second = BoundedRetryExecutor(10).execute(FlakyService(0.5, rng=random.Random(7)))
        assert first.outcome == second.outcome
        assert first.attempts == second.attempts

    def test_executor_call_count_matches_service(self):
        service = FlakyService(0.0)
        result = BoundedRetryExecutor(6).execute(service)
        assert result.exhausted
        assert service.calls == 6

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_rate_out_of_range(self, rate):
        with pytest.raises(ValueError):
            FlakyService(rate)


class TestScriptedOperation:

    def test_negative_failures_rejected(self):
        with pytest.raises(ValueError):
            ScriptedOperation(failures_before_success=-1)

    def test_passes_after_scripted_failures(self):
        op = ScriptedOperation(failures_before_success=2, value="done")
        for _ in range(2):
            with pytest.raises(OperationFailed):
                op()
        assert op() == "done"


class TestCachingPriceProxy:
    """The proxy only calls the API on a cache miss."""

    def test_known_and_unknown_coins(self):
        api = PriceAPI()
        assert api.get_value("Bitcoin") == "$8500"
        assert api.get_value("Dogecoin") == "Unknown Coin"

    def test_repeat_lookups_hit_cache(self):
        api = PriceAPI()
        proxy = CachingPriceProxy(api)
        for coin in ["Bitcoin", "Litecoin", "Ethereum"] * 2:
            proxy.get_value(coin)
        assert api.calls == 3
        assert proxy.misses == 3
        assert proxy.hits == 3
        assert proxy.get_value("Litecoin") == "$50"

    def test_unknown_coin_is_cached_too(self):
        api = PriceAPI()
        proxy = CachingPriceProxy(api)
        proxy.get_value("Dogecoin")
        proxy.get_value("Dogecoin")
        assert api.calls == 1

    def test_clear_forces_refetch(self):
        api = PriceAPI()
        proxy = CachingPriceProxy(api)
        proxy.get_value("Bitcoin")
        proxy.clear()
        proxy.get_value("Bitcoin")
        assert api.calls == 2
