"""Simulated external services used to exercise the retry executor.

FlakyService and ScriptedOperation are fallible operations. PriceAPI and
CachingPriceProxy model an expensive lookup fronted by a memo table.
"""

import logging
import random
from typing import Any, Dict, Optional

from retry_kit.constants import COIN_PRICES, DEFAULT_SUCCESS_RATE, UNKNOWN_COIN
from retry_kit.retry import OperationFailed


logger = logging.getLogger(__name__)


class FlakyService:
    """External call that passes with a fixed probability."""

    def __init__(
        self,
        success_rate: float = DEFAULT_SUCCESS_RATE,
        rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be between 0 and 1, got {success_rate}")
        self.success_rate = success_rate
        self.rng = rng or random.Random()
        self.calls = 0

    def call(self) -> bool:
        self.calls += 1
        logger.debug("Calling external service (call %d)", self.calls)
        if self.rng.random() < self.success_rate:
            return True
        raise OperationFailed(f"external service call {self.calls} failed")

    __call__ = call


class ScriptedOperation:
    """
    Deterministic fallible operation.

    Fails the first ``failures_before_success`` calls, then returns
    ``value``. With ``succeed=False`` it never stops failing.
    """

    def __init__(self, failures_before_success: int = 0, succeed: bool = True, value: Any = True):
        if failures_before_success < 0:
            raise ValueError("failures_before_success must be non-negative")
        self.failures_before_success = failures_before_success
        self.succeed = succeed
        self.value = value
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if not self.succeed or self.calls <= self.failures_before_success:
            raise OperationFailed(f"scripted failure on call {self.calls}")
        return self.value


class PriceAPI:
    """Simulated, expensive cryptocurrency price API."""

    def __init__(self, prices: Optional[Dict[str, str]] = None):
        self.prices = dict(COIN_PRICES if prices is None else prices)
        self.calls = 0

    def get_value(self, coin: str) -> str:
        self.calls += 1
        logger.info("Calling external price API for %s", coin)
        return self.prices.get(coin, UNKNOWN_COIN)


class CachingPriceProxy:
    """Stands in for a PriceAPI and remembers every answer it has fetched."""

    def __init__(self, api: Optional[PriceAPI] = None):
        self.api = api or PriceAPI()
        self.cache: Dict[str, str] = {}
        self.hits = 0
        self.misses = 0

    def get_value(self, coin: str) -> str:
        if coin in self.cache:
            self.hits += 1
            return self.cache[coin]
        self.misses += 1
        self.cache[coin] = self.api.get_value(coin)
        return self.cache[coin]

    def clear(self) -> None:
        self.cache.clear()
