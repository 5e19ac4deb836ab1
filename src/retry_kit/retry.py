"""Bounded retry executor.

Invokes a zero-argument fallible operation until it succeeds or an attempt
ceiling is reached. Exhaustion is reported as a result, not raised. There is
no delay between attempts.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from retry_kit.constants import DEFAULT_MAX_ATTEMPTS


logger = logging.getLogger(__name__)


class OperationFailed(Exception):
    """Raised by a fallible operation when a single attempt fails."""
    pass


class RetryOutcome(str, Enum):
    SUCCEEDED = "SUCCEEDED"
    EXHAUSTED_RETRIES = "EXHAUSTED_RETRIES"


@dataclass
class RetryResult:
    """Final outcome of one executor run."""
    outcome: RetryOutcome
    attempts: int
    max_attempts: int
    value: Any = None
    last_error: Optional[OperationFailed] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is RetryOutcome.SUCCEEDED

    @property
    def exhausted(self) -> bool:
        return self.outcome is RetryOutcome.EXHAUSTED_RETRIES


class BoundedRetryExecutor:
    """Runs an operation at most ``max_attempts`` times.

    Only ``OperationFailed`` counts as a failed attempt. Any other exception
    propagates to the caller untouched.
    """

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int):
            raise ValueError(f"max_attempts must be an integer, got {max_attempts!r}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts

    def execute(self, operation: Callable[[], Any]) -> RetryResult:
        """
        Invoke ``operation`` until it succeeds or the ceiling is reached.

        Args:
            operation: Zero-argument callable. Signals failure by raising
                       OperationFailed; any return value counts as success.

        Returns:
            RetryResult with the outcome and the number of attempts made.
        """
        attempts = 0
        last_error = None

        while attempts < self.max_attempts:
            try:
                value = operation()
            except OperationFailed as e:
                attempts += 1
                last_error = e
                logger.info("Failed attempt %d/%d: %s", attempts, self.max_attempts, e)
                continue
            return self._succeeded(attempts + 1, value, last_error)

        return self._exhausted(attempts, last_error)

    async def execute_async(self, operation: Callable[[], Awaitable[Any]]) -> RetryResult:
        """Same contract as ``execute`` for an operation returning an awaitable."""
        attempts = 0
        last_error = None

        while attempts < self.max_attempts:
            try:
                value = await operation()
            except OperationFailed as e:
                attempts += 1
                last_error = e
                logger.info("Failed attempt %d/%d: %s", attempts, self.max_attempts, e)
                continue
            return self._succeeded(attempts + 1, value, last_error)

        return self._exhausted(attempts, last_error)

    def _succeeded(
        self, attempts: int, value: Any, last_error: Optional[OperationFailed]
    ) -> RetryResult:
        logger.info("Succeeded after %d attempt(s)", attempts)
        return RetryResult(
            outcome=RetryOutcome.SUCCEEDED,
            attempts=attempts,
            max_attempts=self.max_attempts,
            value=value,
            last_error=last_error,
        )

    def _exhausted(self, attempts: int, last_error: Optional[OperationFailed]) -> RetryResult:
        logger.warning("Retry maximum reached after %d attempt(s)", attempts)
        return RetryResult(
            outcome=RetryOutcome.EXHAUSTED_RETRIES,
            attempts=attempts,
            max_attempts=self.max_attempts,
            last_error=last_error,
        )


def retry_operation(
    operation: Callable[[], Any],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> RetryResult:
    """Run ``operation`` through a one-shot BoundedRetryExecutor."""
    return BoundedRetryExecutor(max_attempts).execute(operation)
