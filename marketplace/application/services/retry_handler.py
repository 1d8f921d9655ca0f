"""
Retry Handler service for managing retry logic and circuit breaker patterns.
"""

import asyncio
import inspect
import random
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, Tuple, Type, TypeVar, Union

from marketplace.config.logging import get_logger
from marketplace.domain.exceptions.upstream_error import UpstreamServiceError

logger = get_logger(__name__)

T = TypeVar("T")

FAILURE_THRESHOLD = 5
OPEN_INTERVAL = timedelta(minutes=5)


class RetryHandler:
    """Retry handler with exponential backoff and jitter."""

    def __init__(self, sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep):
        self.logger = logger
        self.sleep = sleep
        # key -> (state, last_failure, failure_count)
        self.circuit_breaker_state: Dict[str, Tuple[str, datetime, int]] = {}

    async def execute_with_retry(
        self,
        operation: Callable[[], Union[T, Awaitable[T]]],
        max_retries: int = 3,
        base_delay: float = 1.0,
        operation_key: str = "default",
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    ) -> T:
        """
        Execute operation with retry logic and circuit breaker.

        Args:
            operation: Callable returning a value or an awaitable
            max_retries: Maximum number of retry attempts
            base_delay: Base delay in seconds for exponential backoff
            operation_key: Key for circuit breaker tracking
            retry_on: Exception types worth retrying; others propagate at once

        Returns:
            Result of the operation

        Raises:
            UpstreamServiceError: If the circuit breaker is open
            Exception: The last error once retries are exhausted
        """
        if self._is_circuit_open(operation_key):
            raise UpstreamServiceError(operation_key, "circuit breaker is open")

        last_exception = None

        for attempt in range(max_retries + 1):
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result

                self._record_success(operation_key)
                return result

            except retry_on as e:
                last_exception = e
                self._record_failure(operation_key)

                if attempt == max_retries:
                    self.logger.error(
                        "Operation failed after all retries",
                        operation_key=operation_key,
                        total_attempts=attempt + 1,
                        final_error=str(e),
                    )
                    break

                delay = self._calculate_delay(attempt, base_delay)

                self.logger.warning(
                    "Operation failed, retrying",
                    operation_key=operation_key,
                    attempt=attempt + 1,
                    max_retries=max_retries,
                    error=str(e),
                    next_retry_in_seconds=delay,
                )

                await self.sleep(delay)

        raise last_exception

    def _calculate_delay(self, attempt: int, base_delay: float) -> float:
        """Calculate delay with exponential backoff and jitter."""
        exponential_delay = base_delay * (2**attempt)

        # ±25% jitter
        jitter = exponential_delay * 0.25
        jittered_delay = exponential_delay + random.uniform(-jitter, jitter)

        return min(jittered_delay, 60.0)

    def _is_circuit_open(self, operation_key: str) -> bool:
        """Check if circuit breaker is open for the operation."""
        if operation_key not in self.circuit_breaker_state:
            return False

        state, last_failure, failure_count = self.circuit_breaker_state[operation_key]

        if state == "open":
            if datetime.now(timezone.utc) - last_failure > OPEN_INTERVAL:
                self.circuit_breaker_state[operation_key] = (
                    "half_open",
                    last_failure,
                    failure_count,
                )
                return False
            return True

        return False

    def _record_failure(self, operation_key: str) -> None:
        """Record a failure for circuit breaker logic."""
        now = datetime.now(timezone.utc)

        if operation_key not in self.circuit_breaker_state:
            self.circuit_breaker_state[operation_key] = ("closed", now, 1)
            return

        state, _, failure_count = self.circuit_breaker_state[operation_key]
        failure_count += 1

        if failure_count >= FAILURE_THRESHOLD:
            self.circuit_breaker_state[operation_key] = ("open", now, failure_count)
            self.logger.warning(
                "Circuit breaker opened",
                operation_key=operation_key,
                failure_count=failure_count,
            )
        else:
            self.circuit_breaker_state[operation_key] = (state, now, failure_count)

    def _record_success(self, operation_key: str) -> None:
        """Reset the breaker after a success."""
        if operation_key in self.circuit_breaker_state:
            state, last_failure, _ = self.circuit_breaker_state[operation_key]
            self.circuit_breaker_state[operation_key] = ("closed", last_failure, 0)
            if state == "half_open":
                self.logger.info(
                    "Circuit breaker reset to closed", operation_key=operation_key
                )

    def get_circuit_breaker_status(self, operation_key: str) -> dict:
        """Get circuit breaker status for monitoring."""
        if operation_key not in self.circuit_breaker_state:
            return {"state": "closed", "failure_count": 0, "last_failure": None}

        state, last_failure, failure_count = self.circuit_breaker_state[operation_key]
        return {
            "state": state,
            "failure_count": failure_count,
            "last_failure": last_failure.isoformat() if last_failure else None,
        }
