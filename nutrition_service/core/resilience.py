"""
Timeout and bounded retry for calls leaving the process
(object storage, nutrient API, product database).
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Tuple, Type, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from nutrition_service.core.config import Config
from nutrition_service.core.logger import logger

T = TypeVar("T")


def _log_retry(operation: str):
    def before_sleep(retry_state: RetryCallState) -> None:
        logger.warning(
            f"Retrying {operation}",
            error=retry_state.outcome.exception() if retry_state.outcome else None,
            metadata={"event": "external_call_retry", "operation": operation,
                      "attempt": retry_state.attempt_number},
        )
    return before_sleep


@dataclass(frozen=True)
class CallPolicy:
    """
    Each attempt is cut off after `timeout` seconds. Failures listed in
    `retry_on` (and timeouts, when retrying is allowed) get at most `retries`
    more attempts.
    """

    timeout: float = 10.0
    retries: int = 1
    wait: float = 0.5

    @classmethod
    def from_config(cls, config: Config) -> "CallPolicy":
        return cls(
            timeout=config.external_call_timeout,
            retries=config.external_call_retries,
            wait=config.external_call_retry_wait,
        )

    async def run(
        self,
        operation: str,
        func: Callable[[], Awaitable[T]],
        retry_on: Tuple[Type[BaseException], ...] = (),
    ) -> T:
        """Run `func` under the timeout; retry only when `retry_on` is not empty."""
        attempts = self.retries + 1 if retry_on else 1
        retryable = retry_on + (asyncio.TimeoutError,)

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(attempts),
            wait=wait_fixed(self.wait),
            retry=retry_if_exception_type(retryable),
            before_sleep=_log_retry(operation),
            reraise=True,
        ):
            with attempt:
                result = await asyncio.wait_for(func(), timeout=self.timeout)
        return result
