"""
Retry Backoff
=============
Exponential backoff bounded by the elapsed-time budget of a logical call.
"""

import random
from typing import Dict

import structlog
from tenacity import RetryCallState

from .config import TransportConfig

logger = structlog.get_logger(__name__)


class BudgetedExponentialWait:
    """
    Tenacity wait strategy: initial * multiplier^(n-1), capped at max_interval
    and randomized by +/- randomization_factor.

    The delay drawn for an attempt is kept, so the stop condition
    (budget_spent) and the sleep agree on the same value. One instance
    serves one logical call.
    """

    def __init__(self, config: TransportConfig):
        self.config = config
        self._delays: Dict[int, float] = {}

    def base_delay(self, attempt_number: int) -> float:
        delay = self.config.initial_interval * (
            self.config.multiplier ** (attempt_number - 1)
        )
        return min(delay, self.config.max_interval)

    def next_delay(self, retry_state: RetryCallState) -> float:
        """Randomized delay after the given attempt, drawn once per attempt."""
        attempt_number = retry_state.attempt_number
        if attempt_number not in self._delays:
            delay = self.base_delay(attempt_number)
            factor = self.config.randomization_factor
            if factor:
                delay = delay * (1 - factor + 2 * factor * random.random())
            self._delays[attempt_number] = delay
        return self._delays[attempt_number]

    def budget_spent(self, retry_state: RetryCallState) -> bool:
        """
        Stop condition: True when sleeping the next delay would reach
        max_elapsed_time. The call then ends with the error it already has.
        """
        elapsed = retry_state.seconds_since_start or 0.0
        return elapsed + self.next_delay(retry_state) >= self.config.max_elapsed_time

    def __call__(self, retry_state: RetryCallState) -> float:
        return self.next_delay(retry_state)


def log_before_sleep(retry_state: RetryCallState) -> None:
    """Log a retry with the failed attempt's error and the upcoming delay."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Retrying after transient failure",
        attempt=retry_state.attempt_number,
        delay=round(retry_state.next_action.sleep, 3) if retry_state.next_action else None,
        error=str(exc),
    )
