"""
PollingEngine – Retries a condition against a live target until it holds
or the deadline elapses.

State machine:  Init -> Polling -> {Satisfied | TimedOut}

  1. Init: deadline = now + policy.timeout_ms
  2. Polling: observe; satisfied -> Satisfied.
     Otherwise, now >= deadline -> TimedOut, else sleep and repeat.

At least one evaluation always happens, even with timeout_ms <= 0. A
target that cannot be located is "not yet satisfied", not an error.
Driver failures and caller errors propagate out of the loop immediately.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

from uiverify.conditions import Condition
from uiverify.models import (
    Observation,
    PollOutcome,
    PollPolicy,
    PollState,
    TargetRef,
    VerifierConfig,
)
from uiverify.resolver import LocatorResolver

logger = logging.getLogger(__name__)


def _loop_time() -> float:
    return asyncio.get_running_loop().time()


class PollingEngine:
    """Cooperative busy-poll with sleep; one attempt in flight at a time."""

    def __init__(
        self,
        resolver: LocatorResolver,
        config: Optional[VerifierConfig] = None,
        clock: Callable[[], float] = _loop_time,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self._resolver = resolver
        self._config = config or VerifierConfig()
        self._clock = clock
        self._sleep = sleep

    async def evaluate(
        self,
        condition: Condition,
        target: TargetRef,
        expected: Any = None,
        policy: Optional[PollPolicy] = None,
        arg: Any = None,
    ) -> PollOutcome:
        """Poll *condition* on *target* and return the terminal outcome."""
        policy = policy or PollPolicy.from_config(self._config)
        condition.validate(expected)

        start = self._clock()
        deadline = start + max(policy.timeout_ms, 0) / 1000.0
        interval = policy.poll_interval_ms / 1000.0
        attempts = 0
        observation = Observation()

        while True:
            attempts += 1
            # Re-locate every attempt: selector targets must see the current DOM.
            handle = self._resolver.locate(target)
            observation = await condition.check(
                handle, expected, arg, self._config.read_timeout_ms
            )
            if observation.satisfied:
                logger.debug(
                    "Condition %s satisfied after %d attempt(s)",
                    condition.name,
                    attempts,
                )
                return self._outcome(PollState.SATISFIED, observation, attempts, start)

            remaining = deadline - self._clock()
            if remaining <= 0:
                break
            logger.debug(
                "Condition %s not satisfied (attempt %d, observed=%r), retrying",
                condition.name,
                attempts,
                observation.observed_value,
            )
            await self._sleep(min(interval, remaining))

        logger.info(
            "Condition %s timed out after %d attempt(s) (%d ms)",
            condition.name,
            attempts,
            policy.timeout_ms,
        )
        return self._outcome(PollState.TIMED_OUT, observation, attempts, start)

    def _outcome(
        self, state: PollState, observation: Observation, attempts: int, start: float
    ) -> PollOutcome:
        return PollOutcome(
            state=state,
            observation=observation,
            attempts=attempts,
            elapsed_ms=round((self._clock() - start) * 1000, 2),
        )
