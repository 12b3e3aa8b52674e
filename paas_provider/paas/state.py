"""Polling state machine for long-running service operations.

``step`` is the pure transition applied to every probe outcome;
``StateChangeConf.wait`` is the loop around it that owns the delay between
probes, the deadline and cancellation.
"""

import logging
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple

from paas_provider.exceptions import (
    NotFoundError,
    UnexpectedStateError,
    WaitCancelledError,
    WaitTimeoutError,
)
from paas_provider.utils.backoff import Backoff, BackoffConfig

logger = logging.getLogger(__name__)

RefreshFunc = Callable[[], Tuple[Optional[Any], str]]


class WaitPhase(str, Enum):
    """Phase of a wait."""
    POLLING = "polling"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of a single status probe.

    ``result`` is None when the object wasn't found.
    """
    result: Optional[Any] = None
    status: str = ""
    error: Optional[Exception] = None


@dataclass(frozen=True)
class WaitState:
    """Snapshot of a wait between probes."""
    phase: WaitPhase = WaitPhase.POLLING
    result: Optional[Any] = None
    last_status: str = ""
    probes: int = 0
    not_found_count: int = 0
    target_occurrences: int = 0
    error: Optional[Exception] = None

    @property
    def done(self) -> bool:
        return self.phase != WaitPhase.POLLING


def _status_value(status: Any) -> str:
    return str(getattr(status, 'value', status) or "")


def step(conf: 'StateChangeConf', state: WaitState, probe: ProbeResult) -> WaitState:
    """Apply one probe outcome to the wait state."""
    state = replace(state, probes=state.probes + 1)

    if probe.error is not None:
        return replace(state, phase=WaitPhase.FAILED, error=probe.error)

    if probe.result is None:
        # Waiting for the object to disappear
        if not conf.target:
            occurrences = state.target_occurrences + 1
            state = replace(state, result=None, last_status="", target_occurrences=occurrences)
            if occurrences >= conf.continuous_target_occurence:
                return replace(state, phase=WaitPhase.SUCCEEDED)
            return state

        not_found_count = state.not_found_count + 1
        state = replace(state, last_status="", not_found_count=not_found_count)
        if not_found_count >= conf.not_found_checks:
            return replace(
                state,
                phase=WaitPhase.FAILED,
                error=NotFoundError(message=f"couldn't find resource ({not_found_count} retries)")
            )
        return state

    status = _status_value(probe.status)
    state = replace(state, result=probe.result, last_status=status, not_found_count=0)

    if status in conf.target:
        occurrences = state.target_occurrences + 1
        state = replace(state, target_occurrences=occurrences)
        if occurrences >= conf.continuous_target_occurence:
            return replace(state, phase=WaitPhase.SUCCEEDED)
        return state

    if status in conf.pending:
        return replace(state, target_occurrences=0)

    if conf.pending:
        return replace(
            state,
            phase=WaitPhase.FAILED,
            error=UnexpectedStateError(status, expected=conf.target, service=probe.result)
        )

    return replace(state, target_occurrences=0)


class StateChangeConf:
    """Waits for an object to move from pending statuses to a target status.

    Args:
        refresh: Zero-argument probe returning ``(object, status)``;
            ``(None, "")`` means the object wasn't found
        pending: Statuses that keep the wait going
        target: Statuses that end the wait successfully
        timeout: Overall deadline in seconds
        delay: Wait before the first probe
        poll_interval: Fixed interval between probes; 0 uses backoff
        min_timeout: Lower bound for the backoff interval
        not_found_checks: Consecutive not-found probes tolerated
        continuous_target_occurence: Consecutive target hits required
        backoff: Interval calculator overriding the defaults above
        clock: Monotonic time source
        sleep: Blocking sleep; defaults to ``time.sleep``, or to waiting on
            the cancel event when one is given
    """

    def __init__(
        self,
        refresh: RefreshFunc,
        pending: Iterable[Any],
        target: Iterable[Any],
        timeout: float,
        delay: float = 0.0,
        poll_interval: float = 0.0,
        min_timeout: float = 0.0,
        not_found_checks: int = 20,
        continuous_target_occurence: int = 1,
        backoff: Optional[Backoff] = None,
        base_delay: float = 0.1,
        max_delay: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.refresh = refresh
        self.pending = tuple(_status_value(s) for s in pending)
        self.target = tuple(_status_value(s) for s in target)
        self.timeout = timeout
        self.delay = delay
        self.not_found_checks = max(not_found_checks, 1)
        self.continuous_target_occurence = max(continuous_target_occurence, 1)
        self.clock = clock
        self.sleep = sleep

        if backoff is None:
            if poll_interval > 0:
                backoff = Backoff.fixed(poll_interval)
            else:
                backoff = Backoff(BackoffConfig(
                    base_delay=base_delay,
                    max_delay=max_delay,
                    min_delay=min_timeout,
                ))
        self.backoff = backoff

        self.last_state = WaitState()

    def probe(self) -> ProbeResult:
        """Run the refresh function once, capturing its error."""
        try:
            result, status = self.refresh()
        except Exception as e:
            logger.debug(f"Status probe failed: {e}")
            return ProbeResult(error=e)

        return ProbeResult(result=result, status=_status_value(status))

    def wait(self, cancel_event: Optional[threading.Event] = None) -> Optional[Any]:
        """Poll until the target status is reached.

        Returns:
            The last object returned by the probe

        Raises:
            WaitTimeoutError: if the deadline passed while still polling
            WaitCancelledError: if ``cancel_event`` was set
            NotFoundError: if the object stayed missing too long
            UnexpectedStateError: on a status outside pending and target
        """
        deadline = self.clock() + self.timeout
        state = WaitState()
        attempt = 0

        if self.delay > 0:
            self._pause(min(self.delay, self.timeout), cancel_event)

        while True:
            self.last_state = state
            self._check_cancelled(state, cancel_event)

            if state.probes and self.clock() >= deadline:
                raise self._timeout_error(state)

            state = step(self, state, self.probe())
            self.last_state = state
            logger.debug(f"Probe {state.probes}: status '{state.last_status}', phase {state.phase.value}")

            if state.phase == WaitPhase.SUCCEEDED:
                return state.result

            if state.phase == WaitPhase.FAILED:
                raise state.error

            # Keep the interval steady while the target is reoccurring
            if state.target_occurrences == 0:
                attempt += 1

            remaining = deadline - self.clock()
            if remaining <= 0:
                raise self._timeout_error(state)

            self._pause(min(self.backoff.calculate_delay(max(attempt, 1)), remaining), cancel_event)

    def _pause(self, seconds: float, cancel_event: Optional[threading.Event]):
        if self.sleep is not None:
            self.sleep(seconds)
        elif cancel_event is not None:
            cancel_event.wait(seconds)
        else:
            time.sleep(seconds)

    def _check_cancelled(self, state: WaitState, cancel_event: Optional[threading.Event]):
        if cancel_event is not None and cancel_event.is_set():
            raise WaitCancelledError(last_status=state.last_status, service=state.result)

    def _timeout_error(self, state: WaitState) -> WaitTimeoutError:
        return WaitTimeoutError(
            timeout_seconds=self.timeout,
            last_status=state.last_status,
            expected=self.target,
            service=state.result,
        )
