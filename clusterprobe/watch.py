import logging
from dataclasses import dataclass, field
from enum import Enum
from threading import Event
from time import monotonic, sleep
from typing import Callable, ClassVar, Optional

logger = logging.getLogger(__name__)

# ticks accumulate the interval, so allow for float rounding at the deadline
DEADLINE_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PollSpec:
    # seconds between two checks
    interval: float
    # seconds before giving up on a resource that is still pending
    timeout: float
    # run the first check right away instead of after one interval
    immediate: bool = field(default_factory=lambda: True)

    def __post_init__(self):
        if self.interval < 0:
            raise ValueError(f"Poll interval must not be negative (is: {self.interval})")
        if self.timeout <= 0:
            raise ValueError(f"Poll timeout must be positive (is: {self.timeout})")


class OutcomeState(Enum):
    CONVERGED = "CONVERGED"
    PENDING = "PENDING"
    FAILED = "FAILED"


@dataclass(frozen=True)
class Outcome:
    state: OutcomeState
    reason: Optional[str] = None
    CONVERGED: ClassVar["Outcome"]

    @classmethod
    def pending(cls, reason: Optional[str] = None) -> "Outcome":
        return cls(OutcomeState.PENDING, reason)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(OutcomeState.FAILED, reason)

    @property
    def converged(self) -> bool:
        return self.state == OutcomeState.CONVERGED

    @property
    def is_failed(self) -> bool:
        return self.state == OutcomeState.FAILED


Outcome.CONVERGED = Outcome(OutcomeState.CONVERGED)


class ConvergenceError(RuntimeError):
    pass


class ConvergenceFailed(ConvergenceError):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class ConvergenceTimeout(ConvergenceError):
    def __init__(self, description: str, timeout: float, attempts: int, last_reason=None):
        message = (
            f"Timed out waiting for {description} after {timeout:.1f}s "
            f"({attempts} check(s))"
        )
        if last_reason:
            message = f"{message}; last observation: {last_reason}"
        super().__init__(message)
        self.timeout = timeout
        self.attempts = attempts
        self.last_reason = last_reason


class ConvergenceCancelled(ConvergenceError):
    pass


def _wait(delay: float, cancel: Optional[Event]) -> None:
    if delay <= 0:
        return
    if cancel is not None:
        cancel.wait(delay)
    else:
        sleep(delay)


def await_convergence(
    spec: PollSpec,
    check: Callable[[], Outcome],
    is_transient: Optional[Callable[[Exception], bool]] = None,
    cancel: Optional[Event] = None,
    description: str = "resource",
) -> int:
    """
    Poll `check` until it reports convergence, a failure, or `spec.timeout` elapses

    A check is allowed as long as its scheduled tick is not later than the deadline, so a
    check landing exactly on the timeout boundary still runs.

    :param spec: interval, timeout and whether to check immediately
    :type spec: PollSpec
    :param check: returns the Outcome of one observation of the resource
    :param is_transient: decides whether an exception raised by `check` is retried
    :param cancel: an Event that aborts the wait once it is set
    :param description: what is being waited for, used in logs and errors
    :return: the number of checks performed
    :raises ConvergenceFailed: the resource entered a disallowed state or the check failed permanently
    :raises ConvergenceTimeout: the resource was still pending at the deadline
    :raises ConvergenceCancelled: `cancel` was set
    """
    start = monotonic()
    deadline = start + spec.timeout
    tick = start if spec.immediate else start + spec.interval
    attempts = 0
    last_reason = None

    while True:
        if tick > deadline + DEADLINE_TOLERANCE:
            logger.info(
                f"Giving up waiting for {description} ({attempts} check(s), {spec.timeout:.1f}s)"
            )
            raise ConvergenceTimeout(description, spec.timeout, attempts, last_reason)
        _wait(tick - monotonic(), cancel)
        if cancel is not None and cancel.is_set():
            raise ConvergenceCancelled(
                f"Waiting for {description} was cancelled after {attempts} check(s)"
            )

        attempts = attempts + 1
        try:
            outcome = check()
        except Exception as e:  # noqa
            if is_transient is not None and is_transient(e):
                outcome = Outcome.pending(str(e))
            else:
                logger.debug(f"Check for {description} failed permanently: {e}")
                raise ConvergenceFailed(str(e)) from e

        elapsed = monotonic() - start
        if outcome.converged:
            logger.info(
                f"Done waiting for {description} ({attempts} check(s), {elapsed:.1f}s/{spec.timeout:.1f}s)"
            )
            return attempts
        if outcome.is_failed:
            logger.debug(f"{description} failed: {outcome.reason}")
            raise ConvergenceFailed(outcome.reason or f"{description} failed")

        last_reason = outcome.reason
        logger.debug(
            f"Waiting for {description} (is: {last_reason or 'pending'}, {elapsed:.1f}s/{spec.timeout:.1f}s)"
        )
        tick = max(tick + spec.interval, monotonic())
