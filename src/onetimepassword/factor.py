import datetime
from dataclasses import dataclass, field
from typing import Union

from .config import DEFAULT_COUNTER, DEFAULT_EPOCH, DEFAULT_PERIOD

Instant = Union[int, float, datetime.datetime]
Duration = Union[int, float, datetime.timedelta]


def to_seconds(value: Union[Instant, Duration]) -> float:
    """
    Normalizes an instant (seconds since the Unix epoch or a datetime) or a
    duration (seconds or a timedelta) to seconds.
    """
    if isinstance(value, datetime.datetime):
        return value.timestamp()
    if isinstance(value, datetime.timedelta):
        return value.total_seconds()
    return value


@dataclass(frozen=True)
class Counter:
    """
    HOTP moving factor: an explicit 8-byte counter.
    """

    value: int = DEFAULT_COUNTER

    def advance(self) -> "Counter":
        """
        Returns the counter that follows this one. The caller must persist it
        before presenting the code generated from this counter.
        """
        return Counter(self.value + 1)


@dataclass(frozen=True)
class TimeStep:
    """
    TOTP moving factor: the number of ``period`` seconds elapsed since ``epoch``.
    """

    period: Duration = DEFAULT_PERIOD
    epoch: Instant = field(default=DEFAULT_EPOCH)

    @property
    def period_seconds(self) -> float:
        return to_seconds(self.period)

    @property
    def epoch_seconds(self) -> float:
        return to_seconds(self.epoch)


Factor = Union[Counter, TimeStep]


def current_value(factor: Factor, now: Instant = 0) -> int:
    """
    Computes the moving factor value fed to the HMAC.

    :param factor: a Counter or a TimeStep
    :param now: the current time, ignored for counters
    :returns: the counter value, or the time step containing ``now``
    """
    if isinstance(factor, Counter):
        return factor.value

    elapsed = to_seconds(now) - factor.epoch_seconds
    # Times before the epoch all belong to the first step
    if elapsed < 0:
        return 0
    return int(elapsed // factor.period_seconds)


def time_remaining(factor: TimeStep, now: Instant) -> float:
    """
    Seconds left before the step containing ``now`` ends.
    """
    period = factor.period_seconds
    elapsed = to_seconds(now) - factor.epoch_seconds
    # Step 0 also covers every time before the epoch
    if elapsed < 0:
        return period - elapsed
    return period - elapsed % period
