import logging
from typing import TYPE_CHECKING, Optional

from . import utils
from .config import settings
from .factor import Instant, current_value
from .otp import generate_otp

if TYPE_CHECKING:
    from .token import Token

logger = logging.getLogger(__name__)


def timecode(token: "Token", now: Instant) -> int:
    """
    Returns the time step containing ``now`` for a time-based token.
    """
    if not token.is_time_based:
        raise TypeError("timecode() requires a time-based token")
    return current_value(token.factor, now)


def generate(token: "Token", now: Instant) -> str:
    """
    Generates the code for the time step containing ``now``.

    :param token: a time-based token
    :param now: seconds since the Unix epoch, or a datetime
    :returns: OTP
    """
    return generate_otp(token.secret, timecode(token, now), token.algorithm, token.digits)


def matched_offset(token: "Token", otp: str, now: Instant, window: Optional[int] = None) -> Optional[int]:
    """
    Looks for ``otp`` among the codes of the ``window`` steps on each side of
    the current one, nearest steps first.

    :returns: the offset in steps of the matching code (negative when the
        prover's clock is behind), or None
    """
    if window is None:
        window = settings.validation_window
    if window < 0:
        raise ValueError("window must not be negative")

    current = timecode(token, now)
    for offset in sorted(range(-window, window + 1), key=abs):
        step = current + offset
        if step < 0:
            continue
        if utils.strings_equal(str(otp), generate_otp(token.secret, step, token.algorithm, token.digits)):
            if offset:
                logger.debug("Time-based code matched %+d steps from the current step", offset)
            return offset
    logger.debug("Time-based code did not match within a window of %d", window)
    return None


def validate(token: "Token", otp: str, now: Instant, window: Optional[int] = None) -> bool:
    """
    Verifies a code, tolerating ``window`` steps of clock drift either way.

    :param token: a time-based token
    :param otp: the code to check
    :param now: time of the check
    :param window: steps accepted on each side; defaults to the configured validation window
    """
    return matched_offset(token, otp, now, window) is not None
