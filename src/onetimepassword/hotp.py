import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Tuple

from . import utils
from .config import MAX_COUNTER, settings
from .factor import Counter
from .otp import generate_otp

if TYPE_CHECKING:
    from .token import Token

logger = logging.getLogger(__name__)


def at(token: "Token", count: int) -> str:
    """
    Generates the code for an explicit counter value.

    :param token: the token whose secret, algorithm and digits are used
    :param count: the HMAC counter
    :returns: OTP
    """
    return generate_otp(token.secret, count, token.algorithm, token.digits)


def verify(token: "Token", otp: str, look_ahead: int = 0) -> Optional[int]:
    """
    Checks a code against the token's counter and the ``look_ahead`` values
    that follow it.

    :param token: a counter token
    :param otp: the code to check
    :param look_ahead: how many counter values past the current one are accepted
    :returns: the matching counter value, or None
    """
    if not token.is_counter:
        raise TypeError("verify() requires a counter token")
    if look_ahead < 0:
        raise ValueError("look_ahead must not be negative")

    start = token.factor.value
    for count in range(start, min(start + look_ahead, MAX_COUNTER) + 1):
        if utils.strings_equal(str(otp), at(token, count)):
            if count != start:
                logger.debug("Counter code matched %d steps ahead", count - start)
            return count
    logger.debug("Counter code did not match within %d values", look_ahead + 1)
    return None


def verify_and_advance(token: "Token", otp: str, look_ahead: int = 0) -> Tuple[bool, "Token"]:
    """
    Verifies a code and, on success, returns the token positioned just after
    the matching counter so the same code cannot be replayed. On a miss the
    token is returned unchanged.
    """
    matched = verify(token, otp, look_ahead=look_ahead)
    if matched is None:
        return False, token
    return True, _at_counter(token, matched).advanced()


def resynchronize(token: "Token", first: str, second: str, look_ahead: Optional[int] = None) -> Optional["Token"]:
    """
    Recovers a counter token that fell out of sync with its prover, using
    two consecutive codes. The window searched is bounded by ``look_ahead``
    (defaults to the configured resync look-ahead).

    :returns: the token positioned after the second code, or None
    """
    if look_ahead is None:
        look_ahead = settings.resync_look_ahead

    matched = verify(token, first, look_ahead=look_ahead)
    if matched is None or matched >= MAX_COUNTER:
        return None
    following = _at_counter(token, matched + 1)
    if not utils.strings_equal(str(second), at(following, matched + 1)):
        logger.debug("Resynchronization failed: second code did not follow the first")
        return None
    logger.debug("Resynchronized counter token at %d", matched + 2)
    return following.advanced()


def _at_counter(token: "Token", count: int) -> "Token":
    return replace(token, factor=Counter(count))
