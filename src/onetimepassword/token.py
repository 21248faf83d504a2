import logging
import time
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Tuple, Union

from . import hotp, totp, utils
from .config import DEFAULT_DIGITS, MAX_COUNTER, SUPPORTED_DIGITS
from .exceptions import EmptySecret, InvalidCounter, InvalidURI, NonPositivePeriod, UnsupportedDigitCount
from .factor import Counter, Factor, Instant, TimeStep
from .otp import Algorithm
from .secret import SecretEncoding, decode, encode_base32

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Token:
    """
    An immutable OTP token: the shared secret plus everything needed to
    generate and check codes. ``name`` and ``issuer`` are display metadata
    and play no part in code generation.

    Advancing a counter token returns a new token; the caller is responsible
    for persisting it.
    """

    secret: bytes = field(repr=False)
    factor: Factor = field(default_factory=TimeStep)
    algorithm: Algorithm = Algorithm.SHA1
    digits: int = DEFAULT_DIGITS
    name: str = ""
    issuer: str = ""

    def __post_init__(self) -> None:
        if not self.secret:
            raise EmptySecret("secret must not be empty")
        if isinstance(self.secret, (bytearray, memoryview)):
            object.__setattr__(self, "secret", bytes(self.secret))
        elif not isinstance(self.secret, bytes):
            raise TypeError("secret must be bytes; use Token.from_secret() to decode text")

        object.__setattr__(self, "algorithm", _coerce_algorithm(self.algorithm))

        if isinstance(self.digits, bool) or not isinstance(self.digits, int) or self.digits not in SUPPORTED_DIGITS:
            raise UnsupportedDigitCount("Digits may only be 6, 7, or 8")

        if isinstance(self.factor, Counter):
            value = self.factor.value
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= MAX_COUNTER:
                raise InvalidCounter("counter must be an unsigned 64-bit integer")
        elif isinstance(self.factor, TimeStep):
            if not self.factor.period_seconds > 0:
                raise NonPositivePeriod("period must be a positive number of seconds")
        else:
            raise TypeError("factor must be a Counter or a TimeStep")

        logger.debug(
            "Created %s token (algorithm=%s, digits=%d)",
            "counter" if self.is_counter else "time-based",
            self.algorithm,
            self.digits,
        )

    @classmethod
    def from_secret(
        cls, representation: Union[str, bytes], encoding: SecretEncoding = SecretEncoding.BASE32, **kwargs: Any
    ) -> "Token":
        """
        Builds a token from a secret as typed by a user.

        :param representation: Base32 text, or arbitrary text when ``encoding`` is RAW
        :param encoding: how to interpret ``representation``
        :param kwargs: the remaining Token fields
        """
        return cls(secret=decode(representation, encoding), **kwargs)

    @property
    def is_counter(self) -> bool:
        return isinstance(self.factor, Counter)

    @property
    def is_time_based(self) -> bool:
        return isinstance(self.factor, TimeStep)

    def generate(self, now: Optional[Instant] = None) -> str:
        """
        Returns the code for the current counter, or for the time step
        containing ``now`` (defaults to the system clock).
        """
        if self.is_counter:
            return hotp.at(self, self.factor.value)
        return totp.generate(self, _now(now))

    def generate_and_advance(self, now: Optional[Instant] = None) -> Tuple[str, "Token"]:
        """
        Generates the current code and returns it with the token that must
        be stored before the code is shown. Time-based tokens are returned
        unchanged.
        """
        return self.generate(now), self.advanced()

    def advanced(self) -> "Token":
        if not self.is_counter:
            return self
        if self.factor.value >= MAX_COUNTER:
            raise InvalidCounter("counter cannot be advanced past 2**64 - 1")
        logger.debug("Advancing counter token to %d", self.factor.value + 1)
        return replace(self, factor=self.factor.advance())

    def validate(self, candidate: str, now: Optional[Instant] = None, window: Optional[int] = None) -> bool:
        """
        Checks a candidate code without changing the token.

        :param candidate: the code to check
        :param now: time of the check, defaults to the system clock (time-based only)
        :param window: for time-based tokens, steps accepted on each side of
            the current one (default from settings); for counter tokens,
            counter values accepted after the current one (default 0)
        """
        if self.is_counter:
            return hotp.verify(self, candidate, look_ahead=window or 0) is not None
        return totp.validate(self, candidate, _now(now), window)

    def provisioning_uri(self, **kwargs: str) -> str:
        """
        Returns the otpauth URI for this token. This exports the secret.

        :raises InvalidURI: the period is not a whole number of seconds, or
            the epoch is not the Unix epoch; otpauth URIs cannot carry either
        """
        counter = self.factor.value if self.is_counter else None
        period = None
        if self.is_time_based:
            period = self.factor.period_seconds
            if period != int(period):
                raise InvalidURI("otpauth URIs only support whole-second periods")
            if self.factor.epoch_seconds != 0:
                raise InvalidURI("otpauth URIs only support time steps counted from the Unix epoch")
        return utils.build_uri(
            encode_base32(self.secret),
            name=self.name,
            initial_count=counter,
            issuer=self.issuer or None,
            algorithm=self.algorithm.value,
            digits=self.digits,
            period=int(period) if period is not None else None,
            **kwargs,
        )


def _coerce_algorithm(algorithm: Union[Algorithm, str]) -> Algorithm:
    if isinstance(algorithm, Algorithm):
        return algorithm
    return Algorithm.from_string(algorithm)


def _now(now: Optional[Instant]) -> Instant:
    return time.time() if now is None else now
