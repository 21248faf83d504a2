import hashlib
import hmac
from enum import StrEnum
from typing import Any

from .config import DEFAULT_DIGITS, MAX_COUNTER, SUPPORTED_DIGITS
from .exceptions import UnsupportedAlgorithm


class Algorithm(StrEnum):
    """
    HMAC digest used to derive codes. The member values are the names used
    in otpauth URIs.
    """

    SHA1 = "SHA1"
    SHA256 = "SHA256"
    SHA512 = "SHA512"

    @classmethod
    def from_string(cls, value: str) -> "Algorithm":
        try:
            return _ALGORITHMS_BY_NAME[value.upper()]
        except (KeyError, AttributeError):
            raise UnsupportedAlgorithm("Invalid value for algorithm, must be SHA1, SHA256 or SHA512") from None

    @property
    def digest(self) -> Any:
        return _DIGESTS[self]

    @property
    def digest_size(self) -> int:
        return self.digest().digest_size


_ALGORITHMS_BY_NAME = {algorithm.value: algorithm for algorithm in Algorithm}

_DIGESTS = {
    Algorithm.SHA1: hashlib.sha1,
    Algorithm.SHA256: hashlib.sha256,
    Algorithm.SHA512: hashlib.sha512,
}


def generate_otp(key: bytes, counter: int, algorithm: Algorithm = Algorithm.SHA1, digits: int = DEFAULT_DIGITS) -> str:
    """
    Implements RFC 4226 section 5.3.

    :param key: the shared secret bytes
    :param counter: the moving factor, either the HOTP counter or the TOTP time step
    :param algorithm: the HMAC digest
    :param digits: length of the code, 6 to 8
    :returns: the code, zero-padded to ``digits`` characters
    """
    if digits not in SUPPORTED_DIGITS:
        raise ValueError("digits must be between 6 and 8")

    hasher = hmac.new(key, int_to_bytestring(counter), Algorithm(algorithm).digest)
    code = dynamic_truncate(hasher.digest())
    # Adding a power of ten larger than any code keeps the leading zeros
    str_code = str(10_000_000_000 + (code % 10**digits))
    return str_code[-digits:]


def dynamic_truncate(hmac_hash: bytes) -> int:
    """
    Picks 4 bytes of the digest at the offset given by the low nibble of its
    last byte and reads them as a 31-bit big-endian integer.
    """
    offset = hmac_hash[-1] & 0xF
    return (
        (hmac_hash[offset] & 0x7F) << 24
        | (hmac_hash[offset + 1] & 0xFF) << 16
        | (hmac_hash[offset + 2] & 0xFF) << 8
        | (hmac_hash[offset + 3] & 0xFF)
    )


def int_to_bytestring(i: int, padding: int = 8) -> bytes:
    """
    Turns an integer to the OATH specified
    bytestring, which is fed to the HMAC
    along with the secret
    """
    if i < 0 or i > MAX_COUNTER:
        raise ValueError("input must be an unsigned 64-bit integer")
    result = bytearray()
    while i != 0:
        result.append(i & 0xFF)
        i >>= 8
    return bytes(bytearray(reversed(result)).rjust(padding, b"\0"))
