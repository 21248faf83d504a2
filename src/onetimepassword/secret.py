import base64
import binascii
import re
import secrets
from enum import StrEnum
from typing import Union

from .exceptions import EmptySecret, InvalidSecretEncoding

# RFC 4226 R6 asks for at least 128 bits; 160 is the recommended size.
MIN_SECRET_BYTES = 16
DEFAULT_SECRET_BYTES = 20

_SEPARATORS = re.compile(r"[\s\-]+")


class SecretEncoding(StrEnum):
    RAW = "raw"
    BASE32 = "base32"


def decode(representation: Union[str, bytes], encoding: SecretEncoding = SecretEncoding.BASE32) -> bytes:
    """
    Converts a user-provided secret into the raw bytes used as the HMAC key.

    :param representation: the secret as typed by the user (or raw bytes)
    :param encoding: ``RAW`` uses the UTF-8 bytes of the text as the key,
        ``BASE32`` decodes an RFC 4648 string (case-insensitive, padding optional)
    :returns: key bytes
    :raises InvalidSecretEncoding: malformed Base32 input
    :raises EmptySecret: the decoded key is empty
    """
    encoding = SecretEncoding(encoding)
    if encoding is SecretEncoding.RAW:
        key = representation if isinstance(representation, bytes) else representation.encode("utf-8")
    else:
        key = _decode_base32(representation)

    if not key:
        raise EmptySecret("secret must not be empty")
    return bytes(key)


def _decode_base32(representation: Union[str, bytes]) -> bytes:
    if isinstance(representation, bytes):
        try:
            representation = representation.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidSecretEncoding("Base32 secret must be ASCII") from e

    # Authenticator apps show secrets in groups, e.g. "JBSW Y3DP EHPK 3PXP"
    secret = _SEPARATORS.sub("", representation).rstrip("=")
    missing_padding = len(secret) % 8
    if missing_padding != 0:
        secret += "=" * (8 - missing_padding)
    # b32decode raises a plain ValueError for non-ASCII text
    try:
        return base64.b32decode(secret, casefold=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretEncoding("invalid Base32 secret") from e


def encode_base32(secret: bytes, padding: bool = False) -> str:
    """
    Encodes key bytes as upper-case Base32. The otpauth scheme does not use
    padding, so it is stripped unless asked for.
    """
    encoded = base64.b32encode(secret).decode("ascii")
    return encoded if padding else encoded.rstrip("=")


def random_secret(length: int = DEFAULT_SECRET_BYTES) -> bytes:
    if length < MIN_SECRET_BYTES:
        raise ValueError("Secrets should be at least 128 bits")
    return secrets.token_bytes(length)
