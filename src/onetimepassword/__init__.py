from re import split
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from . import hotp as hotp
from . import totp as totp
from .config import Settings as Settings
from .config import settings as settings
from .exceptions import (
    EmptySecret as EmptySecret,
    InvalidCounter as InvalidCounter,
    InvalidSecretEncoding as InvalidSecretEncoding,
    InvalidURI as InvalidURI,
    NonPositivePeriod as NonPositivePeriod,
    OTPError as OTPError,
    TokenNotFound as TokenNotFound,
    UnsupportedAlgorithm as UnsupportedAlgorithm,
    UnsupportedDigitCount as UnsupportedDigitCount,
)
from .factor import Counter as Counter
from .factor import TimeStep as TimeStep
from .factor import current_value as current_value
from .otp import Algorithm as Algorithm
from .otp import generate_otp as generate_otp
from .secret import SecretEncoding as SecretEncoding
from .secret import decode as decode_secret
from .secret import encode_base32 as encode_base32
from .secret import random_secret as random_secret
from .store import MemoryTokenStore as MemoryTokenStore
from .store import PersistentToken as PersistentToken
from .store import TokenStore as TokenStore
from .token import Token as Token


def parse_uri(uri: str, secret: Optional[bytes] = None) -> Token:
    """
    Parses the provisioning URI for a token; works for either TOTP or HOTP.
    Only the fields used for code generation and the label are read.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the hotp/totp URI to parse
    :param secret: key bytes kept outside the URI (e.g. in a keychain);
        takes precedence over the ``secret`` parameter
    :returns: Token
    """
    encoded_secret = None
    counter = None
    period = None
    token_data: Dict[str, Any] = {}

    parsed_uri = urlparse(uri)
    if parsed_uri.scheme != "otpauth":
        raise InvalidURI("Not an otpauth URI")

    # Label is "issuer:name" or just "name"
    accountinfo_parts = split(":|%3A", unquote(parsed_uri.path[1:]), maxsplit=1)
    if len(accountinfo_parts) == 1:
        token_data["name"] = accountinfo_parts[0]
    else:
        token_data["issuer"] = accountinfo_parts[0]
        token_data["name"] = accountinfo_parts[1].strip()

    try:
        for key, value in parse_qsl(parsed_uri.query):
            if key == "secret":
                encoded_secret = value
            elif key == "issuer":
                if token_data.get("issuer") and token_data["issuer"] != value:
                    raise InvalidURI("If issuer is specified in both label and parameters, it should be equal.")
                token_data["issuer"] = value
            elif key == "algorithm":
                token_data["algorithm"] = Algorithm.from_string(value)
            elif key == "digits":
                token_data["digits"] = int(value)
            elif key == "period":
                period = int(value)
            elif key == "counter":
                counter = int(value)
    except OTPError:
        raise
    except ValueError as e:
        raise InvalidURI("Invalid numeric parameter in otpauth URI") from e

    if secret is None:
        if not encoded_secret:
            raise InvalidURI("No secret found in URI")
        secret = decode_secret(encoded_secret, SecretEncoding.BASE32)

    if parsed_uri.netloc == "totp":
        factor = TimeStep(period) if period is not None else TimeStep()
    elif parsed_uri.netloc == "hotp":
        factor = Counter(counter) if counter is not None else Counter()
    else:
        raise InvalidURI("Not a supported OTP type")

    return Token(secret=secret, factor=factor, **token_data)
