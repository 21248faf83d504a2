class OTPError(ValueError):
    """
    Base class for every error raised by this package: building, parsing
    or exporting a token, and looking one up in a token store.
    """


class InvalidSecretEncoding(OTPError):
    pass


class EmptySecret(OTPError):
    pass


class UnsupportedDigitCount(OTPError):
    pass


class NonPositivePeriod(OTPError):
    pass


class InvalidCounter(OTPError):
    pass


class UnsupportedAlgorithm(OTPError):
    pass


class InvalidURI(OTPError):
    pass


class TokenNotFound(OTPError):
    """Raised by a token store when an identifier is unknown."""
