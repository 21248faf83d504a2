"""Tests for time-based generation and windowed validation."""

from __future__ import annotations

import pytest

from onetimepassword import totp
from onetimepassword.config import Settings
from onetimepassword.factor import Counter, TimeStep
from onetimepassword.otp import Algorithm
from onetimepassword.token import Token

from .conftest import RFC_SECRET, RFC_SECRET_SHA256, RFC_SECRET_SHA512

TIMES = [59, 1111111109, 1111111111, 1234567890, 2000000000, 20000000000]

# RFC 6238 Appendix B
TOTP_VALUES = {
    Algorithm.SHA1: (RFC_SECRET, ["94287082", "07081804", "14050471", "89005924", "69279037", "65353130"]),
    Algorithm.SHA256: (RFC_SECRET_SHA256, ["46119246", "68084774", "67062674", "91819424", "90698825", "77737706"]),
    Algorithm.SHA512: (RFC_SECRET_SHA512, ["90693936", "25091201", "99943326", "93441116", "38618901", "47863826"]),
}

# Google Authenticator test values, using the 20-byte seed for every digest
GOOGLE_TIMES = [1111111111, 1234567890, 2000000000]
GOOGLE_VALUES = {
    Algorithm.SHA1: ["050471", "005924", "279037"],
    Algorithm.SHA256: ["584430", "829826", "428693"],
    Algorithm.SHA512: ["380122", "671578", "464532"],
}


@pytest.mark.parametrize(
    "algorithm,now,expected",
    [
        (algorithm, now, code)
        for algorithm, (_, codes) in TOTP_VALUES.items()
        for now, code in zip(TIMES, codes)
    ],
)
def test_rfc6238_values(algorithm, now, expected):
    secret = TOTP_VALUES[algorithm][0]
    token = Token(secret=secret, factor=TimeStep(30), algorithm=algorithm, digits=8)
    assert totp.generate(token, now) == expected


@pytest.mark.parametrize(
    "algorithm,now,expected",
    [
        (algorithm, now, code)
        for algorithm, codes in GOOGLE_VALUES.items()
        for now, code in zip(GOOGLE_TIMES, codes)
    ],
)
def test_google_authenticator_values(algorithm, now, expected):
    token = Token(secret=RFC_SECRET, algorithm=algorithm, digits=6)
    assert totp.generate(token, now) == expected


@pytest.mark.parametrize(
    "now,period,count",
    [
        (100, 30, 3),
        (10000, 30, 333),
        (1000000, 30, 33333),
        (100000000, 60, 1666666),
        (10000000000, 90, 111111111),
    ],
)
def test_totp_matches_hotp_at_same_counter(now, period, count):
    timer = Token(secret=RFC_SECRET, factor=TimeStep(period))
    counter = Token(secret=RFC_SECRET, factor=Counter(count))
    assert totp.generate(timer, now) == counter.generate()


def test_timecode():
    token = Token(secret=RFC_SECRET)
    assert totp.timecode(token, 59) == 1


def test_timecode_requires_time_token():
    with pytest.raises(TypeError):
        totp.timecode(Token(secret=RFC_SECRET, factor=Counter(0)), 59)


def test_validate_current_step():
    token = Token(secret=RFC_SECRET, digits=8)
    assert totp.validate(token, "94287082", 59, window=0)
    assert not totp.validate(token, "94287083", 59, window=0)


def test_validate_tolerates_one_step_of_drift():
    token = Token(secret=RFC_SECRET)
    code = totp.generate(token, 1000)
    assert totp.validate(token, code, 1000 + 30, window=1)
    assert totp.validate(token, code, 1000 - 30, window=1)
    assert not totp.validate(token, code, 1000 + 30, window=0)


def test_validate_window_is_bounded():
    token = Token(secret=RFC_SECRET)
    code = totp.generate(token, 1000)
    assert not totp.validate(token, code, 1000 + 90, window=2)
    assert totp.validate(token, code, 1000 + 90, window=3)


def test_validate_skips_negative_steps():
    token = Token(secret=RFC_SECRET)
    code = totp.generate(token, 0)
    assert totp.validate(token, code, 0, window=5)


def test_validate_rejects_negative_window():
    token = Token(secret=RFC_SECRET)
    with pytest.raises(ValueError):
        totp.validate(token, "123456", 59, window=-1)


def test_validate_uses_configured_window(monkeypatch):
    token = Token(secret=RFC_SECRET)
    code = totp.generate(token, 1000)

    monkeypatch.setattr("onetimepassword.totp.settings", Settings(_env_file=None, validation_window=0))
    assert not totp.validate(token, code, 1030)

    monkeypatch.setattr("onetimepassword.totp.settings", Settings(_env_file=None, validation_window=1))
    assert totp.validate(token, code, 1030)


def test_matched_offset():
    token = Token(secret=RFC_SECRET)
    code = totp.generate(token, 1000)
    assert totp.matched_offset(token, code, 1000, window=1) == 0
    assert totp.matched_offset(token, code, 1030, window=1) == -1
    assert totp.matched_offset(token, code, 970, window=1) == 1
    assert totp.matched_offset(token, "000000" if code != "000000" else "111111", 1000, window=1) is None


def test_validate_accepts_full_width_digits():
    token = Token(secret=RFC_SECRET, digits=8)
    assert totp.validate(token, "９４２８７０８２", 59, window=0)
