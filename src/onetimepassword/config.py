"""Library defaults, overridable through ``OTP_*`` environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Defaults shared with widely deployed authenticator apps.
DEFAULT_DIGITS = 6
DEFAULT_PERIOD = 30
DEFAULT_EPOCH = 0
DEFAULT_COUNTER = 0

# RFC 4226 section 5.3: 6 digits at a minimum, possibly 7 or 8.
SUPPORTED_DIGITS = range(6, 9)

DEFAULT_WINDOW = 1
DEFAULT_RESYNC_LOOK_AHEAD = 100

# Largest value of the 8-byte moving factor.
MAX_COUNTER = 2**64 - 1


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="OTP_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Steps checked on each side of the current time step
    validation_window: int = Field(default=DEFAULT_WINDOW, ge=0)

    # Counter values scanned when resynchronizing a counter token
    resync_look_ahead: int = Field(default=DEFAULT_RESYNC_LOOK_AHEAD, ge=1)


settings = Settings()
