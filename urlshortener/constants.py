from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Per-client rate limiting window (30 minutes in seconds)
    QUOTA_WINDOW = 1_800  # 60 * 30


class Defaults:
    """Default values for the shortener settings."""

    API_QUOTA = 10  # Shortening requests per client per window
    LINK_EXPIRY_HOURS = 24
    MAX_LINK_EXPIRY_HOURS = 87_600  # 10 years
    SHORTCODE_LENGTH = 6
    MAX_SHORTCODE_ATTEMPTS = 5
    DOMAIN = 'localhost:3000'
    REDIS_SOCKET_TIMEOUT = 2  # seconds


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class Shortener(StrEnum):
        API_QUOTA = 'API_QUOTA'
        DOMAIN = 'DOMAIN'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'

# Log event codes
SHORTEN_SUCCESS = 'SHORTEN_SUCCESS'
RATE_LIMIT_EXCEEDED = 'RATE_LIMIT_EXCEEDED'
INVALID_REQUEST_BODY = 'INVALID_REQUEST_BODY'
INVALID_URL = 'INVALID_URL'
INVALID_DOMAIN = 'INVALID_DOMAIN'
SHORT_URL_ALREADY_EXISTS = 'SHORT_URL_ALREADY_EXISTS'
SHORT_URL_SAVE_FAILED = 'SHORT_URL_SAVE_FAILED'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
REDIRECT_SUCCESS = 'REDIRECT_SUCCESS'
REDIRECT_COUNTER_FAILED = 'REDIRECT_COUNTER_FAILED'
DATABASE_ERROR = 'DATABASE_ERROR'
