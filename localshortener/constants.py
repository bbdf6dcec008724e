from enum import StrEnum


class TTL:
    """Link validity durations."""

    # Default short URL validity when the caller doesn't provide one (minutes)
    DEFAULT_VALIDITY_MINUTES = 30
    # Longest accepted validity (10 years)
    MAX_VALIDITY_MINUTES = 60 * 24 * 365 * 10


class Shortcode:
    """Shortcode format and generation parameters."""

    MIN_LENGTH = 3
    MAX_LENGTH = 15
    GENERATED_LENGTH = 7
    # Upper bound of random draws before giving up on a unique shortcode
    MAX_GENERATION_ATTEMPTS = 100


class Limits:
    """Request and storage limits."""

    MAX_BATCH_SIZE = 5  # Rows accepted by a single shorten request
    MAX_URL_LENGTH = 2048
    EVENT_LOG_CAPACITY = 1000  # Entries kept in the diagnostic event log


class Redirect:
    """Redirect navigation parameters."""

    DEFAULT_DELAY_SECONDS = 1  # 0 means an immediate 302


class Store:
    """Names of the persisted documents."""

    LINKS = 'links'  # Short URL records
    EVENT_LOG = 'logs'  # Diagnostic event log


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        PROJECT_ROOT = 'PROJECT_ROOT'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'


class Backend(StrEnum):
    """Supported document store backends."""

    REDIS = 'redis'
    MEMORY = 'memory'


class Event(StrEnum):
    """Event log entry names."""

    URL_CREATED = 'url_created'
    BATCH_REJECTED = 'batch_rejected'
    CLICK_RECORDED = 'click_recorded'
    REDIRECT_RESOLVED = 'redirect_resolved'
    REDIRECT_FALLBACK = 'redirect_fallback'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
