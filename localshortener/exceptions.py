class ShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortener_error'


class ValidationError(ShortenerError):
    """Base exception for rejected shorten requests.

    Attributes:
        row (int | None):
            1-based position of the offending row inside a batch, if known.
    """

    error_code = 'validation:validation_error'

    def __init__(self, message: str = '', *, row: int | None = None):
        super().__init__(message)
        self.message = message
        self.row = row

    @property
    def user_message(self) -> str:
        """Message identifying the offending row, suitable for end users."""
        return self.message if self.row is None else f'Row {self.row}: {self.message}'


class InvalidUrlError(ValidationError):
    """Raised when the long URL is missing or not an absolute http(s) URL."""

    error_code = 'validation:invalid_url_error'


class InvalidValidityError(ValidationError):
    """Raised when the validity period is not a positive integer of minutes."""

    error_code = 'validation:invalid_validity_error'


class InvalidShortcodeError(ValidationError):
    """Raised when a desired shortcode doesn't match the 3-15 alphanumeric format."""

    error_code = 'validation:invalid_shortcode_error'


class ShortcodeCollisionError(ValidationError):
    """Raised when a desired shortcode is already taken."""

    error_code = 'validation:shortcode_collision_error'


class InvalidBatchError(ValidationError):
    """Raised when a batch is empty or holds more rows than allowed."""

    error_code = 'validation:invalid_batch_error'


class ShortcodeGenerationError(ShortenerError):
    """Raised when no unique shortcode was drawn within the attempt bound."""

    error_code = 'app:shortcode_generation_error'


class ShortURLExpiredError(ShortenerError):
    """Raised when a short URL exists but is no longer live."""

    error_code = 'app:short_url_expired_error'


class ConfigurationError(ShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
