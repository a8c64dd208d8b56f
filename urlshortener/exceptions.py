from datetime import timedelta


class URLShortenerError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:urlshortener_error'


class InvalidInputError(URLShortenerError):
    """Base exception for requests rejected during validation."""

    error_code = 'input:invalid_input_error'


class MalformedRequestError(InvalidInputError):
    """Raised when a request body cannot be parsed."""

    error_code = 'input:malformed_request_error'


class InvalidURLError(InvalidInputError):
    """Raised when a target URL is not syntactically valid."""

    error_code = 'input:invalid_url_error'


class InvalidDomainError(InvalidInputError):
    """Raised when a target URL points back at this service."""

    error_code = 'input:invalid_domain_error'


class RateLimitExceededError(URLShortenerError):
    """Raised when a client exhausted its quota for the current window.

    Attributes:
        reset_in (timedelta):
            Time left until the client's quota window resets.
    """

    error_code = 'quota:rate_limit_exceeded_error'

    def __init__(self, reset_in: timedelta, message: str | None = None):
        super().__init__(message or f'Rate limit exceeded. Quota resets in {int(reset_in.total_seconds())} seconds.')
        self.reset_in = reset_in


class ConfigurationError(URLShortenerError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
