from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class ShortenResult:
    """Outcome of a successful shortening request.

    Attributes:
        url (str):
            Normalized target URL as stored.
        short (str):
            Full short URL (service domain + shortcode).
        shortcode (str):
            The allocated shortcode alone.
        expiry (int | float):
            Effective link expiry in hours.
        rate_limit (int):
            Client quota left in the current window.
        rate_limit_reset (timedelta):
            Time left until the client's quota window resets.
    """

    url: str
    short: str
    shortcode: str
    expiry: int | float
    rate_limit: int
    rate_limit_reset: timedelta
