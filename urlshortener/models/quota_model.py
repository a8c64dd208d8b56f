from dataclasses import dataclass
from datetime import datetime, timedelta


# fmt: off
@dataclass(frozen=True)
class QuotaModel:
    client_key: str                 # Client network address
    remaining: int                  # Requests left in the current window (may be negative momentarily)
    window_expires_at: datetime     # Moment (UTC) the window resets


@dataclass(frozen=True)
class RateLimitResult:
    admitted: bool                  # True if the request may proceed
    remaining: int                  # Requests left after this one
    reset_in: timedelta             # Time left until the window resets
# fmt: on
