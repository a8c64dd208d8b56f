from dataclasses import dataclass
from datetime import datetime
from typing import Optional


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    """Link record: a live shortcode and where it redirects to

    At most one live record exists per shortcode; the store drops it at `expires_at`.
    """

    target: str                             # Normalized absolute URL, e.g. 'http://example.com/a/b'
    shortcode: str                          # Path segment of the short URL, e.g. 'abc123'
    expires_at: Optional[datetime] = None   # UTC; None for records stored without a TTL
# fmt: on
