"""Shorten a URL: rate limit, validate, allocate, store

Procedure:
    - Step 1: Admit the request against the client's quota (consumes one unit)
    - Step 2: Validate the URL syntax
    - Step 3: Reject URLs pointing back at this service
    - Step 4: Normalize the URL scheme
    - Step 5: Allocate a shortcode (custom or generated)
    - Step 6: Store the link record with its expiry
    - Step 7: Report the short URL and the client's quota snapshot

Nothing is left behind by a failed request: validation runs before any write
and the consumed quota unit is refunded if a later step fails.
"""

import logging
from datetime import timedelta

from urlshortener.constants import Defaults
from urlshortener.dao import LinkRegistry
from urlshortener.dao.exceptions import DataStoreError
from urlshortener.exceptions import InvalidDomainError, InvalidURLError, MalformedRequestError, RateLimitExceededError
from urlshortener.models import ShortenResult
from urlshortener.services.rate_limiter import RateLimiter
from urlshortener.services.shortcode_allocator import ShortcodeAllocator
from urlshortener.utils.helpers import get_short_url
from urlshortener.utils.validators import enforce_http, is_self_referencing, is_url


logger = logging.getLogger(__name__)


class ShortenService:
    """Orchestrate URL shortening

    Attributes:
        rate_limiter (RateLimiter):
            Per-client quota tracker.
        allocator (ShortcodeAllocator):
            Shortcode allocation and collision policy.
        links (LinkRegistry):
            Link record storage.
        domain (str):
            Public domain of this service.
        default_expiry_hours (int):
            Expiry applied when the request omits it or sends 0.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        allocator: ShortcodeAllocator,
        links: LinkRegistry,
        domain: str,
        default_expiry_hours: int = Defaults.LINK_EXPIRY_HOURS,
    ):
        self.rate_limiter = rate_limiter
        self.allocator = allocator
        self.links = links
        self.domain = domain
        self.default_expiry_hours = default_expiry_hours

    def shorten(
        self,
        client_address: str,
        url: str,
        short: str | None = None,
        expiry: int | float | None = None,
    ) -> ShortenResult:
        """Create a short link for `url` on behalf of `client_address`

        Args:
            client_address (str):
                Network address of the requesting client (rate limiting key).
            url (str):
                Raw target URL (scheme optional).
            short (str | None):
                Custom shortcode. None or '' generates one.
            expiry (int | float | None):
                Link expiry in hours. None or 0 applies the default.

        Returns:
            ShortenResult: stored URL, full short URL, expiry and quota snapshot.

        Raises:
            RateLimitExceededError:
                If the client's quota for the window is exhausted.
            MalformedRequestError:
                If the expiry is negative, not a number or too large.
            InvalidURLError:
                If the URL is malformed.
            InvalidDomainError:
                If the URL points at this service.
            ShortURLAlreadyExistsError:
                If the custom shortcode is taken.
            DataStoreError:
                If the link cannot be stored (including shortcode exhaustion).
        """
        # 1- Admit the request against the client's quota
        admission = self.rate_limiter.check_and_consume(client_address)
        if not admission.admitted:
            raise RateLimitExceededError(reset_in=admission.reset_in)

        try:
            # NaN fails both comparisons
            if expiry is not None and not 0 <= expiry <= Defaults.MAX_LINK_EXPIRY_HOURS:
                raise MalformedRequestError(
                    f'Expiry must be between 0 and {Defaults.MAX_LINK_EXPIRY_HOURS} hours (given value: {expiry}).'
                )

            # 2- Validate URL syntax
            if not is_url(url):
                raise InvalidURLError(f'Invalid URL: {url!r}.')

            # 3- Reject self-referencing URLs (redirect loops through this service)
            if is_self_referencing(url, self.domain):
                raise InvalidDomainError(f'URL {url!r} points at this service ({self.domain}).')

            # 4- Normalize scheme
            target = enforce_http(url)

            # 5- Allocate shortcode
            shortcode = self.allocator.allocate(short or None)

            # 6- Store link record
            expiry = expiry or self.default_expiry_hours
            self.links.create(shortcode, target, timedelta(hours=expiry))
        except Exception:
            self._refund(client_address)
            raise

        # 7- Report result with the post-consumption quota snapshot
        logger.debug('Stored short URL.', extra={'shortcode': shortcode, 'target': target, 'expiryHours': expiry})
        return ShortenResult(
            url=target,
            short=get_short_url(shortcode, self.domain),
            shortcode=shortcode,
            expiry=expiry,
            rate_limit=admission.remaining,
            rate_limit_reset=admission.reset_in,
        )

    def _refund(self, client_address: str) -> None:
        try:
            self.rate_limiter.refund(client_address)
        except DataStoreError:
            logger.warning('Could not refund quota unit after a failed request.', exc_info=True, extra={'clientAddress': client_address})
