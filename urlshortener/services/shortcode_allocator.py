"""Shortcode allocation and collision policy

A caller-supplied shortcode is used as-is or rejected; generated shortcodes
are retried a bounded number of times before giving up.
"""

import logging

from urlshortener.constants import Defaults
from urlshortener.dao import LinkRegistry
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError, ShortcodeAllocationError
from urlshortener.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class ShortcodeAllocator:
    """Pick a free shortcode in the link namespace

    Attributes:
        links (LinkRegistry):
            Registry used for collision checks.
        length (int):
            Length of generated shortcodes.
        max_attempts (int):
            Generated shortcodes tried before raising ShortcodeAllocationError.
            1 fails on the first collision.
    """

    def __init__(
        self,
        links: LinkRegistry,
        length: int = Defaults.SHORTCODE_LENGTH,
        max_attempts: int = Defaults.MAX_SHORTCODE_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError(f'At least one allocation attempt is required (given value: {max_attempts}).')

        self.links = links
        self.length = length
        self.max_attempts = max_attempts

    def allocate(self, candidate: str | None = None) -> str:
        """Return a shortcode not used by any live link

        Args:
            candidate (str | None):
                Custom shortcode requested by the client. None (or '') generates one.

        Returns:
            str: the allocated shortcode.

        Raises:
            ShortURLAlreadyExistsError:
                If the custom shortcode is taken. Never retried.
            ShortcodeAllocationError:
                If every generated shortcode collided.
            DataStoreError:
                If the store is unreachable.
        """
        if candidate:
            if self.links.exists(candidate):
                raise ShortURLAlreadyExistsError(f"Short URL with code '{candidate}' already exists.")
            return candidate

        for attempt in range(1, self.max_attempts + 1):
            shortcode = generate_shortcode(self.length)
            if not self.links.exists(shortcode):
                return shortcode
            logger.warning('Generated shortcode collided with a live link.', extra={'shortcode': shortcode, 'attempt': attempt})

        raise ShortcodeAllocationError(f'Could not allocate a free shortcode in {self.max_attempts} attempt(s).')
