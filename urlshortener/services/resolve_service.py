"""Resolve a shortcode to its target URL and count the redirect

The service keeps a single redirect counter for the whole deployment, stored
in the quota namespace. Counting is best effort: a store failure while
incrementing it never blocks the redirect.
"""

import logging

from urlshortener.constants import REDIRECT_COUNTER_FAILED
from urlshortener.dao import LinkRegistry
from urlshortener.dao.base import KeyValueBaseStore, Namespace
from urlshortener.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)

REDIRECT_COUNTER_KEY = 'counter:redirects'


class ResolveService:
    """Look up link records on behalf of the redirect endpoint

    Attributes:
        links (LinkRegistry):
            Link record storage.
        store (KeyValueBaseStore):
            Store holding the redirect counter.
    """

    def __init__(self, links: LinkRegistry, store: KeyValueBaseStore):
        self.links = links
        self.store = store

    def resolve(self, shortcode: str) -> str:
        """Return the target URL for `shortcode` and count the redirect

        Raises:
            ShortURLNotFoundError:
                If no live link record uses the shortcode. The counter is left unchanged.
            DataStoreError:
                If the link record cannot be read.
        """
        target = self.links.resolve(shortcode)

        try:
            self.store.increment(Namespace.QUOTA, REDIRECT_COUNTER_KEY)
        except DataStoreError:
            logger.warning(
                'Failed to increment redirect counter.',
                exc_info=True,
                extra={'shortcode': shortcode, 'event': REDIRECT_COUNTER_FAILED},
            )

        return target

    def redirects(self) -> int:
        """Return the number of redirects served so far (0 when never counted)"""
        value = self.store.get(Namespace.QUOTA, REDIRECT_COUNTER_KEY)
        return 0 if value is None else int(value)
