"""Errors raised by the stores and the link registry

    DAOError
    ├── ShortURLNotFoundError       no live link record for a shortcode (HTTP 404)
    ├── ShortURLAlreadyExistsError  shortcode taken by a live link record (HTTP 403)
    └── DataStoreError              store unreachable or timed out (HTTP 500)
        └── ShortcodeAllocationError  every generated shortcode collided

Example:
    >>> from urlshortener.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    urlshortener.dao.exceptions.ShortURLNotFoundError: Short URL with code 'abc123' not found.
"""


class DAOError(Exception):
    pass


class ShortURLNotFoundError(DAOError):
    """Missing or expired link record."""


class ShortURLAlreadyExistsError(DAOError):
    """A live link record already uses the shortcode."""


class DataStoreError(DAOError):
    """The store could not serve the request (connection refused, timeout, OOM...)."""


class ShortcodeAllocationError(DataStoreError):
    """No free shortcode within the allowed number of generation attempts.

    A storage failure from the client's point of view: the request was valid
    but no link could be saved.
    """
