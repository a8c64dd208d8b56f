"""URL validation and normalization helpers.

Syntax checking is delegated to the `validators` package; this module only
adds the scheme normalization and the self-reference check.

Functions:
    is_url(url: str) -> bool
        Check that a string is a syntactically well-formed URL (scheme optional).
    is_self_referencing(url: str, domain: str) -> bool
        Check whether a URL points back at the service's own domain.
    enforce_http(url: str) -> str
        Prefix 'http://' to URLs lacking an explicit scheme.

Example:
    >>> is_url('example.com/a/b')
    True
    >>> enforce_http('example.com/a/b')
    'http://example.com/a/b'
    >>> is_self_referencing('https://www.short.ly/abc123', 'short.ly')
    True
"""

import re
from urllib.parse import urlsplit

import validators


ALLOWED_SCHEMES = frozenset({'http', 'https', 'ftp'})

SCHEME_RE = re.compile(r'^[a-z][a-z0-9+.\-]*://', re.IGNORECASE)


def _hostname(url: str) -> str | None:
    try:
        host = urlsplit(enforce_http(url.strip())).hostname
    except ValueError:
        return None
    if host is None:
        return None
    host = host.lower().rstrip('.')
    return host.removeprefix('www.')


def is_url(url: str) -> bool:
    """Check that a string is a well-formed http(s)/ftp URL.

    The scheme may be omitted ('example.com/path'), in which case 'http://'
    is assumed. The host must be a dotted domain name or an IP address.

    Args:
        url (str): candidate URL as received from the client.

    Returns:
        bool: True if the URL is well-formed.
    """
    if not isinstance(url, str) or not url:
        return False
    url = enforce_http(url)
    try:
        scheme = urlsplit(url).scheme
    except ValueError:
        return False
    if scheme.lower() not in ALLOWED_SCHEMES:
        return False
    # validators returns a falsy ValidationError instead of raising
    return bool(validators.url(url))


def is_self_referencing(url: str, domain: str) -> bool:
    """Check whether a URL's host is the service's own domain.

    Scheme, port, letter case and a leading 'www.' are ignored on both sides,
    so 'https://WWW.short.ly:443/x' matches the domain 'short.ly'.

    Args:
        url (str): target URL (scheme optional).
        domain (str): configured service domain (scheme optional).

    Returns:
        bool: True if shortening the URL would create a redirect back into the service.
    """
    if not domain:
        return False
    url_host = _hostname(url)
    return url_host is not None and url_host == _hostname(domain)


def enforce_http(url: str) -> str:
    """Return the URL prefixed with 'http://' unless it already carries a scheme."""
    return url if SCHEME_RE.match(url) else f'http://{url}'
