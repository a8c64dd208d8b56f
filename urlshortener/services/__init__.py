from urlshortener.services.rate_limiter import RateLimiter
from urlshortener.services.shortcode_allocator import ShortcodeAllocator
from urlshortener.services.shorten_service import ShortenService
from urlshortener.services.resolve_service import ResolveService


__all__ = [
    'RateLimiter',
    'ShortcodeAllocator',
    'ShortenService',
    'ResolveService',
]
