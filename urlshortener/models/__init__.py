from urlshortener.models.short_url_model import ShortURLModel
from urlshortener.models.quota_model import QuotaModel, RateLimitResult
from urlshortener.models.shorten_result import ShortenResult


__all__ = [
    'ShortURLModel',
    'QuotaModel',
    'RateLimitResult',
    'ShortenResult',
]
