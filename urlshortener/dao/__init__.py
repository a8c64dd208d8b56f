from urlshortener.dao.link_registry import LinkRegistry
from urlshortener.dao.factory import StoreFactory, StoreBackend


__all__ = [
    'LinkRegistry',
    'StoreFactory',
    'StoreBackend',
]
