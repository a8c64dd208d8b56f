from urlshortener.dao.base.key_value_base_store import KeyValueBaseStore, Namespace


__all__ = [
    'KeyValueBaseStore',
    'Namespace',
]
