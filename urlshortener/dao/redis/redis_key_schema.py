__all__ = ['RedisKeySchema']


class RedisKeySchema:
    """Build Redis key names for the link and quota namespaces

    Layout: [<prefix>:]<namespace>:<key>, e.g.

        urlshortener:prod:links:abc123
        urlshortener:prod:quota:203.0.113.7
        urlshortener:prod:quota:counter:redirects

    Give every app and environment its own prefix when they share a Redis
    database; keys without a prefix collide across deployments.
    """

    SEPARATOR = ':'

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    def namespaced_key(self, namespace: str, key: str) -> str:
        parts = [namespace, key] if self.prefix is None else [self.prefix, namespace, key]
        return self.SEPARATOR.join(parts)
