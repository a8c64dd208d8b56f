from urlshortener.dao.memory.key_value_memory_store import KeyValueMemoryStore


__all__ = [
    'KeyValueMemoryStore',
]
