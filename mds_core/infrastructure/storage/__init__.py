from .key_value_storage import (
    InMemoryKeyValueStorage,
    JsonFileKeyValueStorage,
    PrefixedStorage,
)

__all__ = [
    "InMemoryKeyValueStorage",
    "JsonFileKeyValueStorage",
    "PrefixedStorage",
]
