from .transport import JsonTransport
from .discovery_client import DiscoveryClient
from .key_value_storage import KeyValueStorage

__all__ = [
    "JsonTransport",
    "DiscoveryClient",
    "KeyValueStorage",
]
