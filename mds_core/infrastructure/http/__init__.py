from .api_client import MdsApiClient
from .discovery_client import HttpDiscoveryClient, discovery_document_url

__all__ = [
    "MdsApiClient",
    "HttpDiscoveryClient",
    "discovery_document_url",
]
