"""Dependency wiring — builds infrastructure adapters for the application layer.

Applications embedding mds_core can use these factories, or construct the
pieces themselves with their own Settings, storage and httpx clients.
"""

from functools import lru_cache

from mds_core.application.interfaces import KeyValueStorage
from mds_core.application.services import AuthorizationService, Store
from mds_core.config import Settings, get_settings
from mds_core.infrastructure.http import HttpDiscoveryClient, MdsApiClient
from mds_core.infrastructure.storage import InMemoryKeyValueStorage, PrefixedStorage


def get_discovery_client(settings: Settings | None = None) -> HttpDiscoveryClient:
    """Provides a discovery client using the configured HTTP timeout."""
    settings = settings or get_settings()
    return HttpDiscoveryClient(timeout=settings.http_timeout)


def get_api_client(settings: Settings | None = None) -> MdsApiClient:
    """Provides a MyDataShare API client."""
    return MdsApiClient(settings or get_settings())


@lru_cache
def get_store() -> Store:
    """Provides the process-wide Store built from environment settings."""
    settings = get_settings()
    return Store(settings, discovery_client=get_discovery_client(settings))


def get_authorization_service(
    backend: KeyValueStorage | None = None,
    host: str | None = None,
    settings: Settings | None = None,
) -> AuthorizationService:
    """Provides an AuthorizationService with namespaced storage.

    ``backend`` defaults to a fresh in-memory storage; pass a persistent
    one when the login redirect crosses process boundaries.
    """
    settings = settings or get_settings()
    storage = PrefixedStorage(
        backend if backend is not None else InMemoryKeyValueStorage(),
        prefix=settings.storage_prefix,
        host=host,
    )
    return AuthorizationService(storage, get_discovery_client(settings))
