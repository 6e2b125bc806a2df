from .record import Capability, Record
from .resources import IdProvider, Metadata, Translation, Url
from .auth_item import AuthItem
from .oid_config import OidConfigState, OidConfigStatus, OidConfiguration
from .authorization import AuthorizationData, AuthorizationRequest

__all__ = [
    "Capability",
    "Record",
    "IdProvider",
    "Metadata",
    "Translation",
    "Url",
    "AuthItem",
    "OidConfigState",
    "OidConfigStatus",
    "OidConfiguration",
    "AuthorizationData",
    "AuthorizationRequest",
]
