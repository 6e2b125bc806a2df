"""Domain entities for the authorization flow."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class AuthorizationRequest:
    """An OAuth 2.0 authorization-code request with OpenID Connect extras."""

    client_id: str
    redirect_uri: str
    scope: str
    state: str
    response_type: str = "code"
    extras: dict[str, Any] = field(default_factory=dict)  # response_mode, nonce, auth_params

    @property
    def nonce(self) -> str | None:
        return self.extras.get("nonce")

    def to_query_params(self) -> dict[str, Any]:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "response_type": self.response_type,
            "state": self.state,
        }
        params.update(self.extras)
        return params


@dataclass
class AuthorizationData:
    """A user's ID and access tokens after successful authorization."""

    access_token: str
    id_token: str
