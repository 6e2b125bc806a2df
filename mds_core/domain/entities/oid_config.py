"""OpenID Connect discovery document and its fetch state on an AuthItem."""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class OidConfiguration:
    """Endpoints of an identity provider, from its discovery document."""

    authorization_endpoint: str
    token_endpoint: str
    revocation_endpoint: str | None = None
    userinfo_endpoint: str | None = None
    end_session_endpoint: str | None = None
    issuer: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "OidConfiguration":
        """Build from a discovery document; raises KeyError if an endpoint is missing."""
        return cls(
            authorization_endpoint=data["authorization_endpoint"],
            token_endpoint=data["token_endpoint"],
            revocation_endpoint=data.get("revocation_endpoint"),
            userinfo_endpoint=data.get("userinfo_endpoint"),
            end_session_endpoint=data.get("end_session_endpoint"),
            issuer=data.get("issuer"),
            raw=dict(data),
        )

    def to_json(self) -> dict[str, Any]:
        data = dict(self.raw)
        data.update({
            "authorization_endpoint": self.authorization_endpoint,
            "token_endpoint": self.token_endpoint,
            "revocation_endpoint": self.revocation_endpoint,
            "userinfo_endpoint": self.userinfo_endpoint,
            "end_session_endpoint": self.end_session_endpoint,
        })
        if self.issuer is not None:
            data["issuer"] = self.issuer
        return data


class OidConfigStatus(str, Enum):
    """Lifecycle of an AuthItem's discovery document."""

    NOT_STARTED = "not_started"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class OidConfigState:
    """Tagged discovery state.

    ``task`` is set only while PENDING and may be shared by every AuthItem
    of one IdProvider; it resolves to ``None`` when the fetch fails.
    ``config`` is set only when READY.
    """

    status: OidConfigStatus = OidConfigStatus.NOT_STARTED
    task: "asyncio.Task[OidConfiguration | None] | None" = None
    config: OidConfiguration | None = None

    @classmethod
    def not_started(cls) -> "OidConfigState":
        return cls()

    @classmethod
    def pending(cls, task: "asyncio.Task[OidConfiguration | None]") -> "OidConfigState":
        return cls(status=OidConfigStatus.PENDING, task=task)

    @classmethod
    def ready(cls, config: OidConfiguration) -> "OidConfigState":
        return cls(status=OidConfigStatus.READY, config=config)

    @classmethod
    def failed(cls) -> "OidConfigState":
        return cls(status=OidConfigStatus.FAILED)
