"""Unit tests for the AuthorizationService."""

import json
from typing import Any

import httpx
import jwt
import pytest

from mds_core.application.interfaces import DiscoveryClient
from mds_core.application.services import AuthorizationService, parse_query_string
from mds_core.application.services.authorization import code_challenge
from mds_core.domain.entities import AuthItem, OidConfiguration
from mds_core.domain.exceptions import AuthorizationError, OidConfigError
from mds_core.infrastructure.storage import InMemoryKeyValueStorage, PrefixedStorage

CLIENT_ID = "client"
REDIRECT_URI = "https://app.example.com/callback"


class FakeDiscoveryClient(DiscoveryClient):
    """In-memory fake issuing tokens for a fixed nonce."""

    def __init__(self, oid_config: OidConfiguration | None = None):
        self._oid_config = oid_config
        self.token_requests: list[dict[str, Any]] = []
        self.id_token = ""

    async def fetch_oid_config(self, url: str) -> OidConfiguration | None:
        return self._oid_config

    async def request_token(self, oid_config, *, client_id, redirect_uri, code,
                            code_verifier=None) -> dict[str, Any]:
        self.token_requests.append({
            "token_endpoint": oid_config.token_endpoint,
            "client_id": client_id,
            "code": code,
            "code_verifier": code_verifier,
        })
        return {"id_token": self.id_token, "access_token": "access"}


def _oid_config(**overrides: Any) -> OidConfiguration:
    values = {
        "authorization_endpoint": "https://idp.example.com/authorize",
        "token_endpoint": "https://idp.example.com/token",
        "end_session_endpoint": "https://idp.example.com/logout?ui=1",
    }
    values.update(overrides)
    return OidConfiguration(**values)


def _id_token(nonce: str | None) -> str:
    payload: dict[str, Any] = {"iat": 1516239022}
    if nonce is not None:
        payload["nonce"] = nonce
    return jwt.encode(payload, "secret", algorithm="HS256")


@pytest.fixture
def backend() -> InMemoryKeyValueStorage:
    return InMemoryKeyValueStorage()


@pytest.fixture
def discovery_client() -> FakeDiscoveryClient:
    return FakeDiscoveryClient(_oid_config())


@pytest.fixture
def service(backend, discovery_client) -> AuthorizationService:
    return AuthorizationService(PrefixedStorage(backend, host="api.example.com"), discovery_client)


def _auth_item(discovery_client: DiscoveryClient, extra: Any = None) -> AuthItem:
    return AuthItem(
        None,
        {"uuid": "a1"},
        extra=extra,
        oid_config_url="https://idp.example.com",
        discovery_client=discovery_client,
    )


# ── parse_query_string ──


def test_parse_query_string_strips_leading_hash():
    assert parse_query_string("#code=123&return_url=https://example.com#") == {
        "code": "123",
        "return_url": "https://example.com#",
    }


def test_parse_query_string_lists_repeated_keys():
    assert parse_query_string("?asd=1&qwe=3&asd=2&return_url=https://example.com?about") == {
        "asd": ["1", "2"],
        "qwe": "3",
        "return_url": "https://example.com?about",
    }


# ── Authorization request ──


@pytest.mark.asyncio
async def test_build_authorization_url(service, backend, discovery_client):
    auth_item = _auth_item(discovery_client, extra="prompt=login&acr_values=loa2")

    url = httpx.URL(await service.build_authorization_url(
        auth_item, CLIENT_ID, REDIRECT_URI, "openid profile", state="s1"
    ))

    params = url.params
    assert url.path == "/authorize"
    assert params["client_id"] == CLIENT_ID
    assert params["redirect_uri"] == REDIRECT_URI
    assert params["scope"] == "openid profile"
    assert params["response_type"] == "code"
    assert params["response_mode"] == "fragment"
    assert params["state"] == "s1"
    assert params["prompt"] == "login"
    assert params["acr_values"] == "loa2"
    assert len(params["nonce"]) == 128
    assert params["nonce"].isalnum()
    assert params["code_challenge_method"] == "S256"

    assert backend.get("mds-core-api.example.com-nonce") == params["nonce"]
    verifier = backend.get("mds-core-api.example.com-codeVerifier")
    assert params["code_challenge"] == code_challenge(verifier)
    saved = json.loads(backend.get("mds-core-api.example.com-oidConfig"))
    assert saved["token_endpoint"] == "https://idp.example.com/token"


@pytest.mark.asyncio
async def test_build_authorization_url_with_mapping_extra(service, discovery_client):
    auth_item = _auth_item(discovery_client, extra={"ui_locales": "fi"})
    url = httpx.URL(await service.build_authorization_url(auth_item, CLIENT_ID, REDIRECT_URI, "openid"))
    assert url.params["ui_locales"] == "fi"
    assert url.params["state"]


@pytest.mark.asyncio
async def test_build_authorization_url_without_oid_config(service):
    auth_item = _auth_item(FakeDiscoveryClient(None))
    with pytest.raises(OidConfigError, match="AuthItem doesn't have OpenID configuration"):
        await service.build_authorization_url(auth_item, CLIENT_ID, REDIRECT_URI, "openid")


# ── Token callback ──


def test_token_callback_without_nonce_raises(service):
    with pytest.raises(AuthorizationError, match="Nonce was not generated for authorization request."):
        service.token_callback(_id_token("123"), "access")


def test_token_callback_invalid_nonce_raises(service, backend):
    backend.set("mds-core-api.example.com-nonce", "expected")
    with pytest.raises(AuthorizationError, match="IdToken nonce is invalid."):
        service.token_callback(_id_token("123"), "access")
    assert backend.get("mds-core-api.example.com-nonce") is None


def test_token_callback_token_without_nonce_raises(service, backend):
    backend.set("mds-core-api.example.com-nonce", "expected")
    with pytest.raises(AuthorizationError, match="IdToken nonce is invalid."):
        service.token_callback(_id_token(None), "access")


def test_token_callback_saves_id_token(service, backend):
    backend.set("mds-core-api.example.com-nonce", "123")
    id_token = _id_token("123")

    data = service.token_callback(id_token, "access")

    assert data.id_token == id_token
    assert data.access_token == "access"
    assert backend.get("mds-core-api.example.com-idToken") == id_token


def test_token_callback_malformed_token_raises(service, backend):
    backend.set("mds-core-api.example.com-nonce", "123")
    with pytest.raises(AuthorizationError, match="could not be decoded"):
        service.token_callback("garbage", "access")


# ── Authorization callback ──


@pytest.mark.asyncio
async def test_authorization_callback_error_param(service):
    with pytest.raises(AuthorizationError, match="Authorization error"):
        await service.authorization_callback("#error=access_denied", CLIENT_ID, REDIRECT_URI)


@pytest.mark.asyncio
async def test_authorization_callback_without_code(service):
    with pytest.raises(AuthorizationError, match="Authorization code not received."):
        await service.authorization_callback("#state=s1", CLIENT_ID, REDIRECT_URI)


@pytest.mark.asyncio
async def test_authorization_callback_completes_flow(service, backend, discovery_client):
    url = httpx.URL(await service.build_authorization_url(
        _auth_item(discovery_client), CLIENT_ID, REDIRECT_URI, "openid", state="s1"
    ))
    discovery_client.id_token = _id_token(url.params["nonce"])

    data = await service.authorization_callback("#code=abc&state=s1", CLIENT_ID, REDIRECT_URI)

    assert data.access_token == "access"
    request = discovery_client.token_requests[0]
    assert request["code"] == "abc"
    assert request["token_endpoint"] == "https://idp.example.com/token"
    assert code_challenge(request["code_verifier"]) == url.params["code_challenge"]


@pytest.mark.asyncio
async def test_authorization_callback_state_mismatch(service, discovery_client):
    await service.build_authorization_url(
        _auth_item(discovery_client), CLIENT_ID, REDIRECT_URI, "openid", state="s1"
    )
    with pytest.raises(AuthorizationError, match="state is invalid"):
        await service.authorization_callback("#code=abc&state=other", CLIENT_ID, REDIRECT_URI)


@pytest.mark.asyncio
async def test_authorization_callback_without_stored_oid_config(service):
    with pytest.raises(AuthorizationError, match="OID Config not found"):
        await service.authorization_callback("#code=abc", CLIENT_ID, REDIRECT_URI)


# ── End session ──


def test_end_session_url_without_id_token(service):
    assert service.end_session_url("https://app.example.com/") is None


def test_end_session_url_without_oid_config(service, backend):
    backend.set("mds-core-api.example.com-idToken", "token")
    assert service.end_session_url("https://app.example.com/") is None
    assert backend.get("mds-core-api.example.com-idToken") is None


def test_end_session_url(service, backend):
    backend.set("mds-core-api.example.com-idToken", "token")
    backend.set("mds-core-api.example.com-oidConfig", json.dumps(_oid_config().to_json()))

    url = httpx.URL(service.end_session_url("https://app.example.com/"))

    assert url.path == "/logout"
    assert url.params["ui"] == "1"
    assert url.params["post_logout_redirect_uri"] == "https://app.example.com/"
    assert url.params["id_token_hint"] == "token"
    assert backend.get("mds-core-api.example.com-oidConfig") is None
