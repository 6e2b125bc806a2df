"""Authorization with an AuthItem — OpenID Connect authorization-code flow.

The flow spans a browser redirect, so everything needed on the way back
is kept in key-value storage:

    nonce         checked against the ID token's ``nonce`` claim
    state         checked against the ``state`` returned by the provider
    codeVerifier  PKCE verifier sent with the token request
    oidConfig     discovery document JSON, for the token request and logout
    idToken       ID token hint for ending the session
"""

import base64
import hashlib
import json
import logging
import re
import secrets
import string
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import parse_qs

import httpx

from mds_core.application.interfaces import DiscoveryClient, KeyValueStorage
from mds_core.domain.entities import (
    AuthItem,
    AuthorizationData,
    AuthorizationRequest,
    OidConfiguration,
)
from mds_core.domain.exceptions import AuthorizationError, InvalidJwtError, OidConfigError
from mds_core.infrastructure.auth.jwt_decoder import DecodedJwt, decode_jwt

logger = logging.getLogger(__name__)

RESPONSE_MODE_FRAGMENT = "fragment"

NONCE_CHARSET = string.ascii_uppercase + string.ascii_lowercase + string.digits
NONCE_LENGTH = 128

NONCE_KEY = "nonce"
STATE_KEY = "state"
CODE_VERIFIER_KEY = "codeVerifier"
OID_CONFIG_KEY = "oidConfig"
ID_TOKEN_KEY = "idToken"


def generate_nonce(length: int = NONCE_LENGTH) -> str:
    return "".join(secrets.choice(NONCE_CHARSET) for _ in range(length))


def code_challenge(code_verifier: str) -> str:
    """S256 PKCE challenge of a verifier."""
    digest = hashlib.sha256(code_verifier.encode("ascii")).digest()
    return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")


def parse_query_string(query: str) -> dict[str, str | list[str]]:
    """Parse a query string or URL fragment; repeated keys give a list.

    One leading ``#`` or ``?`` is ignored.
    """
    parsed = parse_qs(re.sub(r"^[#?]", "", query), keep_blank_values=True)
    return {key: values if len(values) > 1 else values[0] for key, values in parsed.items()}


def build_authorization_request(
    extra: str | Mapping[str, Any] | None,
    client_id: str,
    redirect_uri: str,
    scope: str,
    *,
    state: str | None = None,
    nonce: str | None = None,
) -> AuthorizationRequest:
    """Build an authorization request using the fragment response mode.

    ``extra`` holds an AuthItem's ``auth_params``, either as a query
    string or a mapping; they are sent along with the request.
    """
    if isinstance(extra, str):
        extras: dict[str, Any] = dict(parse_query_string(extra))
    else:
        extras = dict(extra or {})
    extras["response_mode"] = RESPONSE_MODE_FRAGMENT
    extras["nonce"] = nonce or generate_nonce()
    return AuthorizationRequest(
        client_id=client_id,
        redirect_uri=redirect_uri,
        scope=scope,
        state=state or secrets.token_urlsafe(16),
        extras=extras,
    )


class AuthorizationService:
    """Runs the authorization-code flow for AuthItems.

    Depends on a namespaced key-value storage, a discovery client for the
    token request, and a JWT decoder for reading the ID token's nonce.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        discovery_client: DiscoveryClient,
        jwt_decoder: Callable[[str], DecodedJwt] = decode_jwt,
    ):
        self._storage = storage
        self._discovery_client = discovery_client
        self._decode_jwt = jwt_decoder

    async def build_authorization_url(
        self,
        auth_item: AuthItem,
        client_id: str,
        redirect_uri: str,
        scope: str,
        *,
        state: str | None = None,
    ) -> str:
        """Return the URL to redirect the user to for authorizing with ``auth_item``.

        A pending background discovery fetch is awaited; otherwise the
        discovery document is fetched now.

        Args:
            client_id: Client ID registered with the AuthItem's IdProvider.
            redirect_uri: The redirect_uri registered for the client.
            scope: Space separated scopes to request.
            state: OAuth 2.0 state; generated when not given.

        Raises:
            OidConfigError: If the AuthItem has no OpenID configuration.
        """
        oid_config = await auth_item.resolve_oid_config()
        if oid_config is None:
            raise OidConfigError("AuthItem doesn't have OpenID configuration")

        request = build_authorization_request(
            auth_item.extra, client_id, redirect_uri, scope, state=state
        )
        code_verifier = secrets.token_urlsafe(64)
        request.extras["code_challenge"] = code_challenge(code_verifier)
        request.extras["code_challenge_method"] = "S256"

        self._storage.set(NONCE_KEY, request.nonce or "")
        self._storage.set(STATE_KEY, request.state)
        self._storage.set(CODE_VERIFIER_KEY, code_verifier)
        self._storage.set(OID_CONFIG_KEY, json.dumps(oid_config.to_json()))

        logger.info("Authorization request built for auth item %s", auth_item.uuid)
        return str(
            httpx.URL(oid_config.authorization_endpoint).copy_merge_params(
                request.to_query_params()
            )
        )

    async def authorization_callback(
        self, fragment: str, client_id: str, redirect_uri: str
    ) -> AuthorizationData:
        """Complete authorization from the redirect's URL fragment.

        Performs the token request and validates the ID token's nonce.

        Raises:
            AuthorizationError: On an error response, a missing code or
                state mismatch, or a failed token request.
        """
        params = parse_query_string(fragment)
        if "error" in params:
            raise AuthorizationError(f"Authorization error: {json.dumps(params['error'])}")
        code = params.get("code")
        if not code or not isinstance(code, str):
            raise AuthorizationError("Authorization code not received.")

        expected_state = self._storage.get(STATE_KEY)
        self._storage.remove(STATE_KEY)
        if expected_state is not None and params.get("state") != expected_state:
            raise AuthorizationError("Authorization state is invalid.")

        oid_config = self.load_oid_config()
        if oid_config is None:
            raise AuthorizationError(
                "Cannot perform token request: OID Config not found in storage."
            )

        code_verifier = self._storage.get(CODE_VERIFIER_KEY)
        self._storage.remove(CODE_VERIFIER_KEY)
        token_response = await self._discovery_client.request_token(
            oid_config,
            client_id=client_id,
            redirect_uri=redirect_uri,
            code=code,
            code_verifier=code_verifier,
        )

        id_token = token_response.get("id_token")
        access_token = token_response.get("access_token")
        if not id_token or not access_token:
            raise AuthorizationError("Valid token response not received")
        return self.token_callback(id_token=id_token, access_token=access_token)

    def token_callback(self, id_token: str, access_token: str) -> AuthorizationData:
        """Validate the ID token's nonce and keep the ID token for logout.

        The stored nonce is consumed whether or not it matches.
        """
        try:
            payload = self._decode_jwt(id_token).payload
        except InvalidJwtError as e:
            raise AuthorizationError("IdToken could not be decoded.") from e

        expected_nonce = self._storage.get(NONCE_KEY)
        self._storage.remove(NONCE_KEY)
        if not expected_nonce:
            raise AuthorizationError("Nonce was not generated for authorization request.")
        if expected_nonce != payload.get("nonce"):
            raise AuthorizationError("IdToken nonce is invalid.")

        self._storage.set(ID_TOKEN_KEY, id_token)
        return AuthorizationData(access_token=access_token, id_token=id_token)

    def end_session_url(self, post_logout_redirect_uri: str) -> str | None:
        """Return the provider's end-session URL for logging the user out.

        Returns None when the ID token or the discovery document is no
        longer in storage (e.g. the storage was cleared); any local
        session must then be ended by the caller. Both are removed.
        """
        id_token = self._storage.get(ID_TOKEN_KEY)
        self._storage.remove(ID_TOKEN_KEY)
        if not id_token:
            return None

        oid_config = self.load_oid_config()
        self._storage.remove(OID_CONFIG_KEY)
        if oid_config is None or not oid_config.end_session_endpoint:
            return None

        return str(
            httpx.URL(oid_config.end_session_endpoint).copy_merge_params({
                "post_logout_redirect_uri": post_logout_redirect_uri,
                "id_token_hint": id_token,
            })
        )

    def load_oid_config(self) -> OidConfiguration | None:
        """The discovery document saved when the authorization URL was built."""
        saved = self._storage.get(OID_CONFIG_KEY)
        if not saved:
            return None
        try:
            return OidConfiguration.from_json(json.loads(saved))
        except (ValueError, KeyError, TypeError):
            logger.warning("Discarding unreadable OID configuration from storage")
            return None

