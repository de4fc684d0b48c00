"""
X OAuth token exchange
"""
import json
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from config import AuthConfig

logger = logging.getLogger(__name__)


class TokenExchangeError(Exception):
    """The token endpoint rejected the authorization code"""

    def __init__(self, message: str, payload: Optional[Any] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.payload = payload
        self.status_code = status_code


class TokenResponse:
    """OAuth token response"""

    def __init__(
        self,
        access_token: str,
        expires_in: Optional[int] = None,
        refresh_token: Optional[str] = None,
        token_type: str = "bearer",
        scope: Optional[str] = None,
    ):
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.token_type = token_type
        self.expires_in = expires_in
        self.scope = scope

    def expires_at_ms(self, now_ms: Optional[int] = None) -> Optional[int]:
        """Epoch milliseconds at which the access token expires"""
        if self.expires_in is None:
            return None
        if now_ms is None:
            now_ms = int(time.time() * 1000)
        return now_ms + self.expires_in * 1000

    def to_env_lines(self, now_ms: Optional[int] = None) -> List[str]:
        """Render shell export lines for the env file"""
        lines = [f'export X_OAUTH2_ACCESS_TOKEN="{self.access_token}"']
        if self.refresh_token:
            lines.append(f'export X_OAUTH2_REFRESH_TOKEN="{self.refresh_token}"')
        expires_at = self.expires_at_ms(now_ms)
        if expires_at is not None:
            lines.append(f'export X_OAUTH2_TOKEN_EXPIRY="{expires_at}"')
        return lines

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenResponse":
        """Load from a token endpoint payload"""
        expires_in = data.get("expires_in")
        if expires_in is not None:
            try:
                expires_in = int(expires_in)
            except (TypeError, ValueError) as e:
                raise TokenExchangeError(f"Token response has an invalid expires_in: {expires_in!r}", payload=data) from e
        return cls(
            access_token=data["access_token"],
            expires_in=expires_in,
            refresh_token=data.get("refresh_token"),
            token_type=data.get("token_type", "bearer"),
            scope=data.get("scope"),
        )


async def _post_token_request(client: httpx.AsyncClient, config: AuthConfig, data: Dict[str, str]) -> httpx.Response:
    return await client.post(
        config.token_url,
        data=data,
        auth=(config.client_id, config.client_secret),
        headers={"Content-Type": "application/x-www-form-urlencoded"},
    )


async def exchange_code_for_tokens(
    config: AuthConfig,
    code: str,
    code_verifier: str,
    client: Optional[httpx.AsyncClient] = None,
) -> TokenResponse:
    """
    Exchange authorization code for access and refresh tokens.

    Args:
        config: OAuth client configuration (client id/secret, token URL, redirect URI)
        code: Authorization code from callback
        code_verifier: PKCE code verifier
        client: Optional HTTP client to reuse

    Returns:
        TokenResponse

    Raises:
        TokenExchangeError: if the provider returns an error or an unreadable body
    """
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": config.redirect_uri,
        "code_verifier": code_verifier,
        "client_id": config.client_id,
    }

    logger.info(f"Exchanging authorization code for tokens at {config.token_url}")

    if client is None:
        async with httpx.AsyncClient(timeout=None) as own_client:
            response = await _post_token_request(own_client, config, data)
    else:
        response = await _post_token_request(client, config, data)

    logger.debug(f"Token exchange response status: {response.status_code}")

    try:
        payload = response.json()
    except json.JSONDecodeError as e:
        raise TokenExchangeError(
            f"Token endpoint returned a non-JSON body ({response.status_code}): {response.text}",
            payload=response.text,
            status_code=response.status_code,
        ) from e

    if not isinstance(payload, dict):
        raise TokenExchangeError(
            f"Unexpected token response: {payload!r}",
            payload=payload,
            status_code=response.status_code,
        )

    if payload.get("error") or response.status_code >= 400:
        detail = payload.get("error_description") or payload.get("error") or response.text
        raise TokenExchangeError(
            f"Token exchange failed ({response.status_code}): {detail}",
            payload=payload,
            status_code=response.status_code,
        )

    if not payload.get("access_token"):
        raise TokenExchangeError("Token response is missing access_token", payload=payload,
                                 status_code=response.status_code)

    logger.info("Successfully exchanged authorization code for tokens")
    return TokenResponse.from_dict(payload)
