"""
X OAuth 2.0 authorization flow with PKCE
"""
import base64
import hashlib
import secrets
from typing import NamedTuple
from urllib.parse import urlencode

from config import AuthConfig


class PKCEPair(NamedTuple):
    """PKCE code verifier and challenge pair"""
    verifier: str
    challenge: str


class AuthorizationFlow(NamedTuple):
    """OAuth authorization flow data"""
    pkce: PKCEPair
    state: str
    url: str


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('utf-8').rstrip('=')


def compute_challenge(verifier: str) -> str:
    """SHA-256 of the verifier, base64url encoded without padding (S256)"""
    return _b64url(hashlib.sha256(verifier.encode('utf-8')).digest())


def generate_pkce() -> PKCEPair:
    """
    Generate PKCE code verifier and challenge.

    RFC 7636 PKCE standard:
    - Verifier: 32 random bytes, base64url encoded (43 chars)
    - Challenge: SHA-256 hash of verifier, base64url encoded

    Returns:
        PKCEPair: Tuple of (verifier, challenge)
    """
    verifier = _b64url(secrets.token_bytes(32))
    return PKCEPair(verifier=verifier, challenge=compute_challenge(verifier))


def create_state() -> str:
    """
    Generate random state parameter for CSRF protection.

    Returns:
        str: 16 random bytes as 32 hex characters
    """
    return secrets.token_hex(16)


def create_authorization_flow(config: AuthConfig) -> AuthorizationFlow:
    """
    Create X OAuth authorization flow.

    Generates PKCE pair, state, and authorization URL with all required parameters.

    Returns:
        AuthorizationFlow: Tuple of (pkce, state, url)
    """
    pkce = generate_pkce()
    state = create_state()

    params = {
        "response_type": "code",
        "client_id": config.client_id,
        "redirect_uri": config.redirect_uri,
        "scope": " ".join(config.scopes),
        "state": state,
        "code_challenge": pkce.challenge,
        "code_challenge_method": "S256",
    }

    url = f"{config.authorize_url}?{urlencode(params)}"

    return AuthorizationFlow(pkce=pkce, state=state, url=url)
