"""
X OAuth 2.0 (PKCE) authentication module
"""
from .authorization import (
    PKCEPair,
    AuthorizationFlow,
    compute_challenge,
    generate_pkce,
    create_state,
    create_authorization_flow,
)
from .callback_server import (
    MISSING_CODE,
    STATE_MISMATCH,
    CallbackError,
    CallbackResult,
    CallbackServerError,
    OAuthCallbackServer,
    start_callback_server,
)
from .token_exchange import (
    TokenExchangeError,
    TokenResponse,
    exchange_code_for_tokens,
)


__all__ = [
    # Authorization
    "PKCEPair",
    "AuthorizationFlow",
    "compute_challenge",
    "generate_pkce",
    "create_state",
    "create_authorization_flow",
    # Callback Server
    "MISSING_CODE",
    "STATE_MISMATCH",
    "CallbackError",
    "CallbackResult",
    "CallbackServerError",
    "OAuthCallbackServer",
    "start_callback_server",
    # Token Exchange
    "TokenExchangeError",
    "TokenResponse",
    "exchange_code_for_tokens",
]
