import base64
from urllib.parse import parse_qs

import httpx
import pytest

from x_oauth import TokenExchangeError, TokenResponse, exchange_code_for_tokens


@pytest.mark.asyncio
async def test_exchange_posts_code_with_basic_auth(auth_config, mock_client):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["method"] = request.method
        captured["auth"] = request.headers["Authorization"]
        captured["form"] = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
        return httpx.Response(200, json={
            "token_type": "bearer",
            "expires_in": 7200,
            "access_token": "new-access",
            "refresh_token": "new-refresh",
            "scope": "bookmark.read tweet.read users.read offline.access",
        })

    async with mock_client(handler) as client:
        tokens = await exchange_code_for_tokens(auth_config, "the-code", "the-verifier", client=client)

    expected_auth = base64.b64encode(b"test-client-id:test-client-secret").decode()
    assert captured["method"] == "POST"
    assert captured["url"] == auth_config.token_url
    assert captured["auth"] == f"Basic {expected_auth}"
    assert captured["form"] == {
        "grant_type": "authorization_code",
        "code": "the-code",
        "redirect_uri": auth_config.redirect_uri,
        "code_verifier": "the-verifier",
        "client_id": "test-client-id",
    }
    assert tokens.access_token == "new-access"
    assert tokens.refresh_token == "new-refresh"
    assert tokens.expires_in == 7200


@pytest.mark.asyncio
async def test_error_field_raises(auth_config, mock_client):
    def handler(request):
        return httpx.Response(400, json={
            "error": "invalid_request",
            "error_description": "Value passed for the authorization code was invalid.",
        })

    async with mock_client(handler) as client:
        with pytest.raises(TokenExchangeError) as exc_info:
            await exchange_code_for_tokens(auth_config, "bad", "verifier", client=client)

    assert exc_info.value.payload["error"] == "invalid_request"
    assert exc_info.value.status_code == 400
    assert "authorization code was invalid" in str(exc_info.value)


@pytest.mark.asyncio
async def test_error_field_with_success_status_still_raises(auth_config, mock_client):
    def handler(request):
        return httpx.Response(200, json={"error": "invalid_client"})

    async with mock_client(handler) as client:
        with pytest.raises(TokenExchangeError):
            await exchange_code_for_tokens(auth_config, "code", "verifier", client=client)


@pytest.mark.asyncio
async def test_non_json_body_raises(auth_config, mock_client):
    def handler(request):
        return httpx.Response(502, text="<html>Bad Gateway</html>")

    async with mock_client(handler) as client:
        with pytest.raises(TokenExchangeError) as exc_info:
            await exchange_code_for_tokens(auth_config, "code", "verifier", client=client)

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_non_numeric_expires_in_raises(auth_config, mock_client):
    def handler(request):
        return httpx.Response(200, json={"access_token": "acc", "expires_in": "soon"})

    async with mock_client(handler) as client:
        with pytest.raises(TokenExchangeError, match="expires_in"):
            await exchange_code_for_tokens(auth_config, "code", "verifier", client=client)


def test_env_lines_include_expiry_in_epoch_ms():
    tokens = TokenResponse(access_token="acc", refresh_token="ref", expires_in=7200)

    assert tokens.to_env_lines(now_ms=1_700_000_000_000) == [
        'export X_OAUTH2_ACCESS_TOKEN="acc"',
        'export X_OAUTH2_REFRESH_TOKEN="ref"',
        'export X_OAUTH2_TOKEN_EXPIRY="1700007200000"',
    ]


def test_env_lines_skip_missing_refresh_token():
    tokens = TokenResponse.from_dict({"access_token": "acc", "expires_in": 60})

    lines = tokens.to_env_lines(now_ms=0)

    assert lines == ['export X_OAUTH2_ACCESS_TOKEN="acc"', 'export X_OAUTH2_TOKEN_EXPIRY="60000"']
