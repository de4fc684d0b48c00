import io

import httpx
import pytest
from aiohttp.test_utils import unused_port
from rich.console import Console

import settings
from config import AuthConfig, MonitorConfig


@pytest.fixture
def callback_port():
    return unused_port()


@pytest.fixture
def auth_config(callback_port):
    """Client config whose redirect URI points at a free local port"""
    return AuthConfig(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri=f"http://127.0.0.1:{callback_port}/callback",
        scopes=list(settings.SCOPES),
        authorize_url=settings.AUTHORIZE_URL,
        token_url="https://api.example.test/2/oauth2/token",
    )


@pytest.fixture
def monitor_config(tmp_path):
    """Monitor config with every file under tmp_path"""
    data_dir = tmp_path / "data"
    return MonitorConfig(
        access_token="test-access-token",
        user_id="12345",
        username=None,
        api_base="https://api.example.test",
        data_dir=data_dir,
        seen_file=data_dir / settings.SEEN_FILE_NAME,
        alerts_file=data_dir / settings.ALERTS_FILE_NAME,
        projects_file=tmp_path / "active-projects.md",
        env_file=tmp_path / "global.env",
    )


@pytest.fixture
def console():
    """Console writing plain text into a buffer; read it back with console.file.getvalue()"""
    return Console(file=io.StringIO(), force_terminal=False, width=200)


@pytest.fixture
def mock_client():
    """Factory for httpx.AsyncClient instances answered by handler(request)"""
    def factory(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return factory
