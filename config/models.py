"""Configuration records passed explicitly into each operation"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from urllib.parse import urlparse


class MissingCredentialsError(Exception):
    """Required credentials are not configured"""


@dataclass
class AuthConfig:
    """OAuth 2.0 PKCE client configuration

    Attributes:
        client_id: OAuth 2.0 Client ID (not the consumer key of OAuth 1.0a apps)
        client_secret: OAuth 2.0 Client Secret, sent with HTTP Basic auth
        redirect_uri: Callback URL registered with the app
        scopes: Requested scopes, joined with spaces in the authorization URL
        authorize_url: Browser authorization endpoint
        token_url: Token endpoint
    """
    client_id: str
    client_secret: str
    redirect_uri: str
    scopes: List[str]
    authorize_url: str
    token_url: str

    @property
    def callback_host(self) -> str:
        return urlparse(self.redirect_uri).hostname or "localhost"

    @property
    def callback_port(self) -> int:
        return urlparse(self.redirect_uri).port or 80

    @property
    def callback_path(self) -> str:
        return urlparse(self.redirect_uri).path or "/"


@dataclass
class MonitorConfig:
    """Bookmark monitor configuration"""
    access_token: Optional[str]
    user_id: Optional[str]
    username: Optional[str]
    api_base: str
    data_dir: Path
    seen_file: Path
    alerts_file: Path
    projects_file: Path
    page_size: int = 100
    alert_threshold: int = 2
    max_keywords: int = 10
    env_file: Optional[Path] = field(default=None)
