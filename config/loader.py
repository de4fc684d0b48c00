"""Configuration loader for x-bookmarks

Loads configuration from multiple sources with the following priority:
1. Environment variables (highest priority)
2. Key=value env file (default: ~/.config/env/global.env)
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from dotenv import dotenv_values

import settings
from .models import AuthConfig, MissingCredentialsError, MonitorConfig

# Set up logger for config loader
logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, env_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None):
        """Initialize the config loader

        Args:
            env_file: Optional path to the key=value env file.
                      Defaults to $X_ENV_FILE, then ~/.config/env/global.env.
            environ: Environment mapping to read from (defaults to os.environ)
        """
        self.environ = environ if environ is not None else os.environ
        self.env_path = Path(env_file or self.environ.get("X_ENV_FILE") or settings.ENV_FILE).expanduser()
        self.file_values = self._load_env_file()

    def _load_env_file(self) -> Dict[str, str]:
        """Parse the env file if it exists, without touching the process environment"""
        if not self.env_path.exists():
            logger.debug(f"Env file not found at {self.env_path}, using environment variables and defaults only")
            return {}

        try:
            values = dotenv_values(self.env_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read env file {self.env_path}: {e}")
            return {}

        logger.debug(f"Loaded {len(values)} value(s) from {self.env_path}")
        return {key: value for key, value in values.items() if value is not None}

    def raw(self, name: str) -> Optional[str]:
        """Get a raw string value with priority: env > env file, or None"""
        value = self.environ.get(name)
        if value:
            return value
        value = self.file_values.get(name)
        if value:
            return value.strip()
        return None

    def first(self, *names: str) -> Optional[str]:
        """Return the first non-empty value among several variable names"""
        for name in names:
            value = self.raw(name)
            if value:
                return value
        return None

    def get(self, env_var: str, default: Any) -> Any:
        """Get a configuration value with priority: env > env file > default

        Args:
            env_var: Variable name to check
            default: Default value if not found; its type drives coercion

        Returns:
            The configuration value from environment, env file or default
        """
        env_value = self.raw(env_var)
        if env_value is not None:
            # Try to parse as appropriate type
            if isinstance(default, bool):
                return env_value.lower() in ('true', '1', 'yes')
            elif isinstance(default, int):
                try:
                    return int(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                    return default
            elif isinstance(default, float):
                try:
                    return float(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                    return default
            if isinstance(default, str) and default.startswith("~/"):
                return str(Path(env_value).expanduser())
            return env_value

        # Expand home directory if it's a path
        if isinstance(default, str) and default.startswith("~/"):
            return str(Path(default).expanduser())
        return default


def load_auth_config(loader: Optional[ConfigLoader] = None) -> AuthConfig:
    """Build the authorizer configuration

    Raises:
        MissingCredentialsError: when no OAuth 2.0 client id is configured
    """
    loader = loader or ConfigLoader()

    client_id = loader.first("X_CLIENT_ID", "X_CONSUMER_KEY")
    if not client_id:
        raise MissingCredentialsError(
            "X_CLIENT_ID is not set. Add your OAuth 2.0 Client ID and Client Secret "
            f"(X_CLIENT_ID / X_CLIENT_SECRET) to {loader.env_path}"
        )

    client_secret = loader.first("X_CLIENT_SECRET", "X_CONSUMER_SECRET")
    if not client_secret:
        logger.warning("X_CLIENT_SECRET is not set; token exchange will use an empty secret")

    return AuthConfig(
        client_id=client_id,
        client_secret=client_secret or "",
        redirect_uri=settings.REDIRECT_URI,
        scopes=list(settings.SCOPES),
        authorize_url=settings.AUTHORIZE_URL,
        token_url=settings.TOKEN_URL,
    )


def load_monitor_config(loader: Optional[ConfigLoader] = None) -> MonitorConfig:
    """Build the bookmark monitor configuration

    A missing access token is not an error here; only the ingest mode needs it.
    """
    loader = loader or ConfigLoader()

    data_dir = Path(loader.get("X_BOOKMARKS_DATA_DIR", settings.DATA_DIR))

    return MonitorConfig(
        access_token=loader.raw("X_OAUTH2_ACCESS_TOKEN"),
        user_id=loader.raw("X_USER_ID"),
        username=loader.raw("X_USERNAME"),
        api_base=loader.get("X_API_BASE", settings.API_BASE),
        data_dir=data_dir,
        seen_file=data_dir / settings.SEEN_FILE_NAME,
        alerts_file=data_dir / settings.ALERTS_FILE_NAME,
        projects_file=Path(loader.get("X_ACTIVE_PROJECTS_FILE", settings.ACTIVE_PROJECTS_FILE)),
        page_size=settings.BOOKMARKS_PAGE_SIZE,
        alert_threshold=loader.get("X_BOOKMARKS_ALERT_THRESHOLD", settings.ALERT_THRESHOLD),
        max_keywords=settings.MAX_PROJECT_KEYWORDS,
        env_file=loader.env_path,
    )
