"""X API v2 client for user lookup and bookmarks"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

import settings
from .models import Bookmark


logger = logging.getLogger(__name__)


class XApiError(Exception):
    """Non-2xx response from the X API"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class XAuthError(XApiError):
    """The access token was rejected (401)"""


class XApiClient:
    """Bearer-authenticated client for the endpoints the monitor needs"""

    def __init__(self, access_token: str, api_base: str = settings.API_BASE,
                 client: Optional[httpx.AsyncClient] = None):
        self.access_token = access_token
        self.api_base = api_base.rstrip("/")
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "XApiClient":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=None)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._client is None:
            raise RuntimeError("XApiClient must be used as an async context manager")

        url = f"{self.api_base}{path}"
        logger.debug(f"GET {url} params={params}")
        response = await self._client.get(url, params=params, headers=self.headers)
        logger.debug(f"GET {url} -> {response.status_code}")
        return self._check(response)

    @staticmethod
    def _check(response: httpx.Response) -> Dict[str, Any]:
        if response.status_code == 401:
            raise XAuthError(
                f"Auth failed ({response.status_code}). Your OAuth2 token may be expired.\n"
                "Run: get-bookmark-token to re-authorize.",
                status_code=response.status_code,
                body=response.text,
            )
        if not response.is_success:
            raise XApiError(
                f"X API error: {response.status_code} {response.text}",
                status_code=response.status_code,
                body=response.text,
            )
        return response.json()

    async def lookup_user_id(self, username: Optional[str] = None) -> str:
        """
        Resolve the numeric account id.

        Args:
            username: Handle to look up; without one the token's own account is used

        Returns:
            The account id
        """
        if username:
            path = f"/2/users/by/username/{quote(username.lstrip('@'), safe='')}"
        else:
            path = "/2/users/me"

        payload = await self._get(path, params={"user.fields": "id"})
        user_id = (payload.get("data") or {}).get("id")
        if not user_id:
            raise XApiError(f"User lookup returned no id: {payload}")
        return str(user_id)

    async def fetch_bookmarks(self, user_id: str, max_results: int = settings.BOOKMARKS_PAGE_SIZE) -> List[Bookmark]:
        """
        Fetch the first page of the user's bookmarks.

        Raises:
            XAuthError: token rejected
            XApiError: any other non-2xx response
        """
        payload = await self._get(
            f"/2/users/{user_id}/bookmarks",
            params={
                "max_results": str(max_results),
                "tweet.fields": settings.BOOKMARK_TWEET_FIELDS,
            },
        )
        return [Bookmark.model_validate(item) for item in payload.get("data") or []]
