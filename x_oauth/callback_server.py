"""
Local one-shot OAuth callback server
"""
import asyncio
import errno
import html
import logging
from typing import Optional
from aiohttp import web

logger = logging.getLogger(__name__)

MISSING_CODE = "missing_code"
STATE_MISMATCH = "state_mismatch"


class CallbackServerError(Exception):
    """The callback listener could not be started"""

    def __init__(self, port: int, message: str):
        super().__init__(message)
        self.port = port


class CallbackResult:
    """OAuth callback result"""

    def __init__(self, code: Optional[str] = None, state: Optional[str] = None,
                 error: Optional[str] = None, error_description: Optional[str] = None):
        self.code = code
        self.state = state
        self.error = error
        self.error_description = error_description

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.code)

    def __repr__(self) -> str:
        return f"CallbackResult(ok={self.ok}, error={self.error!r})"


class CallbackError(Exception):
    """The OAuth callback was rejected, so no token exchange happens"""

    def __init__(self, result: CallbackResult):
        reason = {
            MISSING_CODE: "No authorization code received",
            STATE_MISMATCH: "State mismatch, possible CSRF",
        }.get(result.error, f"Authorization denied: {result.error}")
        if result.error_description:
            reason = f"{reason} ({result.error_description})"
        super().__init__(reason)
        self.result = result


class OAuthCallbackServer:
    """Local HTTP server that accepts exactly one OAuth callback"""

    def __init__(self, expected_state: str, host: str = "localhost", port: int = 3000,
                 path: str = "/callback"):
        self.expected_state = expected_state
        self.host = host
        self.port = port
        self.path = path
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None
        self._result: Optional[asyncio.Future] = None

        self.app.router.add_get(path, self._handle_callback)

    def _resolve(self, result: CallbackResult) -> None:
        if self._result is not None and not self._result.done():
            self._result.set_result(result)

    async def _handle_callback(self, request: web.Request) -> web.Response:
        """Handle the OAuth redirect; the first request decides the outcome"""
        if self._result is None or self._result.done():
            return web.Response(text="Callback already handled", status=409)

        code = request.query.get("code")
        state = request.query.get("state")
        error = request.query.get("error")
        error_description = request.query.get("error_description")

        # Provider reported an error (e.g. user denied access)
        if error:
            logger.error(f"OAuth error from provider: {error} {error_description or ''}".rstrip())
            self._resolve(CallbackResult(state=state, error=error, error_description=error_description))
            return web.Response(
                text=f"""
                <html>
                    <body>
                        <h1>Authorization Failed</h1>
                        <p>Error: {html.escape(error)}</p>
                        <p>{html.escape(error_description or '')}</p>
                        <p>You can close this window.</p>
                    </body>
                </html>
                """,
                content_type="text/html",
                status=400,
            )

        if not code:
            logger.error("Callback received without an authorization code")
            self._resolve(CallbackResult(state=state, error=MISSING_CODE))
            return web.Response(text="No code received", status=400)

        # CSRF protection
        if state != self.expected_state:
            logger.warning("State mismatch on OAuth callback, possible CSRF; refusing token exchange")
            self._resolve(CallbackResult(code=code, state=state, error=STATE_MISMATCH))
            return web.Response(text="State mismatch, possible CSRF", status=400)

        self._resolve(CallbackResult(code=code, state=state))

        return web.Response(
            text="""
            <html>
                <body>
                    <h1>Auth successful!</h1>
                    <p>You can close this tab and return to the terminal.</p>
                </body>
            </html>
            """,
            content_type="text/html",
        )

    async def start(self) -> None:
        """Start the callback server

        Raises:
            CallbackServerError: if the port cannot be bound
        """
        self._result = asyncio.get_running_loop().create_future()
        self.runner = web.AppRunner(self.app, access_log=None)
        await self.runner.setup()

        site = web.TCPSite(self.runner, host=self.host, port=self.port)

        try:
            await site.start()
        except OSError as e:
            await self.runner.cleanup()
            self.runner = None
            if e.errno == errno.EADDRINUSE:
                raise CallbackServerError(
                    self.port,
                    f"Port {self.port} is in use. Kill whatever's on it and retry.",
                ) from e
            raise CallbackServerError(self.port, f"Server error: {e}") from e

        logger.info(f"OAuth callback server listening on {self.host}:{self.port}{self.path}")

    async def wait_for_callback(self, timeout: Optional[float] = None) -> CallbackResult:
        """
        Wait for the single OAuth callback.

        Args:
            timeout: Maximum time to wait in seconds (default: wait forever)

        Returns:
            CallbackResult of the first request to the callback path
        """
        if self._result is None:
            raise RuntimeError("Callback server is not started")
        return await asyncio.wait_for(asyncio.shield(self._result), timeout=timeout)

    async def stop(self) -> None:
        """Stop the callback server"""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.debug("OAuth callback server stopped")


async def start_callback_server(expected_state: str, host: str, port: int, path: str) -> OAuthCallbackServer:
    """
    Start OAuth callback server.

    Args:
        expected_state: Expected state parameter for CSRF protection
        host: Interface to bind
        port: Port taken from the redirect URI
        path: Callback path taken from the redirect URI

    Returns:
        OAuthCallbackServer instance
    """
    server = OAuthCallbackServer(expected_state, host=host, port=port, path=path)
    await server.start()
    return server
