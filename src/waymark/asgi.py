"""
ASGI adapter for a Waymark router.

Reads the method and path from the ASGI scope, dispatches, and turns the
result into an HTTP response:

    router = Router()
    router.get("/", lambda: {"message": "Hello, World!"})
    app = RouterApp(router)

    # Run with: uvicorn main:app
"""

import logging
import time
from typing import Any

from waymark.exceptions import HTTPException
from waymark.request import Request
from waymark.response import JSONResponse, Response, TextResponse
from waymark.router import Router
from waymark.types import Receive, Scope, Send


def to_response(result: Any) -> Response:
    """Convert a callback's return value into a Response."""
    if isinstance(result, Response):
        return result
    if isinstance(result, (dict, list)):
        return JSONResponse(result)
    if isinstance(result, (str, bytes)):
        return TextResponse(result)
    if result is None:
        return TextResponse("", status_code=204)
    return JSONResponse(result)


class RouterApp:
    """
    ASGI application serving a single router.

    HTTP exceptions escaping a callback become JSON error responses; any
    other exception is logged server-side and answered with a bare 500.
    """

    def __init__(
        self,
        router: Router,
        access_logger: logging.Logger | None = None,
        log_level: int | None = None,
    ) -> None:
        self.router = router
        self._access_logger = access_logger or logging.getLogger("waymark.access")
        self._error_logger = logging.getLogger("waymark.errors")
        self._log_level = log_level or logging.INFO

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI application entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request(scope)
        start_time = time.perf_counter()
        response, body = self._handle_request(request)

        try:
            await response(send, body)
        finally:
            duration = (time.perf_counter() - start_time) * 1000
            self._access_logger.log(
                self._log_level,
                "%s %s %d %.2fms client=%s",
                request.method,
                request.path,
                response.status_code,
                duration,
                request.client[0] if request.client else "-",
            )

    def _handle_request(self, request: Request) -> tuple[Response, bytes]:
        """Dispatch the request and render the response body."""
        try:
            response = to_response(self.router.dispatch(request.method, request.path))
            return response, response.render()
        except HTTPException as exc:
            if exc.status_code >= 500:
                self._error_logger.error(
                    "status=%d detail=%s", exc.status_code, exc.detail, exc_info=True,
                )
            else:
                self._error_logger.warning("status=%d detail=%s", exc.status_code, exc.detail)
            response = JSONResponse(
                content={"error": exc.detail, "status_code": exc.status_code},
                status_code=exc.status_code,
                headers=exc.headers,
            )
        except Exception as exc:
            self._error_logger.exception("Unhandled exception: %s", exc)
            response = JSONResponse(
                content={"error": "Internal Server Error", "status_code": 500},
                status_code=500,
            )
        return response, response.render()

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    def run(
        self,
        host: str = "localhost",
        port: int = 8000,
        workers: int = 1,
        log_level: str = "info",
    ) -> None:
        """
        Serve the application using uvicorn.

        Args:
            host: Host to bind to.
            port: Port to bind to.
            workers: Number of worker processes.
            log_level: Logging level.
        """
        import uvicorn

        uvicorn.run(
            self,
            host=host,
            port=port,
            workers=workers,
            log_level=log_level,
        )
