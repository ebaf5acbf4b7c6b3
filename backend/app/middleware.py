from typing import Callable

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class BodySizeLimitMiddleware:
    """
    Rejects request bodies larger than the configured limit with a 413.

    The declared Content-Length is checked first. Chunked bodies have none,
    so the received bytes are counted as well, and the buffered messages are
    replayed to the app once the body is known to fit.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: Callable[[], int]):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        limit = self.max_body_bytes()
        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > limit:
            await self._reject(scope, receive, send)
            return

        messages = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            messages.append(message)
            if message["type"] != "http.request":
                break
            received += len(message.get("body", b""))
            if received > limit:
                await self._reject(scope, receive, send)
                return
            more_body = message.get("more_body", False)

        async def replay() -> Message:
            if messages:
                return messages.pop(0)
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send) -> None:
        response = JSONResponse(status_code=413, content={"error": "Request body too large"})
        await response(scope, receive, send)
