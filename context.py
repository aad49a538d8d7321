import uuid
from contextvars import ContextVar
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, taken from X-Request-ID when the client sends one"""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        request.state.request_id = rid
        token = request_id.set(rid)
        try:
            response = await call_next(request)
        finally:
            request_id.reset(token)

        response.headers["X-Request-ID"] = rid
        return response
