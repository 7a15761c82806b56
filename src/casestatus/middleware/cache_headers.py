"""Cache-Control headers for public and private pages."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

# Home page and assets can be cached briefly; case data and admin pages never.
PUBLIC_CACHE_CONTROL = "public, max-age=60, stale-while-revalidate=30"
PRIVATE_CACHE_CONTROL = "no-store"

PUBLIC_PATHS = ("/static",)
PRIVATE_PATHS = ("/case-information", "/admin")


class CacheHeadersMiddleware(BaseHTTPMiddleware):
    """Set Cache-Control unless the endpoint already chose one."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        path = request.url.path
        if path.startswith(PRIVATE_PATHS):
            response.headers.setdefault("Cache-Control", PRIVATE_CACHE_CONTROL)
        elif path == "/" and not request.query_params:
            response.headers.setdefault("Cache-Control", PUBLIC_CACHE_CONTROL)
            # Language comes from Accept-Language when ?lang is absent
            response.headers.add_vary_header("Accept-Language")
        elif path.startswith(PUBLIC_PATHS):
            response.headers.setdefault("Cache-Control", PUBLIC_CACHE_CONTROL)

        return response
