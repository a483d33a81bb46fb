"""
HTTP middlewares: response hardening headers and JSON-only request bodies.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from costflow_shared.config.settings import settings

BASE_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}

# The API serves JSON only; nothing may be embedded or loaded
API_CSP = "default-src 'none'; frame-ancestors 'none'"

# Swagger UI and ReDoc pull their assets from a CDN
DOCS_PATHS = ("/docs", "/redoc")

HSTS = "max-age=31536000; includeSubDomains"


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Hardening headers on every response; HSTS in production only."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers.update(BASE_SECURITY_HEADERS)
        if "server" in response.headers:
            del response.headers["server"]
        if not request.url.path.startswith(DOCS_PATHS):
            response.headers["Content-Security-Policy"] = API_CSP
        if settings.environment == "production":
            response.headers["Strict-Transport-Security"] = HSTS

        return response


class ContentTypeValidationMiddleware(BaseHTTPMiddleware):
    """
    Answer 415 when a write request declares a body that is not JSON.

    Body-less calls such as the calculate endpoints send no content-type
    and pass through.
    """

    WRITE_METHODS = frozenset({"POST", "PUT", "PATCH"})

    async def dispatch(self, request: Request, call_next):
        if request.method in self.WRITE_METHODS:
            media_type = request.headers.get("content-type", "").split(";")[0].strip()
            if media_type and media_type != "application/json":
                return JSONResponse(
                    status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                    content={"detail": f"Unsupported content type {media_type}; send JSON"},
                )
        return await call_next(request)


def register_middlewares(app: FastAPI) -> None:
    # Last added runs first: content type is checked before headers are set
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(ContentTypeValidationMiddleware)
