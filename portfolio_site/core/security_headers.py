"""Security headers middleware.

Adds standard security headers to all responses:
- Content-Security-Policy: self plus the font/icon CDNs the page loads
- X-Content-Type-Options: nosniff
- X-Frame-Options: DENY
- Referrer-Policy: strict-origin-when-cross-origin
- Permissions-Policy: restrictive defaults
- Strict-Transport-Security: HSTS (only when served over HTTPS)
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

CSP_DIRECTIVES = {
    "default-src": ["'self'"],
    "style-src": [
        "'self'",
        "'unsafe-inline'",
        "https://fonts.googleapis.com",
        "https://cdnjs.cloudflare.com",
    ],
    "font-src": ["'self'", "https://fonts.gstatic.com", "https://cdnjs.cloudflare.com"],
    "script-src": ["'self'", "'unsafe-inline'"],
    "img-src": ["'self'", "data:", "https:"],
    "connect-src": ["'self'"],
}


def build_csp(directives: dict) -> str:
    return "; ".join(
        f"{name} {' '.join(sources)}" for name, sources in directives.items()
    )


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, directives: dict = CSP_DIRECTIVES):
        super().__init__(app)
        self.content_security_policy = build_csp(directives)

    async def dispatch(self, request: Request, call_next) -> Response:
        response: Response = await call_next(request)

        response.headers["Content-Security-Policy"] = self.content_security_policy
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "camera=(), microphone=(), geolocation=(), payment=()"
        )

        # HSTS only when the request arrived over HTTPS
        if request.url.scheme == "https":
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )

        return response
