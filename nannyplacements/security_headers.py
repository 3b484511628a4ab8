"""
Security Headers Middleware for FastAPI

Every API response gets a fixed set of hardening headers. The API only serves
JSON and is never framed, so the policies are as strict as browsers allow.
HSTS is only sent in production, where the API sits behind TLS.
"""

import logging
import os
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)

IS_PRODUCTION = os.getenv("ENVIRONMENT", "development").lower() == "production"

CSP_DIRECTIVES = (
    "default-src 'none'",
    "frame-ancestors 'none'",
    "base-uri 'none'",
    "form-action 'self'",
)

# Browser features an API response never needs
DISABLED_FEATURES = (
    "accelerometer",
    "camera",
    "geolocation",
    "gyroscope",
    "magnetometer",
    "microphone",
    "payment",
    "usb",
)


def build_security_headers(production: bool = IS_PRODUCTION) -> dict[str, str]:
    headers = {
        "X-Frame-Options": "DENY",
        "X-Content-Type-Options": "nosniff",
        "Referrer-Policy": "strict-origin-when-cross-origin",
        "Content-Security-Policy": "; ".join(CSP_DIRECTIVES),
        "Permissions-Policy": ", ".join(f"{feature}=()" for feature in DISABLED_FEATURES),
        "X-Permitted-Cross-Domain-Policies": "none",
    }
    if production:
        headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains; preload"
    return headers


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds the security headers to every response outside exclude_paths"""

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []
        self.headers = build_security_headers()
        logger.debug(f"🔒 Security headers: {sorted(self.headers)}")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        if any(request.url.path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        for name, value in self.headers.items():
            response.headers[name] = value

        # Responses carry personal data; never cache unless the endpoint says otherwise
        response.headers.setdefault("Cache-Control", "no-store, no-cache, must-revalidate")
        return response
