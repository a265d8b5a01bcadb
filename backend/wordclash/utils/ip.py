from __future__ import annotations

from flask import Request

_PROXY_HEADERS = ("CF-Connecting-IP", "X-Real-IP")


def get_client_ip(request: Request, trust_proxy_headers: bool = True) -> str | None:
    """Best-effort client address for connection logs."""
    if trust_proxy_headers:
        for header in _PROXY_HEADERS:
            value = request.headers.get(header)
            if value:
                return value.strip()

        forwarded = [p.strip() for p in request.headers.get("X-Forwarded-For", "").split(",") if p.strip()]
        if forwarded:
            return forwarded[0]

    return request.remote_addr or None
