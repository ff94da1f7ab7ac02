# Overview: Cookie transport for access/refresh tokens.

"""
Auth cookies.

Both tokens travel as HttpOnly cookies. Secure and SameSite follow the
request:

    cross-origin  https  ->  SameSite  Secure
    yes           yes        None      yes
    yes           no         Lax       no
    no            yes        Lax       yes
    no            no         Lax       no

Browsers drop SameSite=None cookies that are not Secure, which is why plain
http cross-origin requests fall back to Lax.
"""

from __future__ import annotations

from datetime import timedelta
from urllib.parse import urlsplit

ACCESS_COOKIE = "accessToken"
REFRESH_COOKIE = "refreshToken"


def derive_cookie_policy(*, cross_origin: bool, https: bool) -> tuple[bool, str]:
    """Return (secure, samesite)."""
    if cross_origin and https:
        return True, "None"
    return https, "Lax"


def request_cookie_policy(request) -> tuple[bool, str]:
    """
    Classify a Flask request and return its (secure, samesite).

    HTTPS when the request scheme is https or its Origin is an https URL.
    Cross-origin when an Origin header is present and differs from the
    request's own scheme://host.
    """
    origin = request.headers.get("Origin")
    own_origin = f"{request.scheme}://{request.host}"

    https = request.scheme == "https" or (origin is not None and urlsplit(origin).scheme == "https")
    cross_origin = origin is not None and origin.rstrip("/") != own_origin

    return derive_cookie_policy(cross_origin=cross_origin, https=https)


def _set(response, name: str, value: str, max_age: int, secure: bool, samesite: str) -> None:
    response.set_cookie(
        name,
        value,
        max_age=max_age,
        path="/",
        httponly=True,
        secure=secure,
        samesite=samesite,
    )


def set_auth_cookies(
    response,
    request,
    *,
    access_token: str,
    access_expires: timedelta,
    refresh_token: str | None = None,
    refresh_expires: timedelta | None = None,
) -> None:
    secure, samesite = request_cookie_policy(request)
    _set(response, ACCESS_COOKIE, access_token, int(access_expires.total_seconds()), secure, samesite)
    if refresh_token is not None and refresh_expires is not None:
        _set(response, REFRESH_COOKIE, refresh_token, int(refresh_expires.total_seconds()), secure, samesite)


def clear_auth_cookies(response, request) -> None:
    secure, samesite = request_cookie_policy(request)
    for name in (ACCESS_COOKIE, REFRESH_COOKIE):
        _set(response, name, "", 0, secure, samesite)
