# Overview: Request decorators for API routes.

from functools import wraps

from flask import g, request

from .container import get_services
from .errors import UnauthorizedError
from .session_cookies import ACCESS_COOKIE


def _access_token_from_request() -> str | None:
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(ACCESS_COOKIE) or None


def require_auth(f):
    """
    Require a valid access token (Bearer header or accessToken cookie).

    Sets:
    - g.token_payload: the decoded JWT claims
    - g.current_owner: the authenticated StoreOwner

    Raises UnauthorizedError (401) if the token is missing, invalid or
    expired, or the owner no longer exists or was deactivated.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = _access_token_from_request()
        if not token:
            raise UnauthorizedError("Authentication required")

        auth = get_services().auth
        payload = auth.verify_access_token(token)
        if not payload:
            raise UnauthorizedError("Invalid or expired token")

        owner = auth.owners.find_by_id(payload.get("id"))
        if not owner or not owner.is_active:
            raise UnauthorizedError("Invalid or expired token")

        g.token_payload = payload
        g.current_owner = owner

        return f(*args, **kwargs)

    return decorated_function
