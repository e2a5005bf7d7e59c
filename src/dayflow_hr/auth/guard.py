from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import RequestUser

TOKEN_SERVICE_EXTENSION = "dayflow_hr.token_service"


def _extract_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if not header:
        return None
    parts = header.split(" ", 1)
    if len(parts) != 2 or parts[0] != "Bearer":
        return None
    return parts[1].strip() or None


def auth_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        token = _extract_token()
        if not token:
            raise AuthenticationError("No token provided")
        token_service = current_app.extensions[TOKEN_SERVICE_EXTENSION]
        g.request_user = token_service.verify(token)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @auth_required
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_user().role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        return view(*args, **kwargs)

    return wrapper


def current_user() -> RequestUser:
    user = g.get("request_user")
    if user is None:
        raise AuthenticationError("No token provided")
    return user
