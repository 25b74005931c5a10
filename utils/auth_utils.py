"""
Session cookie helpers for route handlers.
"""
from functools import wraps

from flask import current_app, g, request

from services.auth_service import get_session
from utils.errors import Unauthorized


def _cookie_name():
    return current_app.config['CONFIG'].get("session_cookie_name", "session_token")


def current_session():
    """The session for the request cookie, or None."""
    token = request.cookies.get(_cookie_name())
    return get_session(token, current_app.config['CONFIG'])


def login_required(view):
    """Reject requests without a live session; expose the user id as ``g.user_id``."""
    @wraps(view)
    def wrapped(*args, **kwargs):
        session = current_session()
        if session is None:
            raise Unauthorized()
        g.user_id = session["user"]["id"]
        return view(*args, **kwargs)
    return wrapped


def set_session_cookie(response, token):
    config = current_app.config['CONFIG']
    response.set_cookie(
        _cookie_name(),
        token,
        max_age=int(config.get("session_ttl_days", 7)) * 24 * 3600,
        httponly=True,
        samesite="Lax",
        secure=request.is_secure,
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(_cookie_name())
    return response
