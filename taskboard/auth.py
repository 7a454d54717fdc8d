from functools import wraps

from flask import current_app, g, request

from .errors import Forbidden, InvalidTokenError, Unauthorized
from .models import CurrentUser


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme != "Bearer" or not token.strip():
        return None
    return token.strip()


def token_required(f):
    """Reject the request unless it carries a valid token for a known user.

    On success the caller is available to the view as ``g.current_user``.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if token is None:
            raise Unauthorized("Access token required")

        services = current_app.extensions["taskboard"]
        try:
            user_id = services.tokens.verify(token)
        except InvalidTokenError:
            raise Forbidden("Invalid or expired token")

        user = services.users.get_by_id(user_id)
        if user is None:
            raise Unauthorized("Invalid token - user not found")

        g.current_user = CurrentUser(id=user.id, username=user.username)
        return f(*args, **kwargs)
    return wrapper
