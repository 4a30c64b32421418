from functools import wraps

from flask import g

from library_app.errors import Forbidden
from library_app.services.auth_service import AuthService
from library_app.utils.auth import extract_token


def token_required(view):
    @wraps(view)
    def wrapped(*args, **kwargs):
        g.current_user = AuthService.authenticate_token(extract_token())
        return view(*args, **kwargs)
    return wrapped


def role_required(*roles):
    def decorator(fn):
        @wraps(fn)
        @token_required
        def wrapper(*args, **kwargs):
            if g.current_user.type not in roles:
                raise Forbidden("admin privileges required" if roles == ("admin",) else "Forbidden")
            return fn(*args, **kwargs)
        return wrapper
    return decorator
