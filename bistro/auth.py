from datetime import datetime, timedelta, timezone
from functools import wraps

import jwt
from jwt.exceptions import InvalidTokenError
from flask import current_app, g, request
from werkzeug.security import check_password_hash, generate_password_hash

from .http import ApiError


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def issue_token(user) -> str:
    expires = datetime.now(timezone.utc) + timedelta(days=current_app.config["JWT_EXPIRES_DAYS"])
    claims = {"id": user.id, "email": user.email, "role": user.role, "exp": expires}
    return jwt.encode(claims, current_app.config["JWT_SECRET"], algorithm="HS256")


def decode_token(token: str) -> dict:
    return jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"])


def _bearer_token() -> str | None:
    auth_header = request.headers.get("Authorization", "").strip()
    if not auth_header.lower().startswith("bearer "):
        return None
    return auth_header[7:].strip() or None


def login_required(fn):
    """Decodes the bearer token into g.user or answers 401."""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _bearer_token()
        if not token:
            raise ApiError(401, "UNAUTHORIZED", "No token provided")
        try:
            g.user = decode_token(token)
        except InvalidTokenError:
            raise ApiError(401, "UNAUTHORIZED", "Invalid or expired token")
        return fn(*args, **kwargs)
    return wrapper


def admin_required(fn):
    @wraps(fn)
    @login_required
    def wrapper(*args, **kwargs):
        if not is_admin():
            raise ApiError(403, "FORBIDDEN", "Admin access required")
        return fn(*args, **kwargs)
    return wrapper


def is_admin() -> bool:
    return g.user.get("role") == "admin"


def check_owner(resource) -> None:
    """Users may only touch their own rows; admins may touch any."""
    if not is_admin() and resource.user_id != g.user.get("id"):
        raise ApiError(403, "FORBIDDEN", "Unauthorized access")
