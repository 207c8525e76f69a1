import logging
from flask import Blueprint, g, jsonify
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models import User
from ..http import ApiError, parse_body, not_found, unique_violation
from ..auth import hash_password, verify_password, issue_token, login_required
from ..dto import user_dto
from ..schemas import RegisterRequest, LoginRequest

logger = logging.getLogger(__name__)

bp = Blueprint("auth", __name__)


@bp.post("/auth/register")
def register():
    data = parse_body(RegisterRequest)
    email = data.email.lower()

    if User.query.filter_by(email=email).one_or_none():
        raise ApiError(409, "EMAIL_TAKEN", "Email already exists")

    user = User(name=data.name, email=email, password_hash=hash_password(data.password), role=data.role)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        if unique_violation(e, "ix_users_email", "users.email"):
            raise ApiError(409, "EMAIL_TAKEN", "Email already exists")
        raise

    logger.info("registered user %s (%s)", user.id, user.role)
    return jsonify(user=user_dto(user), token=issue_token(user)), 201


@bp.post("/auth/login")
def login():
    data = parse_body(LoginRequest)
    user = User.query.filter_by(email=data.email.lower()).one_or_none()
    if user is None or not verify_password(user.password_hash, data.password):
        raise ApiError(401, "INVALID_CREDENTIALS", "Invalid credentials")
    return jsonify(user=user_dto(user), token=issue_token(user))


@bp.get("/auth/me")
@login_required
def me():
    user = db.session.get(User, g.user["id"])
    if user is None:
        raise not_found("User")
    return jsonify(user=user_dto(user))
