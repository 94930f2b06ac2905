"""Session-cookie authentication routes."""

from __future__ import annotations

from flask import jsonify, session

from ...errors import RecordNotFoundError
from ...extensions import get_session_factory
from ...serializers import serialize_user
from ...services import auth as auth_service
from ...web import SESSION_USER_KEY, current_user_id, json_body, login_required
from . import bp


@bp.post("/register")
def register():
    """Create a user and log them in."""

    data = json_body()
    user = auth_service.create_user(
        username=str(data.get("username") or ""),
        password=str(data.get("password") or ""),
        session_factory=get_session_factory(),
    )
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify(serialize_user(user)), 201


@bp.post("/login")
def login():
    data = json_body()
    user = auth_service.authenticate(
        username=str(data.get("username") or ""),
        password=str(data.get("password") or ""),
        session_factory=get_session_factory(),
    )
    if user is None:
        return jsonify({"error": "Invalid username or password"}), 401
    session.clear()
    session[SESSION_USER_KEY] = user.id
    return jsonify(serialize_user(user))


@bp.post("/logout")
def logout():
    session.clear()
    return "", 204


@bp.get("/me")
@login_required
def me():
    user = auth_service.get_user(current_user_id(), get_session_factory())
    if user is None:
        session.clear()
        raise RecordNotFoundError("User", current_user_id())
    return jsonify(serialize_user(user))
