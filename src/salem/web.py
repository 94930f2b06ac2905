"""Request helpers shared by the JSON blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Mapping, TypeVar

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from .errors import RecordNotFoundError, ValidationError
from .logging_config import get_logger

logger = get_logger(__name__)

SESSION_USER_KEY = "user_id"

F = TypeVar("F", bound=Callable[..., Any])


def login_required(view: F) -> F:
    """Reject the request with 401 unless a user is logged in."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any):
        user_id = session.get(SESSION_USER_KEY)
        if user_id is None:
            return jsonify({"error": "Unauthorized"}), 401
        g.user_id = int(user_id)
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]


def current_user_id() -> int:
    return g.user_id


def json_body() -> Mapping[str, Any]:
    """Return the request JSON object, or an empty mapping."""

    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValidationError({"body": ["Expected a JSON object."]})
    return payload


def parse_id_list(raw: str | None, field: str = "cardIds") -> list[int]:
    """Parse a comma separated list of ids, ignoring blank items."""

    if not raw:
        return []
    ids: list[int] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(int(item))
        except ValueError as exc:
            raise ValidationError({field: [f"Invalid id: {item!r}."]}) from exc
    return ids


def register_error_handlers(app: Flask) -> None:
    """Translate domain exceptions into JSON error responses."""

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": "Invalid data", "fields": exc.fields}), 400

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        return jsonify({"error": exc.description}), exc.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected(exc: Exception):
        logger.exception("Unhandled error", extra={"path": request.path, "method": request.method})
        return jsonify({"error": "Internal server error"}), 500
