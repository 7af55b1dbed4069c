from __future__ import annotations

import logging
from typing import Any, Optional

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.exceptions import (
    ConflictError,
    DomainError,
    ForbiddenError,
    NotFoundError,
    TooEarlyError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (ForbiddenError, 403),
    (ConflictError, 409),
    (TooEarlyError, 422),
    (ValidationError, 400),
)


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def json_error(message: str, status: int, **extra: Any):
    body = {"success": False, "message": message}
    body.update(extra)
    return jsonify(body), status


def field(data: dict, *names: str) -> Any:
    """First non-empty value among ``names`` (snake_case and the legacy camelCase)."""

    for name in names:
        value = data.get(name)
        if value not in (None, ""):
            return value
    return None


def as_int(value: Any, name: str, *, required: bool = True) -> Optional[int]:
    if value in (None, ""):
        if required:
            raise ValidationError(f"{name} is required")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer")


def iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        extra = {}
        if isinstance(e, ConflictError) and e.existing_status is not None:
            extra["existing_status"] = e.existing_status.value
        return json_error(str(e), status_for(e), **extra)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return json_error(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(e: Exception):
        logger.exception("Unhandled error: %s", e)
        return json_error("Internal server error", 500)
