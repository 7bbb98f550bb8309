"""JSON response helpers shared by the controllers."""

from __future__ import annotations

import logging
from decimal import Decimal
from functools import wraps
from typing import Any

from flask import jsonify

from ..core.exceptions import DomainError, FormatError, NotFoundError, ValidationError

_logger = logging.getLogger(__name__)

STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (FormatError, 422),
)


def as_amount(value: Decimal) -> str:
    return str(value.quantize(Decimal("0.01")))


def ok(data: Any = None, *, message: str = "", status: int = 200):
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def status_for(error: DomainError) -> int:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return 400


def json_api(view):
    """Turn domain errors raised by a view into {"success": false} responses."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), status_for(e))
        except Exception:
            _logger.exception("unhandled error in %s", view.__name__)
            return fail("Error interno del sistema", 500)

    return wrapper
