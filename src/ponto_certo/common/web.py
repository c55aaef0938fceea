from __future__ import annotations

import dataclasses
import logging
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .datetime_utils import parse_iso_date, parse_month

logger = logging.getLogger(__name__)


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(data=None, message: str = ""):
    payload = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    return jsonify(payload)


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Faça login para continuar", 401)
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return fail("Faça login para continuar", 401)
        if session.get("role") != Role.ADMIN.value:
            return fail("Acesso restrito a administradores", 403)
        return view(*args, **kwargs)

    return wrapper


def current_user_id() -> int:
    return int(session["user_id"])


def current_org_id() -> int:
    return int(session["organization_id"])


def current_role() -> Role:
    return Role(session.get("role"))


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def body_date(data: dict, key: str):
    value = (data.get(key) or "").strip()
    if not value:
        raise ValidationError(f"Campo {key} é obrigatório")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Data inválida em {key} (AAAA-MM-DD)")


def optional_body_date(data: dict, key: str):
    if not (data.get(key) or "").strip():
        return None
    return body_date(data, key)


def query_date(key: str, default: date) -> date:
    value = (request.args.get(key) or "").strip()
    if not value:
        return default
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Data inválida em {key} (AAAA-MM-DD)")


def query_month(key: str = "month", default: Optional[date] = None) -> date:
    value = (request.args.get(key) or "").strip()
    if not value:
        if default is None:
            raise ValidationError(f"Campo {key} é obrigatório")
        return default.replace(day=1)
    try:
        return parse_month(value)
    except ValueError:
        raise ValidationError(f"Mês inválido em {key} (AAAA-MM)")


def to_json(value):
    """Dataclasses, enums, dates and decimals into plain JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_json(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, dict):
        return {str(to_json(k)): to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_json(v) for v in value]
    return value


def register_error_handlers(app: Flask) -> None:
    """Translate domain errors into the JSON toast payload used by every endpoint."""

    @app.errorhandler(ValidationError)
    def _validation(e):
        return fail(str(e), 400)

    @app.errorhandler(AuthenticationError)
    def _authentication(e):
        return fail(str(e), 401)

    @app.errorhandler(AuthorizationError)
    def _authorization(e):
        return fail(str(e), 403)

    @app.errorhandler(NotFoundError)
    def _not_found(e):
        return fail(str(e), 404)

    @app.errorhandler(Exception)
    def _unexpected(e):
        if isinstance(e, HTTPException):
            return fail(e.description or e.name, e.code or 500)
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return fail("Erro interno do sistema", 500)
