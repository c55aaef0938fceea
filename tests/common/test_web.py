from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from flask import Flask, session

from ponto_certo.common.web import (
    admin_required,
    login_required,
    ok,
    query_month,
    register_error_handlers,
    to_json,
)
from ponto_certo.core.enums import OvertimeDestination
from ponto_certo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ponto_certo.payroll.model import HoursBalance


@pytest.fixture
def client():
    app = Flask(__name__)
    app.secret_key = "test"
    register_error_handlers(app)

    @app.route("/login/<role>")
    def login(role):
        session["user_id"] = 1
        session["organization_id"] = 1
        session["role"] = role
        return ok()

    @app.route("/private")
    @login_required
    def private():
        return ok({"hello": "world"})

    @app.route("/admin")
    @admin_required
    def admin_only():
        return ok(message="ok")

    @app.route("/raise/<kind>")
    def boom(kind):
        raise {
            "validation": ValidationError("Campo inválido"),
            "forbidden": AuthorizationError("Sem permissão"),
            "missing": NotFoundError("Não encontrado"),
            "bug": RuntimeError("bug"),
        }[kind]

    @app.route("/month")
    def month():
        return ok(to_json(query_month(default=date(2025, 3, 12))))

    return app.test_client()


def test_login_required(client):
    assert client.get("/private").status_code == 401
    client.get("/login/employee")
    assert client.get("/private").get_json() == {"success": True, "data": {"hello": "world"}}


def test_admin_required(client):
    client.get("/login/employee")
    assert client.get("/admin").status_code == 403
    client.get("/login/admin")
    assert client.get("/admin").get_json()["message"] == "ok"


@pytest.mark.parametrize(
    "kind, status, message",
    [
        ("validation", 400, "Campo inválido"),
        ("forbidden", 403, "Sem permissão"),
        ("missing", 404, "Não encontrado"),
        ("bug", 500, "Erro interno do sistema"),
    ],
)
def test_domain_errors_become_json(client, kind, status, message):
    resp = client.get(f"/raise/{kind}")
    assert resp.status_code == status
    assert resp.get_json() == {"success": False, "message": message}


def test_query_month(client):
    assert client.get("/month").get_json()["data"] == "2025-03-01"
    assert client.get("/month?month=2024-11").get_json()["data"] == "2024-11-01"
    assert client.get("/month?month=novembro").status_code == 400


def test_to_json_converts_nested_values():
    data = to_json({"balance": HoursBalance(user_id=1, organization_id=2), "dest": OvertimeDestination.MIXED,
                    "amount": Decimal("10.50"), "days": (date(2025, 1, 1),)})

    assert data == {
        "balance": {"user_id": 1, "organization_id": 2, "balance_minutes": 0, "last_calculated_at": None},
        "dest": "mixed",
        "amount": 10.5,
        "days": ["2025-01-01"],
    }
