# tests/test_error_handlers.py
import asyncio
import json

from starlette.requests import Request

from troop_manager.config.settings import settings
from troop_manager.core import error_handlers
from troop_manager.core.exceptions import AppException, InternalError


def make_request() -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "path": "/boom",
        "query_string": b"",
        "headers": [],
    })


def test_internal_error_envelope():
    error = InternalError()

    assert isinstance(error, AppException)
    assert error.status_code == 500
    assert error.error_code == "INTERNAL_ERROR"
    assert error.to_dict() == {"success": False, "error": "Internal server error"}


def test_unexpected_errors_hide_details_outside_debug(monkeypatch):
    monkeypatch.setattr(error_handlers, "settings", settings.model_copy(update={"DEBUG": False}))

    response = asyncio.run(
        error_handlers.unhandled_exception_handler(make_request(), RuntimeError("connection string leaked"))
    )

    assert response.status_code == 500
    assert json.loads(response.body) == {"success": False, "error": "Internal server error"}


def test_unexpected_errors_carry_the_stack_in_debug(monkeypatch):
    monkeypatch.setattr(error_handlers, "settings", settings.model_copy(update={"DEBUG": True}))

    response = asyncio.run(error_handlers.unhandled_exception_handler(make_request(), RuntimeError("boom")))

    body = json.loads(response.body)
    assert response.status_code == 500
    assert body["error"] == "boom"
    assert "RuntimeError" in body["stack"]
