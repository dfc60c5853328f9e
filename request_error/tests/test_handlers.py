import os
import unittest
from unittest import mock

from fastapi import FastAPI
from fastapi.testclient import TestClient

from request_error.api import install_error_handlers
from request_error.core.config import get_settings
from request_error.core.errors import RequestError


def _make_app() -> FastAPI:
    app = FastAPI()
    install_error_handlers(app)

    @app.get("/missing")
    async def missing():
        inner = RequestError.not_found("User not found", "id=7")
        raise RequestError.create("Load profile failed", inner)

    @app.get("/crash")
    async def crash():
        raise RuntimeError("db down")

    @app.get("/odd")
    async def odd():
        raise RequestError("odd", 42)

    @app.get("/status/{code}")
    async def with_status(code: int):
        raise RequestError("odd status", code)

    @app.get("/nan")
    async def nan_status():
        raise RequestError.create("odd status", float("nan"), "d")

    @app.get("/items/{item_id}")
    async def item(item_id: int):
        return {"item_id": item_id}

    return app


class TestErrorHandlers(unittest.TestCase):
    def setUp(self):
        get_settings.cache_clear()
        self.addCleanup(get_settings.cache_clear)
        self.client = TestClient(_make_app(), raise_server_exceptions=False)

    def test_request_error_rendered_with_its_status(self):
        r = self.client.get("/missing")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(
            r.json(),
            {"message": "Load profile failed", "status": 404, "details": "User not found: id=7"},
        )

    def test_details_hidden_when_not_exposed(self):
        with mock.patch.dict(os.environ, {"EXPOSE_DETAILS": "false"}):
            get_settings.cache_clear()
            r = self.client.get("/missing")
        self.assertEqual(r.status_code, 404)
        self.assertIsNone(r.json()["details"])

    def test_unhandled_exception_becomes_internal_error(self):
        with self.assertLogs("request_error.api.handlers", level="ERROR"):
            r = self.client.get("/crash")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(
            r.json(),
            {"message": "Internal server error", "status": 500, "details": "db down"},
        )

    def test_validation_error(self):
        r = self.client.get("/items/abc")
        self.assertEqual(r.status_code, 422)
        data = r.json()
        self.assertEqual(data["message"], "Invalid request")
        self.assertEqual(data["status"], 422)
        self.assertTrue(data["details"].startswith("item_id: "))

    def test_http_exception(self):
        r = self.client.post("/missing")
        self.assertEqual(r.status_code, 405)
        self.assertEqual(r.json()["status"], 405)

    def test_non_http_status_falls_back_to_500(self):
        r = self.client.get("/odd")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["status"], 42)

    def test_client_errors_logged(self):
        with self.assertLogs("request_error.api.handlers", level="INFO") as logs:
            self.client.get("/missing")
        self.assertIn("Error 404: Load profile failed: User not found: id=7", logs.output[0])

    def test_bodyless_and_informational_codes_fall_back_to_500(self):
        for code in (101, 204, 304):
            with self.subTest(code=code):
                r = self.client.get(f"/status/{code}")
                self.assertEqual(r.status_code, 500)
                self.assertEqual(r.json()["status"], code)

    def test_non_finite_status_rendered_as_response_code(self):
        r = self.client.get("/nan")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json(), {"message": "odd status", "status": 500, "details": "d"})

    def test_server_errors_logged_at_error(self):
        with self.assertLogs("request_error.api.handlers", level="ERROR") as logs:
            self.client.get("/status/503")
        self.assertIn("GET /status/503 failed | Error 503: odd status", logs.output[0])
