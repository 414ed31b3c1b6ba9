"""Application wiring: fallback 404, request ids, CORS, health and unexpected errors."""

import logging
import unittest
from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from notes_api.core.log import ERROR_LOGGER, RequestIdFilter, set_request_id
from notes_api.main import create_app
from tests.helpers import add_user, auth_header, make_client, make_database


class AppTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()
        self.client = make_client(self.database)

    def tearDown(self) -> None:
        self.client.close()
        self.database.dispose()


class TestFallbacks(AppTestCase):
    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json(), {"message": "Notes API"})

    def test_unknown_path_is_json_404(self) -> None:
        response = self.client.get("/does/not/exist")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {"message": "404 Not Found"})

    def test_health(self) -> None:
        response = self.client.get("/api/v1/health")
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["database"], "connected")
        self.assertEqual(body["cache"], "disabled")

    def test_health_reports_unreachable_cache(self) -> None:
        cache = MagicMock()
        cache.ping.return_value = False
        client = make_client(self.database, cache=cache)
        try:
            body = client.get("/api/v1/health").json()
        finally:
            client.close()
        self.assertEqual(body["status"], "ok")
        self.assertEqual(body["cache"], "disconnected")


class TestRequestId(AppTestCase):
    def test_echoes_incoming_id(self) -> None:
        response = self.client.get("/", headers={"X-Request-ID": "abc123"})
        self.assertEqual(response.headers["x-request-id"], "abc123")

    def test_mints_id_when_absent(self) -> None:
        first = self.client.get("/").headers["x-request-id"]
        second = self.client.get("/").headers["x-request-id"]
        self.assertTrue(first)
        self.assertNotEqual(first, second)

    def test_filter_stamps_records(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        set_request_id("req-1")
        try:
            RequestIdFilter().filter(record)
        finally:
            set_request_id(None)
        self.assertEqual(record.request_id, "req-1")
        RequestIdFilter().filter(record)
        self.assertEqual(record.request_id, "-")


class TestCors(AppTestCase):
    def _preflight(self, origin: str):
        return self.client.options(
            "/api/v1/notes",
            headers={
                "Origin": origin,
                "Access-Control-Request-Method": "GET",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

    def test_allowed_origin(self) -> None:
        response = self._preflight("http://localhost:3000")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.headers["access-control-allow-origin"], "http://localhost:3000"
        )
        self.assertEqual(response.headers["access-control-allow-credentials"], "true")

    def test_disallowed_origin(self) -> None:
        response = self._preflight("https://evil.example.com")
        self.assertEqual(response.status_code, 400)
        self.assertNotIn("access-control-allow-origin", response.headers)


class _RecordingHandler(logging.Handler):
    """Keeps records after the request-id filter has stamped them."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []
        self.addFilter(RequestIdFilter())

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


class TestUnexpectedError(unittest.TestCase):
    def setUp(self) -> None:
        self.database = make_database()
        self.user_id = add_user(self.database)
        self.client = TestClient(
            create_app(database=self.database),
            base_url="https://testserver",
            raise_server_exceptions=False,
        )
        self.handler = _RecordingHandler()
        logging.getLogger(ERROR_LOGGER).addHandler(self.handler)

    def tearDown(self) -> None:
        logging.getLogger(ERROR_LOGGER).removeHandler(self.handler)
        self.client.close()
        self.database.dispose()

    def _failing_list(self, headers: dict):
        with patch(
            "notes_api.services.notes.list_notes", side_effect=RuntimeError("db exploded")
        ):
            return self.client.get("/api/v1/notes", headers=headers)

    def test_unhandled_exception_is_generic_500_and_logged(self) -> None:
        response = self._failing_list(auth_header(self.user_id))
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"message": "Internal server error"})
        self.assertNotIn("db exploded", response.text)
        self.assertEqual(len(self.handler.records), 1)
        self.assertIn("RuntimeError", self.handler.records[0].getMessage())

    def test_error_log_and_response_carry_request_id(self) -> None:
        headers = {
            **auth_header(self.user_id),
            "X-Request-ID": "rid-42",
            "Origin": "http://localhost:3000",
        }
        response = self._failing_list(headers)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.headers["x-request-id"], "rid-42")
        self.assertEqual(
            response.headers["access-control-allow-origin"], "http://localhost:3000"
        )
        self.assertEqual([r.request_id for r in self.handler.records], ["rid-42"])


if __name__ == "__main__":
    unittest.main()
