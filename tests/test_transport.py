"""Tests for transports and the request descriptor model."""

import unittest
from unittest.mock import MagicMock

import requests

from chassis.models import SyncRequest
from chassis.transport import (
    CallableTransport,
    ChassisError,
    ConfigurationError,
    HttpStatusError,
    HttpTransport,
    InvalidResponseError,
    QueueTransport,
    TransportError,
)


def _response(status=200, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


class SyncRequestTest(unittest.TestCase):
    """Tests for the request descriptor model."""

    def test_aliases_and_normalisation(self):
        """Test aliases and normalisation."""
        request = SyncRequest.from_options(
            {"url": "/a", "dataType": "JSON", "type": "post", "cache": False}
        )

        self.assertEqual(request.data_type, "json")
        self.assertEqual(request.type, "POST")
        self.assertEqual(request.passthrough, {"cache": False})

    def test_defaults(self):
        """Test defaults."""
        request = SyncRequest.from_options({})

        self.assertIsNone(request.url)
        self.assertEqual(request.data_type, "json")
        self.assertEqual(request.type, "GET")
        self.assertIsNone(request.success)


class HttpTransportTest(unittest.TestCase):
    """Tests for the requests-backed transport."""

    def setUp(self):
        self.session = MagicMock()
        self.transport = HttpTransport(session=self.session, timeout=5)
        self.success = MagicMock()
        self.error = MagicMock()

    def call(self, **options):
        options.setdefault("url", "https://example.com/items/1")
        options.setdefault("success", self.success)
        options.setdefault("error", self.error)
        self.transport(options)

    def test_get_json(self):
        """Test get json."""
        self.session.request.return_value = _response(body={"id": 1})

        self.call(data={"q": "x"})

        self.session.request.assert_called_once_with(
            "GET",
            "https://example.com/items/1",
            headers=None,
            timeout=5,
            params={"q": "x"},
        )
        self.success.assert_called_once_with({"id": 1})
        self.error.assert_not_called()

    def test_write_sends_json_body(self):
        """Test write sends json body."""
        self.session.request.return_value = _response(body={"id": 2})

        self.call(type="put", data={"title": "t"}, timeout=1.5)

        args, kwargs = self.session.request.call_args
        self.assertEqual(args[0], "PUT")
        self.assertEqual(kwargs["json"], {"title": "t"})
        self.assertEqual(kwargs["timeout"], 1.5)

    def test_text_data_type(self):
        """Test text data type."""
        self.session.request.return_value = _response(text="plain")

        self.call(dataType="text")

        self.success.assert_called_once_with("plain")

    def test_base_url_is_joined(self):
        """Test base url is joined."""
        transport = HttpTransport(session=self.session, base_url="https://api.example.com/v1")
        self.session.request.return_value = _response(body={})

        transport({"url": "/items", "success": self.success})

        self.assertEqual(
            self.session.request.call_args[0][1], "https://api.example.com/v1/items"
        )

    def test_http_error_status(self):
        """Test http error status."""
        self.session.request.return_value = _response(status=404, body={"reason": "gone"})

        self.call()

        self.success.assert_not_called()
        exc = self.error.call_args[0][0]
        self.assertIsInstance(exc, HttpStatusError)
        self.assertEqual(exc.status, 404)
        self.assertEqual(exc.payload, {"reason": "gone"})

    def test_http_error_with_non_json_body(self):
        """Test http error with non json body."""
        self.session.request.return_value = _response(
            status=500, body=ValueError("no json"), text="oops"
        )

        self.call()

        self.assertEqual(self.error.call_args[0][0].payload, "oops")

    def test_invalid_json(self):
        """Test invalid json."""
        self.session.request.return_value = _response(body=ValueError("bad"), text="<html>")

        self.call()

        exc = self.error.call_args[0][0]
        self.assertIsInstance(exc, InvalidResponseError)
        self.assertEqual(exc.payload, "<html>")

    def test_network_failure(self):
        """Test network failure."""
        self.session.request.side_effect = requests.ConnectionError("refused")

        self.call()

        exc = self.error.call_args[0][0]
        self.assertIsInstance(exc, TransportError)
        self.assertNotIsInstance(exc, HttpStatusError)

    def test_missing_url_is_a_configuration_error(self):
        """Test missing url is a configuration error."""
        with self.assertRaises(ConfigurationError):
            self.transport({"success": self.success})
        self.session.request.assert_not_called()


class QueueTransportTest(unittest.TestCase):
    """Tests for the deferred transport."""

    def test_requests_wait_until_settled(self):
        """Test requests wait until settled."""
        transport = QueueTransport()
        success = MagicMock()

        transport({"url": "/a", "success": success})
        success.assert_not_called()

        settled = transport.respond({"ok": True})

        success.assert_called_once_with({"ok": True})
        self.assertEqual(settled.outcome, "success")
        self.assertEqual(transport.pending, [])
        self.assertEqual(len(transport.history), 1)

    def test_fail_defaults_to_transport_error(self):
        """Test fail defaults to transport error."""
        transport = QueueTransport()
        error = MagicMock()
        transport({"url": "/a", "error": error})

        transport.fail()

        self.assertIsInstance(error.call_args[0][0], TransportError)

    def test_request_settles_once(self):
        """Test request settles once."""
        transport = QueueTransport()
        request = transport({"url": "/a"})
        request.respond(None)

        with self.assertRaises(ChassisError):
            request.fail()

    def test_nothing_pending(self):
        """Test nothing pending."""
        with self.assertRaises(ChassisError):
            QueueTransport().respond({})

    def test_respond_all(self):
        """Test respond all."""
        transport = QueueTransport()
        success = MagicMock()
        transport({"success": success})
        transport({"success": success})

        self.assertEqual(transport.respond_all("r"), 2)
        self.assertEqual(success.call_count, 2)


class CallableTransportTest(unittest.TestCase):
    """Tests for the function adapter."""

    def test_handler_receives_validated_request(self):
        """Test handler receives validated request."""
        handler = MagicMock(return_value={"a": 1})
        success = MagicMock()

        CallableTransport(handler)({"url": "/a", "dataType": "json", "success": success})

        request = handler.call_args[0][0]
        self.assertIsInstance(request, SyncRequest)
        self.assertEqual(request.url, "/a")
        success.assert_called_once_with({"a": 1})

    def test_transport_errors_pass_through(self):
        """Test transport errors pass through."""
        failure = HttpStatusError("HTTP 503", status=503)
        error = MagicMock()

        CallableTransport(MagicMock(side_effect=failure))({"error": error})

        error.assert_called_once_with(failure)


if __name__ == "__main__":
    unittest.main()
