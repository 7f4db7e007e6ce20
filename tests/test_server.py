import http.client
import json
import threading
import unittest

from rec_invoice.server import InvoiceHandler, InvoiceHTTPServer


class SmallBodyHandler(InvoiceHandler):
    MAX_BODY_BYTES = 16


class InvoiceHandlerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.server = InvoiceHTTPServer(("127.0.0.1", 0), SmallBodyHandler)
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        host, port = self.server.server_address[:2]
        self.conn = http.client.HTTPConnection(host, port, timeout=5)

    def tearDown(self) -> None:
        self.conn.close()
        self.server.shutdown()
        self.server.server_close()
        self.thread.join(timeout=5)

    def post_headers_only(self, headers):
        # Headers are sent by hand so http.client does not add Content-Length.
        self.conn.putrequest("POST", "/invoice")
        for name, value in headers.items():
            self.conn.putheader(name, value)
        self.conn.endheaders()
        response = self.conn.getresponse()
        return response.status, json.loads(response.read().decode("utf-8"))

    def test_missing_content_length_is_rejected(self) -> None:
        status, body = self.post_headers_only({})

        self.assertEqual(status, 411)
        self.assertEqual(body, {"err": "Content-Length header is required."})

    def test_oversized_body_is_rejected_before_reading(self) -> None:
        status, body = self.post_headers_only({"Content-Length": "17"})

        self.assertEqual(status, 413)
        self.assertEqual(body, {"err": "Body exceeds 16 bytes."})

    def test_non_integer_content_length_is_rejected(self) -> None:
        status, body = self.post_headers_only({"Content-Length": "many"})

        self.assertEqual(status, 400)
        self.assertIn("integer", body["err"])

    def test_health_endpoint(self) -> None:
        self.conn.request("GET", "/health")
        response = self.conn.getresponse()

        self.assertEqual(response.status, 200)
        self.assertEqual(json.loads(response.read()), {"status": "ok"})


if __name__ == "__main__":
    unittest.main()
