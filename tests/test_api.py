import json
import unittest

from invoicy_pdf.server import (
    BUNDLE_JOB,
    DOCUMENT_JOB,
    POST_ROUTES,
    RenderPool,
    RenderUnavailable,
    check_content_length,
    is_client_disconnect,
    validate_bundle_payload,
    validate_render_payload,
)


def json_bytes(payload: object) -> bytes:
    return json.dumps(payload).encode("utf-8")


class RenderPayloadValidationTests(unittest.TestCase):
    def test_accepts_valid_payload(self) -> None:
        payload, error = validate_render_payload(
            json_bytes(
                {
                    "document": {"items": [{"description": "Work", "quantity": 1, "price": 20}]},
                    "companyInfo": {"name": "Acme Co"},
                }
            )
        )

        self.assertIsNone(error)
        assert payload is not None
        self.assertIn("document", payload)

    def test_accepts_missing_company(self) -> None:
        _, error = validate_render_payload(json_bytes({"document": {}}))
        self.assertIsNone(error)

    def test_rejects_invalid_utf8(self) -> None:
        _, error = validate_render_payload(b"\xff")

        assert error is not None
        self.assertEqual(error[0], 400)
        self.assertEqual(error[1]["error"], "invalid_encoding")

    def test_rejects_invalid_json(self) -> None:
        _, error = validate_render_payload(b'{"document":')

        assert error is not None
        self.assertEqual(error[0], 400)
        self.assertEqual(error[1]["error"], "invalid_json")

    def test_rejects_non_object_root(self) -> None:
        _, error = validate_render_payload(json_bytes(["bad-root"]))

        assert error is not None
        self.assertEqual(error[1]["error"], "invalid_payload")

    def test_rejects_missing_document(self) -> None:
        _, error = validate_render_payload(json_bytes({"companyInfo": {}}))

        assert error is not None
        self.assertEqual(error[0], 400)
        self.assertIn("document", error[1]["detail"])

    def test_rejects_non_array_items(self) -> None:
        _, error = validate_render_payload(json_bytes({"document": {"items": "bad"}}))

        assert error is not None
        self.assertEqual(error[1]["error"], "invalid_payload")

    def test_rejects_non_object_company(self) -> None:
        _, error = validate_render_payload(json_bytes({"document": {}, "company_info": "Acme"}))

        assert error is not None
        self.assertIn("company_info", error[1]["detail"])


class BundlePayloadValidationTests(unittest.TestCase):
    def test_accepts_valid_bundle(self) -> None:
        body = json_bytes(
            {
                "bundle": {"items": [{"type": "invoice", "data": {}, "included": True}]},
                "companyInfo": {"name": "Acme Co"},
            }
        )
        payload, error = validate_bundle_payload(body, max_items=5)

        self.assertIsNone(error)
        assert payload is not None
        self.assertEqual(len(payload["bundle"]["items"]), 1)

    def test_rejects_missing_bundle(self) -> None:
        _, error = validate_bundle_payload(json_bytes({}), max_items=5)

        assert error is not None
        self.assertEqual(error[1]["error"], "invalid_payload")

    def test_rejects_non_object_item(self) -> None:
        _, error = validate_bundle_payload(json_bytes({"bundle": {"items": [1]}}), max_items=5)

        assert error is not None
        self.assertIn("items[0]", error[1]["detail"])

    def test_rejects_oversized_bundle(self) -> None:
        items = [{"type": "invoice", "data": {}}] * 3
        _, error = validate_bundle_payload(json_bytes({"bundle": {"items": items}}), max_items=2)

        assert error is not None
        self.assertEqual(error[0], 413)
        self.assertEqual(error[1]["error"], "bundle_too_large")
        self.assertEqual(error[1]["max_items"], 2)


class ClientDisconnectTests(unittest.TestCase):
    def test_detects_disconnects(self) -> None:
        self.assertTrue(is_client_disconnect(BrokenPipeError()))
        self.assertTrue(is_client_disconnect(ConnectionResetError()))
        self.assertFalse(is_client_disconnect(ValueError("boom")))


class ContentLengthTests(unittest.TestCase):
    def test_accepts_length_within_limit(self) -> None:
        self.assertEqual(check_content_length("12", 100), (12, None))

    def test_rejects_bad_lengths(self) -> None:
        cases = {
            None: (411, "missing_content_length"),
            "abc": (400, "invalid_content_length"),
            "0": (400, "empty_body"),
            "101": (413, "payload_too_large"),
        }
        for header, (status, code) in cases.items():
            with self.subTest(header=header):
                length, error = check_content_length(header, 100)
                assert error is not None
                self.assertEqual(length, 0)
                self.assertEqual(error[0], status)
                self.assertEqual(error[1]["error"], code)


class RenderPoolTests(unittest.TestCase):
    def test_routes_map_to_jobs(self) -> None:
        self.assertEqual(POST_ROUTES["/render"], DOCUMENT_JOB)
        self.assertEqual(POST_ROUTES["/pdf"], DOCUMENT_JOB)
        self.assertEqual(POST_ROUTES["/attachments"], BUNDLE_JOB)

    def test_full_queue_reports_server_busy(self) -> None:
        pool = RenderPool(workers=1, inflight=1, queue_timeout_ms=0, render_timeout_ms=1000)
        self.addCleanup(pool.close)
        pool.slots.acquire()
        self.addCleanup(pool.slots.release)

        with self.assertRaises(RenderUnavailable) as caught:
            pool.run(dict, {})

        self.assertEqual(caught.exception.status, 503)
        self.assertEqual(caught.exception.body["error"], "server_busy")
        self.assertEqual(caught.exception.body["max_inflight_renders"], 1)


if __name__ == "__main__":
    unittest.main()
