# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from unittest import mock

from fastapi.testclient import TestClient

from nutrition_backend.config import settings
from nutrition_backend.main import create_app

from nutrition_factories import function_call_response, meal_ingredient, meal_result, recipe_edit_result


class TestNormalizeApi(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.client = TestClient(create_app())

    @classmethod
    def tearDownClass(cls) -> None:
        cls.client.close()

    def test_health(self) -> None:
        resp = self.client.get("/api/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"ok": True})

    def test_meal_success(self) -> None:
        raw = function_call_response("analyze_meal_text", meal_result())
        resp = self.client.post("/api/normalize/meal_text", json={"response": raw})
        self.assertEqual(resp.status_code, 200)

        payload = resp.json()
        self.assertTrue(payload["success"])
        self.assertEqual(payload["kind"], "meal_text")
        self.assertEqual(payload["result"]["calories"], 305)
        self.assertEqual(payload["totals"]["calories"], 305)
        self.assertEqual(payload["totals"]["protein"], 23.0)

    def test_single_ingredient_totals(self) -> None:
        raw = function_call_response("analyze_ingredient", meal_ingredient("egg", 120, 10, 5, 5))
        resp = self.client.post("/api/normalize/ingredient_text", json={"response": raw})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totals"]["calories"], 105)

    def test_recipe_edit_has_no_totals(self) -> None:
        raw = function_call_response("edit_recipe", recipe_edit_result())
        resp = self.client.post("/api/normalize/recipe_edit", json={"response": raw})
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["totals"])

    def test_plain_text_response(self) -> None:
        text = '```json\n{"error": "not food"}\n```'
        resp = self.client.post("/api/normalize/image_analysis", json={"response": text})
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.json()["detail"], "not food")

    def test_schema_violation(self) -> None:
        fields = meal_result()
        del fields["health_assessment"]
        raw = function_call_response("analyze_meal_text", fields)
        resp = self.client.post("/api/normalize/meal_text", json={"response": raw})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], "API response format invalid: missing field: health_assessment")

    def test_nothing_extracted(self) -> None:
        resp = self.client.post("/api/normalize/meal_text", json={"response": {"candidates": []}})
        self.assertEqual(resp.status_code, 502)
        self.assertEqual(resp.json()["detail"], "no valid result produced")

    def test_unknown_kind(self) -> None:
        resp = self.client.post("/api/normalize/smoothie", json={"response": {}})
        self.assertEqual(resp.status_code, 404)

    def test_payload_too_large(self) -> None:
        raw = function_call_response("analyze_meal_text", meal_result())
        with mock.patch.object(settings, "max_raw_response_bytes", 10):
            resp = self.client.post("/api/normalize/meal_text", json={"response": raw})
        self.assertEqual(resp.status_code, 413)

    def test_chunked_payload_too_large(self) -> None:
        body = json.dumps({"response": function_call_response("analyze_meal_text", meal_result())}).encode()

        def chunks():
            for start in range(0, len(body), 64):
                yield body[start : start + 64]

        with mock.patch.object(settings, "max_raw_response_bytes", 100):
            resp = self.client.post(
                "/api/normalize/meal_text",
                content=chunks(),
                headers={"content-type": "application/json"},
            )
        self.assertEqual(resp.status_code, 413)

    def test_malformed_body(self) -> None:
        resp = self.client.post(
            "/api/normalize/meal_text",
            content=b"{not json",
            headers={"content-type": "application/json"},
        )
        self.assertEqual(resp.status_code, 422)

        resp = self.client.post("/api/normalize/meal_text", json={"raw": {}})
        self.assertEqual(resp.status_code, 422)


if __name__ == "__main__":
    unittest.main()
