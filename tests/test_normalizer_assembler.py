# -*- coding: utf-8 -*-

from __future__ import annotations

import copy
import json
import unittest

from nutrition_backend.normalizer import FailureKind, ResultKind, normalize
from nutrition_backend.normalizer.assembler import assemble
from nutrition_backend.normalizer.registry import INGREDIENT_TEXT, MEAL_TEXT, RECIPE_FROM_IMAGES

from nutrition_factories import (
    function_call_response,
    legacy_response,
    meal_ingredient,
    meal_result,
    recipe_ingredient,
    recipe_result,
)


class TestAssembler(unittest.TestCase):
    def test_nothing_extracted(self) -> None:
        raw = {"functionCalls": [], "candidates": [{"content": {"parts": [{"text": "sorry"}]}}]}

        result = assemble(raw, MEAL_TEXT)
        self.assertFalse(result.ok)
        self.assertEqual(result.failure, FailureKind.extraction)
        self.assertEqual(result.to_dict(), {"error": "no valid result produced"})

    def test_model_declared_error_is_verbatim(self) -> None:
        raw = function_call_response("analyze_food_image", {"error": "No food detected in the image"})

        result = normalize(raw, ResultKind.image_analysis)
        self.assertEqual(result.failure, FailureKind.model_error)
        self.assertEqual(result.to_dict(), {"error": "No food detected in the image"})

    def test_schema_violation(self) -> None:
        fields = recipe_result()
        del fields["servings"]

        result = assemble(function_call_response("create_recipe", fields), RECIPE_FROM_IMAGES)
        self.assertEqual(result.failure, FailureKind.schema)
        self.assertEqual(result.error, "API response format invalid: missing field: servings")

    def test_meal_success(self) -> None:
        raw = function_call_response("analyze_meal_text", meal_result())
        before = copy.deepcopy(raw)

        result = normalize(raw, "meal_text")
        self.assertTrue(result.ok)
        self.assertIsNone(result.failure)
        self.assertEqual(result.kind, ResultKind.meal_text)
        out = result.to_dict()
        self.assertEqual([i["calories"] for i in out["ingredients"]], [105, 200])
        self.assertEqual(out["calories"], 305)
        self.assertEqual(raw, before)

    def test_legacy_shape_image_analysis(self) -> None:
        args = meal_result()
        del args["portions"]
        raw = legacy_response({"functionCall": {"name": "analyze_food_image", "args": args}})

        result = normalize(raw, ResultKind.image_analysis)
        self.assertTrue(result.ok)
        self.assertEqual(result.result["calories"], 305)

    def test_fenced_text_recipe_ingredient(self) -> None:
        item = recipe_ingredient("egg", 120, 10, 5, 5)
        text = "```json\n" + json.dumps(item, ensure_ascii=False) + "\n```"

        result = normalize(legacy_response({"text": text}), ResultKind.recipe_ingredient_text)
        self.assertTrue(result.ok)
        self.assertEqual(result.result["calories"], 105)
        self.assertEqual(result.result["name"], item["name"])

    def test_wrong_function_name_without_text(self) -> None:
        raw = function_call_response("edit_recipe", meal_result())

        result = normalize(raw, ResultKind.meal_text)
        self.assertEqual(result.failure, FailureKind.extraction)

    def test_huge_macros_fail_as_values(self) -> None:
        raw = function_call_response("analyze_ingredient", meal_ingredient("egg", 100, 1e30, 0, 0))

        result = assemble(raw, INGREDIENT_TEXT)
        self.assertEqual(result.failure, FailureKind.schema)
        self.assertEqual(result.error, "API response format invalid: field out of range: protein")

        fields = meal_result()
        fields["ingredients"][0]["protein"] = 10**28
        result = normalize(function_call_response("analyze_meal_text", fields), ResultKind.meal_text)
        self.assertEqual(result.failure, FailureKind.schema)
        self.assertEqual(
            result.error,
            "API response format invalid: ingredients[0] field out of range: protein",
        )

    def test_unknown_kind(self) -> None:
        with self.assertRaises(KeyError):
            normalize({}, "smoothie")


if __name__ == "__main__":
    unittest.main()
