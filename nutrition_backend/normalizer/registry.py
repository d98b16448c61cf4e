# -*- coding: utf-8 -*-
"""Normalizer — result kind registry.

One `ResultKindSpec` per use case. The validator and corrector are driven
entirely by these entries, so a new use case is a new entry here rather than
another copy of the validation code.

Field names may be dotted paths (``"health_assessment.score"``) to address
nested objects. Every typed field must be listed in ``required_fields`` or in
``optional_fields``; optional fields are type-checked only when present.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple


class ResultKind(str, Enum):
    meal_text = "meal_text"
    ingredient_text = "ingredient_text"
    recipe_ingredient_text = "recipe_ingredient_text"
    image_analysis = "image_analysis"
    recipe_from_images = "recipe_from_images"
    recipe_edit = "recipe_edit"


@dataclass(frozen=True)
class ResultKindSpec:
    kind: ResultKind
    function_name: str
    required_fields: Tuple[str, ...] = ()
    optional_fields: Tuple[str, ...] = ()
    numeric_fields: Tuple[str, ...] = ()
    required_non_empty_strings: Tuple[str, ...] = ()
    multi_lang_text_fields: Tuple[str, ...] = ()
    multi_lang_list_fields: Tuple[str, ...] = ()
    ingredients_field: Optional[str] = None
    item_required_fields: Tuple[str, ...] = ()
    item_non_empty_strings: Tuple[str, ...] = ()
    # The result itself is a single nutrition item (no ingredient list).
    correct_top_level: bool = False
    assessment_field: Optional[str] = None
    steps_field: Optional[str] = None
    steps_min_length: int = 0
    step_multi_lang_text_fields: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        declared = set(self.required_fields) | set(self.optional_fields)
        typed = (
            self.numeric_fields
            + self.required_non_empty_strings
            + self.multi_lang_text_fields
            + self.multi_lang_list_fields
        )
        undeclared = [name for name in typed if name not in declared]
        if undeclared:
            raise ValueError(f"{self.kind.value}: typed fields not declared: {', '.join(undeclared)}")
        for name in (self.ingredients_field, self.assessment_field, self.steps_field):
            if name and name not in declared:
                raise ValueError(f"{self.kind.value}: field not declared: {name}")
        if self.correct_top_level and self.ingredients_field:
            raise ValueError(f"{self.kind.value}: correct_top_level excludes ingredients_field")


_NUTRITION_FIELDS = ("calories", "protein", "carbs", "fat")

_TEXT_ITEM_FIELDS = (
    "name",
    "engName",
    "calories",
    "protein",
    "carbs",
    "fat",
    "amountValue",
    "amountUnit",
)

_RECIPE_ITEM_FIELDS = (
    "name",
    "amountValue",
    "amountUnit",
    "calories",
    "protein",
    "carbs",
    "fat",
)


MEAL_TEXT = ResultKindSpec(
    kind=ResultKind.meal_text,
    function_name="analyze_meal_text",
    required_fields=("name", "portions") + _NUTRITION_FIELDS + ("ingredients", "health_assessment"),
    numeric_fields=("portions",) + _NUTRITION_FIELDS,
    required_non_empty_strings=("name",),
    ingredients_field="ingredients",
    item_required_fields=_TEXT_ITEM_FIELDS,
    item_non_empty_strings=("name", "engName", "amountUnit"),
    assessment_field="health_assessment",
)

INGREDIENT_TEXT = ResultKindSpec(
    kind=ResultKind.ingredient_text,
    function_name="analyze_ingredient",
    required_fields=_TEXT_ITEM_FIELDS,
    numeric_fields=_NUTRITION_FIELDS + ("amountValue",),
    required_non_empty_strings=("name", "engName", "amountUnit"),
    correct_top_level=True,
)

RECIPE_INGREDIENT_TEXT = ResultKindSpec(
    kind=ResultKind.recipe_ingredient_text,
    function_name="analyze_recipe_ingredient",
    required_fields=_RECIPE_ITEM_FIELDS,
    numeric_fields=_NUTRITION_FIELDS + ("amountValue",),
    multi_lang_text_fields=("name", "amountUnit"),
    correct_top_level=True,
)

IMAGE_ANALYSIS = ResultKindSpec(
    kind=ResultKind.image_analysis,
    function_name="analyze_food_image",
    required_fields=("name",) + _NUTRITION_FIELDS + ("ingredients", "health_assessment"),
    numeric_fields=_NUTRITION_FIELDS,
    required_non_empty_strings=("name",),
    ingredients_field="ingredients",
    item_required_fields=_TEXT_ITEM_FIELDS,
    item_non_empty_strings=("name", "engName", "amountUnit"),
    assessment_field="health_assessment",
)

RECIPE_FROM_IMAGES = ResultKindSpec(
    kind=ResultKind.recipe_from_images,
    function_name="create_recipe",
    required_fields=(
        "name",
        "description",
        "calories",
        "protein",
        "carbs",
        "fat",
        "duration",
        "difficulty",
        "servings",
        "ingredients",
        "steps",
    ),
    optional_fields=("recipeHealthAssessment.pros", "recipeHealthAssessment.cons"),
    numeric_fields=_NUTRITION_FIELDS + ("duration", "servings"),
    multi_lang_list_fields=("recipeHealthAssessment.pros", "recipeHealthAssessment.cons"),
    ingredients_field="ingredients",
    item_required_fields=_RECIPE_ITEM_FIELDS,
    steps_field="steps",
)

RECIPE_EDIT = ResultKindSpec(
    kind=ResultKind.recipe_edit,
    function_name="edit_recipe",
    required_fields=("name", "description", "steps"),
    multi_lang_text_fields=("name", "description"),
    steps_field="steps",
    steps_min_length=1,
    step_multi_lang_text_fields=("stepDescription",),
)


REGISTRY: Dict[ResultKind, ResultKindSpec] = {
    spec.kind: spec
    for spec in (
        MEAL_TEXT,
        INGREDIENT_TEXT,
        RECIPE_INGREDIENT_TEXT,
        IMAGE_ANALYSIS,
        RECIPE_FROM_IMAGES,
        RECIPE_EDIT,
    )
}


def get_spec(kind: ResultKind | str) -> ResultKindSpec:
    """Look up a registry entry by kind or kind name. Raises KeyError if unknown."""
    try:
        key = ResultKind(kind)
    except ValueError as exc:
        raise KeyError(f"Unknown result kind: {kind}") from exc
    return REGISTRY[key]
