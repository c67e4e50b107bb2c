"""Recipe and meal plan generation from free text.

The inference collaborator is asked for strict JSON; its output is
unwrapped, parsed, checked for required fields and repaired (default
servings and quantities, nominal measurements) before any schema object is
returned.
"""

import json
import math
import re
from collections.abc import Mapping
from typing import Any

from kitchly.errors import IncompleteResultError, ParseError
from kitchly.generate.prompts import (
    MEAL_PLAN_PROMPT,
    QUICK_RECIPE_PROMPT,
    RECIPE_PROMPT,
    build_prompt,
)
from kitchly.llm import InferenceClient
from kitchly.logging_config import get_logger
from kitchly.normalize import (
    ensure_measured,
    sanitize_ingredients,
    sanitize_instructions,
    sanitize_line_items,
)
from kitchly.schemas import (
    MEAL_TYPES,
    MealPlan,
    MealPlanDay,
    PlannedMeal,
    Recipe,
    UserPreferences,
)

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

DEFAULT_SERVINGS = 4


def extract_json_text(raw: str) -> str:
    """Strip a fenced code block wrapper if the text contains one."""
    text = raw.strip()
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text


def parse_json_object(raw: str) -> dict[str, Any]:
    """Parse model output into a JSON object, raising ParseError otherwise."""
    try:
        data = json.loads(extract_json_text(raw))
    except json.JSONDecodeError as e:
        raise ParseError(f"Model output is not valid JSON: {e}", raw=raw) from e
    if not isinstance(data, dict):
        raise ParseError("Model output is not a JSON object.", raw=raw)
    return data


def _repair_quantity(value: Any) -> Any:
    """Default a missing or non-positive numeric quantity to 1."""
    if value is None:
        return 1
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return value
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value <= 0:
        return 1
    return value


def _repair_items(items: list[Any], key: str) -> list[Any]:
    repaired = []
    for item in items:
        if isinstance(item, Mapping) and isinstance(item.get(key), list):
            measurements = [
                {**m, "quantity": _repair_quantity(m.get("quantity"))}
                if isinstance(m, Mapping)
                else m
                for m in item[key]
            ]
            item = {**item, key: measurements}
        repaired.append(item)
    return repaired


def _valid_servings(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        value = float(value)
    except OverflowError:
        return False
    return math.isfinite(value) and round(value) >= 1


def _non_empty_list(data: Mapping[str, Any], key: str) -> bool:
    value = data.get(key)
    return isinstance(value, list) and len(value) > 0


def _optional_text(value: Any) -> str | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    return value.strip() if isinstance(value, str) and value.strip() else None


def parse_recipe(raw: str) -> Recipe:
    """
    Parse and repair a recipe from model output.

    Raises:
        ParseError: If the output is not a JSON object.
        IncompleteResultError: If title, ingredients or instructions are missing.
        ValidationError: If an ingredient has no usable name.
    """
    data = parse_json_object(raw)

    missing = [
        field
        for field, ok in (
            ("title", isinstance(data.get("title"), str) and data["title"].strip()),
            ("ingredients", _non_empty_list(data, "ingredients")),
            ("instructions", _non_empty_list(data, "instructions")),
        )
        if not ok
    ]
    instructions = sanitize_instructions(data.get("instructions"))
    if not missing and not instructions:
        missing.append("instructions")
    if missing:
        raise IncompleteResultError(f"Recipe is missing: {', '.join(missing)}", missing=missing)

    ingredients = sanitize_ingredients(_repair_items(data["ingredients"], "measurements"))

    servings = data.get("servings")
    if not _valid_servings(servings):
        servings = DEFAULT_SERVINGS

    tags = data.get("dietaryTags", data.get("dietary_tags")) or []

    return Recipe(
        title=data["title"].strip(),
        ingredients=[ensure_measured(ing) for ing in ingredients],
        instructions=instructions,
        servings=int(round(servings)),
        prep_time=_optional_text(data.get("prepTime", data.get("prep_time"))),
        cook_time=_optional_text(data.get("cookTime", data.get("cook_time"))),
        cuisine=_optional_text(data.get("cuisine")),
        dietary_tags=[t.strip() for t in tags if isinstance(t, str) and t.strip()]
        if isinstance(tags, list)
        else [],
    )


def _parse_day(raw_day: Any) -> MealPlanDay:
    raw_day = raw_day if isinstance(raw_day, Mapping) else {}
    meals = []
    for raw_meal in raw_day.get("meals") or []:
        if not isinstance(raw_meal, Mapping):
            continue
        meal_type = str(raw_meal.get("type") or "").strip().lower()
        meals.append(
            PlannedMeal(
                type=meal_type if meal_type in MEAL_TYPES else "dinner",
                recipe_name=_optional_text(raw_meal.get("recipe", raw_meal.get("recipeName")))
                or "Untitled Meal",
                description=_optional_text(raw_meal.get("description")),
            )
        )
    return MealPlanDay(day=_optional_text(raw_day.get("day")) or "Day", meals=meals)


def render_plan_text(days: list[MealPlanDay]) -> str:
    """Render a plain day-by-day summary of a plan."""
    lines = []
    for day in days:
        lines.append(f"{day.day}:")
        lines.extend(f"  {meal.type}: {meal.recipe_name}" for meal in day.meals)
    return "\n".join(lines)


def parse_plan(raw: str) -> MealPlan:
    """
    Parse and repair a meal plan from model output.

    Raises:
        ParseError: If the output is not a JSON object.
        IncompleteResultError: If title, days or the consolidated list are missing.
        ValidationError: If a line item has no usable name.
    """
    data = parse_json_object(raw)
    consolidated_key = "consolidatedList" if "consolidatedList" in data else "consolidated_list"

    missing = [
        field
        for field, ok in (
            ("title", isinstance(data.get("title"), str) and data["title"].strip()),
            ("days", _non_empty_list(data, "days")),
            ("consolidatedList", _non_empty_list(data, consolidated_key)),
        )
        if not ok
    ]
    if missing:
        raise IncompleteResultError(f"Meal plan is missing: {', '.join(missing)}", missing=missing)

    days = [_parse_day(d) for d in data["days"]]
    line_items = sanitize_line_items(
        _repair_items(
            _repair_items(data[consolidated_key], "line_item_measurements"), "measurements"
        )
    )

    return MealPlan(
        title=data["title"].strip(),
        days=days,
        consolidated_list=[ensure_measured(item) for item in line_items],
        rendered_text=render_plan_text(days),
    )


class RecipeAndPlanGenerator:
    """Turns natural-language requests into Recipe and MealPlan objects."""

    def __init__(self, inference: InferenceClient):
        self.inference = inference

    async def generate_recipe(
        self,
        user_text: str,
        preferences: UserPreferences | None = None,
        *,
        quick: bool = False,
    ) -> Recipe:
        """
        Generate a recipe for a user request.

        Args:
            user_text: The user's message.
            preferences: Optional dietary and cooking preferences.
            quick: Use the short voice-oriented prompt.

        Returns:
            A validated Recipe with at least one ingredient and step.
        """
        template = QUICK_RECIPE_PROMPT if quick else RECIPE_PROMPT
        raw = await self.inference.complete(build_prompt(template, user_text, preferences))
        recipe = parse_recipe(raw)
        logger.info(
            f'Generated recipe "{recipe.title}": {len(recipe.ingredients)} ingredients, '
            f"{len(recipe.instructions)} steps"
        )
        return recipe

    async def generate_plan(
        self, user_text: str, preferences: UserPreferences | None = None
    ) -> MealPlan:
        """Generate a multi-day meal plan with a consolidated shopping list."""
        raw = await self.inference.complete(build_prompt(MEAL_PLAN_PROMPT, user_text, preferences))
        plan = parse_plan(raw)
        logger.info(
            f'Generated meal plan "{plan.title}": {len(plan.days)} days, '
            f"{len(plan.consolidated_list)} items"
        )
        return plan
