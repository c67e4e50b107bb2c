"""Text summary of the kitchen state for prompt context and inspection."""

from typing import Any

from kitchly.schemas import KitchenState

EMPTY_KITCHEN_TEXT = (
    "No active kitchen session. The user has not started a recipe, "
    "meal plan, or cooking session yet."
)


def render_kitchen_summary(state: KitchenState) -> str:
    """Render the kitchen state as a sectioned text block."""
    sections: list[str] = []

    if recipe := state.current_recipe:
        ingredient_lines = []
        for ing in recipe.ingredients:
            amounts = ", ".join(f"{m.quantity:g} {m.unit}" for m in ing.measurements)
            ingredient_lines.append(f"  - {ing.name} ({amounts})" if amounts else f"  - {ing.name}")
        lines = ["[Active Recipe]", f"Title: {recipe.title}"]
        if recipe.servings:
            lines.append(f"Servings: {recipe.servings}")
        if recipe.prep_time:
            lines.append(f"Prep time: {recipe.prep_time}")
        if recipe.cook_time:
            lines.append(f"Cook time: {recipe.cook_time}")
        lines.append("Ingredients:")
        lines.extend(ingredient_lines)
        lines.append(f"Steps: {len(recipe.instructions)} total")
        sections.append("\n".join(lines))

    if state.last_order_link:
        sections.append(f"[Instacart Link]\n{state.last_order_link}")

    if plan := state.current_meal_plan:
        days = "\n".join(
            f"  {day.day}: " + ", ".join(f"{m.type}: {m.recipe_name}" for m in day.meals)
            for day in plan.days
        )
        sections.append(
            f"[Active Meal Plan]\nTitle: {plan.title}\n{days}"
            f"\nConsolidated shopping list items: {len(plan.consolidated_list)}"
        )

    if session := state.cooking_session:
        sections.append(
            f"[Cooking Session]\nRecipe: {session.recipe.title}"
            f"\nCurrent step: {session.current_step + 1} of {session.total_steps}"
            f"\nStatus: {'paused' if session.is_paused else 'active'}"
        )

    if state.user_preferences:
        prefs = state.user_preferences.describe()
        if prefs:
            sections.append("[User Preferences]\n" + "\n".join(prefs))

    if not sections:
        return EMPTY_KITCHEN_TEXT
    return "Current Kitchen State:\n" + "\n\n".join(sections)


def summary_values(state: KitchenState) -> dict[str, Any]:
    """Get flat flags describing the kitchen state."""
    session = state.cooking_session
    return {
        "has_active_recipe": state.current_recipe is not None,
        "has_active_meal_plan": state.current_meal_plan is not None,
        "has_cooking_session": session is not None,
        "has_order_link": state.last_order_link is not None,
        "current_step": session.current_step if session else -1,
        "total_steps": session.total_steps if session else 0,
    }
