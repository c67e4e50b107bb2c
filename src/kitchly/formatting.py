"""User-facing rendering of recipes, plans and cooking steps.

Step, status and ingredient strings are written for voice playback: short,
plain, no markdown. Recipe and plan renderings are markdown for chat.
"""

from kitchly.schemas import CookingSession, MealPlan, Recipe


def order_link_message(url: str, plan: bool = False) -> str:
    """Get the follow-up message delivering an order link."""
    if plan:
        return (
            f"**[Order all ingredients on Instacart]({url})** "
            "-- one click to get everything delivered!"
        )
    return f"**[Order ingredients on Instacart]({url})** -- get everything delivered to your door!"


def format_step(recipe: Recipe, step_index: int) -> str:
    """Format one instruction as "Step N of T: ..."."""
    total = len(recipe.instructions)
    return f"Step {step_index + 1} of {total}: {recipe.instructions[step_index]}"


def format_ingredients(recipe: Recipe) -> str:
    lines = [f"- {ing.describe()}" for ing in recipe.ingredients]
    return f"Ingredients for {recipe.title}:\n" + "\n".join(lines)


def progress_percent(current: int, total: int) -> int:
    """Percentage complete, rounded half up."""
    if total <= 0:
        return 0
    return (current * 200 + total) // (total * 2)


def format_status(session: CookingSession) -> str:
    total = session.total_steps
    current = session.current_step + 1
    text = (
        f"You're on step {current} of {total} for {session.recipe.title} "
        f"({progress_percent(current, total)}% complete)."
    )
    if session.is_paused:
        text += " The session is paused."
    return text


def format_session_intro(recipe: Recipe) -> str:
    total = len(recipe.instructions)
    return (
        f"Let's cook {recipe.title}! I'll guide you step by step. "
        f'There are {total} steps total. Say "next" to advance, "repeat" to hear a step again, '
        f'"previous" to go back, or "done" to end.\n\n' + format_step(recipe, 0)
    )


def format_recipe(recipe: Recipe, order_link: str | None = None) -> str:
    """Render a recipe as markdown, with the order link when available."""
    lines = [f"# {recipe.title}", ""]

    meta = []
    if recipe.servings:
        meta.append(f"**Servings:** {recipe.servings}")
    if recipe.prep_time:
        meta.append(f"**Prep Time:** {recipe.prep_time}")
    if recipe.cook_time:
        meta.append(f"**Cook Time:** {recipe.cook_time}")
    if recipe.cuisine:
        meta.append(f"**Cuisine:** {recipe.cuisine}")
    if meta:
        lines.extend([" | ".join(meta), ""])

    if recipe.dietary_tags:
        lines.extend([f"*Tags: {', '.join(recipe.dietary_tags)}*", ""])

    lines.extend(["## Ingredients", ""])
    lines.extend(f"- {ing.describe()}" for ing in recipe.ingredients)
    lines.extend(["", "## Instructions", ""])
    lines.extend(f"{i}. {step}" for i, step in enumerate(recipe.instructions, 1))
    lines.append("")

    if order_link:
        lines.extend(["---", "", order_link_message(order_link)])

    return "\n".join(lines)


def format_meal_plan(plan: MealPlan, order_link: str | None = None) -> str:
    """Render a meal plan and its consolidated list as markdown."""
    lines = [f"# {plan.title}", ""]

    for day in plan.days:
        lines.extend([f"## {day.day}", ""])
        for meal in day.meals:
            desc = f" -- {meal.description}" if meal.description else ""
            lines.append(f"- **{meal.type.capitalize()}:** {meal.recipe_name}{desc}")
        lines.append("")

    lines.extend(["## Consolidated Shopping List", ""])
    lines.extend(f"- {item.describe()}" for item in plan.consolidated_list)
    lines.append("")

    if order_link:
        lines.extend(["---", "", order_link_message(order_link, plan=True)])

    return "\n".join(lines)
