"""Domain data schemas shared across the kitchen core."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

MealType = Literal["breakfast", "lunch", "dinner", "snack"]
MEAL_TYPES: tuple[str, ...] = ("breakfast", "lunch", "dinner", "snack")


class Measurement(BaseModel):
    """A quantity of an ingredient, e.g. 2 cups."""

    quantity: float = Field(gt=0)
    unit: str = Field(min_length=1)


class IngredientItem(BaseModel):
    """An ingredient of a recipe."""

    name: str = Field(min_length=1)
    display_text: str | None = None
    measurements: list[Measurement] = Field(default_factory=list)

    def describe(self) -> str:
        """Get a short human-readable line for this item."""
        if self.display_text:
            return self.display_text
        amounts = ", ".join(f"{m.quantity:g} {m.unit}" for m in self.measurements)
        return f"{amounts} {self.name}" if amounts else self.name


class LineItem(IngredientItem):
    """An item of a shopping list."""


class Recipe(BaseModel):
    """Recipe with ingredients and instructions."""

    title: str
    ingredients: list[IngredientItem] = Field(default_factory=list)
    instructions: list[str] = Field(default_factory=list)
    servings: int | None = None
    prep_time: str | None = None
    cook_time: str | None = None
    cuisine: str | None = None
    dietary_tags: list[str] = Field(default_factory=list)


class PlannedMeal(BaseModel):
    """A single meal slot within a plan day."""

    type: MealType = "dinner"
    recipe_name: str
    description: str | None = None


class MealPlanDay(BaseModel):
    """A single day of a meal plan."""

    day: str
    meals: list[PlannedMeal] = Field(default_factory=list)


class MealPlan(BaseModel):
    """Multi-day meal plan with a consolidated shopping list."""

    title: str
    days: list[MealPlanDay]
    consolidated_list: list[LineItem] = Field(default_factory=list)
    rendered_text: str = ""


class CookingSession(BaseModel):
    """An in-progress step-by-step cooking session."""

    recipe: Recipe
    current_step: int = 0
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_paused: bool = False

    @property
    def total_steps(self) -> int:
        """Get the number of instruction steps."""
        return len(self.recipe.instructions)


class UserPreferences(BaseModel):
    """User-specific dietary and cooking preferences."""

    dietary_restrictions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    cuisine_preferences: list[str] = Field(default_factory=list)
    serving_size: int | None = Field(None, ge=1, le=50)
    budget: Literal["budget", "moderate", "premium"] | None = None
    cooking_skill: Literal["beginner", "intermediate", "advanced"] | None = None

    def describe(self, allergy_label: str = "Allergies") -> list[str]:
        """Get one line per configured preference."""
        lines = []
        if self.dietary_restrictions:
            lines.append(f"Dietary restrictions: {', '.join(self.dietary_restrictions)}")
        if self.allergies:
            lines.append(f"{allergy_label}: {', '.join(self.allergies)}")
        if self.cuisine_preferences:
            lines.append(f"Cuisine preferences: {', '.join(self.cuisine_preferences)}")
        if self.serving_size:
            lines.append(f"Preferred servings: {self.serving_size}")
        if self.budget:
            lines.append(f"Budget: {self.budget}")
        if self.cooking_skill:
            lines.append(f"Skill level: {self.cooking_skill}")
        return lines


class KitchenState(BaseModel):
    """Per-conversation kitchen state."""

    current_recipe: Recipe | None = None
    current_meal_plan: MealPlan | None = None
    cooking_session: CookingSession | None = None
    last_order_link: str | None = None
    user_preferences: UserPreferences | None = None


class OrderResponse(BaseModel):
    """Successful response from the grocery ordering API."""

    order_link_url: str
