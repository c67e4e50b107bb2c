"""Pytest configuration and shared fixtures."""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from fakeredis import FakeAsyncRedis, FakeServer

from kitchly.actions import KitchenServices
from kitchly.connectors import GroceryOrderConnector
from kitchly.schemas import CookingSession, IngredientItem, Measurement, OrderResponse, Recipe
from kitchly.state import KitchenContextStore

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )


# =============================================================================
# Inference Fixtures
# =============================================================================


class ScriptedInference:
    """Inference double that replays canned replies and records prompts."""

    def __init__(self, *replies: str):
        self.replies = list(replies)
        self.calls: list[tuple[str, str]] = []

    async def complete(self, prompt: str, *, size: str = "large") -> str:
        self.calls.append((prompt, size))
        if not self.replies:
            raise AssertionError("No scripted inference reply left")
        return self.replies.pop(0)


@pytest.fixture
def llm_recipe_payload():
    """Recipe JSON as the model is asked to produce it."""
    return {
        "title": "Garlic Butter Pasta",
        "servings": 2,
        "prepTime": "10 minutes",
        "cookTime": "15 minutes",
        "cuisine": "Italian",
        "dietaryTags": ["vegetarian"],
        "ingredients": [
            {
                "name": "spaghetti",
                "display_text": "8 oz spaghetti",
                "measurements": [{"quantity": 8, "unit": "ounce"}],
            },
            {
                "name": "butter",
                "display_text": "3 tablespoons butter",
                "measurements": [{"quantity": 3, "unit": "tablespoon"}],
            },
            {
                "name": "garlic",
                "display_text": "4 cloves garlic, minced",
                "measurements": [{"quantity": 4, "unit": "clove"}],
            },
            {"name": "salt", "measurements": []},
        ],
        "instructions": [
            "Bring a large pot of salted water to a boil.",
            "Cook the spaghetti until al dente.",
            "Melt the butter and sizzle the garlic.",
            "Toss the pasta with the garlic butter.",
            "Season and serve.",
        ],
    }


@pytest.fixture
def llm_recipe_reply(llm_recipe_payload):
    """Recipe payload wrapped in a fenced block, as models often reply."""
    return f"```json\n{json.dumps(llm_recipe_payload)}\n```"


@pytest.fixture
def llm_plan_payload():
    """Meal plan JSON as the model is asked to produce it."""
    return {
        "title": "Two Day Veggie Plan",
        "days": [
            {
                "day": "Monday",
                "meals": [
                    {"type": "breakfast", "recipe": "Overnight Oats", "description": "Oats with berries."},
                    {"type": "dinner", "recipe": "Veggie Stir Fry", "description": "Quick wok dinner."},
                ],
            },
            {
                "day": "Tuesday",
                "meals": [
                    {"type": "Lunch", "recipe": "Lentil Soup"},
                    {"type": "brunch", "recipe": "Shakshuka"},
                ],
            },
        ],
        "consolidatedList": [
            {
                "name": "rolled oats",
                "display_text": "2 cups rolled oats",
                "line_item_measurements": [{"quantity": 2, "unit": "cup"}],
            },
            {"name": "lentils", "line_item_measurements": [{"quantity": 0, "unit": "cup"}]},
            {"name": "eggs", "measurements": [{"quantity": 6, "unit": "each"}]},
        ],
    }


@pytest.fixture
def scripted_inference():
    """Factory for inference doubles with canned replies."""
    return ScriptedInference


# =============================================================================
# Domain Fixtures
# =============================================================================


@pytest.fixture
def sample_recipe():
    """A five-step recipe."""
    return Recipe(
        title="Pancakes",
        servings=4,
        ingredients=[
            IngredientItem(
                name="flour",
                display_text="2 cups flour",
                measurements=[Measurement(quantity=2, unit="cup")],
            ),
            IngredientItem(name="milk", measurements=[Measurement(quantity=1.5, unit="cup")]),
            IngredientItem(name="eggs", measurements=[Measurement(quantity=2, unit="each")]),
        ],
        instructions=[
            "Whisk the dry ingredients.",
            "Whisk the wet ingredients.",
            "Combine and rest the batter.",
            "Heat a greased pan.",
            "Cook until golden on both sides.",
        ],
    )


@pytest.fixture
def make_session(sample_recipe):
    """Factory for cooking sessions over the sample recipe."""

    def _make(step: int = 0, recipe: Recipe | None = None, **kwargs) -> CookingSession:
        return CookingSession(recipe=recipe or sample_recipe, current_step=step, **kwargs)

    return _make


# =============================================================================
# Store and Service Fixtures
# =============================================================================


@pytest.fixture
def fake_redis():
    """In-memory async Redis with its own server per test."""
    return FakeAsyncRedis(server=FakeServer(), decode_responses=True)


@pytest.fixture
def store(fake_redis):
    """Kitchen context store over fake Redis."""
    return KitchenContextStore(fake_redis, ttl_seconds=3600, serialize_conversations=True)


@pytest.fixture
def mock_order_client():
    """Grocery connector double returning a fixed link."""
    client = MagicMock(spec=GroceryOrderConnector)
    client.name = "mock"
    client.create_recipe_order = AsyncMock(
        return_value=OrderResponse(order_link_url="https://instacart.test/recipe/123")
    )
    client.create_shopping_list_order = AsyncMock(
        return_value=OrderResponse(order_link_url="https://instacart.test/list/456")
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def make_services(store):
    """Factory wiring kitchen services around the fake store."""

    def _make(inference=None, order_client=None, order_link_attempts: int = 2) -> KitchenServices:
        services = KitchenServices.create(store, inference=inference, order_client=order_client)
        services.order_link_attempts = order_link_attempts
        return services

    return _make
