"""Base connector interface for grocery ordering integrations."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from kitchly.schemas import IngredientItem, OrderResponse, Recipe


@dataclass
class ConnectorResponse:
    """Standardized response from connector API calls."""

    data: Any
    status_code: int
    headers: dict[str, str]

    @property
    def is_success(self) -> bool:
        """Check if response indicates success."""
        return 200 <= self.status_code < 300


class GroceryOrderConnector(ABC):
    """Abstract base class for services that turn ingredients into order links."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return connector name for logging and identification."""

    @abstractmethod
    async def create_recipe_order(self, recipe: Recipe) -> OrderResponse:
        """
        Create a shoppable recipe page.

        Args:
            recipe: Recipe with at least one ingredient and instruction.

        Returns:
            OrderResponse carrying the order link.
        """

    @abstractmethod
    async def create_shopping_list_order(
        self, title: str, items: Sequence[IngredientItem | dict[str, Any]]
    ) -> OrderResponse:
        """
        Create a shoppable shopping list page.

        Args:
            title: List title shown on the landing page.
            items: Line items to order.

        Returns:
            OrderResponse carrying the order link.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release network resources."""
