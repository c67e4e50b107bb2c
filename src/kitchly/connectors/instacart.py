"""Instacart Developer Platform connector for shoppable recipes and lists.

Endpoints:
    POST /products/recipe         create a recipe landing page
    POST /products/products_link  create a shopping list landing page
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import httpx

from kitchly.config import Settings, get_settings
from kitchly.connectors.base import ConnectorResponse, GroceryOrderConnector
from kitchly.errors import (
    ConfigurationError,
    NetworkError,
    OrderAPIError,
    OrderTimeoutError,
    ValidationError,
)
from kitchly.logging_config import get_logger
from kitchly.normalize import (
    ensure_measured,
    sanitize_ingredients,
    sanitize_instructions,
    sanitize_line_items,
)
from kitchly.schemas import IngredientItem, OrderResponse, Recipe

logger = get_logger(__name__)

CLIENT_NAME = "Kitchly"
CLIENT_VERSION = "1.0"
API_KEY_PREFIX = "keys."

PARTNER_LINKBACK_URL = "https://www.kitchly.app"
RECIPE_IMAGE_URL = "https://www.kitchly.app/images/instakitchly.png"

# Affiliate tracking parameters included with every link
AFFILIATE_CONFIG: dict[str, str] = {
    "utm_campaign": "kitchly",
    "utm_medium": "affiliate",
    "utm_source": "instacart_idp",
    "utm_term": "partnertype-mediapartner",
    "utm_content": "campaignid-20313_partnerid-6107940",
}


def landing_page_configuration() -> dict[str, Any]:
    """Get the landing page block stamped on every request."""
    return {
        **AFFILIATE_CONFIG,
        "partner_linkback_url": PARTNER_LINKBACK_URL,
        "enable_pantry_items": True,
    }


def _require_title(title: Any, kind: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError(f"{kind} title must be a non-empty string.")
    return title.strip()


def _measurements(item: IngredientItem) -> list[dict[str, Any]]:
    return [{"quantity": m.quantity, "unit": m.unit} for m in ensure_measured(item).measurements]


def build_recipe_request(recipe: Recipe) -> dict[str, Any]:
    """
    Build the POST /products/recipe body.

    Raises:
        ValidationError: If the recipe lacks a title, ingredients or steps.
    """
    title = _require_title(recipe.title, "Recipe")
    if not recipe.ingredients:
        raise ValidationError("Recipe must contain at least one ingredient.")
    if not recipe.instructions:
        raise ValidationError("Recipe must contain at least one instruction step.")

    ingredients = sanitize_ingredients(recipe.ingredients)
    instructions = sanitize_instructions(recipe.instructions)
    if not instructions:
        raise ValidationError("Recipe instructions must contain at least one non-empty step.")

    body_ingredients = []
    for ing in ingredients:
        entry: dict[str, Any] = {"name": ing.name}
        if ing.display_text:
            entry["display_text"] = ing.display_text
        entry["measurements"] = _measurements(ing)
        body_ingredients.append(entry)

    return {
        "title": title,
        "image_url": RECIPE_IMAGE_URL,
        "link_type": "recipe",
        "ingredients": body_ingredients,
        "instructions": instructions,
        "landing_page_configuration": landing_page_configuration(),
    }


def build_shopping_list_request(
    title: str, items: Sequence[IngredientItem | dict[str, Any]]
) -> dict[str, Any]:
    """
    Build the POST /products/products_link body.

    Raises:
        ValidationError: If the title is blank, the list is empty or an item is unnamed.
    """
    title = _require_title(title, "Shopping list")
    if not items:
        raise ValidationError("Shopping list must contain at least one item.")

    line_items = []
    for item in sanitize_line_items(items):
        entry: dict[str, Any] = {"name": item.name}
        if item.display_text:
            entry["display_text"] = item.display_text
        entry["line_item_measurements"] = _measurements(item)
        line_items.append(entry)

    return {
        "title": title,
        "link_type": "shopping_list",
        "line_items": line_items,
        "landing_page_configuration": landing_page_configuration(),
    }


class InstacartConnector(GroceryOrderConnector):
    """Connector for the Instacart Developer Platform API."""

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        api_key = settings.instacart_api_key if api_key is None else api_key
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "Missing INSTACART_API_KEY. Set it in the environment to enable grocery ordering."
            )
        self.api_key = api_key.strip()
        self.base_url = (base_url or settings.instacart_base_url).rstrip("/")
        self.timeout = timeout or settings.instacart_timeout or self.DEFAULT_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        """Return connector name."""
        return "instacart"

    @property
    def authorization(self) -> str:
        """Get the bearer credential, adding the key prefix when missing."""
        key = self.api_key if self.api_key.startswith(API_KEY_PREFIX) else API_KEY_PREFIX + self.api_key
        return f"Bearer {key}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "Authorization": self.authorization,
                    "X-Instacart-Client": CLIENT_NAME,
                    "X-Instacart-Client-Version": CLIENT_VERSION,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(self, endpoint: str, body: dict[str, Any]) -> ConnectorResponse:
        """POST a JSON body, bounded by the request timeout. Never retries."""
        url = f"{self.base_url}{endpoint}"
        client = await self._get_client()
        logger.debug(f"POST {url}")

        try:
            response = await asyncio.wait_for(client.post(url, json=body), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            logger.error(f"Request to {url} timed out after {self.timeout:g}s")
            raise OrderTimeoutError(
                f"Instacart API request timed out after {self.timeout:g} seconds."
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e}")
            raise NetworkError(f"Instacart API request failed: {e}") from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"API error {response.status_code} for {url}: {error_detail}")
            raise OrderAPIError(
                f"Instacart API returned {response.status_code}: {error_detail}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json()
        except ValueError:
            data = None

        return ConnectorResponse(
            data=data,
            status_code=response.status_code,
            headers=dict(response.headers),
        )

    @staticmethod
    def _parse_order_response(response: ConnectorResponse) -> OrderResponse:
        data = response.data if isinstance(response.data, dict) else {}
        link = data.get("products_link_url")
        if not isinstance(link, str) or not link.strip():
            logger.error(f"API response missing products_link_url: {response.data!r}")
            raise OrderAPIError(
                "Instacart API response did not contain a valid products_link_url.",
                status_code=response.status_code,
                response=response.data,
            )
        logger.info(f"Order link created: {link}")
        return OrderResponse(order_link_url=link)

    async def create_recipe_order(self, recipe: Recipe) -> OrderResponse:
        """Create a shoppable recipe page from a Recipe."""
        body = build_recipe_request(recipe)
        logger.info(
            f'Creating recipe "{body["title"]}" with {len(body["ingredients"])} ingredient(s)'
        )
        return self._parse_order_response(await self._request("/products/recipe", body))

    async def create_shopping_list_order(
        self, title: str, items: Sequence[IngredientItem | dict[str, Any]]
    ) -> OrderResponse:
        """Create a shoppable shopping list page."""
        body = build_shopping_list_request(title, items)
        logger.info(
            f'Creating shopping list "{body["title"]}" with {len(body["line_items"])} item(s)'
        )
        return self._parse_order_response(await self._request("/products/products_link", body))

    async def __aenter__(self) -> "InstacartConnector":
        """Async context manager entry."""
        await self._get_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()


def build_order_client(settings: Settings | None = None) -> InstacartConnector | None:
    """
    Resolve the grocery ordering capability once at startup.

    Returns:
        A connector, or None when no credential is configured.
    """
    settings = settings or get_settings()
    try:
        client = InstacartConnector(
            api_key=settings.instacart_api_key,
            base_url=settings.instacart_base_url,
            timeout=settings.instacart_timeout,
        )
    except ConfigurationError as e:
        logger.warning(f"Grocery ordering unavailable: {e}")
        return None
    env = "dev" if settings.instacart_use_dev else "prod"
    logger.info(f"Instacart connector ready (env={env}, url={client.base_url})")
    return client
