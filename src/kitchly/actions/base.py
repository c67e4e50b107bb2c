"""Conversation action surface shared by all kitchen actions."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

from kitchly.config import Settings, get_settings
from kitchly.connectors import GroceryOrderConnector
from kitchly.cook import CookAlongSessionManager
from kitchly.errors import GenerationError, ValidationError
from kitchly.generate import RecipeAndPlanGenerator
from kitchly.llm import InferenceClient
from kitchly.logging_config import LoggingContext, get_logger
from kitchly.state import KitchenContextStore

logger = get_logger(__name__)

Callback = Callable[[str], Awaitable[None]]


@dataclass
class ConversationContext:
    """The inbound message an action is asked to handle."""

    conversation_id: str
    text: str = ""
    user_id: str | None = None


class ActionResult(BaseModel):
    """Outcome of an action, as returned to the message router."""

    success: bool
    text: str | None = None
    error: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def failure(cls, error: str, **data: Any) -> "ActionResult":
        return cls(success=False, error=error, data=data)


@dataclass
class KitchenServices:
    """Process-wide collaborators resolved once at startup."""

    store: KitchenContextStore
    sessions: CookAlongSessionManager
    generator: RecipeAndPlanGenerator | None = None
    order_client: GroceryOrderConnector | None = None
    order_link_attempts: int = 1

    @property
    def ordering_enabled(self) -> bool:
        return self.order_client is not None

    @property
    def generation_enabled(self) -> bool:
        return self.generator is not None

    @classmethod
    def create(
        cls,
        store: KitchenContextStore,
        inference: InferenceClient | None = None,
        order_client: GroceryOrderConnector | None = None,
        settings: Settings | None = None,
    ) -> "KitchenServices":
        """Wire the generator and session manager around the given collaborators."""
        settings = settings or get_settings()
        generator = RecipeAndPlanGenerator(inference) if inference is not None else None
        return cls(
            store=store,
            sessions=CookAlongSessionManager(store, generator=generator, inference=inference),
            generator=generator,
            order_client=order_client,
            order_link_attempts=settings.order_link_attempts,
        )


class Action(ABC):
    """Base class for conversation actions.

    ``handle`` never raises: validation and generation problems become
    specific failure results and anything unexpected is logged and reported
    generically.
    """

    name: str = "ACTION"
    failure_prefix: str = "Sorry, something went wrong"

    def __init__(self, services: KitchenServices):
        self.services = services

    async def can_handle(self, context: ConversationContext) -> bool:
        """Check whether this action is applicable to the conversation."""
        return True

    async def handle(
        self, context: ConversationContext, callback: Callback | None = None
    ) -> ActionResult:
        """Handle a message, holding the conversation lock throughout."""
        store = self.services.store
        with LoggingContext(conversation_id=context.conversation_id, action=self.name):
            async with store.conversation_lock(context.conversation_id):
                try:
                    return await self.run(context, callback)
                except ValidationError as e:
                    logger.warning(f"Validation failed: {e}")
                    return ActionResult.failure(f"{self.failure_prefix}: {e}")
                except GenerationError as e:
                    logger.warning(f"Generation failed: {e}")
                    return ActionResult.failure(e.user_message)
                except Exception as e:
                    logger.exception(f"{self.name} failed: {e}")
                    return ActionResult.failure(f"{self.failure_prefix}: {e}")

    @abstractmethod
    async def run(self, context: ConversationContext, callback: Callback | None) -> ActionResult:
        """Perform the action. May raise; ``handle`` converts errors."""
