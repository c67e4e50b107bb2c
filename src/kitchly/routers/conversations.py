"""API routes for conversation-scoped kitchen actions and state."""

import uuid
from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from kitchly.actions import (
    Action,
    ConfirmAndShopAction,
    ConversationContext,
    CookAlongAction,
    CreateRecipeAction,
    KitchenServices,
    PlanMealsAction,
)
from kitchly.logging_config import LoggingContext, get_logger
from kitchly.schemas import KitchenState, UserPreferences
from kitchly.state import render_kitchen_summary, summary_values

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/conversations/{conversation_id}", tags=["conversations"]
)


# =============================================================================
# Request/Response Schemas
# =============================================================================


class MessageRequest(BaseModel):
    """A user message routed to a kitchen action."""

    text: str = Field(default="", description="The user's message")
    user_id: str | None = None


class ActionResponse(BaseModel):
    """Result of running an action for one message."""

    action: str
    success: bool
    text: str | None = None
    error: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
    messages: list[str] = Field(
        default_factory=list, description="Supplementary messages sent while handling"
    )


class KitchenStateResponse(BaseModel):
    """Stored kitchen state with its rendered summary."""

    conversation_id: str
    summary: str
    values: dict[str, Any]
    state: KitchenState


# =============================================================================
# Dependencies
# =============================================================================


def get_services(request: Request) -> KitchenServices:
    """Get the process-wide kitchen services built at startup."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Kitchen services are not initialized",
        )
    return services


ServicesDep = Annotated[KitchenServices, Depends(get_services)]


def _require_generation(services: KitchenServices) -> None:
    if not services.generation_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Recipe generation is not configured",
        )


async def _run_action(
    action: Action, conversation_id: str, message: MessageRequest
) -> ActionResponse:
    """Run an action, collecting the messages it sends along the way."""
    messages: list[str] = []

    async def collect(text: str) -> None:
        messages.append(text)

    context = ConversationContext(
        conversation_id=conversation_id, text=message.text, user_id=message.user_id
    )
    with LoggingContext(request_id=str(uuid.uuid4())):
        result = await action.handle(context, collect)
        logger.info(f"{action.name} finished (success={result.success})")

    return ActionResponse(
        action=action.name,
        success=result.success,
        text=result.text,
        error=result.error,
        data=result.data,
        messages=messages,
    )


# =============================================================================
# Action Endpoints
# =============================================================================


@router.post("/recipes", response_model=ActionResponse)
async def create_recipe(
    conversation_id: str, message: MessageRequest, services: ServicesDep
) -> ActionResponse:
    """Generate a recipe and, when ordering is configured, an order link."""
    _require_generation(services)
    return await _run_action(CreateRecipeAction(services), conversation_id, message)


@router.post("/meal-plans", response_model=ActionResponse)
async def create_meal_plan(
    conversation_id: str, message: MessageRequest, services: ServicesDep
) -> ActionResponse:
    """Generate a multi-day meal plan with a consolidated shopping list."""
    _require_generation(services)
    return await _run_action(PlanMealsAction(services), conversation_id, message)


@router.post("/cook-along", response_model=ActionResponse)
async def cook_along(
    conversation_id: str, message: MessageRequest, services: ServicesDep
) -> ActionResponse:
    """Start or navigate the guided cooking session."""
    return await _run_action(CookAlongAction(services), conversation_id, message)


@router.get("/order-link", response_model=ActionResponse)
async def get_order_link(conversation_id: str, services: ServicesDep) -> ActionResponse:
    """Re-surface the last order link created in this conversation."""
    return await _run_action(ConfirmAndShopAction(services), conversation_id, MessageRequest())


# =============================================================================
# State Endpoints
# =============================================================================


@router.get("/state", response_model=KitchenStateResponse)
async def get_state(conversation_id: str, services: ServicesDep) -> KitchenStateResponse:
    """Get the stored kitchen state and its text summary."""
    state = await services.store.get(conversation_id)
    return KitchenStateResponse(
        conversation_id=conversation_id,
        summary=render_kitchen_summary(state),
        values=summary_values(state),
        state=state,
    )


@router.put("/preferences", response_model=UserPreferences)
async def update_preferences(
    conversation_id: str, preferences: UserPreferences, services: ServicesDep
) -> UserPreferences:
    """Set the preferences used when generating recipes and plans."""
    store = services.store
    async with store.conversation_lock(conversation_id):
        state = await store.merge(conversation_id, {"user_preferences": preferences})
    logger.info(f"Preferences updated for conversation {conversation_id}")
    return state.user_preferences or preferences


@router.delete("/state", status_code=status.HTTP_204_NO_CONTENT)
async def clear_state(conversation_id: str, services: ServicesDep) -> None:
    """Forget everything stored for this conversation."""
    store = services.store
    async with store.conversation_lock(conversation_id):
        await store.clear(conversation_id)
    logger.info(f"Kitchen state cleared for conversation {conversation_id}")
