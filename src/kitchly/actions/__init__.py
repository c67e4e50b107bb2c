"""Conversation actions exposed to the message router."""

from kitchly.actions.base import (
    Action,
    ActionResult,
    Callback,
    ConversationContext,
    KitchenServices,
)
from kitchly.actions.confirm_and_shop import ConfirmAndShopAction
from kitchly.actions.cook_along import CookAlongAction
from kitchly.actions.create_recipe import CreateRecipeAction
from kitchly.actions.plan_meals import PlanMealsAction


def build_actions(services: KitchenServices) -> list[Action]:
    """Instantiate every kitchen action around shared services."""
    return [
        CreateRecipeAction(services),
        PlanMealsAction(services),
        CookAlongAction(services),
        ConfirmAndShopAction(services),
    ]


__all__ = [
    "Action",
    "ActionResult",
    "Callback",
    "ConfirmAndShopAction",
    "ConversationContext",
    "CookAlongAction",
    "CreateRecipeAction",
    "KitchenServices",
    "PlanMealsAction",
    "build_actions",
]
