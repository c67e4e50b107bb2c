"""PLAN_MEALS: generate a multi-day plan and a shoppable consolidated list."""

from kitchly.actions.base import Action, ActionResult, Callback, ConversationContext
from kitchly.actions.ordering import ORDERING_UNAVAILABLE, create_order_link
from kitchly.formatting import format_meal_plan, order_link_message


class PlanMealsAction(Action):
    """Creates a meal plan and, when ordering is available, a shopping list link."""

    name = "PLAN_MEALS"
    failure_prefix = "Sorry, I couldn't create that meal plan"

    async def can_handle(self, context: ConversationContext) -> bool:
        return self.services.generation_enabled

    async def run(self, context: ConversationContext, callback: Callback | None) -> ActionResult:
        services = self.services
        if services.generator is None:
            return ActionResult.failure("Meal planning is currently unavailable.")

        state = await services.store.get(context.conversation_id)
        plan = await services.generator.generate_plan(context.text, state.user_preferences)

        link = None
        if services.order_client is not None:
            client = services.order_client
            link = await create_order_link(
                lambda: client.create_shopping_list_order(plan.title, plan.consolidated_list),
                attempts=services.order_link_attempts,
            )

        await services.store.merge(
            context.conversation_id, {"current_meal_plan": plan, "last_order_link": link}
        )

        if link and callback is not None:
            await callback(order_link_message(link, plan=True))

        text = format_meal_plan(plan, link)
        if not services.ordering_enabled:
            text += f"\n\n{ORDERING_UNAVAILABLE}"

        return ActionResult(
            success=True,
            text=text,
            data={
                "meal_plan": plan.model_dump(mode="json"),
                "order_link": link,
                "ordering_available": services.ordering_enabled,
                "total_days": len(plan.days),
                "total_items": len(plan.consolidated_list),
            },
        )
