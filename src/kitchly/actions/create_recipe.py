"""CREATE_RECIPE: generate a recipe and a shoppable recipe page."""

from kitchly.actions.base import Action, ActionResult, Callback, ConversationContext
from kitchly.actions.ordering import ORDERING_UNAVAILABLE, create_order_link
from kitchly.formatting import format_recipe, order_link_message
from kitchly.logging_config import get_logger

logger = get_logger(__name__)


class CreateRecipeAction(Action):
    """Creates a recipe and, when ordering is available, an order link for it."""

    name = "CREATE_RECIPE"
    failure_prefix = "Sorry, I couldn't create that recipe"

    async def can_handle(self, context: ConversationContext) -> bool:
        return self.services.generation_enabled

    async def run(self, context: ConversationContext, callback: Callback | None) -> ActionResult:
        services = self.services
        if services.generator is None:
            return ActionResult.failure("Recipe generation is currently unavailable.")

        state = await services.store.get(context.conversation_id)
        recipe = await services.generator.generate_recipe(context.text, state.user_preferences)

        link = None
        if services.order_client is not None:
            client = services.order_client
            link = await create_order_link(
                lambda: client.create_recipe_order(recipe),
                attempts=services.order_link_attempts,
            )

        await services.store.merge(
            context.conversation_id, {"current_recipe": recipe, "last_order_link": link}
        )

        if link and callback is not None:
            await callback(order_link_message(link))

        text = format_recipe(recipe, link)
        if not services.ordering_enabled:
            text += f"\n\n{ORDERING_UNAVAILABLE}"

        return ActionResult(
            success=True,
            text=text,
            data={
                "recipe": recipe.model_dump(mode="json"),
                "order_link": link,
                "ordering_available": services.ordering_enabled,
            },
        )
