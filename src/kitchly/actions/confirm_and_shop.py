"""CONFIRM_AND_SHOP: re-surface the last order link."""

from kitchly.actions.base import Action, ActionResult, Callback, ConversationContext
from kitchly.formatting import order_link_message


class ConfirmAndShopAction(Action):
    """Surfaces the stored order link when the user confirms a suggestion."""

    name = "CONFIRM_AND_SHOP"

    async def can_handle(self, context: ConversationContext) -> bool:
        state = await self.services.store.get(context.conversation_id)
        return state.last_order_link is not None

    async def run(self, context: ConversationContext, callback: Callback | None) -> ActionResult:
        state = await self.services.store.get(context.conversation_id)
        url = state.last_order_link
        if not url:
            return ActionResult.failure("No active recipe or shopping link found.")

        if callback is not None:
            await callback(order_link_message(url))

        return ActionResult(success=True, text=f"Instacart link: {url}", data={"order_link": url})
