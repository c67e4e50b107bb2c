"""COOK_ALONG: step-by-step guided cooking."""

from kitchly.actions.base import Action, ActionResult, Callback, ConversationContext


class CookAlongAction(Action):
    """Starts or navigates the conversation's cooking session.

    Always applicable: an existing recipe is enough, and without one the
    session manager tries to generate one.
    """

    name = "COOK_ALONG"
    failure_prefix = "Sorry, something went wrong with the cook-along"

    async def run(self, context: ConversationContext, callback: Callback | None) -> ActionResult:
        outcome = await self.services.sessions.handle(
            context.conversation_id, context.text, notify=callback
        )
        if not outcome.success:
            return ActionResult.failure(outcome.text, **outcome.data)
        return ActionResult(success=True, text=outcome.text, data=outcome.data)
