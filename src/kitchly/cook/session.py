"""Cook-along session manager.

Owns the active cooking session of each conversation: starts sessions
(reusing the current recipe or generating one), routes navigation through
the pure transition function and persists the result.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

from kitchly.cook.navigation import (
    NavCommand,
    Transition,
    apply_command,
    clamp_session,
    classify_command,
    parse_inference_reply,
)
from kitchly.errors import GenerationError, SessionStateError, ValidationError
from kitchly.formatting import format_session_intro
from kitchly.generate import RecipeAndPlanGenerator
from kitchly.generate.prompts import NAVIGATION_PROMPT
from kitchly.llm import InferenceClient
from kitchly.logging_config import get_logger
from kitchly.schemas import CookingSession, KitchenState, Recipe
from kitchly.state import KitchenContextStore

logger = get_logger(__name__)

Notify = Callable[[str], Awaitable[None]]

GENERATING_NOTICE = "I don't have a recipe loaded yet. Let me create one for you first..."
COULD_NOT_START = (
    "I could not generate a recipe from your request. Please try asking for a specific dish "
    "first, then start the cook-along."
)
BROKEN_SESSION = (
    "Your cooking session could not be continued, so I've ended it. "
    "Ask me to start cooking again whenever you're ready."
)
UNCLEAR_COMMAND = (
    'Sorry, I didn\'t catch that. Say "next", "previous", "repeat", or "done".'
)


@dataclass
class CookAlongOutcome:
    """Result of handling one cook-along utterance."""

    success: bool
    text: str
    data: dict[str, Any] = field(default_factory=dict)


class CookAlongSessionManager:
    """State machine over KitchenState.cooking_session."""

    def __init__(
        self,
        store: KitchenContextStore,
        generator: RecipeAndPlanGenerator | None = None,
        inference: InferenceClient | None = None,
    ):
        self.store = store
        self.generator = generator
        self.inference = inference

    async def handle(
        self, conversation_id: str, text: str, notify: Notify | None = None
    ) -> CookAlongOutcome:
        """
        Handle one utterance for a conversation.

        Args:
            conversation_id: Conversation the session belongs to.
            text: Raw user utterance.
            notify: Optional callback for interim messages.

        Returns:
            The outcome to show the user.
        """
        state = await self.store.get(conversation_id)
        if state.cooking_session is not None:
            return await self._navigate(conversation_id, state.cooking_session, text)
        return await self._start(conversation_id, state, text, notify)

    async def _navigate(
        self, conversation_id: str, stored: CookingSession, text: str
    ) -> CookAlongOutcome:
        try:
            session = clamp_session(stored)
        except SessionStateError as e:
            logger.warning(f"Clearing unusable cooking session: {e}")
            await self.store.merge(conversation_id, {"cooking_session": None})
            return CookAlongOutcome(success=False, text=BROKEN_SESSION)

        if session is not stored:
            logger.warning(
                f"Clamped stored step {stored.current_step} to {session.current_step}"
            )

        command = classify_command(text)
        if command is NavCommand.NONE:
            command, answer = await self.interpret_with_inference(session, text)
            if command is None:
                # Free-text answers leave the session as it was (clamping aside)
                await self._persist(conversation_id, stored, session)
                return CookAlongOutcome(
                    success=True,
                    text=answer,
                    data={"current_step": session.current_step, "total_steps": session.total_steps},
                )

        transition = apply_command(session, command)
        logger.info(
            f"Cook-along {command.value}: step {session.current_step + 1}/{session.total_steps}"
            + (" -> ended" if transition.ended else "")
        )
        await self._apply(conversation_id, stored, transition)
        return CookAlongOutcome(success=True, text=transition.text, data=transition.data)

    async def interpret_with_inference(
        self, session: CookingSession, text: str
    ) -> tuple[NavCommand | None, str]:
        """Ask the inference collaborator to interpret an unrecognised utterance."""
        if self.inference is None:
            return None, UNCLEAR_COMMAND

        prompt = NAVIGATION_PROMPT.format(
            title=session.recipe.title,
            step=session.current_step + 1,
            total=session.total_steps,
            instruction=session.recipe.instructions[session.current_step],
            utterance=text,
        )
        reply = (await self.inference.complete(prompt, size="small")).strip()
        command = parse_inference_reply(reply)
        if command is None:
            return None, reply or UNCLEAR_COMMAND
        logger.debug(f"Inference mapped utterance to {command.value}")
        return command, reply

    async def _apply(
        self, conversation_id: str, stored: CookingSession, transition: Transition
    ) -> None:
        if transition.persist:
            await self.store.merge(conversation_id, {"cooking_session": transition.session})
        else:
            await self._persist(conversation_id, stored, transition.session)

    async def _persist(
        self, conversation_id: str, stored: CookingSession, session: CookingSession | None
    ) -> None:
        """Write back a session only when clamping changed it."""
        if session is not None and session is not stored:
            await self.store.merge(conversation_id, {"cooking_session": session})

    async def _start(
        self,
        conversation_id: str,
        state: KitchenState,
        text: str,
        notify: Notify | None,
    ) -> CookAlongOutcome:
        patch: dict[str, Any] = {}
        recipe = state.current_recipe
        if recipe is not None and not recipe.instructions:
            logger.warning(f'Current recipe "{recipe.title}" has no steps; generating a new one')
            recipe = None

        if recipe is None:
            recipe = await self._generate(text, state, notify)
            if recipe is None:
                return CookAlongOutcome(success=False, text=COULD_NOT_START)
            patch["current_recipe"] = recipe

        session = CookingSession(recipe=recipe.model_copy(deep=True))
        patch["cooking_session"] = session
        await self.store.merge(conversation_id, patch)

        logger.info(f'Started cooking session for "{recipe.title}" ({session.total_steps} steps)')
        return CookAlongOutcome(
            success=True,
            text=format_session_intro(recipe),
            data={
                "recipe_title": recipe.title,
                "current_step": 0,
                "total_steps": session.total_steps,
                "session_started": True,
            },
        )

    async def _generate(
        self, text: str, state: KitchenState, notify: Notify | None
    ) -> Recipe | None:
        if self.generator is None:
            logger.warning("No recipe available and generation is disabled")
            return None

        if notify is not None:
            await notify(GENERATING_NOTICE)
        try:
            return await self.generator.generate_recipe(text, state.user_preferences, quick=True)
        except (GenerationError, ValidationError) as e:
            logger.warning(f"Could not generate a recipe for cook-along: {e}")
            return None
