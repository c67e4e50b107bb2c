"""Tests for the cook-along session manager."""

from unittest.mock import AsyncMock

import pytest

from kitchly.cook import CookAlongSessionManager
from kitchly.cook.session import (
    BROKEN_SESSION,
    COULD_NOT_START,
    GENERATING_NOTICE,
    UNCLEAR_COMMAND,
)
from kitchly.generate import RecipeAndPlanGenerator
from kitchly.schemas import CookingSession, Recipe

CID = "conv-cook"


def make_manager(store, inference=None) -> CookAlongSessionManager:
    generator = RecipeAndPlanGenerator(inference) if inference is not None else None
    return CookAlongSessionManager(store, generator=generator, inference=inference)


class TestStartSession:
    """Tests for starting a cooking session."""

    @pytest.mark.asyncio
    async def test_start_with_current_recipe(self, store, sample_recipe):
        """Test an existing recipe is reused without generation."""
        await store.merge(CID, {"current_recipe": sample_recipe})
        manager = make_manager(store)

        outcome = await manager.handle(CID, "let's cook")

        assert outcome.success
        assert "Let's cook Pancakes!" in outcome.text
        assert "Step 1 of 5:" in outcome.text
        assert outcome.data["session_started"] is True

        state = await store.get(CID)
        assert state.cooking_session.current_step == 0
        assert state.cooking_session.recipe == sample_recipe

    @pytest.mark.asyncio
    async def test_start_generates_recipe(self, store, scripted_inference, llm_recipe_reply):
        """Test a recipe is generated when none is loaded."""
        inference = scripted_inference(llm_recipe_reply)
        notify = AsyncMock()

        outcome = await make_manager(store, inference).handle(CID, "cook garlic pasta", notify)

        assert outcome.success
        notify.assert_awaited_once_with(GENERATING_NOTICE)
        assert "ideal for voice reading" in inference.calls[0][0]

        state = await store.get(CID)
        assert state.current_recipe.title == "Garlic Butter Pasta"
        assert state.cooking_session.recipe.title == "Garlic Butter Pasta"

    @pytest.mark.asyncio
    async def test_generation_failure(self, store, scripted_inference):
        """Test unusable model output reports that cooking could not start."""
        inference = scripted_inference("no recipe here")

        outcome = await make_manager(store, inference).handle(CID, "cook something")

        assert not outcome.success
        assert outcome.text == COULD_NOT_START
        state = await store.get(CID)
        assert state.cooking_session is None
        assert state.current_recipe is None

    @pytest.mark.asyncio
    async def test_no_recipe_and_no_generator(self, store):
        """Test starting without a recipe or generator fails gracefully."""
        outcome = await make_manager(store).handle(CID, "start")
        assert not outcome.success
        assert outcome.text == COULD_NOT_START

    @pytest.mark.asyncio
    async def test_recipe_without_steps_is_replaced(
        self, store, scripted_inference, llm_recipe_reply
    ):
        """Test a stored recipe with no steps is regenerated."""
        await store.merge(CID, {"current_recipe": Recipe(title="Stub")})
        inference = scripted_inference(llm_recipe_reply)

        outcome = await make_manager(store, inference).handle(CID, "start")

        assert outcome.success
        assert (await store.get(CID)).current_recipe.title == "Garlic Butter Pasta"


class TestNavigateSession:
    """Tests for navigating an active session."""

    @pytest.mark.asyncio
    async def test_next_persists_step(self, store, make_session):
        """Test NEXT at step 2 of 5 shows step 4 and persists index 3."""
        await store.merge(CID, {"cooking_session": make_session(2)})

        outcome = await make_manager(store).handle(CID, "next")

        assert outcome.text.startswith("Step 4 of 5:")
        assert (await store.get(CID)).cooking_session.current_step == 3

    @pytest.mark.asyncio
    async def test_next_at_last_step_clears_session(self, store, make_session, sample_recipe):
        """Test finishing the last step removes the session but keeps the recipe."""
        await store.merge(
            CID, {"current_recipe": sample_recipe, "cooking_session": make_session(4)}
        )

        outcome = await make_manager(store).handle(CID, "next")

        assert outcome.success
        assert "complete" in outcome.text
        state = await store.get(CID)
        assert state.cooking_session is None
        assert state.current_recipe == sample_recipe

    @pytest.mark.asyncio
    async def test_done_ends_from_anywhere(self, store, make_session):
        """Test DONE clears the session regardless of step."""
        await store.merge(CID, {"cooking_session": make_session(1)})

        outcome = await make_manager(store).handle(CID, "I'm done")

        assert outcome.data == {"finished": True}
        assert (await store.get(CID)).cooking_session is None

    @pytest.mark.asyncio
    async def test_repeat_does_not_write(self, store, make_session):
        """Test REPEAT leaves the stored record untouched."""
        await store.merge(CID, {"cooking_session": make_session(1)})
        store.merge = AsyncMock(wraps=store.merge)

        first = await make_manager(store).handle(CID, "repeat")
        second = await make_manager(store).handle(CID, "repeat")

        assert first.text == second.text
        store.merge.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_out_of_range_step_is_clamped(self, store, make_session):
        """Test a corrupt stored step is clamped and written back."""
        await store.merge(CID, {"cooking_session": make_session(42)})

        outcome = await make_manager(store).handle(CID, "repeat")

        assert outcome.text.startswith("Step 5 of 5:")
        assert (await store.get(CID)).cooking_session.current_step == 4

    @pytest.mark.asyncio
    async def test_session_without_steps_is_cleared(self, store):
        """Test an unusable session is ended with an explanation."""
        await store.merge(CID, {"cooking_session": CookingSession(recipe=Recipe(title="Empty"))})

        outcome = await make_manager(store).handle(CID, "next")

        assert not outcome.success
        assert outcome.text == BROKEN_SESSION
        assert (await store.get(CID)).cooking_session is None


class TestInferenceFallback:
    """Tests for utterances outside the command vocabulary."""

    @pytest.mark.asyncio
    async def test_unclear_without_inference(self, store, make_session):
        """Test unrecognised text without inference asks for a command."""
        await store.merge(CID, {"cooking_session": make_session(1)})

        outcome = await make_manager(store).handle(CID, "hmm the pan is smoking")

        assert outcome.text == UNCLEAR_COMMAND
        assert (await store.get(CID)).cooking_session.current_step == 1

    @pytest.mark.asyncio
    async def test_inference_command_is_applied(self, store, make_session, scripted_inference):
        """Test a vocabulary reply from the small model drives navigation."""
        await store.merge(CID, {"cooking_session": make_session(1)})
        inference = scripted_inference("NEXT")

        outcome = await make_manager(store, inference).handle(CID, "alright the batter is resting")

        assert outcome.text.startswith("Step 3 of 5:")
        prompt, size = inference.calls[0]
        assert size == "small"
        assert "Whisk the wet ingredients." in prompt
        assert (await store.get(CID)).cooking_session.current_step == 2

    @pytest.mark.asyncio
    async def test_inference_answer_is_returned(self, store, make_session, scripted_inference):
        """Test a free-text reply is returned and the step is unchanged."""
        await store.merge(CID, {"cooking_session": make_session(3)})
        inference = scripted_inference("Medium heat, about 350 degrees.")

        outcome = await make_manager(store, inference).handle(CID, "how hot should the pan be")

        assert outcome.success
        assert outcome.text == "Medium heat, about 350 degrees."
        assert outcome.data == {"current_step": 3, "total_steps": 5}
        assert (await store.get(CID)).cooking_session.current_step == 3
