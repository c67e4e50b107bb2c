"""Tests for cook-along command classification and transitions."""

import pytest

from kitchly.cook import (
    NavCommand,
    apply_command,
    clamp_session,
    classify_command,
    parse_inference_reply,
)
from kitchly.errors import SessionStateError
from kitchly.formatting import progress_percent
from kitchly.schemas import Recipe


class TestClassifyCommand:
    """Tests for utterance classification."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("next", NavCommand.NEXT),
            ("What's next?", NavCommand.NEXT),
            ("ok got it", NavCommand.NEXT),
            ("go back please", NavCommand.PREVIOUS),
            ("can you repeat that", NavCommand.REPEAT),
            ("say that again", NavCommand.REPEAT),
            ("I'm done", NavCommand.DONE),
            ("let's cook", NavCommand.START),
            ("where am I?", NavCommand.STATUS),
            ("what do I need", NavCommand.INGREDIENTS),
            ("how long should the butter brown?", NavCommand.NONE),
        ],
    )
    def test_classification(self, text, expected):
        """Test representative utterances map to their commands."""
        assert classify_command(text) is expected

    def test_done_wins_over_next(self):
        """Test earlier commands take precedence when several match."""
        assert classify_command("okay, done") is NavCommand.DONE

    def test_curly_apostrophe(self):
        """Test typographic apostrophes are normalized."""
        assert classify_command("what’s next") is NavCommand.NEXT

    def test_word_boundaries(self):
        """Test commands are not matched inside other words."""
        assert classify_command("the backend of the oven") is NavCommand.NONE


class TestParseInferenceReply:
    """Tests for the closed-vocabulary inference reply."""

    @pytest.mark.parametrize(
        "reply,expected",
        [
            ("NEXT", NavCommand.NEXT),
            (' "previous". ', NavCommand.PREVIOUS),
            ("Repeat!", NavCommand.REPEAT),
            ("DONE", NavCommand.DONE),
        ],
    )
    def test_vocabulary(self, reply, expected):
        """Test vocabulary words map to commands."""
        assert parse_inference_reply(reply) is expected

    def test_free_text(self):
        """Test anything else is a free-text answer."""
        assert parse_inference_reply("Brown it for about 3 minutes.") is None


class TestClampSession:
    """Tests for step clamping."""

    def test_in_range_unchanged(self, make_session):
        """Test valid sessions are returned as-is."""
        session = make_session(3)
        assert clamp_session(session) is session

    @pytest.mark.parametrize("step,expected", [(-4, 0), (5, 4), (99, 4)])
    def test_out_of_range_clamped(self, make_session, step, expected):
        """Test stored steps outside the recipe are clamped."""
        assert clamp_session(make_session(step)).current_step == expected

    def test_no_steps_raises(self, make_session):
        """Test a session over a recipe without steps is unusable."""
        with pytest.raises(SessionStateError):
            clamp_session(make_session(0, recipe=Recipe(title="Empty")))


class TestApplyCommand:
    """Tests for the pure transition function."""

    def test_next_advances(self, make_session):
        """Test NEXT at step 2 of 5 moves to step 3 (index 2 to 3)."""
        transition = apply_command(make_session(2), NavCommand.NEXT)

        assert transition.session.current_step == 3
        assert transition.persist is True
        assert transition.text.startswith("Step 4 of 5:")

    def test_next_at_last_step_ends(self, make_session):
        """Test NEXT on the final step completes the session."""
        transition = apply_command(make_session(4), NavCommand.NEXT)

        assert transition.ended
        assert transition.persist is True
        assert "Pancakes is complete" in transition.text

    def test_previous_at_first_step_stays(self, make_session):
        """Test PREVIOUS never goes below step 0."""
        transition = apply_command(make_session(0), NavCommand.PREVIOUS)
        assert transition.session.current_step == 0
        assert transition.text.startswith("Step 1 of 5:")

    def test_previous_moves_back(self, make_session):
        transition = apply_command(make_session(3), NavCommand.PREVIOUS)
        assert transition.session.current_step == 2

    def test_repeat_is_idempotent(self, make_session):
        """Test REPEAT neither moves nor persists."""
        session = make_session(1)
        first = apply_command(session, NavCommand.REPEAT)
        second = apply_command(first.session, NavCommand.REPEAT)

        assert first.session is session
        assert second.session is session
        assert first.text == second.text == "Step 2 of 5: Whisk the wet ingredients."
        assert first.persist is False

    @pytest.mark.parametrize("step", [0, 2, 4])
    def test_done_always_ends(self, make_session, step):
        """Test DONE ends the session from any step."""
        transition = apply_command(make_session(step), NavCommand.DONE)
        assert transition.ended
        assert "Cooking session ended for Pancakes" in transition.text

    def test_start_restarts(self, make_session):
        """Test START resets to the first step and unpauses."""
        transition = apply_command(make_session(3, is_paused=True), NavCommand.START)

        assert transition.session.current_step == 0
        assert transition.session.is_paused is False
        assert transition.text.startswith("Restarting Pancakes from the beginning.")

    def test_status(self, make_session):
        """Test STATUS reports progress without moving."""
        transition = apply_command(make_session(1), NavCommand.STATUS)

        assert transition.session.current_step == 1
        assert transition.data == {"current": 2, "total": 5, "percent": 40, "paused": False}
        assert "step 2 of 5" in transition.text

    def test_ingredients(self, make_session):
        """Test INGREDIENTS lists the recipe's ingredients."""
        transition = apply_command(make_session(1), NavCommand.INGREDIENTS)
        assert "2 cups flour" in transition.text
        assert transition.persist is False

    def test_none_is_not_a_transition(self, make_session):
        """Test NONE must be resolved before applying."""
        with pytest.raises(ValueError):
            apply_command(make_session(0), NavCommand.NONE)

    @pytest.mark.parametrize("command", [c for c in NavCommand if c is not NavCommand.NONE])
    @pytest.mark.parametrize("step", range(5))
    def test_step_stays_in_bounds(self, make_session, command, step):
        """Test every transition leaves the step inside the recipe."""
        transition = apply_command(make_session(step), command)
        if transition.session is not None:
            assert 0 <= transition.session.current_step < 5


class TestProgressPercent:
    """Tests for progress rounding."""

    @pytest.mark.parametrize(
        "current,total,expected",
        [(1, 3, 33), (2, 3, 67), (1, 8, 13), (3, 8, 38), (5, 5, 100), (0, 0, 0)],
    )
    def test_rounds_half_up(self, current, total, expected):
        assert progress_percent(current, total) == expected
