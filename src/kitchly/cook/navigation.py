"""Navigation commands and the pure cook-along transition function.

Text is first classified into a closed set of commands; transitions are
then a function of (session, command) only, with no I/O.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from kitchly.errors import SessionStateError
from kitchly.formatting import format_ingredients, format_status, format_step, progress_percent
from kitchly.schemas import CookingSession


class NavCommand(str, Enum):
    """Navigation commands understood during a cooking session."""

    DONE = "done"
    NEXT = "next"
    PREVIOUS = "previous"
    REPEAT = "repeat"
    START = "start"
    STATUS = "status"
    INGREDIENTS = "ingredients"
    NONE = "none"


# Checked in order; first match wins ("okay, done" is DONE, not NEXT).
_COMMAND_PATTERNS: list[tuple[NavCommand, re.Pattern[str]]] = [
    (NavCommand.DONE, re.compile(r"\b(done|finish|stop|end|exit|quit)\b")),
    (NavCommand.NEXT, re.compile(r"\b(next|continue|go on|move on|what'?s next|okay|ok|got it)\b")),
    (NavCommand.PREVIOUS, re.compile(r"\b(previous|prev|back|go back|last step)\b")),
    (NavCommand.REPEAT, re.compile(r"\b(repeat|again|say that again|one more time|what was that)\b")),
    (NavCommand.START, re.compile(r"\b(start|begin|let'?s go|let'?s cook|let'?s start|ready)\b")),
    (NavCommand.STATUS, re.compile(r"\b(where am i|what step|status|progress|how far)\b")),
    (NavCommand.INGREDIENTS, re.compile(r"\b(ingredients|what do i need|shopping list|supplies)\b")),
]

# Replies the inference fallback may give instead of free text
INFERENCE_VOCABULARY: dict[str, NavCommand] = {
    "NEXT": NavCommand.NEXT,
    "PREVIOUS": NavCommand.PREVIOUS,
    "REPEAT": NavCommand.REPEAT,
    "DONE": NavCommand.DONE,
}


def classify_command(text: str) -> NavCommand:
    """Classify an utterance into a navigation command."""
    normalized = text.lower().strip().replace("’", "'")
    for command, pattern in _COMMAND_PATTERNS:
        if pattern.search(normalized):
            return command
    return NavCommand.NONE


def parse_inference_reply(reply: str) -> NavCommand | None:
    """Map a closed-vocabulary reply to a command; None means free text."""
    token = reply.strip().strip("\"'.!").upper()
    return INFERENCE_VOCABULARY.get(token)


@dataclass(frozen=True)
class Transition:
    """Result of applying a command to a session."""

    session: CookingSession | None
    text: str
    persist: bool = False
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ended(self) -> bool:
        return self.session is None


def clamp_session(session: CookingSession) -> CookingSession:
    """
    Clamp a stored session's step into range.

    Raises:
        SessionStateError: If the session's recipe has no steps at all.
    """
    total = session.total_steps
    if total == 0:
        raise SessionStateError(f'Cooking session for "{session.recipe.title}" has no steps.')
    step = min(max(session.current_step, 0), total - 1)
    if step == session.current_step:
        return session
    return session.model_copy(update={"current_step": step})


def _move_to(session: CookingSession, step: int, **updates: Any) -> Transition:
    moved = session.model_copy(update={"current_step": step, **updates})
    return Transition(
        session=moved,
        text=format_step(session.recipe, step),
        persist=True,
        data={"current_step": step, "total_steps": session.total_steps},
    )


def _stay(session: CookingSession, text: str, **data: Any) -> Transition:
    return Transition(session=session, text=text, data=data)


def _end(text: str) -> Transition:
    return Transition(session=None, text=text, persist=True, data={"finished": True})


def apply_command(session: CookingSession, command: NavCommand) -> Transition:
    """
    Apply a navigation command to an active session.

    Args:
        session: Active session with a step already in range.
        command: Any command except NONE.

    Returns:
        The transition; ``session`` is None when the session ended.
    """
    total = session.total_steps
    step = session.current_step
    title = session.recipe.title

    if command is NavCommand.NEXT:
        if step + 1 >= total:
            return _end(f"That was the last step! Your {title} is complete. Enjoy your meal!")
        return _move_to(session, step + 1)

    if command is NavCommand.PREVIOUS:
        return _move_to(session, max(0, step - 1))

    if command is NavCommand.REPEAT:
        return _stay(session, format_step(session.recipe, step), current_step=step, total_steps=total)

    if command is NavCommand.DONE:
        return _end(f"Cooking session ended for {title}. Great job!")

    if command is NavCommand.STATUS:
        return _stay(
            session,
            format_status(session),
            current=step + 1,
            total=total,
            percent=progress_percent(step + 1, total),
            paused=session.is_paused,
        )

    if command is NavCommand.INGREDIENTS:
        return _stay(session, format_ingredients(session.recipe))

    if command is NavCommand.START:
        restarted = _move_to(session, 0, is_paused=False)
        return Transition(
            session=restarted.session,
            text=f"Restarting {title} from the beginning.\n\n{restarted.text}",
            persist=True,
            data=restarted.data,
        )

    raise ValueError(f"Command {command!r} has no direct transition")
