"""Cook-along session handling."""

from kitchly.cook.navigation import (
    NavCommand,
    Transition,
    apply_command,
    clamp_session,
    classify_command,
    parse_inference_reply,
)
from kitchly.cook.session import CookAlongOutcome, CookAlongSessionManager

__all__ = [
    "CookAlongOutcome",
    "CookAlongSessionManager",
    "NavCommand",
    "Transition",
    "apply_command",
    "clamp_session",
    "classify_command",
    "parse_inference_reply",
]
