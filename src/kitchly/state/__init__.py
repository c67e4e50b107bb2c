"""Per-conversation kitchen state."""

from kitchly.state.store import KitchenContextStore, create_redis_client
from kitchly.state.summary import render_kitchen_summary, summary_values

__all__ = [
    "KitchenContextStore",
    "create_redis_client",
    "render_kitchen_summary",
    "summary_values",
]
