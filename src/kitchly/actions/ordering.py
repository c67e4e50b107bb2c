"""Best-effort order link creation for recipe and plan actions."""

from collections.abc import Awaitable, Callable

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from kitchly.errors import NetworkError, OrderTimeoutError, ValidationError
from kitchly.logging_config import get_logger
from kitchly.schemas import OrderResponse

logger = get_logger(__name__)

ORDERING_UNAVAILABLE = "Grocery ordering is currently unavailable, so there's no Instacart link this time."


def is_transient(exc: BaseException) -> bool:
    """Connection failures and 5xx responses are worth one more try; timeouts are not."""
    if not isinstance(exc, NetworkError) or isinstance(exc, OrderTimeoutError):
        return False
    return exc.status_code is None or exc.status_code >= 500


async def create_order_link(
    create: Callable[[], Awaitable[OrderResponse]],
    attempts: int = 1,
    backoff: float = 0.5,
) -> str | None:
    """
    Run an order-link request, downgrading failures to a warning.

    Args:
        create: Zero-argument coroutine factory performing the request.
        attempts: Total attempts for transient failures.
        backoff: Base wait between attempts in seconds.

    Returns:
        The order link URL, or None if it could not be created.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        retry=retry_if_exception(is_transient),
        wait=wait_exponential(multiplier=backoff, max=5),
        reraise=True,
    )
    try:
        async for attempt in retrying:
            with attempt:
                response = await create()
    except ValidationError as e:
        logger.warning(f"Order request rejected before sending: {e}")
        return None
    except NetworkError as e:
        logger.warning(f"Failed to create order link: {e}")
        return None
    return response.order_link_url
