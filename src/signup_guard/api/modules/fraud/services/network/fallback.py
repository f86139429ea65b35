import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

logger = logging.getLogger(__name__)

P = TypeVar("P")
T = TypeVar("T")


async def attempt_in_order(
    providers: Sequence[P],
    attempt: Callable[[P], Awaitable[T | None]],
    timeout_seconds: float,
    label: str,
) -> T | None:
    """Try each provider in turn until one yields a value.

    Each attempt is bounded by ``timeout_seconds``. A timeout, an exception or
    a ``None`` result moves on to the next provider. Returns ``None`` when every
    provider fails. Attempts are strictly sequential.
    """
    for provider in providers:
        try:
            async with asyncio.timeout(timeout_seconds):
                result = await attempt(provider)
        except TimeoutError:
            logger.warning("%s provider timed out", label, extra={"provider": str(provider)})
            continue
        except Exception as exc:  # noqa: BLE001
            logger.warning("%s provider failed", label, extra={"provider": str(provider)})
            logger.debug("%s lookup via %s failed: %s", label, provider, exc)
            continue

        if result is not None:
            return result
        logger.warning("%s provider returned no value", label, extra={"provider": str(provider)})

    logger.warning("All %s providers failed", label)
    return None


__all__ = ("attempt_in_order",)
