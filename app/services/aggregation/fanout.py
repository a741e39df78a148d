import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger

R = TypeVar("R")


@dataclass
class AdapterOutcome(Generic[R]):
    """What one adapter contributed to a fan-out. ``error`` is set when it failed."""

    adapter: str
    result: R
    error: str | None = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class FanOutCoordinator:
    """
    Issues one logical request to many adapters concurrently.

    At most ``max_concurrency`` adapter calls of a single fan-out are in flight;
    the rest wait for a free slot. Each call is bounded by ``timeout`` once it
    holds a slot. Any failure is logged and downgraded to that adapter's empty
    result, so siblings are never cancelled and the caller never sees the error.
    The fan-out returns only after every adapter has settled.
    """

    def __init__(self, max_concurrency: int = 5, timeout: float = 30.0):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.max_concurrency = max_concurrency
        self.timeout = timeout

    async def fan_out(
        self,
        request_kind: str,
        adapters: Sequence[Any],
        call: Callable[[Any], Awaitable[R]],
        default: Callable[[], R] = list,
        context: str = "",
    ) -> list[AdapterOutcome[R]]:
        if not adapters:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _invoke(adapter: Any) -> AdapterOutcome[R]:
            name = getattr(adapter, "name", repr(adapter))
            async with semaphore:
                started = time.perf_counter()
                try:
                    result = await asyncio.wait_for(call(adapter), timeout=self.timeout)
                except asyncio.TimeoutError:
                    elapsed = time.perf_counter() - started
                    logger.warning(f"{request_kind} timed out in {name} after {self.timeout}s {context}".rstrip())
                    return AdapterOutcome(name, default(), error=f"timeout after {self.timeout}s", elapsed=elapsed)
                except Exception as e:
                    elapsed = time.perf_counter() - started
                    logger.warning(f"{request_kind} error in {name} {context}: {e!r}")
                    return AdapterOutcome(name, default(), error=repr(e), elapsed=elapsed)

            elapsed = time.perf_counter() - started
            return AdapterOutcome(name, default() if result is None else result, elapsed=elapsed)

        outcomes = await asyncio.gather(*(_invoke(adapter) for adapter in adapters))

        failed = [o.adapter for o in outcomes if not o.ok]
        logger.info(
            f"{request_kind}: {len(outcomes) - len(failed)}/{len(outcomes)} adapters succeeded"
            + (f" (failed: {', '.join(failed)})" if failed else "")
        )
        return list(outcomes)


def collect(outcomes: Sequence[AdapterOutcome[list]]) -> list[list]:
    """Per-adapter result lists, in adapter order, failures included as empty lists."""
    return [list(outcome.result) for outcome in outcomes]
