"""Minimum busy-duration gate around asynchronous operations"""
import asyncio
import inspect
import logging
import time
from typing import Any, Awaitable, Callable, List, Optional

from ..config import DEFAULT_MIN_DURATION_MS

logger = logging.getLogger(__name__)

BusyListener = Callable[[bool], None]


class LoadingGate:
    """Keeps a busy signal asserted for at least a minimum duration
    
    The busy flag is raised before the operation starts and lowered no
    earlier than min_duration_ms after the start, and no later than
    max(operation duration, min_duration_ms). Failures propagate only after
    the minimum duration has elapsed. There are no retries and no timeout.
    """
    
    def __init__(
        self,
        min_duration_ms: int = DEFAULT_MIN_DURATION_MS,
        clock: Optional[Callable[[], float]] = None,
        sleep: Optional[Callable[[float], Awaitable[Any]]] = None
    ):
        """Initialize loading gate
        
        Args:
            min_duration_ms: Default minimum busy duration in milliseconds
            clock: Monotonic clock returning seconds (defaults to time.monotonic)
            sleep: Coroutine function sleeping for seconds (defaults to asyncio.sleep)
        """
        if min_duration_ms < 0:
            raise ValueError(f"min_duration_ms must be >= 0, got {min_duration_ms}")
        self.min_duration_ms = min_duration_ms
        self._clock = clock or time.monotonic
        self._sleep = sleep or asyncio.sleep
        self._active = 0
        self._listeners: List[BusyListener] = []
    
    @property
    def busy(self) -> bool:
        """Whether a gated operation is in progress"""
        return self._active > 0
    
    def add_listener(self, listener: BusyListener) -> None:
        """Register listener called with the busy flag whenever it changes"""
        if listener not in self._listeners:
            self._listeners.append(listener)
    
    def remove_listener(self, listener: BusyListener) -> None:
        """Deregister busy listener"""
        if listener in self._listeners:
            self._listeners.remove(listener)
    
    def _set_active(self, delta: int) -> None:
        was_busy = self.busy
        self._active += delta
        if self.busy != was_busy:
            for listener in list(self._listeners):
                listener(self.busy)
    
    async def run_gated(
        self,
        operation: Callable[[], Any],
        min_duration_ms: Optional[int] = None
    ) -> Any:
        """Run operation with the busy signal asserted
        
        Args:
            operation: Zero-argument callable returning a value or awaitable
            min_duration_ms: Minimum busy duration, defaults to the gate's
            
        Returns:
            The operation's result
            
        Raises:
            Exception: Whatever the operation raised, after the minimum duration
        """
        minimum_ms = self.min_duration_ms if min_duration_ms is None else min_duration_ms
        
        self._set_active(1)
        try:
            started_at = self._clock()
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
            finally:
                elapsed_ms = (self._clock() - started_at) * 1000
                remaining_ms = minimum_ms - elapsed_ms
                if remaining_ms > 0:
                    logger.debug(f"Holding busy signal for another {remaining_ms:.0f}ms")
                    await self._sleep(remaining_ms / 1000)
        finally:
            self._set_active(-1)
        
        return result
