# tagbot/services/heartbeat.py

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class Heartbeat:
    """
    Cancellable recurring task.
    
    Calls `beat` every `interval` seconds until cancelled. Starting a
    heartbeat that is already running cancels the running task first, so
    at most one task exists at a time.
    """
    
    def __init__(self, interval: float, beat: Callable[[], Awaitable[None]], name: str = "heartbeat"):
        self.interval = interval
        self.beat = beat
        self.name = name
        self._task: Optional[asyncio.Task] = None
    
    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()
    
    def start(self) -> None:
        """Start the recurring task, replacing any running one"""
        if self.active:
            logger.debug(f"Restarting {self.name}")
        self.cancel()
        
        self._task = asyncio.create_task(self._run(), name=self.name)
        logger.debug(f"{self.name} started ({self.interval}s)")
    
    def cancel(self) -> bool:
        """
        Stop the recurring task
        
        Returns:
            True if a running task was cancelled, False if there was nothing to cancel
        """
        task, self._task = self._task, None
        if task is None or task.done():
            return False
        
        task.cancel()
        logger.debug(f"{self.name} cancelled")
        return True
    
    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.beat()
            except Exception as e:
                logger.warning(f"{self.name} beat failed: {e}")
