# tagbot/services/session_manager.py

import asyncio
import logging
from typing import Optional

from tagbot.infrastructure.event_bus import EventBus
from tagbot.infrastructure.host_client import HostClient

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Obtains and caches the single session token shared by every channel.
    
    The token is acquired at most once; concurrent callers wait on the
    same acquisition. A failed acquisition is not retried here, the next
    caller simply tries again.
    """
    
    SESSION_EVENT = "session"
    
    def __init__(self, host_client: HostClient, bus: EventBus, hostname: Optional[str], session: Optional[str] = None):
        self.host_client = host_client
        self.bus = bus
        self.hostname = hostname
        self.session = session
        self._lock = asyncio.Lock()
    
    def replace(self, session: Optional[str]) -> None:
        """Swap the cached session wholesale (None forces re-acquisition)"""
        self.session = session
    
    async def get_session(self) -> str:
        """
        Return the cached session, acquiring it from the host on first use
        
        Raises:
            SessionError: Acquisition failed
        """
        if self.session is not None:
            return self.session
        
        async with self._lock:
            if self.session is None:
                logger.info(f"Acquiring session from {self.hostname}")
                session = await self.host_client.get_session(self.hostname)
                self.session = session
                self.bus.publish(self.SESSION_EVENT, session)
        
        return self.session
