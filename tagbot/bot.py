# tagbot/bot.py

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional, Set

from tagbot.config.settings import Settings, settings as default_settings
from tagbot.infrastructure.event_bus import EventBus
from tagbot.infrastructure.host_client import HostClient
from tagbot.infrastructure.transport import Transport
from tagbot.services.connection_controller import ConnectionController
from tagbot.services.game_channel import GameChannel
from tagbot.services.group_channel import GroupChannel
from tagbot.services.joiner_channel import JoinerChannel
from tagbot.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class Bot:
    """
    Game bot holding the joiner, group and game channels.
    
    Usage:
        bot = Bot(hostname="tagpro-radius.koalabeast.com", room="abc123")
        bot.on("error", handle_error)
        result = await bot.group.connect()
    
    Bot-wide events published on `bot.bus`:
    - error(err)
    - session(session)
    - game-connected(socket), group-connected(socket), joiner-connected(socket)
    - game-update(name, value), group-update(name, value)
    """
    
    def __init__(
        self,
        hostname: Optional[str] = None,
        session: Optional[str] = None,
        room: Optional[str] = None,
        location: Optional[str] = None,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None,
        host_client: Optional[HostClient] = None,
        bus: Optional[EventBus] = None
    ):
        self.settings = settings or default_settings
        self.hostname = hostname or self.settings.HOSTNAME
        
        self.bus = bus or EventBus()
        self.host_client = host_client or HostClient(self.settings)
        self.transport = transport or Transport(self.settings)
        self.sessions = SessionManager(
            self.host_client,
            self.bus,
            self.hostname,
            session=session or self.settings.SESSION
        )
        self.controller = ConnectionController(self, self.transport)
        
        self.game = GameChannel(self)
        self.group = GroupChannel(
            self,
            room=room or self.settings.ROOM,
            location=location or self.settings.LOCATION
        )
        self.joiner = JoinerChannel(self)
        
        # Fire-and-forget work (leave notifications) kept alive until done
        self._tasks: Set[asyncio.Task] = set()
    
    @property
    def session(self) -> Optional[str]:
        return self.sessions.session
    
    @session.setter
    def session(self, value: Optional[str]) -> None:
        self.sessions.replace(value)
    
    @property
    def channels(self):
        return (self.joiner, self.group, self.game)
    
    def on(self, event: str, handler: Callable[..., Any]) -> Callable[..., Any]:
        """Subscribe to a bot-wide event"""
        return self.bus.register(event, handler)
    
    def spawn(self, coro: Coroutine[Any, Any, Any], name: Optional[str] = None) -> asyncio.Task:
        """Run a coroutine in the background without awaiting it"""
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task
    
    async def close(self) -> None:
        """Disconnect every channel and wait for pending background work"""
        for channel in self.channels:
            if channel.connected:
                logger.info(f"Closing {channel.name} channel")
                try:
                    await channel.socket.disconnect()
                except Exception as e:
                    logger.warning(f"Error closing {channel.name} channel: {e}")
        
        self.group.heartbeat.cancel()
        
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
    
    def __repr__(self) -> str:
        return f"<Bot {self.hostname} room={self.group.room}>"
