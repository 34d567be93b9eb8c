# tagbot/services/channel.py

from typing import TYPE_CHECKING, Any, Callable, Optional

from tagbot.schemas.bot_schema import ConnectResult

if TYPE_CHECKING:
    from tagbot.bot import Bot
    from tagbot.infrastructure.transport import TransportSocket


class Channel:
    """
    Base class for the bot's connection targets (game, group, joiner).
    
    Subclasses provide:
    - `name`, used for the "<name>-connected" bus event
    - `default_address()`, the address used when connect() gets none
    - `register_listeners(bot)`, called once the socket is stored
    """
    
    name: str = "channel"
    
    def __init__(self, bot: "Bot"):
        self.bot = bot
        self.socket: Optional["TransportSocket"] = None
        # Set while a connect attempt is between the precondition check and its outcome
        self.connecting = False
    
    @property
    def connected(self) -> bool:
        return self.socket is not None and self.socket.connected
    
    @property
    def connected_event(self) -> str:
        return f"{self.name}-connected"
    
    def default_address(self) -> Optional[str]:
        raise NotImplementedError
    
    async def register_listeners(self, bot: "Bot") -> None:
        raise NotImplementedError
    
    async def connect(
        self,
        address: Optional[str] = None,
        callback: Optional[Callable[[Optional[Exception], Any], Any]] = None
    ) -> ConnectResult:
        """Connect this channel through the bot's connection controller"""
        return await self.bot.controller.connect(self, address, callback)
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} connected={self.connected}>"
