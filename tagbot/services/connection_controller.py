# tagbot/services/connection_controller.py

import inspect
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from tagbot.exceptions.bot_exceptions import (
    AlreadyConnectedError,
    BotException,
    SocketError,
)
from tagbot.infrastructure.transport import Transport
from tagbot.schemas.bot_schema import ConnectResult

if TYPE_CHECKING:
    from tagbot.bot import Bot
    from tagbot.services.channel import Channel

logger = logging.getLogger(__name__)

Callback = Callable[[Optional[Exception], Any], Any]


class ConnectionController:
    """
    Generic connector shared by all channels.
    
    Enforces one live socket per channel, makes sure a session exists,
    opens the transport and wires the channel's listeners once the
    connection is up.
    
    Every failure is delivered three ways: the bot-wide "error" event, the
    optional callback, and the returned ConnectResult. Nothing is raised.
    """
    
    ERROR_EVENT = "error"
    
    def __init__(self, bot: "Bot", transport: Transport):
        self.bot = bot
        self.transport = transport
    
    async def connect(
        self,
        channel: "Channel",
        address: Optional[str] = None,
        callback: Optional[Callback] = None
    ) -> ConnectResult:
        """
        Connect a channel
        
        Args:
            channel: Channel to connect
            address: Address override, defaults to channel.default_address()
            callback: Optional callback(error, socket), plain or coroutine function
            
        Returns:
            ConnectResult with either the socket or the error
        """
        if channel.connected or channel.connecting:
            state = "live" if channel.connected else "pending"
            logger.warning(f"Connect on {channel.name} channel rejected: {state} connection")
            return await self._fail(AlreadyConnectedError(channel.name, details={"state": state}), callback)
        
        address = address or channel.default_address()
        if not address:
            return await self._fail(
                SocketError(f"No address available for {channel.name} channel", address=address),
                callback
            )
        
        channel.connecting = True
        try:
            try:
                session = await self.bot.sessions.get_session()
                socket = await self.transport.open(address, session)
            except BotException as e:
                return await self._fail(e, callback)
            
            channel.socket = socket
        finally:
            channel.connecting = False
        
        logger.info(f"{channel.name} channel connected to {address}")
        self.bot.bus.publish(channel.connected_event, socket)
        
        # Listeners go on only after the socket is stored and announced
        await channel.register_listeners(self.bot)
        # Replay anything the server pushed before the handlers existed
        await socket.flush()
        
        await self._invoke_callback(callback, None, socket)
        return ConnectResult(socket=socket)
    
    async def _fail(self, error: Exception, callback: Optional[Callback]) -> ConnectResult:
        self.bot.bus.publish(self.ERROR_EVENT, error)
        await self._invoke_callback(callback, error, None)
        return ConnectResult(error=error)
    
    @staticmethod
    async def _invoke_callback(callback: Optional[Callback], error: Optional[Exception], socket: Any) -> None:
        if callback is None:
            return
        try:
            result = callback(error, socket)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Error in connect callback")
