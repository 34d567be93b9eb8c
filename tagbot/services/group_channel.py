# tagbot/services/group_channel.py

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import ValidationError

from tagbot.schemas.bot_schema import PrivacyNotice
from tagbot.services.channel import Channel
from tagbot.services.heartbeat import Heartbeat

if TYPE_CHECKING:
    from tagbot.bot import Bot

logger = logging.getLogger(__name__)


class GroupChannel(Channel):
    """
    Lobby ("group") channel.
    
    Mirrors membership and group settings, keeps the bot's membership alive
    with a periodic "touch", and leaves the group gracefully when the
    connection drops.
    
    Members use whole-record replace: every "member" push overwrites the
    stored record for that id.
    """
    
    name = "group"
    UPDATE_EVENT = "group-update"
    TOUCH_EVENT = "touch"
    
    def __init__(self, bot: "Bot", room: Optional[str] = None, location: str = "page"):
        super().__init__(bot)
        self.self_id: Optional[Any] = None
        self.room = room
        self.members: Dict[Any, Dict[str, Any]] = {}
        
        # Maintained by consumers of the member list
        self.players: Dict[Any, Dict[str, Any]] = {}
        self.spectators: Dict[Any, Dict[str, Any]] = {}
        self.waiting: Dict[Any, Dict[str, Any]] = {}
        
        self.location = location
        self.private = False
        self.max_players = 12
        self.max_spectators = 6
        self.self_assignment = True
        self.settings: Dict[str, Any] = {}  # map, time, speed, etc.
        
        # Guards against the disconnect handler re-entering while it closes the socket
        self._leaving = False
        
        self.heartbeat = Heartbeat(
            bot.settings.HEARTBEAT_INTERVAL_SECONDS,
            self.touch,
            name="group-heartbeat"
        )
    
    def default_address(self) -> Optional[str]:
        return self.bot.settings.group_address(self.bot.hostname, self.room)
    
    async def register_listeners(self, bot: "Bot") -> None:
        socket = self.socket
        socket.on("you", self.on_you)
        socket.on("member", self.on_member)
        socket.on("removed", self.on_removed)
        socket.on("connect", self.on_connect)
        socket.on("private", self.on_private)
        socket.on("disconnect", self.on_disconnect)
        
        # The handshake may already be complete by the time listeners are
        # attached, in which case no "connect" event will follow
        if socket.connected:
            await self.on_connect()
    
    async def touch(self) -> None:
        """Send a liveness touch carrying the bot's location"""
        await self.socket.emit(self.TOUCH_EVENT, self.location)
    
    def on_you(self, member_id: Any) -> None:
        self.self_id = member_id
        self.bot.bus.publish(self.UPDATE_EVENT, "you", member_id)
    
    def on_member(self, data: Dict[str, Any]) -> None:
        if not isinstance(data, dict) or "id" not in data:
            logger.debug(f"Skipping member update without id: {data!r}")
            return
        
        self.members[data["id"]] = data
        self.bot.bus.publish(self.UPDATE_EVENT, "member", data)
    
    def on_removed(self, data: Dict[str, Any]) -> None:
        member_id = data.get("id") if isinstance(data, dict) else None
        removed = self.members.pop(member_id, None)
        if removed is not None:
            self.bot.bus.publish(self.UPDATE_EVENT, "removed", removed)
    
    async def on_connect(self) -> None:
        """Start the keepalive: one immediate touch, then one every interval"""
        self._leaving = False
        self.heartbeat.cancel()
        try:
            await self.touch()
        except Exception as e:
            logger.warning(f"Initial touch failed: {e}")
        self.heartbeat.start()
        logger.info(f"Group {self.room} keepalive started")
    
    def on_private(self, data: Dict[str, Any]) -> None:
        try:
            notice = PrivacyNotice.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed privacy notice {data!r}: {e.errors()}")
            return
        
        self.private = notice.is_private
        self.max_spectators = notice.max_spectators
        self.max_players = notice.max_players
        self.self_assignment = notice.self_assignment
        self.bot.bus.publish(self.UPDATE_EVENT, "private", notice)
    
    async def on_disconnect(self, reason: Any = None) -> None:
        """Leave the group gracefully: close, stop the keepalive, notify the host"""
        if self._leaving:
            return
        self._leaving = True
        logger.info(f"Group {self.room} disconnected (reason: {reason})")
        
        if self.socket is not None:
            try:
                await self.socket.disconnect()
            except Exception as e:
                logger.warning(f"Error closing group socket: {e}")
        
        self.heartbeat.cancel()
        self.bot.spawn(self._leave(), name="group-leave")
    
    async def _leave(self) -> None:
        try:
            await self.bot.host_client.leave_group(self.bot.hostname, self.bot.session)
        except Exception as e:
            logger.debug(f"Leave notification failed: {e}")
