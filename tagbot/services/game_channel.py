# tagbot/services/game_channel.py

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from pydantic import ValidationError

from tagbot.schemas.bot_schema import ClockNotice, Score, ScoreNotice
from tagbot.services.channel import Channel

if TYPE_CHECKING:
    from tagbot.bot import Bot

logger = logging.getLogger(__name__)


class GameChannel(Channel):
    """
    In-match channel.
    
    Mirrors the bot's identity, the player roster, the match clock and the
    score from the server's independent pushes. Each field holds the most
    recent value seen; no ordering between events is assumed.
    """
    
    name = "game"
    UPDATE_EVENT = "game-update"
    
    # The server sends 4 before the match clock has started
    INITIAL_STATE = 4
    
    def __init__(self, bot: "Bot"):
        super().__init__(bot)
        self.self_id: Optional[Any] = None
        self.port: Optional[int] = None
        self.players: Dict[Any, Dict[str, Any]] = {}
        self.time: int = 0
        self.state: int = self.INITIAL_STATE
        self.map: Optional[Any] = None
        self.score: Optional[Score] = None
    
    def default_address(self) -> Optional[str]:
        # The game port is only known once the bot has been placed in a match
        if self.port is None:
            return None
        return f"{self.bot.hostname}:{self.port}"
    
    async def register_listeners(self, bot: "Bot") -> None:
        socket = self.socket
        socket.on("id", self.on_id)
        socket.on("p", self.on_players)
        socket.on("time", self.on_time)
        socket.on("score", self.on_score)
    
    def on_id(self, player_id: Any) -> None:
        self.self_id = player_id
        self.bot.bus.publish(self.UPDATE_EVENT, "id", player_id)
    
    def on_players(self, updates: Optional[List[Dict[str, Any]]]) -> None:
        """Merge a batch of partial player updates, attribute by attribute"""
        if not updates:
            return
        
        for update in updates:
            if not isinstance(update, dict) or "id" not in update:
                logger.debug(f"Skipping player update without id: {update!r}")
                continue
            
            player = self.players.setdefault(update["id"], {})
            for attr, value in update.items():
                if attr == "id":
                    continue
                player[attr] = value
        
        self.bot.bus.publish(self.UPDATE_EVENT, "players", self.players)
    
    def on_time(self, data: Dict[str, Any]) -> None:
        try:
            notice = ClockNotice.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed time notice {data!r}: {e.errors()}")
            return
        
        self.time = notice.time
        self.state = notice.state
        self.bot.bus.publish(self.UPDATE_EVENT, "time", notice)
    
    def on_score(self, data: Dict[str, Any]) -> None:
        try:
            notice = ScoreNotice.model_validate(data)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed score notice {data!r}: {e.errors()}")
            return
        
        self.score = Score(red=notice.r, blue=notice.b)
        self.bot.bus.publish(self.UPDATE_EVENT, "score", self.score)
