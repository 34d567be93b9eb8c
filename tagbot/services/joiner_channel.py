# tagbot/services/joiner_channel.py

from typing import TYPE_CHECKING, Optional

from tagbot.services.channel import Channel

if TYPE_CHECKING:
    from tagbot.bot import Bot


class JoinerChannel(Channel):
    """Matchmaking channel; only connection plumbing lives here"""
    
    name = "joiner"
    
    def default_address(self) -> Optional[str]:
        return self.bot.settings.joiner_address(self.bot.hostname)
    
    async def register_listeners(self, bot: "Bot") -> None:
        """Extension point for matchmaking listeners"""
        pass
