# tagbot/config/settings.py

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional


class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=".env",
        env_prefix="TAGBOT_",
        case_sensitive=True,
        extra="ignore"
    )
    
    # Game host
    HOSTNAME: Optional[str] = None
    SESSION: Optional[str] = None  # Skips session acquisition when set
    SESSION_COOKIE_NAME: str = "tagpro"
    
    # Group (lobby) configuration
    ROOM: Optional[str] = None
    LOCATION: str = "page"  # Reported in keepalive touches
    GROUP_PORT: int = 81
    HEARTBEAT_INTERVAL_SECONDS: float = 30.0
    
    # HTTP side effects (session acquisition, leave notification)
    HTTP_TIMEOUT_SECONDS: float = 5.0
    HTTP_CONNECT_TIMEOUT_SECONDS: float = 2.0
    
    # Socket.IO client
    SOCKET_WAIT_TIMEOUT_SECONDS: float = 5.0
    SOCKET_RECONNECTION: bool = True
    SOCKETIO_LOGGER: bool = False
    
    # Logging
    LOG_LEVEL: str = "INFO"
    
    def group_address(self, hostname: str, room: Optional[str]) -> str:
        """Build the group (lobby) channel address"""
        return f"{hostname}:{self.GROUP_PORT}/groups/{room}"
    
    def joiner_address(self, hostname: str) -> str:
        """Build the joiner (matchmaking) channel address"""
        return f"{hostname}:{self.GROUP_PORT}/games/find"


settings = Settings()
