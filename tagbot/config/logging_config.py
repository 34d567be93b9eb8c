# tagbot/config/logging_config.py

import logging
from typing import Optional

from tagbot.config.settings import settings


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the bot process
    
    Args:
        level: Logging level name, defaults to settings.LOG_LEVEL
    """
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    
    # Socket.IO and Engine.IO are very chatty at INFO
    socketio_level = logging.INFO if settings.SOCKETIO_LOGGER else logging.WARNING
    logging.getLogger("socketio").setLevel(socketio_level)
    logging.getLogger("engineio").setLevel(socketio_level)
