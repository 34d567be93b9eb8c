# tagbot/exceptions/__init__.py

from tagbot.exceptions.bot_exceptions import (
    BotException,
    AlreadyConnectedError,
    SessionError,
    SocketError
)

__all__ = [
    'BotException',
    'AlreadyConnectedError',
    'SessionError',
    'SocketError'
]
