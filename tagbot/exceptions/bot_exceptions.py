# tagbot/exceptions/bot_exceptions.py

from typing import Any, Dict, Optional


class BotException(Exception):
    """Base class for all bot exceptions"""
    
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class AlreadyConnectedError(BotException):
    """Exception raised when connecting a channel that already holds a live socket"""
    
    def __init__(self, channel: str, details: Optional[Dict[str, Any]] = None):
        self.channel = channel
        super().__init__(
            message=f"Socket already connected on {channel} channel",
            details={"channel": channel, **(details or {})}
        )


class SessionError(BotException):
    """Exception raised when a session cannot be acquired from the game host"""
    
    def __init__(self, message: str, hostname: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.hostname = hostname
        super().__init__(
            message=message,
            details={"hostname": hostname, **(details or {})}
        )


class SocketError(BotException):
    """Exception raised when the transport fails to open a connection"""
    
    def __init__(self, message: str, address: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.address = address
        super().__init__(
            message=message,
            details={"address": address, **(details or {})}
        )
