# tagbot/__init__.py

"""
Client-side automation agent for a real-time multiplayer browser game.

Maintains the joiner, group and game Socket.IO channels and mirrors
remote state locally.
"""

from tagbot.bot import Bot

__all__ = ['Bot']
