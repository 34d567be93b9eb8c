# tagbot/schemas/bot_schema.py

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional


# ================ Game Channel Payloads ================

class ClockNotice(BaseModel):
    """Match clock and opaque state code pushed on the game channel"""
    time: int
    state: int


class ScoreNotice(BaseModel):
    """Raw score push on the game channel ({r, b})"""
    r: int
    b: int


class Score(BaseModel):
    """Score snapshot kept on the game channel"""
    red: int
    blue: int


# ================ Group Channel Payloads ================

class PrivacyNotice(BaseModel):
    """Privacy and capacity settings pushed on the group channel"""
    model_config = ConfigDict(populate_by_name=True)
    
    is_private: bool = Field(..., alias="isPrivate")
    max_spectators: int = Field(..., alias="maxSpectators")
    max_players: int = Field(..., alias="maxPlayers")
    self_assignment: bool = Field(..., alias="selfAssignment")


# ================ Connect Outcome ================

class ConnectResult(BaseModel):
    """Outcome of a channel connect attempt: either a socket or an error"""
    model_config = ConfigDict(arbitrary_types_allowed=True)
    
    socket: Optional[Any] = None
    error: Optional[Exception] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None
