"""
Mastery and progress schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import FiniteFloat

from nexus.schemas.base import CamelModel


class MasteryUpdateRequest(CamelModel):
    user_id: Optional[str] = None
    topic: Optional[str] = None
    score_delta: FiniteFloat = 0


class MasteryResponse(CamelModel):
    id: str
    user_id: str
    topic: str
    score: float
    confidence: float
    last_updated: datetime


class Goal(CamelModel):
    text: str
    completed: bool = False


class Challenge(CamelModel):
    id: str
    title: str
    completed: bool = False


class ProgressUpdateRequest(CamelModel):
    user_id: Optional[str] = None
    xp_delta: int = 0


class ProgressResponse(CamelModel):
    id: str
    user_id: str
    level: int
    xp: int
    streak: int
    last_active_date: Optional[datetime] = None
    goals: list[Goal] = []
    challenges: list[Challenge] = []
