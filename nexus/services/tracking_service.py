"""
Per-topic mastery and XP/level/streak progress.
"""

import math
from datetime import datetime
from typing import Optional

from nexus.errors import StorageError, ValidationError
from nexus.models.ids import UserId
from nexus.models.models import Mastery, Progress
from nexus.services.store import EntityStore
from nexus.utils.common import clamp
from nexus.utils.logger import configure_logging

logger = configure_logging()

MASTERY_START_SCORE = 50.0
MASTERY_START_CONFIDENCE = 0.5
XP_PER_LEVEL = 100


def apply_xp(level: int, xp: int, xp_delta: int) -> tuple[int, int]:
    """Return (level, xp) after adding xp_delta. XP never goes negative and level never drops."""
    new_xp = max(0, xp + xp_delta)
    new_level = level
    if new_xp >= XP_PER_LEVEL:
        new_level += new_xp // XP_PER_LEVEL
        new_xp %= XP_PER_LEVEL
    return new_level, new_xp


def next_streak(streak: int, last_active: Optional[datetime], now: datetime) -> int:
    if last_active is None:
        return 1
    gap = (now.date() - last_active.date()).days
    if gap <= 0:
        return max(streak, 1)
    if gap == 1:
        return streak + 1
    return 1


class TrackingService:
    def __init__(self, store: EntityStore):
        self.store = store

    def list_mastery(self, user_id: UserId) -> list[Mastery]:
        return self.store.find(Mastery, Mastery.user_id == user_id, order_by=(Mastery.topic.asc(),))

    def update_mastery(
        self,
        user_id: Optional[UserId],
        topic: Optional[str],
        score_delta: float,
        now: Optional[datetime] = None,
    ) -> Mastery:
        if not user_id or not topic or not topic.strip():
            raise ValidationError("userId and topic are required")
        if not math.isfinite(score_delta):
            raise ValidationError("scoreDelta must be a finite number")
        topic = topic.strip()

        record = self.store.first(Mastery, Mastery.user_id == user_id, Mastery.topic == topic)
        if record is None:
            record = Mastery(
                user_id=user_id,
                topic=topic,
                score=MASTERY_START_SCORE,
                confidence=MASTERY_START_CONFIDENCE,
            )

        record.score = clamp(record.score + score_delta, 0, 100)
        record.last_updated = now or datetime.utcnow()
        self.store.save(record, conflict=StorageError("Mastery record was created concurrently; retry"))
        logger.info("mastery updated user=%s topic=%s delta=%s score=%s", user_id, topic, score_delta, record.score)
        return record

    def get_progress(self, user_id: UserId) -> Progress:
        progress = self.store.first(Progress, Progress.user_id == user_id)
        if progress is None:
            progress = Progress(user_id=user_id, level=1, xp=0, streak=0, goals=[], challenges=[])
            self.store.save(progress, conflict=StorageError("Progress record was created concurrently; retry"))
        return progress

    def update_progress(
        self,
        user_id: Optional[UserId],
        xp_delta: int,
        now: Optional[datetime] = None,
    ) -> Progress:
        if not user_id:
            raise ValidationError("userId is required")
        now = now or datetime.utcnow()

        progress = self.get_progress(user_id)
        progress.level, progress.xp = apply_xp(progress.level, progress.xp, int(xp_delta))
        progress.streak = next_streak(progress.streak, progress.last_active_date, now)
        progress.last_active_date = now
        self.store.save(progress)
        logger.info("progress updated user=%s level=%s xp=%s streak=%s", user_id, progress.level, progress.xp, progress.streak)
        return progress
