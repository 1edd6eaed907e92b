import logging
from datetime import date, timedelta
from typing import Optional

from vocab.schemas import StreakData
from vocab.store import VocabStore

logger = logging.getLogger(__name__)

# Active dates older than this are dropped
ACTIVE_DATES_KEPT = 365


class StreakTracker:
    """Counts consecutive days with at least one completed rating"""

    def __init__(self, store: VocabStore):
        self.store = store

    @staticmethod
    def advance(streak: StreakData, today: date) -> StreakData:
        """Return the streak after activity on ``today`` (input untouched)"""
        if streak.last_active_date == today:
            return streak

        if streak.last_active_date == today - timedelta(days=1):
            current = streak.current_streak + 1
        else:
            current = 1

        active_dates = list(streak.active_dates)
        if today not in active_dates:
            active_dates.append(today)
            active_dates = active_dates[-ACTIVE_DATES_KEPT:]

        return StreakData(
            current_streak=current,
            longest_streak=max(streak.longest_streak, current),
            last_active_date=today,
            active_dates=active_dates
        )

    def record_activity(self, today: date = None) -> StreakData:
        """Load, advance and save the learner's streak"""
        today = today or date.today()
        streak = self.store.get_streak()
        updated = self.advance(streak, today)
        if updated is not streak:
            self.store.save_streak(updated)
            logger.debug("Streak now %d day(s)", updated.current_streak)
        return updated

    def notify(self, today: date = None) -> Optional[StreakData]:
        """Fire-and-forget variant: failures are logged, never raised"""
        try:
            return self.record_activity(today)
        except Exception:
            logger.warning("Streak update failed", exc_info=True)
            return None
