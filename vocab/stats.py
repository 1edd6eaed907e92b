from collections import Counter
from datetime import date, timedelta
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from vocab.schemas import StreakData
from vocab.store import VocabStore


class DailyCount(BaseModel):
    """Number of events on one day"""
    date: date
    count: int

class ProgressStats(BaseModel):
    """Snapshot for the progress report"""
    daily_reviews: List[DailyCount] = Field(default_factory=list)
    status_counts: Dict[str, int] = Field(default_factory=dict)
    due_forecast: List[DailyCount] = Field(default_factory=list)
    total_reviews: int = 0
    total_words: int = 0
    streak: StreakData = Field(default_factory=StreakData)
    quiz_accuracy: Optional[float] = None


def compute_progress(
    store: VocabStore,
    today: date = None,
    history_days: int = 30,
    forecast_days: int = 7
) -> ProgressStats:
    """
    Summarize a learner's review history and upcoming workload.
    
    Args:
        store: Learner-scoped store
        today: Reference date (defaults to today)
        history_days: How many past days (including today) to count reviews for
        forecast_days: How many upcoming days (starting today) to forecast
    """
    today = today or date.today()
    logs = store.get_review_logs()
    cards = store.get_all_card_states()
    
    per_day = Counter(log.reviewed_at.date() for log in logs)
    daily_reviews = [
        DailyCount(date=day, count=per_day.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in range(history_days - 1, -1, -1))
    ]
    
    status_counts = Counter(card.status for card in cards)
    
    # Overdue cards land on today
    scheduled = [c for c in cards if c.status not in ("new", "retired")]
    due_per_day = Counter(max(c.due_date, today) for c in scheduled)
    due_forecast = [
        DailyCount(date=day, count=due_per_day.get(day, 0))
        for day in (today + timedelta(days=offset) for offset in range(forecast_days))
    ]
    
    quizzes = store.get_quiz_results()
    total_questions = sum(q.total_questions for q in quizzes)
    quiz_accuracy = (
        sum(q.correct_count for q in quizzes) / total_questions if total_questions else None
    )
    
    return ProgressStats(
        daily_reviews=daily_reviews,
        status_counts=dict(status_counts),
        due_forecast=due_forecast,
        total_reviews=len(logs),
        total_words=len(cards),
        streak=store.get_streak(),
        quiz_accuracy=quiz_accuracy
    )
