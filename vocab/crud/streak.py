from sqlalchemy.orm import Session
from vocab.models import StreakRecord
from vocab.schemas import StreakData
from vocab.mapping import streak_row_values
from typing import Optional

def get_streak(db: Session, user_id: int) -> Optional[StreakRecord]:
    """Get a learner's streak record"""
    return db.query(StreakRecord).filter(StreakRecord.user_id == user_id).first()

def save_streak(db: Session, user_id: int, streak: StreakData) -> StreakRecord:
    """Insert or replace a learner's streak record"""
    record = db.merge(StreakRecord(user_id=user_id, **streak_row_values(streak)))
    db.commit()
    return record
