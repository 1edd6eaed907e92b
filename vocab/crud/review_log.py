from sqlalchemy.orm import Session
from vocab.models import ReviewLog
from vocab.schemas import ReviewLogData
from vocab.mapping import review_log_row_values
from datetime import date, datetime, time
from typing import Iterable, List

def add_review_logs(db: Session, user_id: int, logs: Iterable[ReviewLogData], commit: bool = True):
    """Append review logs; re-adding an existing ID is a no-op overwrite"""
    for log in logs:
        db.merge(ReviewLog(user_id=user_id, **review_log_row_values(log)))
    if commit:
        db.commit()

def get_review_logs_since(db: Session, user_id: int, since: date) -> List[ReviewLog]:
    """Get review logs from the start of a given day onwards"""
    return db.query(ReviewLog).filter(
        ReviewLog.user_id == user_id,
        ReviewLog.reviewed_at >= datetime.combine(since, time.min)
    ).order_by(ReviewLog.reviewed_at).all()

def get_review_logs(db: Session, user_id: int) -> List[ReviewLog]:
    """Get a learner's full review history"""
    return db.query(ReviewLog).filter(
        ReviewLog.user_id == user_id
    ).order_by(ReviewLog.reviewed_at).all()

def delete_review_logs(db: Session, user_id: int, commit: bool = True):
    """Remove all of a learner's review logs"""
    db.query(ReviewLog).filter(ReviewLog.user_id == user_id).delete(synchronize_session=False)
    if commit:
        db.commit()
