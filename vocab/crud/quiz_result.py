from sqlalchemy.orm import Session
from vocab.models import QuizResult
from vocab.schemas import QuizResultData
from vocab.mapping import quiz_result_row_values
from typing import List

def add_quiz_result(db: Session, user_id: int, result: QuizResultData, commit: bool = True) -> QuizResult:
    """Record a completed quiz run"""
    db_result = db.merge(QuizResult(user_id=user_id, **quiz_result_row_values(result)))
    if commit:
        db.commit()
    return db_result

def get_quiz_results(db: Session, user_id: int) -> List[QuizResult]:
    """Get all quiz runs, oldest first"""
    return db.query(QuizResult).filter(
        QuizResult.user_id == user_id
    ).order_by(QuizResult.date).all()

def delete_quiz_results(db: Session, user_id: int, commit: bool = True):
    """Remove all of a learner's quiz results"""
    db.query(QuizResult).filter(QuizResult.user_id == user_id).delete(synchronize_session=False)
    if commit:
        db.commit()
