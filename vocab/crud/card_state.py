from sqlalchemy.orm import Session
from vocab.models import CardState
from vocab.schemas import CardStateData
from vocab.mapping import card_state_row_values
from datetime import date
from typing import Iterable, List

def get_card_states(db: Session, user_id: int, word_ids: Iterable[str]) -> List[CardState]:
    """Get card states for a set of words"""
    word_ids = list(word_ids)
    if not word_ids:
        return []
    return db.query(CardState).filter(
        CardState.user_id == user_id,
        CardState.word_id.in_(word_ids)
    ).all()

def get_all_card_states(db: Session, user_id: int) -> List[CardState]:
    """Get every card state a learner has"""
    return db.query(CardState).filter(CardState.user_id == user_id).all()

def get_due_card_states(db: Session, user_id: int, word_ids: Iterable[str], today: date) -> List[CardState]:
    """Cards due on or before today that are neither new nor retired"""
    word_ids = list(word_ids)
    if not word_ids:
        return []
    return db.query(CardState).filter(
        CardState.user_id == user_id,
        CardState.word_id.in_(word_ids),
        CardState.due_date <= today,
        CardState.status.notin_(["new", "retired"])
    ).all()

def get_new_card_states(db: Session, user_id: int, word_ids: Iterable[str]) -> List[CardState]:
    """Never-studied cards among the given words"""
    word_ids = list(word_ids)
    if not word_ids:
        return []
    return db.query(CardState).filter(
        CardState.user_id == user_id,
        CardState.word_id.in_(word_ids),
        CardState.status == "new"
    ).order_by(CardState.word_id).all()

def get_studied_card_states(db: Session, user_id: int) -> List[CardState]:
    """Cards that have been rated at least once"""
    return db.query(CardState).filter(
        CardState.user_id == user_id,
        CardState.status != "new"
    ).all()

def upsert_card_states(db: Session, user_id: int, states: Iterable[CardStateData], commit: bool = True):
    """Insert or replace card states (idempotent on word ID)"""
    for state in states:
        db.merge(CardState(user_id=user_id, **card_state_row_values(state)))
    if commit:
        db.commit()

def delete_card_states(db: Session, user_id: int, commit: bool = True):
    """Remove all of a learner's card states"""
    db.query(CardState).filter(CardState.user_id == user_id).delete(synchronize_session=False)
    if commit:
        db.commit()
