from sqlalchemy.orm import Session
from vocab.models import Word, CardState
from vocab.schemas import WordCreate
from vocab.sm2 import SM2Algorithm
from vocab.mapping import card_state_row_values
from datetime import date
from typing import Iterable, List, Optional, Set
import uuid

def create_word(db: Session, user_id: int, word: WordCreate, reference_date: date = None) -> Word:
    """Create a user-authored word and its initial card state"""
    data = word.model_dump()
    data["definitions"] = [d.model_dump() for d in word.definitions]
    db_word = Word(id=uuid.uuid4().hex, user_id=user_id, source="user", **data)
    db.add(db_word)
    
    state = SM2Algorithm.create_initial_state(db_word.id, reference_date=reference_date)
    db.add(CardState(user_id=user_id, **card_state_row_values(state)))
    
    db.commit()
    db.refresh(db_word)
    return db_word

def get_word(db: Session, word_id: str) -> Optional[Word]:
    """Get word by ID"""
    return db.query(Word).filter(Word.id == word_id).first()

def get_words_by_ids(db: Session, word_ids: Iterable[str]) -> List[Word]:
    """Batch-load words by ID"""
    word_ids = list(word_ids)
    if not word_ids:
        return []
    return db.query(Word).filter(Word.id.in_(word_ids)).all()

def get_user_words(db: Session, user_id: int) -> List[Word]:
    """Get all words a learner authored"""
    return db.query(Word).filter(
        Word.user_id == user_id,
        Word.source == "user"
    ).order_by(Word.created_at).all()

def get_eligible_word_ids(db: Session, user_id: int, enabled_list_ids: List[str]) -> Set[str]:
    """User-authored words plus words from any enabled list"""
    condition = (Word.user_id == user_id) & (Word.source == "user")
    if enabled_list_ids:
        condition = condition | Word.list_id.in_(enabled_list_ids)
    return {word_id for (word_id,) in db.query(Word.id).filter(condition)}

def delete_word(db: Session, user_id: int, word_id: str) -> bool:
    """Delete a user-authored word and its card states"""
    db_word = db.query(Word).filter(Word.id == word_id, Word.user_id == user_id).first()
    if not db_word:
        return False
    db.delete(db_word)
    db.commit()
    return True
