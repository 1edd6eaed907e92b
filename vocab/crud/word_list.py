from sqlalchemy.orm import Session
from vocab.models import User, Word, WordList, CardState
from vocab.schemas import RawWordEntry
from vocab.sm2 import SM2Algorithm
from vocab.mapping import card_state_row_values
from datetime import date
from typing import List, Optional
import uuid

def create_word_list(
    db: Session,
    name: str,
    entries: List[RawWordEntry],
    description: str = "",
    list_id: Optional[str] = None
) -> WordList:
    """Create a builtin word list with its words"""
    word_list = WordList(id=list_id or uuid.uuid4().hex, name=name, description=description)
    db.add(word_list)
    
    for entry in entries:
        db.add(Word(
            id=uuid.uuid4().hex,
            list_id=word_list.id,
            word=entry.word,
            phonetic=entry.phonetic,
            audio=entry.audio,
            definitions=[d.model_dump() for d in entry.definitions],
            example=entry.example,
            example_translation=entry.example_translation,
            tags=[],
            source="builtin"
        ))
    
    db.commit()
    db.refresh(word_list)
    return word_list

def get_word_list(db: Session, list_id: str) -> Optional[WordList]:
    """Get word list by ID"""
    return db.query(WordList).filter(WordList.id == list_id).first()

def get_word_lists(db: Session) -> List[WordList]:
    """Get all builtin word lists"""
    return db.query(WordList).order_by(WordList.name).all()

def delete_word_list(db: Session, list_id: str) -> bool:
    """Delete a word list together with its words and their card states"""
    word_list = get_word_list(db, list_id)
    if not word_list:
        return False
    db.delete(word_list)
    db.commit()
    return True

def enable_word_list(db: Session, user_id: int, list_id: str, reference_date: date = None) -> int:
    """
    Enable a list for a learner and start tracking its words.
    
    Returns:
        Number of card states created
    """
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not get_word_list(db, list_id):
        return 0
    
    if list_id not in (user.enabled_list_ids or []):
        user.enabled_list_ids = list(user.enabled_list_ids or []) + [list_id]
    
    tracked = {
        word_id for (word_id,) in db.query(CardState.word_id).join(Word).filter(
            CardState.user_id == user_id,
            Word.list_id == list_id
        )
    }
    word_ids = [word_id for (word_id,) in db.query(Word.id).filter(Word.list_id == list_id)]
    
    created = 0
    for word_id in word_ids:
        if word_id in tracked:
            continue
        state = SM2Algorithm.create_initial_state(word_id, reference_date=reference_date)
        db.add(CardState(user_id=user_id, **card_state_row_values(state)))
        created += 1
    
    db.commit()
    return created

def disable_word_list(db: Session, user_id: int, list_id: str) -> bool:
    """Stop scheduling a list's words for a learner (progress is kept)"""
    user = db.query(User).filter(User.id == user_id).first()
    if not user or list_id not in (user.enabled_list_ids or []):
        return False
    user.enabled_list_ids = [i for i in user.enabled_list_ids if i != list_id]
    db.commit()
    return True
