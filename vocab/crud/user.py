from sqlalchemy.orm import Session
from vocab.models import User
from vocab.schemas import UserCreate, UserSettings
from typing import Optional

def create_user(db: Session, user: UserCreate) -> User:
    """Create a new learner profile"""
    db_user = User(**user.model_dump(), enabled_list_ids=[])
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

def get_user(db: Session, user_id: int) -> Optional[User]:
    """Get user by ID"""
    return db.query(User).filter(User.id == user_id).first()

def update_user_settings(db: Session, user_id: int, user_settings: UserSettings) -> Optional[User]:
    """Replace a learner's study limits and enabled lists"""
    db_user = get_user(db, user_id)
    if db_user:
        db_user.daily_new_card_limit = user_settings.daily_new_card_limit
        db_user.daily_review_limit = user_settings.daily_review_limit
        db_user.enabled_list_ids = list(user_settings.enabled_list_ids)
        db.commit()
        db.refresh(db_user)
    return db_user
