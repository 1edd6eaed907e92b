from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from vocab.database import Base

class User(Base):
    """Learner profile with study settings"""
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    daily_new_card_limit = Column(Integer, nullable=False, default=20)
    daily_review_limit = Column(Integer, nullable=False, default=100)
    enabled_list_ids = Column(JSON, nullable=False, default=list)  # ["list-id", ...]
    created_at = Column(DateTime, default=datetime.utcnow)
    
    streak = relationship("StreakRecord", back_populates="user", uselist=False, cascade="all, delete-orphan")
