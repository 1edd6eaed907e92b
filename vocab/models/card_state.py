from sqlalchemy import Column, Integer, String, Float, Date, ForeignKey
from sqlalchemy.orm import relationship
from vocab.database import Base

class CardState(Base):
    """SM-2 memory-strength tracking per learner and word"""
    __tablename__ = "card_states"
    
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    word_id = Column(String, ForeignKey("words.id"), primary_key=True)
    
    # SM-2 algorithm fields
    ease_factor = Column(Float, nullable=False, default=2.5)
    interval = Column(Integer, nullable=False, default=0)  # days until next review
    repetition = Column(Integer, nullable=False, default=0)  # consecutive successful reviews
    
    due_date = Column(Date, nullable=False, index=True)
    last_review_date = Column(Date)
    status = Column(String, nullable=False, default="new", index=True)  # new, learning, review, mastered, retired
    consecutive_easy_count = Column(Integer, nullable=False, default=0)
    
    word = relationship("Word", back_populates="card_states")
