from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from vocab.database import Base

class ReviewLog(Base):
    """Append-only record of a single rating event"""
    __tablename__ = "review_logs"
    
    id = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    word_id = Column(String, nullable=False, index=True)  # kept after the word is deleted
    quality = Column(Integer, nullable=False)  # 0-5
    reviewed_at = Column(DateTime, nullable=False, index=True)
    previous_interval = Column(Integer, nullable=False)
    new_interval = Column(Integer, nullable=False)
    previous_ease_factor = Column(Float, nullable=False)
    new_ease_factor = Column(Float, nullable=False)
    mode = Column(String, nullable=False, default="review")  # "review" or "quiz"
