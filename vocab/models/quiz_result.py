from sqlalchemy import Column, Integer, String, Date, ForeignKey, JSON
from vocab.database import Base

class QuizResult(Base):
    """Summary of one completed quiz run"""
    __tablename__ = "quiz_results"
    
    id = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    date = Column(Date, nullable=False, index=True)
    mode = Column(String, nullable=False)  # "mcq" or "spelling"
    total_questions = Column(Integer, nullable=False)
    correct_count = Column(Integer, nullable=False)
    wrong_word_ids = Column(JSON, nullable=False, default=list)
    duration_seconds = Column(Integer, nullable=False, default=0)
