from sqlalchemy import Column, Integer, Date, ForeignKey, JSON
from sqlalchemy.orm import relationship
from vocab.database import Base

class StreakRecord(Base):
    """Daily activity streak per learner"""
    __tablename__ = "streaks"
    
    user_id = Column(Integer, ForeignKey("users.id"), primary_key=True)
    current_streak = Column(Integer, nullable=False, default=0)
    longest_streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(Date)
    active_dates = Column(JSON, nullable=False, default=list)  # ISO dates, last 365 kept
    
    user = relationship("User", back_populates="streak")
