from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from vocab.database import Base

class WordList(Base):
    """Shared builtin word list that learners can enable"""
    __tablename__ = "word_lists"
    
    id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, default="")
    created_at = Column(DateTime, default=datetime.utcnow)
    
    words = relationship("Word", back_populates="word_list", cascade="all, delete-orphan")
