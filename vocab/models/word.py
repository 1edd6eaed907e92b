from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from vocab.database import Base

class Word(Base):
    """Vocabulary entry, either user-authored or from a builtin list"""
    __tablename__ = "words"
    
    id = Column(String, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), index=True)  # set for user-authored words
    list_id = Column(String, ForeignKey("word_lists.id"), index=True)  # set for builtin words
    word = Column(String, nullable=False)
    phonetic = Column(String)
    audio = Column(String)
    definitions = Column(JSON, nullable=False)  # [{"pos": "n.", "meaning": "..."}]
    example = Column(Text)
    example_translation = Column(Text)
    tags = Column(JSON, nullable=False, default=list)
    source = Column(String, nullable=False, default="user")  # "user" or "builtin"
    created_at = Column(DateTime, default=datetime.utcnow)
    
    word_list = relationship("WordList", back_populates="words")
    card_states = relationship("CardState", back_populates="word", cascade="all, delete-orphan")
