import os
import random
import tempfile
from datetime import date, timedelta

import pytest

# Set test environment variables before vocab.config is imported
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "vocab-test.db")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SESSION_STATE_PATH"] = os.path.join(tempfile.gettempdir(), "vocab-test-session.json")

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from vocab.crud import create_user, create_word
from vocab.database import Base
from vocab.mapping import word_from_row
from vocab.schemas import CardStateData, Definition, UserCreate, WordCreate
from vocab.store import VocabStore


@pytest.fixture
def engine():
    """Fresh in-memory database per test"""
    import vocab.models  # noqa: F401

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def user(db):
    return create_user(db, UserCreate(name="Test Learner", daily_new_card_limit=20, daily_review_limit=100))


@pytest.fixture
def store(db, user):
    return VocabStore(db, user.id)


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def make_word(db, user, today):
    """Create a user-authored word (and its new card) and return it as WordData"""
    def _make(word: str, meaning: str = None, pos: str = "n."):
        row = create_word(db, user.id, WordCreate(
            word=word,
            definitions=[Definition(pos=pos, meaning=meaning or f"meaning of {word}")]
        ), reference_date=today)
        return word_from_row(row)
    return _make


@pytest.fixture
def set_card(store, today):
    """Overwrite a word's card state"""
    def _set(word_id: str, status: str = "review", due_offset: int = 0, **fields):
        state = CardStateData(
            word_id=word_id,
            due_date=today + timedelta(days=due_offset),
            status=status,
            **fields
        )
        store.upsert_card_states([state])
        return state
    return _set
