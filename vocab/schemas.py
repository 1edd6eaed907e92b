from pydantic import BaseModel, Field
from typing import Dict, List, Literal, Optional, Union
from datetime import date, datetime

CardStatus = Literal["new", "learning", "review", "mastered", "retired"]
ReviewMode = Literal["review", "quiz"]
QuizMode = Literal["mcq", "spelling"]
WordSource = Literal["user", "builtin"]


class Definition(BaseModel):
    """One part-of-speech / meaning pair"""
    pos: str = ""
    meaning: str

class WordCreate(BaseModel):
    """Schema for authoring a word"""
    word: str
    phonetic: Optional[str] = None
    audio: Optional[str] = None
    definitions: List[Definition] = Field(default_factory=list)
    example: Optional[str] = None
    example_translation: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class RawWordEntry(BaseModel):
    """Schema for one entry of an imported word list file"""
    word: str
    phonetic: Optional[str] = None
    audio: Optional[str] = None
    definitions: List[Definition]
    example: Optional[str] = None
    example_translation: Optional[str] = None

class WordData(WordCreate):
    """Immutable word content as the scheduler sees it"""
    id: str
    source: WordSource = "user"
    list_id: Optional[str] = None

    @property
    def primary_meaning(self) -> Optional[str]:
        return self.definitions[0].meaning if self.definitions else None

class CardStateData(BaseModel):
    """Mutable learning record for one word"""
    word_id: str
    ease_factor: float = 2.5
    interval: int = 0
    repetition: int = 0
    due_date: date
    last_review_date: Optional[date] = None
    status: CardStatus = "new"
    consecutive_easy_count: int = 0

class ReviewLogData(BaseModel):
    """Audit record of one rating event"""
    id: str
    word_id: str
    quality: int
    reviewed_at: datetime
    previous_interval: int
    new_interval: int
    previous_ease_factor: float
    new_ease_factor: float
    mode: ReviewMode = "review"

class QuizResultData(BaseModel):
    """Summary of a completed quiz run"""
    id: str
    date: date
    mode: QuizMode
    total_questions: int
    correct_count: int
    wrong_word_ids: List[str] = Field(default_factory=list)
    duration_seconds: int = 0

class UserCreate(BaseModel):
    """Schema for creating a learner profile"""
    name: str
    daily_new_card_limit: int = 20
    daily_review_limit: int = 100

class UserSettings(BaseModel):
    """Study limits and enabled word lists"""
    daily_new_card_limit: int = 20
    daily_review_limit: int = 100
    enabled_list_ids: List[str] = Field(default_factory=list)

class StreakData(BaseModel):
    """Consecutive-day activity counter"""
    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[date] = None
    active_dates: List[date] = Field(default_factory=list)

class SM2Result(BaseModel):
    """Next ease factor / interval / repetition triple"""
    ease_factor: float
    interval: int
    repetition: int

class ReviewCard(BaseModel):
    """A card state paired with its word"""
    card_state: CardStateData
    word: WordData

class DueCards(BaseModel):
    """Eligible card states, split so review cards can precede new ones"""
    review_cards: List[CardStateData] = Field(default_factory=list)
    new_cards: List[CardStateData] = Field(default_factory=list)

class ScheduledQueue(BaseModel):
    """Today's study queue: due reviews followed by new cards"""
    review_cards: List[ReviewCard] = Field(default_factory=list)
    new_cards: List[ReviewCard] = Field(default_factory=list)

    @property
    def cards(self) -> List[ReviewCard]:
        return self.review_cards + self.new_cards

class MCQQuestion(BaseModel):
    """Pick the meaning of a headword from four options"""
    type: Literal["mcq"] = "mcq"
    word_id: str
    question_text: str
    phonetic: Optional[str] = None
    audio: Optional[str] = None
    correct_answer: str
    options: List[str]

class SpellingQuestion(BaseModel):
    """Type the headword for a given meaning"""
    type: Literal["spelling"] = "spelling"
    word_id: str
    hint: str
    correct_answer: str
    phonetic: Optional[str] = None
    audio: Optional[str] = None

QuizQuestion = Union[MCQQuestion, SpellingQuestion]

class DailySessionState(BaseModel):
    """Per-day session memory that survives reloads.

    Tracks whether today's batch of new cards was already shown and the
    worst quality each word received today. Reset when the calendar day
    changes or when the learner restarts today's learning.
    """
    day: date = Field(default_factory=date.today)
    new_cards_shown: bool = False
    session_words: Dict[str, int] = Field(default_factory=dict)

    def ensure_day(self, today: Optional[date] = None) -> bool:
        """Reset if a new calendar day started. Returns True when reset."""
        today = today or date.today()
        if self.day == today:
            return False
        self.day = today
        self.new_cards_shown = False
        self.session_words = {}
        return True

    def restart(self) -> None:
        """Clear today's state so learning starts over"""
        self.new_cards_shown = False
        self.session_words = {}

    def record_quality(self, word_id: str, quality: int) -> None:
        """Remember the worst quality a word received today"""
        previous = self.session_words.get(word_id)
        if previous is None or quality < previous:
            self.session_words[word_id] = quality

class ExportBundle(BaseModel):
    """Full backup of one learner's data"""
    version: int = 1
    export_date: datetime
    words: List[WordData] = Field(default_factory=list)
    card_states: List[CardStateData] = Field(default_factory=list)
    review_logs: List[ReviewLogData] = Field(default_factory=list)
    quiz_results: List[QuizResultData] = Field(default_factory=list)
    settings: Optional[UserSettings] = None
    streak: Optional[StreakData] = None
