from vocab.models.user import User
from vocab.models.word_list import WordList
from vocab.models.word import Word
from vocab.models.card_state import CardState
from vocab.models.review_log import ReviewLog
from vocab.models.quiz_result import QuizResult
from vocab.models.streak import StreakRecord

__all__ = [
    "User",
    "WordList",
    "Word",
    "CardState",
    "ReviewLog",
    "QuizResult",
    "StreakRecord"
]
