"""Study session state machine: learning -> reinforcing -> quizzing.

The orchestrator is the only thing that mutates card states during a
session. Learning-phase ratings are buffered and flushed together when the
phase completes (or when a later phase needs them durable, or on
teardown). Quiz answers are written one at a time by ``QuizRun``.
"""

import logging
import random
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from vocab.exceptions import PersistenceError, PhaseTransitionError
from vocab.quiz import QuizGenerator, QuizRun, shuffled
from vocab.schemas import (
    CardStateData,
    DailySessionState,
    QuizQuestion,
    ReviewCard,
    ReviewLogData,
    ScheduledQueue,
    UserSettings,
    WordData,
)
from vocab.selector import DueCardSelector
from vocab.sm2 import RATING_QUALITIES, SM2Algorithm
from vocab.store import VocabStore
from vocab.streak import StreakTracker
from vocab.write_buffer import WriteAheadBuffer

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    LEARNING = "learning"
    REINFORCING = "reinforcing"
    QUIZZING = "quizzing"


class SessionStats(BaseModel):
    """Running tally for the learning phase"""
    reviewed: int = 0
    correct: int = 0
    incorrect: int = 0

    @property
    def accuracy(self) -> Optional[float]:
        if not self.reviewed:
            return None
        return self.correct / self.reviewed


class RatingOutcome(BaseModel):
    """What one learning-phase rating produced"""
    card_state: CardStateData
    review_log: ReviewLogData
    requeued: bool
    session_complete: bool


class SessionOrchestrator:
    """Drives one learner's study session for a single day"""

    def __init__(
        self,
        store: VocabStore,
        daily_state: DailySessionState,
        user_settings: Optional[UserSettings] = None,
        streak: Optional[StreakTracker] = None,
        rng: Optional[random.Random] = None,
        today: date = None
    ):
        self.store = store
        self.today = today or date.today()
        self.daily_state = daily_state
        self.daily_state.ensure_day(self.today)
        self.user_settings = user_settings
        self.streak = streak
        self.rng = rng or random.Random()

        self.selector = DueCardSelector(store)
        self.quiz_generator = QuizGenerator(store, self.rng)
        self.buffer = WriteAheadBuffer()

        self.phase = SessionPhase.LEARNING
        self.complete = False
        self.learning_complete = False
        self.stats = SessionStats()

        self.queue: List[ReviewCard] = []
        self.reinforcement_queue: List[WordData] = []
        self.index = 0
        self.quiz: Optional[QuizRun] = None

    # ---- learning ----

    def start_learning(self) -> ScheduledQueue:
        """Build today's queue; new cards are only offered once per day"""
        user_settings = self.user_settings or self.store.get_settings()
        include_new = not self.daily_state.new_cards_shown

        scheduled = self.selector.scheduled_queue(
            user_settings.daily_new_card_limit,
            user_settings.daily_review_limit,
            user_settings.enabled_list_ids,
            today=self.today,
            include_new=include_new
        )
        if scheduled.new_cards:
            self.daily_state.new_cards_shown = True

        self.phase = SessionPhase.LEARNING
        self.queue = scheduled.cards
        self.index = 0
        self.complete = False
        self.learning_complete = False
        logger.info(
            "Learning started: %d review + %d new card(s)",
            len(scheduled.review_cards), len(scheduled.new_cards)
        )

        if not self.queue:
            self._complete_learning()
        return scheduled

    @property
    def current_card(self) -> Optional[ReviewCard]:
        if self.phase != SessionPhase.LEARNING or self.index >= len(self.queue):
            return None
        return self.queue[self.index]

    def preview_intervals(self) -> Dict[int, int]:
        """Unfuzzed interval each rating button would schedule for the current card"""
        card = self.current_card
        if card is None:
            return {}
        state = card.card_state
        return {
            quality: SM2Algorithm.calculate_next_state(
                quality, state.repetition, state.ease_factor, state.interval
            ).interval
            for quality in RATING_QUALITIES
        }

    def rate(self, quality: int) -> Optional[RatingOutcome]:
        """
        Rate the current card and move on.

        Forgotten cards (quality < 3) go back to the end of the queue with
        their updated state. Returns None when there is no card to rate.
        """
        if self.phase != SessionPhase.LEARNING:
            raise PhaseTransitionError(f"Cannot rate cards while {self.phase.value}")
        card = self.current_card
        if card is None:
            return None

        updated, log = SM2Algorithm.apply_rating(
            card.card_state,
            quality,
            mode="review",
            today=self.today,
            now=datetime.now(),
            rng=self.rng
        )
        self.buffer.add(updated, log)
        self.daily_state.record_quality(updated.word_id, log.quality)

        requeued = log.quality < 3
        self.stats.reviewed += 1
        if requeued:
            self.stats.incorrect += 1
            self.queue.append(ReviewCard(card_state=updated, word=card.word))
        else:
            self.stats.correct += 1

        self.index += 1
        if self.index >= len(self.queue):
            self._complete_learning()

        return RatingOutcome(
            card_state=updated,
            review_log=log,
            requeued=requeued,
            session_complete=self.complete
        )

    def _complete_learning(self) -> None:
        self.complete = True
        self.learning_complete = True
        if not self.flush():
            logger.warning("Learning finished but %d rating(s) are still unsaved", len(self.buffer))
        if self.stats.reviewed and self.streak:
            self.streak.notify(self.today)
        logger.info(
            "Learning complete: %d reviewed, %d remembered, %d forgotten",
            self.stats.reviewed, self.stats.correct, self.stats.incorrect
        )

    def restart_learning(self) -> ScheduledQueue:
        """Forget today's session memory and build a fresh queue"""
        self._require_durable()
        self.daily_state.restart()
        self.stats = SessionStats()
        return self.start_learning()

    # ---- persistence ----

    def flush(self) -> bool:
        """Write buffered ratings; safe to call repeatedly"""
        return self.buffer.flush(self.store)

    def _require_durable(self) -> None:
        if not self.flush():
            raise PersistenceError(
                f"{len(self.buffer)} buffered rating(s) could not be saved; try again"
            )

    def close(self) -> None:
        """Best-effort flush on teardown; failures are logged and dropped"""
        try:
            if not self.flush():
                logger.warning("Discarding %d unsaved rating(s) on close", len(self.buffer))
        except Exception:
            logger.warning("Flush on close failed", exc_info=True)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    # ---- today's touched words ----

    def touched_words(self) -> Dict[str, int]:
        """
        Worst quality each word received in today's learning.

        Falls back to today's review logs when the in-memory record was
        lost (e.g. the page was reloaded), and restores the record from them.
        """
        if self.daily_state.session_words:
            return dict(self.daily_state.session_words)

        for log in self.store.get_review_logs_since(self.today):
            if log.mode == "review" and log.reviewed_at.date() == self.today:
                self.daily_state.record_quality(log.word_id, log.quality)
        return dict(self.daily_state.session_words)

    def _touched_word_data(self) -> List[WordData]:
        touched = self.touched_words()
        words = self.store.get_words(touched)
        return [words[word_id] for word_id in touched if word_id in words]

    def _require_learning_complete(self, action: str) -> None:
        if not self.learning_complete:
            raise PhaseTransitionError(f"Finish today's learning before starting {action}")

    # ---- reinforcing ----

    def start_reinforcement(self) -> List[WordData]:
        """Drill today's words again, hardest first; nothing is scheduled"""
        self._require_learning_complete("reinforcement")
        self._require_durable()

        touched = self.touched_words()
        words = shuffled(self._touched_word_data(), self.rng)
        # Stable sort keeps the shuffled order among equal qualities
        words.sort(key=lambda w: touched[w.id])

        self.phase = SessionPhase.REINFORCING
        self.reinforcement_queue = words
        self.index = 0
        self.complete = not words
        logger.info("Reinforcement started with %d word(s)", len(words))
        return words

    @property
    def current_word(self) -> Optional[WordData]:
        if self.phase != SessionPhase.REINFORCING or self.index >= len(self.reinforcement_queue):
            return None
        return self.reinforcement_queue[self.index]

    def next_card(self) -> Optional[WordData]:
        """Advance the reinforcement drill and return the next word"""
        if self.phase != SessionPhase.REINFORCING:
            raise PhaseTransitionError(f"No reinforcement drill while {self.phase.value}")
        if self.index < len(self.reinforcement_queue):
            self.index += 1
        self.complete = self.index >= len(self.reinforcement_queue)
        return self.current_word

    # ---- quizzing ----

    def start_quiz(self, count: Optional[int] = None) -> List[QuizQuestion]:
        """Multiple-choice quiz over today's words; empty when too few words"""
        self._require_learning_complete("a quiz")
        self._require_durable()

        words = self._touched_word_data()
        questions = self.quiz_generator.generate_mcq(len(words) if count is None else count, words=words)

        self.phase = SessionPhase.QUIZZING
        self.quiz = QuizRun(
            self.store,
            questions,
            mode="mcq",
            streak=self.streak,
            rng=self.rng,
            today=self.today
        )
        self.index = 0
        self.complete = self.quiz.is_complete
        logger.info("Quiz started with %d question(s)", len(questions))
        return questions

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.phase != SessionPhase.QUIZZING or self.quiz is None:
            return None
        return self.quiz.current_question

    def answer_quiz(self, response: str) -> bool:
        """Grade the current quiz question; store errors propagate"""
        if self.phase != SessionPhase.QUIZZING or self.quiz is None:
            raise PhaseTransitionError(f"No quiz in progress while {self.phase.value}")
        correct = self.quiz.answer(response)
        self.index = self.quiz.index
        self.complete = self.quiz.is_complete
        return correct

