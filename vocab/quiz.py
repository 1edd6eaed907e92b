import logging
import random
import time
import uuid
from datetime import date, datetime
from typing import List, Optional, Sequence, TypeVar

from vocab.exceptions import PhaseTransitionError
from vocab.schemas import (
    MCQQuestion,
    QuizMode,
    QuizQuestion,
    QuizResultData,
    SpellingQuestion,
    WordData,
)
from vocab.sm2 import SM2Algorithm
from vocab.store import VocabStore
from vocab.streak import StreakTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")

MCQ_OPTION_COUNT = 4
CORRECT_QUALITY = 4
WRONG_QUALITY = 1


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Uniformly shuffled copy (Fisher-Yates)"""
    result = list(items)
    (rng or random).shuffle(result)
    return result


class QuizGenerator:
    """Builds quiz questions from words the learner has already studied"""

    def __init__(self, store: VocabStore, rng: Optional[random.Random] = None):
        self.store = store
        self.rng = rng or random.Random()

    def get_studied_words(self) -> List[WordData]:
        """Words with a non-new card state and at least one definition"""
        studied_ids = [c.word_id for c in self.store.get_studied_card_states()]
        words = self.store.get_words(studied_ids)
        return [words[i] for i in studied_ids if i in words and words[i].definitions]

    def generate_mcq(self, count: int, words: Optional[List[WordData]] = None) -> List[MCQQuestion]:
        """
        Build up to ``count`` meaning-choice questions.

        Args:
            count: Number of questions wanted
            words: Pool to draw from (defaults to all studied words)

        Returns:
            Questions with one correct meaning and three distractors, or an
            empty list when fewer than four usable words exist
        """
        pool = self.get_studied_words() if words is None else [w for w in words if w.definitions]
        if len(pool) < MCQ_OPTION_COUNT:
            logger.info("Not enough studied words for a choice quiz (%d)", len(pool))
            return []

        questions = []
        for word in shuffled(pool, self.rng)[:max(0, count)]:
            correct_answer = word.primary_meaning
            distractors = [
                w.primary_meaning
                for w in shuffled([w for w in pool if w.id != word.id], self.rng)[:MCQ_OPTION_COUNT - 1]
            ]
            questions.append(MCQQuestion(
                word_id=word.id,
                question_text=word.word,
                phonetic=word.phonetic,
                audio=word.audio,
                correct_answer=correct_answer,
                options=shuffled([correct_answer] + distractors, self.rng)
            ))
        return questions

    def generate_spelling(self, count: int, words: Optional[List[WordData]] = None) -> List[SpellingQuestion]:
        """Build up to ``count`` questions asking for the headword of a meaning"""
        pool = self.get_studied_words() if words is None else [w for w in words if w.definitions]
        if not pool:
            return []

        return [
            SpellingQuestion(
                word_id=word.id,
                hint=word.primary_meaning,
                correct_answer=word.word,
                phonetic=word.phonetic,
                audio=word.audio
            )
            for word in shuffled(pool, self.rng)[:max(0, count)]
        ]


class QuizRun:
    """
    Walks a list of quiz questions, persisting every answer immediately.

    Each answer rates the word (quality 4 when correct, 1 otherwise) and
    writes its card state and a ``quiz`` review log straight away, in one
    transaction. Store failures propagate to the caller and leave the run
    on the same question. After the last answer a single
    QuizResult is written.
    """

    def __init__(
        self,
        store: VocabStore,
        questions: List[QuizQuestion],
        mode: QuizMode = "mcq",
        streak: Optional[StreakTracker] = None,
        rng: Optional[random.Random] = None,
        today: date = None
    ):
        self.store = store
        self.questions = list(questions)
        self.mode = mode
        self.streak = streak
        self.rng = rng
        self.today = today or date.today()
        self.index = 0
        self.correct_count = 0
        self.wrong_word_ids: List[str] = []
        self.result: Optional[QuizResultData] = None
        self._started = time.monotonic()

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.index < len(self.questions):
            return self.questions[self.index]
        return None

    @property
    def is_complete(self) -> bool:
        return self.index >= len(self.questions)

    @staticmethod
    def is_correct(question: QuizQuestion, response: str) -> bool:
        if isinstance(question, SpellingQuestion):
            return response.strip().lower() == question.correct_answer.strip().lower()
        return response == question.correct_answer

    def answer(self, response: str) -> bool:
        """Grade and persist the current answer; returns whether it was right"""
        question = self.current_question
        if question is None:
            raise PhaseTransitionError("No quiz question is waiting for an answer")

        correct = self.is_correct(question, response)
        self._record(question.word_id, correct)

        if correct:
            self.correct_count += 1
        else:
            self.wrong_word_ids.append(question.word_id)
        self.index += 1

        if self.is_complete:
            self._finish()
        return correct

    def _record(self, word_id: str, correct: bool) -> None:
        states = self.store.get_card_states([word_id])
        if states:
            updated, log = SM2Algorithm.apply_rating(
                states[0],
                CORRECT_QUALITY if correct else WRONG_QUALITY,
                mode="quiz",
                today=self.today,
                now=datetime.now(),
                rng=self.rng
            )
            self.store.save_review_batch([updated], [log])
        else:
            logger.warning("Quiz word %s has no card state; answer not scheduled", word_id)

        if self.streak:
            self.streak.notify(self.today)

    def _finish(self) -> None:
        self.result = QuizResultData(
            id=uuid.uuid4().hex,
            date=self.today,
            mode=self.mode,
            total_questions=len(self.questions),
            correct_count=self.correct_count,
            wrong_word_ids=list(self.wrong_word_ids),
            duration_seconds=int(round(time.monotonic() - self._started))
        )
        self.store.add_quiz_result(self.result)
        logger.info(
            "Quiz finished: %d/%d correct", self.correct_count, len(self.questions)
        )
