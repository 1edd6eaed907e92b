"""User-scoped storage facade consumed by the scheduling core.

Every read and write the scheduler performs goes through ``VocabStore``.
It wraps the ``vocab.crud`` functions, converts rows to schema objects via
``vocab.mapping`` and turns SQLAlchemy failures into ``PersistenceError``
after rolling the session back.
"""

import logging
from contextlib import contextmanager
from datetime import date
from typing import Dict, Iterable, List, Optional, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vocab import crud
from vocab.exceptions import PersistenceError
from vocab.mapping import (
    card_state_from_row,
    quiz_result_from_row,
    review_log_from_row,
    settings_from_user,
    streak_from_row,
    word_from_row,
    word_row_values,
)
from vocab.models import Word
from vocab.schemas import (
    CardStateData,
    QuizResultData,
    ReviewLogData,
    StreakData,
    UserSettings,
    WordData,
)

logger = logging.getLogger(__name__)


class VocabStore:
    """Reads and writes one learner's scheduling data"""

    def __init__(self, db: Session, user_id: int):
        self.db = db
        self.user_id = user_id

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Store %s failed for user %s: %s", action, self.user_id, e)
            raise PersistenceError(f"{action} failed: {e}") from e

    # ---- settings / identity ----

    def get_settings(self) -> UserSettings:
        with self._guard("load settings"):
            return settings_from_user(crud.get_user(self.db, self.user_id))

    def update_settings(self, user_settings: UserSettings) -> None:
        with self._guard("save settings"):
            crud.update_user_settings(self.db, self.user_id, user_settings)

    # ---- words ----

    def get_eligible_word_ids(self, enabled_list_ids: List[str]) -> Set[str]:
        with self._guard("resolve eligible words"):
            return crud.get_eligible_word_ids(self.db, self.user_id, enabled_list_ids)

    def get_words(self, word_ids: Iterable[str]) -> Dict[str, WordData]:
        with self._guard("load words"):
            rows = crud.get_words_by_ids(self.db, word_ids)
        return {row.id: word_from_row(row) for row in rows}

    def get_user_words(self) -> List[WordData]:
        with self._guard("load user words"):
            return [word_from_row(row) for row in crud.get_user_words(self.db, self.user_id)]

    # ---- card states ----

    def get_card_states(self, word_ids: Iterable[str]) -> List[CardStateData]:
        with self._guard("load card states"):
            rows = crud.get_card_states(self.db, self.user_id, word_ids)
        return [card_state_from_row(row) for row in rows]

    def get_all_card_states(self) -> List[CardStateData]:
        with self._guard("load card states"):
            rows = crud.get_all_card_states(self.db, self.user_id)
        return [card_state_from_row(row) for row in rows]

    def get_due_card_states(self, word_ids: Iterable[str], today: date) -> List[CardStateData]:
        with self._guard("load due cards"):
            rows = crud.get_due_card_states(self.db, self.user_id, word_ids, today)
        return [card_state_from_row(row) for row in rows]

    def get_new_card_states(self, word_ids: Iterable[str]) -> List[CardStateData]:
        with self._guard("load new cards"):
            rows = crud.get_new_card_states(self.db, self.user_id, word_ids)
        return [card_state_from_row(row) for row in rows]

    def get_studied_card_states(self) -> List[CardStateData]:
        with self._guard("load studied cards"):
            rows = crud.get_studied_card_states(self.db, self.user_id)
        return [card_state_from_row(row) for row in rows]

    def upsert_card_states(self, states: Iterable[CardStateData]) -> None:
        with self._guard("save card states"):
            crud.upsert_card_states(self.db, self.user_id, states)

    # ---- review logs ----

    def add_review_logs(self, logs: Iterable[ReviewLogData]) -> None:
        with self._guard("append review logs"):
            crud.add_review_logs(self.db, self.user_id, logs)

    def save_review_batch(self, states: Iterable[CardStateData], logs: Iterable[ReviewLogData]) -> None:
        """Write card states and review logs in a single transaction"""
        with self._guard("save review batch"):
            crud.upsert_card_states(self.db, self.user_id, states, commit=False)
            crud.add_review_logs(self.db, self.user_id, logs, commit=False)
            self.db.commit()

    def get_review_logs_since(self, since: date) -> List[ReviewLogData]:
        with self._guard("load review logs"):
            rows = crud.get_review_logs_since(self.db, self.user_id, since)
        return [review_log_from_row(row) for row in rows]

    def get_review_logs(self) -> List[ReviewLogData]:
        with self._guard("load review logs"):
            rows = crud.get_review_logs(self.db, self.user_id)
        return [review_log_from_row(row) for row in rows]

    # ---- quiz results ----

    def add_quiz_result(self, result: QuizResultData) -> None:
        with self._guard("save quiz result"):
            crud.add_quiz_result(self.db, self.user_id, result)

    def get_quiz_results(self) -> List[QuizResultData]:
        with self._guard("load quiz results"):
            rows = crud.get_quiz_results(self.db, self.user_id)
        return [quiz_result_from_row(row) for row in rows]

    # ---- streak ----

    def get_streak(self) -> StreakData:
        with self._guard("load streak"):
            return streak_from_row(crud.get_streak(self.db, self.user_id))

    def save_streak(self, streak: StreakData) -> None:
        with self._guard("save streak"):
            crud.save_streak(self.db, self.user_id, streak)

    # ---- bulk replace (backup restore) ----

    def replace_all(
        self,
        words: List[WordData],
        card_states: List[CardStateData],
        review_logs: List[ReviewLogData],
        quiz_results: List[QuizResultData],
        user_settings: Optional[UserSettings] = None,
        streak: Optional[StreakData] = None
    ) -> None:
        """Replace all of this learner's data in one transaction"""
        with self._guard("restore data"):
            crud.delete_card_states(self.db, self.user_id, commit=False)
            crud.delete_review_logs(self.db, self.user_id, commit=False)
            crud.delete_quiz_results(self.db, self.user_id, commit=False)
            self.db.query(Word).filter(Word.user_id == self.user_id).delete(synchronize_session=False)
            # Bulk deletes bypass the identity map
            self.db.expunge_all()

            for word in words:
                self.db.merge(Word(user_id=self.user_id, **word_row_values(word)))
            crud.upsert_card_states(self.db, self.user_id, card_states, commit=False)
            crud.add_review_logs(self.db, self.user_id, review_logs, commit=False)
            for result in quiz_results:
                crud.add_quiz_result(self.db, self.user_id, result, commit=False)
            self.db.commit()

        if user_settings is not None:
            self.update_settings(user_settings)
        if streak is not None:
            self.save_streak(streak)
