"""Row <-> schema adapters between the ORM layer and the scheduling core.

Stored rows may carry NULLs for columns added after they were written
(e.g. ``consecutive_easy_count``) or loosely-shaped JSON. Everything is
normalized here so the core only ever sees complete schema objects.
"""

from typing import Any, Dict, Optional

from vocab.config import settings
from vocab.models import CardState, QuizResult, ReviewLog, StreakRecord, User, Word
from vocab.schemas import (
    CardStateData,
    Definition,
    QuizResultData,
    ReviewLogData,
    StreakData,
    UserSettings,
    WordData,
)


def _definition(raw: Any) -> Optional[Definition]:
    if isinstance(raw, dict) and raw.get("meaning"):
        return Definition(pos=raw.get("pos") or "", meaning=raw["meaning"])
    return None


def word_from_row(row: Word) -> WordData:
    definitions = [d for d in (_definition(raw) for raw in (row.definitions or [])) if d]
    return WordData(
        id=row.id,
        word=row.word,
        phonetic=row.phonetic,
        audio=row.audio,
        definitions=definitions,
        example=row.example,
        example_translation=row.example_translation,
        tags=list(row.tags or []),
        source=row.source or "user",
        list_id=row.list_id,
    )


def word_row_values(word: WordData) -> Dict[str, Any]:
    return {
        "id": word.id,
        "word": word.word,
        "phonetic": word.phonetic,
        "audio": word.audio,
        "definitions": [d.model_dump() for d in word.definitions],
        "example": word.example,
        "example_translation": word.example_translation,
        "tags": list(word.tags),
        "source": word.source,
        "list_id": word.list_id,
    }


def card_state_from_row(row: CardState) -> CardStateData:
    return CardStateData(
        word_id=row.word_id,
        ease_factor=row.ease_factor if row.ease_factor is not None else settings.initial_ease_factor,
        interval=row.interval or 0,
        repetition=row.repetition or 0,
        due_date=row.due_date,
        last_review_date=row.last_review_date,
        status=row.status or "new",
        consecutive_easy_count=row.consecutive_easy_count or 0,
    )


def card_state_row_values(state: CardStateData) -> Dict[str, Any]:
    return {
        "word_id": state.word_id,
        "ease_factor": state.ease_factor,
        "interval": state.interval,
        "repetition": state.repetition,
        "due_date": state.due_date,
        "last_review_date": state.last_review_date,
        "status": state.status,
        "consecutive_easy_count": state.consecutive_easy_count,
    }


def review_log_from_row(row: ReviewLog) -> ReviewLogData:
    return ReviewLogData(
        id=row.id,
        word_id=row.word_id,
        quality=row.quality,
        reviewed_at=row.reviewed_at,
        previous_interval=row.previous_interval or 0,
        new_interval=row.new_interval or 0,
        previous_ease_factor=row.previous_ease_factor,
        new_ease_factor=row.new_ease_factor,
        mode=row.mode or "review",
    )


def review_log_row_values(log: ReviewLogData) -> Dict[str, Any]:
    return log.model_dump()


def quiz_result_from_row(row: QuizResult) -> QuizResultData:
    return QuizResultData(
        id=row.id,
        date=row.date,
        mode=row.mode,
        total_questions=row.total_questions,
        correct_count=row.correct_count,
        wrong_word_ids=list(row.wrong_word_ids or []),
        duration_seconds=row.duration_seconds or 0,
    )


def quiz_result_row_values(result: QuizResultData) -> Dict[str, Any]:
    return result.model_dump()


def settings_from_user(user: Optional[User]) -> UserSettings:
    if user is None:
        return UserSettings(
            daily_new_card_limit=settings.default_daily_new_card_limit,
            daily_review_limit=settings.default_daily_review_limit,
        )
    return UserSettings(
        daily_new_card_limit=user.daily_new_card_limit,
        daily_review_limit=user.daily_review_limit,
        enabled_list_ids=list(user.enabled_list_ids or []),
    )


def streak_from_row(row: Optional[StreakRecord]) -> StreakData:
    if row is None:
        return StreakData()
    return StreakData(
        current_streak=row.current_streak or 0,
        longest_streak=row.longest_streak or 0,
        last_active_date=row.last_active_date,
        active_dates=list(row.active_dates or []),
    )


def streak_row_values(streak: StreakData) -> Dict[str, Any]:
    return {
        "current_streak": streak.current_streak,
        "longest_streak": streak.longest_streak,
        "last_active_date": streak.last_active_date,
        "active_dates": [d.isoformat() for d in streak.active_dates],
    }
