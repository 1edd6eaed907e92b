import logging
import math
import random
import uuid
from datetime import date, datetime, timedelta
from typing import Optional, Tuple

from vocab.config import settings
from vocab.schemas import CardStateData, CardStatus, ReviewLogData, ReviewMode, SM2Result

logger = logging.getLogger(__name__)

# Ratings the study UI offers: forget, hard, good, easy
RATING_QUALITIES = (1, 3, 4, 5)

# Second successful repetition uses a fixed step per quality
SECOND_STEP_DAYS = {3: 4, 4: 6, 5: 8}

EASY_QUALITY = 5
RETIRE_AFTER_EASY = 5
RETIRE_MASTERED_AFTER_EASY = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SM2Algorithm:
    """
    SM-2 spaced repetition algorithm for calculating review intervals.
    Based on SuperMemo 2 algorithm by Piotr Wozniak, with a
    quality-dependent second step, a damped multiplier for hard ratings,
    an interval cap, due-date fuzz and retirement of over-learned words.
    """

    @staticmethod
    def clamp_quality(quality: float) -> int:
        """Round to the nearest integer and clamp into 0-5"""
        return max(0, min(5, _round_half_up(quality)))

    @staticmethod
    def calculate_next_state(
        quality: float,
        repetition: int,
        ease_factor: float,
        interval: int,
        max_interval_days: Optional[int] = None
    ) -> SM2Result:
        """
        Calculate the next SM-2 parameters after a rating.

        Args:
            quality: Response quality (0-5). 0=total blackout, 5=perfect.
                Out-of-range and fractional values are clamped and rounded.
            repetition: Consecutive successful reviews so far
            ease_factor: Current EF (>= 1.3)
            interval: Current interval in days
            max_interval_days: Upper bound for grown intervals (defaults to config)

        Returns:
            SM2Result with the new ease factor, interval and repetition
        """
        quality = SM2Algorithm.clamp_quality(quality)
        if max_interval_days is None:
            max_interval_days = settings.max_interval_days

        # Update easiness factor based on quality
        new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        new_ef = round(max(settings.minimum_ease_factor, new_ef), 2)

        # If quality < 3, reset repetitions (failed recall)
        if quality < 3:
            new_repetition = 0
            new_interval = 1
        else:
            new_repetition = repetition + 1

            if new_repetition == 1:
                new_interval = 1
            elif new_repetition == 2:
                new_interval = SECOND_STEP_DAYS[quality]
            else:
                # Hard ratings grow slower than the ease factor alone would
                multiplier = max(1.2, new_ef * 0.8) if quality == 3 else new_ef
                # Strip float noise before ceil (e.g. 10 * 1.3 = 13.000000000000002)
                new_interval = math.ceil(round(interval * multiplier, 6))
                new_interval = min(new_interval, max_interval_days)

        return SM2Result(
            ease_factor=new_ef,
            interval=new_interval,
            repetition=new_repetition
        )

    @staticmethod
    def derive_status(
        repetition: int,
        interval: int,
        consecutive_easy_count: int,
        current_status: CardStatus
    ) -> CardStatus:
        """Derive the lifecycle status after a rating.

        Retirement wins over everything else: five easy ratings in a row,
        or three in a row for a card that was already mastered.
        """
        if consecutive_easy_count >= RETIRE_AFTER_EASY:
            return "retired"
        if current_status == "mastered" and consecutive_easy_count >= RETIRE_MASTERED_AFTER_EASY:
            return "retired"

        if repetition == 0:
            return "learning"
        if interval >= settings.mastery_threshold_days:
            return "mastered"
        return "review"

    @staticmethod
    def apply_fuzz(interval: int, rng: Optional[random.Random] = None) -> int:
        """
        Randomly perturb an interval so reviews don't cluster on one day.

        - < 3 days: unchanged
        - 3-7 days: one day earlier or later
        - > 7 days: uniformly within +-20%, rounded
        """
        rng = rng or random
        if interval < 3:
            return interval
        if interval <= 7:
            return interval + rng.choice((-1, 1))
        fuzz_range = interval * 0.2
        return _round_half_up(interval + rng.uniform(-fuzz_range, fuzz_range))

    @staticmethod
    def calculate_due_date(
        interval: int,
        from_date: date = None,
        rng: Optional[random.Random] = None
    ) -> date:
        """Calculate the fuzzed due date for an interval"""
        base_date = from_date if from_date else date.today()
        return base_date + timedelta(days=SM2Algorithm.apply_fuzz(interval, rng))

    @staticmethod
    def create_initial_state(word_id: str, reference_date: date = None) -> CardStateData:
        """
        Initialize SM-2 parameters for a new word.

        Args:
            word_id: Word the card belongs to
            reference_date: Optional reference date (defaults to today)
        """
        return CardStateData(
            word_id=word_id,
            ease_factor=settings.initial_ease_factor,
            interval=0,
            repetition=0,
            due_date=reference_date if reference_date else date.today(),
            status="new",
            consecutive_easy_count=0
        )

    @staticmethod
    def next_consecutive_easy(previous: int, quality: float) -> int:
        """Extend the easy streak on a top rating, otherwise break it"""
        if SM2Algorithm.clamp_quality(quality) == EASY_QUALITY:
            return previous + 1
        return 0

    @staticmethod
    def apply_rating(
        card: CardStateData,
        quality: float,
        mode: ReviewMode = "review",
        today: date = None,
        now: datetime = None,
        rng: Optional[random.Random] = None
    ) -> Tuple[CardStateData, ReviewLogData]:
        """
        Rate a card and return its updated copy plus the matching review log.

        The input card is not modified.
        """
        today = today if today else date.today()
        now = now if now else datetime.now()
        clamped = SM2Algorithm.clamp_quality(quality)

        result = SM2Algorithm.calculate_next_state(
            clamped,
            card.repetition,
            card.ease_factor,
            card.interval
        )
        easy_count = SM2Algorithm.next_consecutive_easy(card.consecutive_easy_count, clamped)
        status = SM2Algorithm.derive_status(
            result.repetition,
            result.interval,
            easy_count,
            card.status
        )

        updated = card.model_copy(update={
            "ease_factor": result.ease_factor,
            "interval": result.interval,
            "repetition": result.repetition,
            "due_date": SM2Algorithm.calculate_due_date(result.interval, today, rng),
            "last_review_date": today,
            "status": status,
            "consecutive_easy_count": easy_count,
        })
        log = ReviewLogData(
            id=uuid.uuid4().hex,
            word_id=card.word_id,
            quality=clamped,
            reviewed_at=now,
            previous_interval=card.interval,
            new_interval=result.interval,
            previous_ease_factor=card.ease_factor,
            new_ease_factor=result.ease_factor,
            mode=mode
        )
        logger.debug(
            "Rated %s q=%d: interval %d -> %d, EF %.2f -> %.2f, status %s -> %s",
            card.word_id, clamped, card.interval, result.interval,
            card.ease_factor, result.ease_factor, card.status, status
        )
        return updated, log

    @staticmethod
    def is_due_for_review(due_date: date, today: date = None) -> bool:
        """Check if a card is due for review"""
        return (today or date.today()) >= due_date

    @staticmethod
    def get_days_overdue(due_date: date, today: date = None) -> int:
        """Calculate how many days overdue a review is"""
        today = today or date.today()
        if today < due_date:
            return 0
        return (today - due_date).days


def format_interval(days: int) -> str:
    """Short label for a projected interval on a rating button"""
    if days <= 0:
        return "<1d"
    if days < 30:
        return f"{days}d"
    if days < 365:
        return f"{_round_half_up(days / 30)}mo"
    return f"{_round_half_up(days / 365)}y"
