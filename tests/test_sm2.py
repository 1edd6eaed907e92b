import random
from datetime import date, datetime, timedelta

import pytest

from vocab.schemas import CardStateData
from vocab.sm2 import SM2Algorithm, format_interval


class TestCalculateNextState:
    def test_good_ratings_follow_one_six_then_ease(self):
        first = SM2Algorithm.calculate_next_state(4, 0, 2.5, 0)
        assert (first.repetition, first.interval, first.ease_factor) == (1, 1, 2.5)

        second = SM2Algorithm.calculate_next_state(4, first.repetition, first.ease_factor, first.interval)
        assert (second.repetition, second.interval) == (2, 6)

        third = SM2Algorithm.calculate_next_state(4, second.repetition, second.ease_factor, second.interval)
        assert (third.repetition, third.interval) == (3, 15)

    def test_easy_third_repetition(self):
        result = SM2Algorithm.calculate_next_state(5, 2, 2.5, 6)
        assert result.ease_factor == 2.6
        assert result.repetition == 3
        assert result.interval == 16

    def test_second_step_depends_on_quality(self):
        assert SM2Algorithm.calculate_next_state(3, 1, 2.5, 1).interval == 4
        assert SM2Algorithm.calculate_next_state(4, 1, 2.5, 1).interval == 6
        assert SM2Algorithm.calculate_next_state(5, 1, 2.5, 1).interval == 8

    def test_hard_rating_grows_slower(self):
        hard = SM2Algorithm.calculate_next_state(3, 3, 2.5, 10)
        assert hard.ease_factor == 2.36
        # 10 * max(1.2, 2.36 * 0.8)
        assert hard.interval == 19

    @pytest.mark.parametrize("quality", [0, 1, 2])
    def test_failed_recall_resets(self, quality):
        result = SM2Algorithm.calculate_next_state(quality, 5, 2.5, 40)
        assert result.repetition == 0
        assert result.interval == 1

    def test_ease_factor_never_below_minimum(self):
        ef = 1.4
        for _ in range(5):
            ef = SM2Algorithm.calculate_next_state(0, 0, ef, 1).ease_factor
            assert ef >= 1.3
        assert ef == 1.3

    def test_interval_is_capped(self):
        result = SM2Algorithm.calculate_next_state(4, 5, 2.5, 300)
        assert result.interval == 365

    def test_float_noise_does_not_add_a_day(self):
        result = SM2Algorithm.calculate_next_state(4, 3, 1.3, 10)
        assert result.interval == 13

    def test_quality_is_clamped_and_rounded(self):
        assert SM2Algorithm.clamp_quality(7) == 5
        assert SM2Algorithm.clamp_quality(-2) == 0
        assert SM2Algorithm.clamp_quality(3.5) == 4
        assert SM2Algorithm.clamp_quality(2.4) == 2


class TestDeriveStatus:
    def test_failed_card_is_learning(self):
        assert SM2Algorithm.derive_status(0, 1, 0, "review") == "learning"

    def test_long_interval_is_mastered(self):
        assert SM2Algorithm.derive_status(4, 21, 0, "review") == "mastered"
        assert SM2Algorithm.derive_status(3, 20, 0, "review") == "review"

    def test_five_easy_in_a_row_retires(self):
        assert SM2Algorithm.derive_status(5, 10, 5, "review") == "retired"

    def test_mastered_card_retires_after_three_easy(self):
        assert SM2Algorithm.derive_status(5, 60, 3, "mastered") == "retired"
        assert SM2Algorithm.derive_status(5, 60, 3, "review") == "mastered"


class TestFuzz:
    def test_short_intervals_unchanged(self):
        rng = random.Random(1)
        for interval in (0, 1, 2):
            assert SM2Algorithm.apply_fuzz(interval, rng) == interval

    def test_medium_intervals_move_one_day(self):
        rng = random.Random(1)
        results = {SM2Algorithm.apply_fuzz(5, rng) for _ in range(50)}
        assert results == {4, 6}

    def test_long_intervals_within_twenty_percent(self):
        rng = random.Random(1)
        for _ in range(200):
            assert 80 <= SM2Algorithm.apply_fuzz(100, rng) <= 120

    def test_due_date_uses_fuzzed_interval(self):
        start = date(2024, 1, 1)
        assert SM2Algorithm.calculate_due_date(2, start) == date(2024, 1, 3)


class TestApplyRating:
    def test_fresh_card_forgotten_becomes_learning(self):
        card = SM2Algorithm.create_initial_state("w1", reference_date=date(2024, 1, 1))
        updated, log = SM2Algorithm.apply_rating(
            card, 1, today=date(2024, 1, 1), now=datetime(2024, 1, 1, 9), rng=random.Random(0)
        )
        assert updated.status == "learning"
        assert updated.interval == 1
        assert updated.due_date == date(2024, 1, 2)
        assert updated.last_review_date == date(2024, 1, 1)
        assert log.quality == 1
        assert log.previous_interval == 0
        assert log.new_interval == 1
        assert log.mode == "review"

    def test_input_card_is_not_modified(self):
        card = SM2Algorithm.create_initial_state("w1")
        SM2Algorithm.apply_rating(card, 5)
        assert card.status == "new"
        assert card.repetition == 0

    def test_easy_streak_counts_and_breaks(self):
        card = CardStateData(word_id="w1", due_date=date.today(), status="review",
                             repetition=3, interval=10, consecutive_easy_count=4)
        retired, _ = SM2Algorithm.apply_rating(card, 5)
        assert retired.status == "retired"
        assert retired.consecutive_easy_count == 5

        broken, _ = SM2Algorithm.apply_rating(card, 4)
        assert broken.consecutive_easy_count == 0
        assert broken.status != "retired"

    def test_quiz_mode_is_logged(self):
        card = SM2Algorithm.create_initial_state("w1")
        _, log = SM2Algorithm.apply_rating(card, 4, mode="quiz")
        assert log.mode == "quiz"


def test_days_overdue():
    today = date(2024, 3, 10)
    assert SM2Algorithm.get_days_overdue(today - timedelta(days=3), today) == 3
    assert SM2Algorithm.get_days_overdue(today + timedelta(days=3), today) == 0
    assert SM2Algorithm.is_due_for_review(today, today)


@pytest.mark.parametrize("days,label", [(0, "<1d"), (1, "1d"), (15, "15d"), (45, "2mo"), (400, "1y")])
def test_format_interval(days, label):
    assert format_interval(days) == label
