from datetime import date, timedelta

from vocab.schemas import StreakData
from vocab.streak import StreakTracker


def test_consecutive_days_extend_streak():
    day = date(2024, 5, 1)
    streak = StreakData()
    for offset in range(3):
        streak = StreakTracker.advance(streak, day + timedelta(days=offset))
    assert streak.current_streak == 3
    assert streak.longest_streak == 3
    assert len(streak.active_dates) == 3


def test_gap_resets_current_but_keeps_longest():
    streak = StreakData(current_streak=4, longest_streak=4, last_active_date=date(2024, 5, 1))
    streak = StreakTracker.advance(streak, date(2024, 5, 3))
    assert streak.current_streak == 1
    assert streak.longest_streak == 4


def test_same_day_is_counted_once():
    day = date(2024, 5, 1)
    streak = StreakTracker.advance(StreakData(), day)
    assert StreakTracker.advance(streak, day) is streak


def test_record_activity_persists(store, today):
    StreakTracker(store).record_activity(today)
    saved = store.get_streak()
    assert saved.current_streak == 1
    assert saved.active_dates == [today]


def test_notify_swallows_store_failures(store, monkeypatch):
    def broken():
        raise RuntimeError("boom")

    monkeypatch.setattr(store, "get_streak", broken)
    assert StreakTracker(store).notify() is None
