from datetime import date, timedelta

from vocab.daily_state import load_daily_state, save_daily_state
from vocab.schemas import DailySessionState


def test_state_resets_on_new_day():
    yesterday = date.today() - timedelta(days=1)
    state = DailySessionState(day=yesterday, new_cards_shown=True, session_words={"w": 3})
    assert state.ensure_day(date.today())
    assert not state.new_cards_shown
    assert state.session_words == {}
    assert not state.ensure_day(date.today())


def test_record_quality_keeps_the_worst():
    state = DailySessionState()
    state.record_quality("w", 4)
    state.record_quality("w", 1)
    state.record_quality("w", 5)
    assert state.session_words == {"w": 1}


def test_saved_per_user(tmp_path):
    path = str(tmp_path / "session.json")
    state = DailySessionState(new_cards_shown=True, session_words={"w": 3})
    save_daily_state(1, state, path=path)
    save_daily_state(2, DailySessionState(), path=path)

    assert load_daily_state(1, path=path) == state
    assert not load_daily_state(2, path=path).new_cards_shown
    assert load_daily_state(3, path=path) == DailySessionState()


def test_corrupt_file_starts_fresh(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert load_daily_state(1, path=str(path)).session_words == {}
