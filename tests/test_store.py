from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from vocab.exceptions import PersistenceError
from vocab.mapping import card_state_from_row, word_from_row
from vocab.models import CardState, Word
from vocab.schemas import UserSettings
from vocab.sm2 import SM2Algorithm


def test_new_word_gets_initial_card(store, make_word, today):
    word = make_word("apple")
    [state] = store.get_card_states([word.id])
    assert state.status == "new"
    assert state.ease_factor == 2.5
    assert state.due_date == today
    assert store.get_user_words()[0].word == "apple"


def test_null_columns_are_normalized(today):
    row = CardState(user_id=1, word_id="w", due_date=today, ease_factor=None,
                    interval=None, repetition=None, status=None, consecutive_easy_count=None)
    state = card_state_from_row(row)
    assert state.ease_factor == 2.5
    assert state.consecutive_easy_count == 0
    assert state.status == "new"


def test_malformed_definitions_are_dropped():
    row = Word(id="w", word="apple", definitions=[{"pos": "n.", "meaning": "fruit"}, "junk", {"pos": "v."}])
    word = word_from_row(row)
    assert [d.meaning for d in word.definitions] == ["fruit"]
    assert word.primary_meaning == "fruit"
    assert word.tags == []


def test_upsert_replaces_existing_state(store, make_word):
    word = make_word("apple")
    [state] = store.get_card_states([word.id])
    updated, _ = SM2Algorithm.apply_rating(state, 4)
    store.upsert_card_states([updated])
    store.upsert_card_states([updated])

    states = store.get_all_card_states()
    assert len(states) == 1
    assert states[0].repetition == 1


def test_settings_round_trip(store):
    store.update_settings(UserSettings(daily_new_card_limit=5, daily_review_limit=50, enabled_list_ids=["a"]))
    loaded = store.get_settings()
    assert loaded.daily_new_card_limit == 5
    assert loaded.enabled_list_ids == ["a"]


def test_review_logs_since_day_start(store, make_word, today):
    word = make_word("apple")
    [state] = store.get_card_states([word.id])
    _, log = SM2Algorithm.apply_rating(state, 4, today=today, now=datetime.combine(today, datetime.min.time()))
    store.add_review_logs([log])
    assert [entry.id for entry in store.get_review_logs_since(today)] == [log.id]


def test_database_errors_become_persistence_errors(store, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr("vocab.crud.get_all_card_states", broken)
    with pytest.raises(PersistenceError):
        store.get_all_card_states()
