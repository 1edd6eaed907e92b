import json

import pytest

from vocab.backup import export_data, import_data
from vocab.exceptions import ImportFormatError
from vocab.session import SessionOrchestrator
from vocab.schemas import DailySessionState
from vocab.streak import StreakTracker


def test_export_then_restore_replaces_data(store, make_word, rng, today):
    make_word("apple")
    make_word("banana")
    orchestrator = SessionOrchestrator(store, DailySessionState(), streak=StreakTracker(store), rng=rng, today=today)
    orchestrator.start_learning()
    while not orchestrator.complete:
        orchestrator.rate(4)

    payload = export_data(store)
    exported = json.loads(payload)
    assert exported["version"] == 1
    assert len(exported["words"]) == 2
    assert len(exported["review_logs"]) == 2

    make_word("cherry")
    bundle = import_data(store, payload)

    assert len(bundle.words) == 2
    assert sorted(w.word for w in store.get_user_words()) == ["apple", "banana"]
    assert len(store.get_all_card_states()) == 2
    assert len(store.get_review_logs()) == 2
    assert store.get_streak().current_streak == 1


def test_invalid_json_is_rejected(store, make_word):
    make_word("apple")
    with pytest.raises(ImportFormatError):
        import_data(store, "not json")
    assert len(store.get_user_words()) == 1


def test_unknown_version_is_rejected(store):
    payload = json.loads(export_data(store))
    payload["version"] = 99
    with pytest.raises(ImportFormatError):
        import_data(store, json.dumps(payload))
