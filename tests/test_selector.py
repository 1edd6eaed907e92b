from vocab.crud import create_word_list, enable_word_list
from vocab.schemas import Definition, RawWordEntry
from vocab.selector import DueCardSelector


def test_review_cards_sorted_by_due_date_then_ease(store, make_word, set_card):
    a, b, c = make_word("alpha"), make_word("beta"), make_word("gamma")
    set_card(a.id, due_offset=0, ease_factor=2.5)
    set_card(b.id, due_offset=-3, ease_factor=2.5)
    set_card(c.id, due_offset=0, ease_factor=1.8)

    due = DueCardSelector(store).select_due_cards(10, 10, [])

    assert [card.word_id for card in due.review_cards] == [b.id, c.id, a.id]
    assert due.new_cards == []


def test_future_new_and_retired_cards_are_not_reviews(store, make_word, set_card):
    future, retired, fresh = make_word("future"), make_word("retired"), make_word("fresh")
    set_card(future.id, due_offset=2)
    set_card(retired.id, status="retired", due_offset=-10)

    due = DueCardSelector(store).select_due_cards(10, 10, [])

    assert due.review_cards == []
    assert [card.word_id for card in due.new_cards] == [fresh.id]


def test_limits_truncate_each_list(store, make_word, set_card):
    for i in range(5):
        set_card(make_word(f"review{i}").id, due_offset=-i)
    for i in range(5):
        make_word(f"new{i}")

    due = DueCardSelector(store).select_due_cards(2, 3, [])

    assert len(due.review_cards) == 3
    assert len(due.new_cards) == 2


def test_zero_limits_give_empty_queue(store, make_word):
    make_word("lonely")
    queue = DueCardSelector(store).scheduled_queue(0, 0, [])
    assert queue.cards == []


def test_only_enabled_lists_are_eligible(db, user, store):
    entries = [RawWordEntry(word=w, definitions=[Definition(meaning=w)]) for w in ("one", "two")]
    enabled = create_word_list(db, "Enabled", entries, list_id="enabled")
    create_word_list(db, "Other", entries, list_id="other")
    assert enable_word_list(db, user.id, enabled.id) == 2

    due = DueCardSelector(store).select_due_cards(10, 10, ["enabled"])

    words = store.get_words(c.word_id for c in due.new_cards)
    assert {w.list_id for w in words.values()} == {"enabled"}
    assert len(due.new_cards) == 2


def test_queue_puts_reviews_before_new_cards(store, make_word, set_card):
    fresh = make_word("fresh")
    old = make_word("old")
    set_card(old.id, due_offset=-1)

    queue = DueCardSelector(store).scheduled_queue(10, 10, [])

    assert [card.word.word for card in queue.cards] == ["old", "fresh"]
    assert queue.new_cards[0].word.id == fresh.id


def test_include_new_false_skips_new_cards(store, make_word):
    make_word("fresh")
    queue = DueCardSelector(store).scheduled_queue(10, 10, [], include_new=False)
    assert queue.new_cards == []
