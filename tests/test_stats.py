from datetime import timedelta

from vocab.stats import compute_progress


def test_progress_counts_statuses_and_forecast(store, make_word, set_card, today):
    make_word("fresh")
    set_card(make_word("overdue").id, due_offset=-5)
    set_card(make_word("soon").id, due_offset=2)
    set_card(make_word("gone").id, status="retired", due_offset=1)

    progress = compute_progress(store, today=today, forecast_days=3)

    assert progress.total_words == 4
    assert progress.status_counts == {"new": 1, "review": 2, "retired": 1}
    assert [(d.date, d.count) for d in progress.due_forecast] == [
        (today, 1),
        (today + timedelta(days=1), 0),
        (today + timedelta(days=2), 1),
    ]
    assert progress.quiz_accuracy is None


def test_daily_reviews_cover_history_window(store, today):
    progress = compute_progress(store, today=today, history_days=7)
    assert len(progress.daily_reviews) == 7
    assert progress.daily_reviews[-1].date == today
    assert progress.total_reviews == 0
