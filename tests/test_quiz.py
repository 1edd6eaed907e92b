import pytest
from sqlalchemy.exc import OperationalError

from vocab.exceptions import PersistenceError, PhaseTransitionError
from vocab.quiz import QuizGenerator, QuizRun, shuffled
from vocab.schemas import SpellingQuestion


@pytest.fixture
def studied(make_word, set_card):
    """Create words and mark them as already studied"""
    def _studied(*words):
        created = []
        for w in words:
            word = make_word(w, meaning=f"{w} meaning")
            set_card(word.id, status="review", due_offset=3, repetition=1, interval=3)
            created.append(word)
        return created
    return _studied


def test_mcq_needs_four_studied_words(store, rng, studied, make_word):
    studied("apple", "banana", "cherry")
    make_word("unseen")
    assert QuizGenerator(store, rng).generate_mcq(10) == []


def test_mcq_options_hold_one_correct_answer(store, rng, studied):
    studied("apple", "banana", "cherry", "damson", "elder")
    questions = QuizGenerator(store, rng).generate_mcq(3)

    assert len(questions) == 3
    for question in questions:
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert question.options.count(question.correct_answer) == 1
        assert question.correct_answer == f"{question.question_text} meaning"


def test_mcq_count_larger_than_pool(store, rng, studied):
    studied("apple", "banana", "cherry", "damson")
    assert len(QuizGenerator(store, rng).generate_mcq(50)) == 4


def test_new_words_are_not_quizzed(store, rng, studied, make_word):
    studied("apple")
    make_word("unseen")
    questions = QuizGenerator(store, rng).generate_spelling(10)
    assert [q.correct_answer for q in questions] == ["apple"]


def test_spelling_is_case_and_space_insensitive():
    question = SpellingQuestion(word_id="w", hint="a fruit", correct_answer="Apple")
    assert QuizRun.is_correct(question, "  apple ")
    assert not QuizRun.is_correct(question, "appel")


def test_run_rates_words_and_records_result(store, rng, studied, today):
    apple, banana = studied("apple", "banana")
    questions = sorted(QuizGenerator(store, rng).generate_spelling(2), key=lambda q: q.correct_answer)
    run = QuizRun(store, questions, mode="spelling", rng=rng, today=today)

    assert run.answer("apple") is True
    assert run.answer("wrong") is False
    assert run.is_complete

    states = {s.word_id: s for s in store.get_card_states([apple.id, banana.id])}
    assert states[apple.id].repetition == 2
    assert states[banana.id].status == "learning"

    logs = store.get_review_logs()
    assert [log.quality for log in logs] == [4, 1]
    assert {log.mode for log in logs} == {"quiz"}

    result = store.get_quiz_results()[0]
    assert result.total_questions == 2
    assert result.correct_count == 1
    assert result.wrong_word_ids == [banana.id]
    assert result.date == today


def test_answer_after_completion_is_rejected(store):
    run = QuizRun(store, [])
    assert run.is_complete
    with pytest.raises(PhaseTransitionError):
        run.answer("anything")


def test_shuffled_keeps_items_and_input(rng):
    items = list(range(10))
    result = shuffled(items, rng)
    assert sorted(result) == items
    assert items == list(range(10))


def _fail_log_writes(monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr("vocab.crud.add_review_logs", broken)


def test_failed_answer_writes_nothing_and_can_be_retried(store, rng, studied, today, monkeypatch):
    [apple] = studied("apple")
    questions = QuizGenerator(store, rng).generate_spelling(1)
    run = QuizRun(store, questions, mode="spelling", rng=rng, today=today)

    _fail_log_writes(monkeypatch)
    with pytest.raises(PersistenceError):
        run.answer("apple")

    assert run.index == 0
    assert run.correct_count == 0
    assert run.wrong_word_ids == []
    [state] = store.get_card_states([apple.id])
    assert (state.repetition, state.interval) == (1, 3)
    assert store.get_review_logs() == []
    assert store.get_quiz_results() == []

    monkeypatch.undo()
    assert run.answer("apple") is True

    [state] = store.get_card_states([apple.id])
    assert (state.repetition, state.interval) == (2, 6)
    assert len(store.get_review_logs()) == 1
    assert store.get_quiz_results()[0].correct_count == 1
