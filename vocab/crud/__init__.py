from vocab.crud.user import create_user, get_user, update_user_settings
from vocab.crud.word_list import (
    create_word_list,
    get_word_list,
    get_word_lists,
    delete_word_list,
    enable_word_list,
    disable_word_list
)
from vocab.crud.word import (
    create_word,
    get_word,
    get_words_by_ids,
    get_user_words,
    get_eligible_word_ids,
    delete_word
)
from vocab.crud.card_state import (
    get_card_states,
    get_all_card_states,
    get_due_card_states,
    get_new_card_states,
    get_studied_card_states,
    upsert_card_states,
    delete_card_states
)
from vocab.crud.review_log import (
    add_review_logs,
    get_review_logs_since,
    get_review_logs,
    delete_review_logs
)
from vocab.crud.quiz_result import add_quiz_result, get_quiz_results, delete_quiz_results
from vocab.crud.streak import get_streak, save_streak

__all__ = [
    "create_user",
    "get_user",
    "update_user_settings",
    "create_word_list",
    "get_word_list",
    "get_word_lists",
    "delete_word_list",
    "enable_word_list",
    "disable_word_list",
    "create_word",
    "get_word",
    "get_words_by_ids",
    "get_user_words",
    "get_eligible_word_ids",
    "delete_word",
    "get_card_states",
    "get_all_card_states",
    "get_due_card_states",
    "get_new_card_states",
    "get_studied_card_states",
    "upsert_card_states",
    "delete_card_states",
    "add_review_logs",
    "get_review_logs_since",
    "get_review_logs",
    "delete_review_logs",
    "add_quiz_result",
    "get_quiz_results",
    "delete_quiz_results",
    "get_streak",
    "save_streak",
]
