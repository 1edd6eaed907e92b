import logging
from datetime import datetime

from pydantic import ValidationError

from vocab.exceptions import ImportFormatError
from vocab.schemas import ExportBundle
from vocab.store import VocabStore

logger = logging.getLogger(__name__)

EXPORT_VERSION = 1


def export_data(store: VocabStore) -> str:
    """Serialize a learner's words, progress, settings and streak to JSON"""
    bundle = ExportBundle(
        version=EXPORT_VERSION,
        export_date=datetime.now(),
        words=store.get_user_words(),
        card_states=store.get_all_card_states(),
        review_logs=store.get_review_logs(),
        quiz_results=store.get_quiz_results(),
        settings=store.get_settings(),
        streak=store.get_streak()
    )
    return bundle.model_dump_json(indent=2)


def import_data(store: VocabStore, payload: str) -> ExportBundle:
    """
    Replace a learner's data with the contents of an export.
    
    Raises:
        ImportFormatError: payload is not valid JSON of a supported version
    """
    try:
        bundle = ExportBundle.model_validate_json(payload)
    except ValidationError as e:
        raise ImportFormatError(f"Invalid backup file: {e}") from e
    
    if bundle.version != EXPORT_VERSION:
        raise ImportFormatError(f"Unsupported backup version: {bundle.version}")
    
    store.replace_all(
        bundle.words,
        bundle.card_states,
        bundle.review_logs,
        bundle.quiz_results,
        user_settings=bundle.settings,
        streak=bundle.streak
    )
    logger.info(
        "Imported %d word(s), %d card state(s), %d review log(s)",
        len(bundle.words), len(bundle.card_states), len(bundle.review_logs)
    )
    return bundle
