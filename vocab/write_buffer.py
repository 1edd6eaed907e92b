import logging
from typing import Dict, List

from vocab.exceptions import PersistenceError
from vocab.schemas import CardStateData, ReviewLogData
from vocab.store import VocabStore

logger = logging.getLogger(__name__)


class WriteAheadBuffer:
    """
    Accumulates rating results until they can be written in one batch.

    Card states are deduplicated by word ID (last write wins) while every
    review log is kept. The buffer is only cleared after the store confirms
    the write, so a failed flush can simply be retried later.
    """

    def __init__(self):
        self._states: Dict[str, CardStateData] = {}
        self._logs: List[ReviewLogData] = []

    def __len__(self) -> int:
        return len(self._logs)

    @property
    def pending(self) -> bool:
        return bool(self._states or self._logs)

    @property
    def states(self) -> List[CardStateData]:
        return list(self._states.values())

    @property
    def logs(self) -> List[ReviewLogData]:
        return list(self._logs)

    def add(self, state: CardStateData, log: ReviewLogData) -> None:
        self._states[state.word_id] = state
        self._logs.append(log)

    def flush(self, store: VocabStore) -> bool:
        """
        Write everything buffered in a single transaction.

        Returns:
            True when the buffer is empty afterwards, False if the write
            failed and the entries were kept for a retry
        """
        if not self.pending:
            return True

        states, logs = self.states, self.logs
        try:
            store.save_review_batch(states, logs)
        except PersistenceError:
            logger.warning(
                "Flush of %d card state(s) / %d log(s) failed; keeping buffer",
                len(states), len(logs), exc_info=True
            )
            return False

        self._states.clear()
        self._logs.clear()
        logger.info("Flushed %d card state(s) and %d review log(s)", len(states), len(logs))
        return True
