import logging
from datetime import date
from typing import List

from vocab.schemas import DueCards, ReviewCard, ScheduledQueue
from vocab.store import VocabStore

logger = logging.getLogger(__name__)


class DueCardSelector:
    """Turns stored card states into today's bounded study queue"""

    def __init__(self, store: VocabStore):
        self.store = store

    def select_due_cards(
        self,
        daily_new_limit: int,
        daily_review_limit: int,
        enabled_list_ids: List[str],
        today: date = None
    ) -> DueCards:
        """
        Pick today's review and new cards.

        Review cards are due on or before today and neither new nor retired,
        most overdue first, lower ease factor first among equally-due cards.
        New cards keep the store's stable order. Both lists are truncated to
        their daily limit and returned separately.
        """
        today = today or date.today()
        eligible = self.store.get_eligible_word_ids(enabled_list_ids)
        if not eligible:
            return DueCards()

        due = [
            c for c in self.store.get_due_card_states(eligible, today)
            if c.due_date <= today and c.status not in ("new", "retired")
        ]
        due.sort(key=lambda c: (c.due_date, c.ease_factor))
        review_cards = due[:max(0, daily_review_limit)]

        fresh = [c for c in self.store.get_new_card_states(eligible) if c.status == "new"]
        new_cards = fresh[:max(0, daily_new_limit)]

        logger.debug(
            "Selected %d/%d review and %d/%d new cards from %d eligible words",
            len(review_cards), len(due), len(new_cards), len(fresh), len(eligible)
        )
        return DueCards(review_cards=review_cards, new_cards=new_cards)

    def build_queue(self, due: DueCards) -> ScheduledQueue:
        """Pair card states with their words, dropping cards whose word is gone"""
        word_ids = [c.word_id for c in due.review_cards + due.new_cards]
        words = self.store.get_words(word_ids)

        def pair(states) -> List[ReviewCard]:
            cards = []
            for state in states:
                word = words.get(state.word_id)
                if word is None:
                    logger.warning("Skipping card %s: word not found", state.word_id)
                    continue
                cards.append(ReviewCard(card_state=state, word=word))
            return cards

        return ScheduledQueue(review_cards=pair(due.review_cards), new_cards=pair(due.new_cards))

    def scheduled_queue(
        self,
        daily_new_limit: int,
        daily_review_limit: int,
        enabled_list_ids: List[str],
        today: date = None,
        include_new: bool = True
    ) -> ScheduledQueue:
        """Select and pair in one step; new cards can be left out entirely"""
        due = self.select_due_cards(daily_new_limit, daily_review_limit, enabled_list_ids, today)
        if not include_new:
            due = DueCards(review_cards=due.review_cards)
        return self.build_queue(due)
