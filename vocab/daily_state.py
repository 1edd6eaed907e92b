"""File-backed storage for ``DailySessionState``, one entry per learner."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from vocab.config import settings
from vocab.schemas import DailySessionState

logger = logging.getLogger(__name__)


def _read_all(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8") or "{}")
    except ValueError:
        logger.warning("Session state file %s is not valid JSON, starting fresh", path)
        return {}


def load_daily_state(user_id: int, path: Optional[str] = None) -> DailySessionState:
    """Today's session memory for a learner (a fresh one when none is stored)"""
    raw = _read_all(Path(path or settings.session_state_path)).get(str(user_id))
    if raw is None:
        return DailySessionState()
    try:
        return DailySessionState.model_validate(raw)
    except ValidationError:
        logger.warning("Discarding unreadable session state for user %s", user_id)
        return DailySessionState()


def save_daily_state(user_id: int, state: DailySessionState, path: Optional[str] = None) -> None:
    target = Path(path or settings.session_state_path)
    raw = _read_all(target)
    raw[str(user_id)] = state.model_dump(mode="json")
    target.write_text(json.dumps(raw, indent=2), encoding="utf-8")
