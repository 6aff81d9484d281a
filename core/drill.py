"""Session owner: routes events through the quiz and persists progress."""

import logging

from .interfaces import Storage
from .models import Settings
from .quiz import QuizMachine

logger = logging.getLogger(__name__)


class Drill:
    """One user's drill.

    Settings and the correct count are loaded from storage on construction
    and saved back after every event.
    """

    def __init__(self, machine: QuizMachine, storage: Storage, user_id: str = "default",
                 default_settings: Settings = None):
        self.machine = machine
        self.storage = storage
        self.user_id = user_id
        settings, correct = self._load(default_settings or Settings())
        self._session = machine.new_session(settings, correct)

    def _load(self, default_settings: Settings) -> tuple[Settings, int]:
        state = self.storage.load_state(self.user_id)
        if not state:
            return default_settings, 0
        try:
            settings = Settings.from_dict(state.get('settings') or default_settings.to_dict())
            correct = max(int(state.get('correct', 0)), 0)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Discarding unreadable state for {self.user_id}: {e}")
            return default_settings, 0
        logger.info(f"Restored {self.user_id}: {correct} correct, settings {settings.to_dict()}")
        return settings, correct

    @property
    def session(self):
        return self._session

    @property
    def settings(self) -> Settings:
        return self._session.settings

    @property
    def correct(self) -> int:
        return self._session.correct

    def dispatch(self, event) -> list:
        """Apply an event, save progress and return the effects to execute."""
        self._session, effects = self.machine.transition(self._session, event)
        self.storage.save_state(self._session.persisted(), self.user_id)
        return effects
