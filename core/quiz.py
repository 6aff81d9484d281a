"""Quiz state machine: turns events into new sessions and effect intents."""

import logging
import random
from dataclasses import replace

from .catalog import Catalog, draw_prompt, select_eligible_pools
from .config import REVEAL_TRIGGER
from .effects import PlaySound, Speak
from .models import Commit, InputChanged, Session, Settings, SettingsChanged, ToggleReveal
from .utils import contains_hiragana, normalize, romaji_to_kana

logger = logging.getLogger(__name__)


def is_match(text: str, session: Session) -> bool:
    return session.current is not None and normalize(text) == normalize(session.current.romaji)


def failure_message(guess: str, kana: str) -> str:
    """Echo a wrong guess back with its rendering in the prompt's script."""
    romaji = guess.strip().upper()
    rendered = romaji_to_kana(romaji, hiragana=contains_hiragana(kana))
    return f"{romaji.lower()} ({rendered})"


class QuizMachine:
    """Owns the catalog and the random source; all transitions are pure otherwise."""

    def __init__(self, catalog: Catalog, rng: random.Random = None):
        self.catalog = catalog
        self.rng = rng or random.Random()

    def draw(self, settings: Settings):
        return draw_prompt(select_eligible_pools(self.catalog, settings), self.rng)

    def new_session(self, settings: Settings = None, correct: int = 0) -> Session:
        settings = settings or Settings()
        return Session(current=self.draw(settings), correct=correct, settings=settings)

    def transition(self, session: Session, event) -> tuple[Session, list]:
        """Apply one event. Returns (new_session, effects)."""
        if isinstance(event, SettingsChanged):
            return self._settings_changed(session, event.settings), []
        if isinstance(event, InputChanged):
            return self._input_changed(session, event.text)
        if isinstance(event, Commit):
            return self._commit(session)
        if isinstance(event, ToggleReveal):
            return replace(session, is_revealing=not session.is_revealing, input=''), []
        logger.warning(f"Ignoring unknown event: {event!r}")
        return session, []

    def _settings_changed(self, session: Session, settings: Settings) -> Session:
        current = session.current
        if current is None or not settings.is_enabled(current.category):
            current = self.draw(settings)
        return replace(session, settings=settings, current=current)

    def _input_changed(self, session: Session, text: str) -> tuple[Session, list]:
        if REVEAL_TRIGGER in text:
            return replace(session, is_revealing=True, input=''), []
        if session.is_revealing:
            return session, []
        if is_match(text, session):
            return self._correct(session)
        return replace(session, input=text), []

    def _commit(self, session: Session) -> tuple[Session, list]:
        if session.is_revealing:
            return replace(session, is_revealing=False, input=''), []
        if session.input == '':
            return replace(session, is_wrong=False), []
        if session.current is None:
            return session, []
        if is_match(session.input, session):
            return self._correct(session)
        return self._incorrect(session), []

    def _correct(self, session: Session) -> tuple[Session, list]:
        effects = [PlaySound(), Speak(session.current.kana)]
        new_session = replace(
            session,
            correct=session.correct + 1,
            current=self.draw(session.settings),
            is_wrong=False,
            input=''
        )
        return new_session, effects

    def _incorrect(self, session: Session) -> Session:
        return replace(
            session,
            is_wrong=failure_message(session.input, session.current.kana),
            input=''
        )
