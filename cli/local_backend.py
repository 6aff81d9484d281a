"""In-process backend with the same surface as the REST client."""

import random

from core.catalog import build_catalog
from core.drill import Drill
from core.interfaces import Storage
from core.models import Commit, InputChanged, Settings, SettingsChanged, ToggleReveal
from core.quiz import QuizMachine


class LocalBackend:
    """Runs the drill directly against a storage, no server needed."""

    base_url = 'local'

    def __init__(self, storage: Storage, user_id: str = "default", rng: random.Random = None,
                 catalog=None):
        machine = QuizMachine(catalog or build_catalog(), rng)
        try:
            config = storage.load_config()
        except FileNotFoundError:
            config = {}
        self.drill = Drill(machine, storage, user_id, Settings.from_dict(config.get('default_settings')))

    def _snapshot(self, effects: list = None) -> dict:
        return {
            'session': self.drill.session.to_dict(),
            'has_prompt': self.drill.session.current is not None,
            'effects': [effect.to_dict() for effect in effects or []]
        }

    def health_check(self) -> dict:
        return {'service': 'kanadrill (local)', 'status': 'ok'}

    def get_session(self) -> dict:
        return self._snapshot()

    def send_input(self, text: str) -> dict:
        return self._snapshot(self.drill.dispatch(InputChanged(text)))

    def commit(self) -> dict:
        return self._snapshot(self.drill.dispatch(Commit()))

    def toggle_reveal(self) -> dict:
        return self._snapshot(self.drill.dispatch(ToggleReveal()))

    def change_settings(self, settings: dict) -> dict:
        return self._snapshot(self.drill.dispatch(SettingsChanged(Settings.from_dict(settings))))
