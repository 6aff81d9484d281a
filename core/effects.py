"""Side-effect intents emitted by the quiz and the runner that executes them."""

import logging
from dataclasses import dataclass

from .interfaces import SoundPlayer, SpeechSynthesizer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaySound:
    """Play the success sound."""

    def to_dict(self) -> dict:
        return {'type': 'play_sound'}


@dataclass(frozen=True)
class Speak:
    """Speak the given text."""

    text: str

    def to_dict(self) -> dict:
        return {'type': 'speak', 'text': self.text}


def effect_from_dict(data: dict):
    """Rebuild an effect intent from its wire form."""
    effect_type = data.get('type')
    if effect_type == 'play_sound':
        return PlaySound()
    if effect_type == 'speak':
        return Speak(data.get('text', ''))
    raise ValueError(f"Unknown effect type: {effect_type}")


class EffectRunner:
    """Executes effect intents through injected collaborators.

    Effects are fire-and-forget: a failing collaborator is logged and the
    remaining effects still run.
    """

    def __init__(self, sound: SoundPlayer | None = None, speech: SpeechSynthesizer | None = None):
        self.sound = sound
        self.speech = speech

    def run(self, effects: list) -> None:
        for effect in effects:
            try:
                if isinstance(effect, PlaySound):
                    if self.sound:
                        self.sound.play()
                elif isinstance(effect, Speak):
                    if self.speech:
                        self.speech.speak(effect.text)
                else:
                    logger.warning(f"Ignoring unknown effect: {effect!r}")
            except Exception as e:
                logger.error(f"Effect {effect!r} failed: {type(e).__name__}: {e}")
