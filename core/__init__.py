from .models import Prompt, Settings, Session, SettingsChanged, InputChanged, Commit, ToggleReveal
from .catalog import Catalog, CatalogError, build_catalog, select_eligible_pools, draw_prompt
from .quiz import QuizMachine
from .drill import Drill
from .effects import PlaySound, Speak, EffectRunner, effect_from_dict
from .interfaces import SoundPlayer, SpeechSynthesizer, Storage
from .utils import normalize, normalize_romaji, kana_to_romaji, romaji_to_kana, contains_hiragana
from .config import CATEGORIES, DEFAULT_SETTINGS, REVEAL_TRIGGER

__all__ = [
    'Prompt', 'Settings', 'Session',
    'SettingsChanged', 'InputChanged', 'Commit', 'ToggleReveal',
    'Catalog', 'CatalogError', 'build_catalog', 'select_eligible_pools', 'draw_prompt',
    'QuizMachine', 'Drill',
    'PlaySound', 'Speak', 'EffectRunner', 'effect_from_dict',
    'SoundPlayer', 'SpeechSynthesizer', 'Storage',
    'normalize', 'normalize_romaji', 'kana_to_romaji', 'romaji_to_kana', 'contains_hiragana',
    'CATEGORIES', 'DEFAULT_SETTINGS', 'REVEAL_TRIGGER'
]
