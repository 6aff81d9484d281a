"""Domain models for kanadrill application."""

from dataclasses import dataclass, field, replace

from .config import CATEGORIES, DEFAULT_SETTINGS


@dataclass(frozen=True)
class Prompt:
    """One quiz item: a kana glyph or vocabulary word with its answer key."""

    kana: str
    romaji: str
    category: str
    meaning: str | None = None
    expression: str | None = None

    def to_dict(self) -> dict:
        return {
            'kana': self.kana,
            'romaji': self.romaji,
            'category': self.category,
            'meaning': self.meaning,
            'expression': self.expression
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Prompt':
        return cls(
            kana=data['kana'],
            romaji=data['romaji'],
            category=data['category'],
            meaning=data.get('meaning'),
            expression=data.get('expression')
        )


@dataclass(frozen=True)
class Settings:
    """Which catalog categories are eligible for sampling."""

    hiragana: bool = DEFAULT_SETTINGS['hiragana']
    katakana: bool = DEFAULT_SETTINGS['katakana']
    words: bool = DEFAULT_SETTINGS['words']

    def is_enabled(self, category: str) -> bool:
        return category in CATEGORIES and bool(getattr(self, category))

    def any_enabled(self) -> bool:
        return any(self.is_enabled(category) for category in CATEGORIES)

    def toggled(self, category: str) -> 'Settings':
        """Return a copy with one category flipped."""
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category}")
        return replace(self, **{category: not getattr(self, category)})

    def to_dict(self) -> dict:
        return {category: getattr(self, category) for category in CATEGORIES}

    @classmethod
    def from_dict(cls, data: dict | None) -> 'Settings':
        data = data or {}
        return cls(**{
            category: bool(data.get(category, DEFAULT_SETTINGS[category]))
            for category in CATEGORIES
        })


@dataclass(frozen=True)
class Session:
    """Quiz state for one user.

    ``is_wrong`` is either False or the diagnostic shown after a failed
    attempt. ``current`` is None only when no category is enabled.
    """

    current: Prompt | None = None
    input: str = ''
    is_wrong: str | bool = False
    is_revealing: bool = False
    correct: int = 0
    settings: Settings = field(default_factory=Settings)

    def to_dict(self) -> dict:
        return {
            'current': self.current.to_dict() if self.current else None,
            'input': self.input,
            'is_wrong': self.is_wrong,
            'is_revealing': self.is_revealing,
            'correct': self.correct,
            'settings': self.settings.to_dict()
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Session':
        current = data.get('current')
        return cls(
            current=Prompt.from_dict(current) if current else None,
            input=data.get('input', ''),
            is_wrong=data.get('is_wrong') or False,
            is_revealing=data.get('is_revealing', False),
            correct=data.get('correct', 0),
            settings=Settings.from_dict(data.get('settings'))
        )

    def persisted(self) -> dict:
        """The part of the session that survives a restart."""
        return {
            'settings': self.settings.to_dict(),
            'correct': self.correct
        }


# Inbound events

@dataclass(frozen=True)
class SettingsChanged:
    settings: Settings


@dataclass(frozen=True)
class InputChanged:
    text: str


@dataclass(frozen=True)
class Commit:
    pass


@dataclass(frozen=True)
class ToggleReveal:
    pass
