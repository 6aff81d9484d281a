"""Configuration constants for kanadrill application."""

import os

# Prompt categories, in pool order
CATEGORIES = ('hiragana', 'katakana', 'words')

# Settings used for a user with no saved state
DEFAULT_SETTINGS = {
    'hiragana': True,
    'katakana': True,
    'words': False
}

# Typing this anywhere in the input switches to reveal mode
REVEAL_TRIGGER = '?'

# Language passed to speech collaborators
SPEECH_LANGUAGE = 'ja'

# Bundled catalog tables
DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'data')
HIRAGANA_TABLE = 'hiragana.json'
KATAKANA_TABLE = 'katakana.json'
WORDS_TABLE = 'words.json'

# Vocabulary record fields
WORD_KANA_FIELD = 'Vocab-kana'
WORD_MEANING_FIELD = 'Vocab-meaning'
WORD_EXPRESSION_FIELD = 'Vocab-expression'

# Long vowels written with a macron are drilled as doubled vowels
MACRON_VOWELS = {
    'ā': 'aa',
    'ē': 'ee',
    'ī': 'ii',
    'ō': 'oo',
    'ū': 'uu',
    'â': 'aa',
    'ê': 'ee',
    'î': 'ii',
    'ô': 'oo',
    'û': 'uu'
}

CONFIG_FILE = os.path.expanduser('~/.config/kanadrill/config.json')
