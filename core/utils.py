"""Romanization helpers for kanadrill application."""

import re

import jaconv
import pykakasi

from .config import MACRON_VOWELS

_kakasi = pykakasi.kakasi()

HIRAGANA_RE = re.compile(r'[ぁ-ゖゝゞ]')
KANA_RE = re.compile(r'[ぁ-ゖゝゞァ-ヺー-ヾ]')


def normalize(text: str) -> str:
    """Normalize an answer for comparison: trim and lower-case."""
    return text.strip().lower()


def normalize_romaji(romaji: str) -> str:
    """Lower-case a romanization, spell macron vowels double and drop apostrophes."""
    romaji = romaji.strip().lower()
    for macron, double in MACRON_VOWELS.items():
        romaji = romaji.replace(macron, double)
    return romaji.replace("'", '').replace('’', '')


def kana_to_romaji(kana: str) -> str:
    """Transliterate kana into normalized Hepburn romaji."""
    items = _kakasi.convert(kana)
    return normalize_romaji(''.join(item['hepburn'] for item in items))


def contains_hiragana(text: str) -> bool:
    return bool(HIRAGANA_RE.search(text))


def romaji_to_kana(romaji: str, hiragana: bool = True) -> str:
    """Best-effort rendering of typed romaji into hiragana or katakana.

    Returns an empty string when nothing in the text converts to kana.
    Otherwise this is whatever jaconv makes of the text: a stray consonant
    may come out as a small tsu ("kax" gives かっ) or pass through as a
    latin letter.
    """
    kana = jaconv.alphabet2kana(romaji.lower())
    if not KANA_RE.search(kana):
        return ''
    if hiragana:
        return kana
    return jaconv.hira2kata(kana)
