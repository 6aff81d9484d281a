"""Static content catalog: kana tables and vocabulary turned into prompts."""

import json
import logging
import os
import random
from dataclasses import dataclass

from .config import (
    DATA_DIR, HIRAGANA_TABLE, KATAKANA_TABLE, WORDS_TABLE,
    WORD_KANA_FIELD, WORD_MEANING_FIELD, WORD_EXPRESSION_FIELD
)
from .models import Prompt, Settings
from .utils import kana_to_romaji, normalize_romaji

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when catalog source data is malformed."""


@dataclass(frozen=True)
class Catalog:
    """The three prompt pools, read-only for the life of the process."""

    hiragana: tuple[Prompt, ...]
    katakana: tuple[Prompt, ...]
    words: tuple[Prompt, ...]

    def counts(self) -> dict:
        return {
            'hiragana': len(self.hiragana),
            'katakana': len(self.katakana),
            'words': len(self.words)
        }


def load_table(name: str, data_dir: str = None):
    """Load one bundled JSON table."""
    path = os.path.join(data_dir or DATA_DIR, name)
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _kana_prompts(table: dict, category: str) -> tuple[Prompt, ...]:
    if not isinstance(table, dict) or not table:
        raise CatalogError(f"The {category} table must be a non-empty mapping")
    prompts = []
    for kana, romaji in table.items():
        kana = str(kana).strip()
        romaji = normalize_romaji(str(romaji or ''))
        if not kana or not romaji:
            raise CatalogError(f"Malformed {category} entry: {kana!r} -> {romaji!r}")
        prompts.append(Prompt(kana=kana, romaji=romaji, category=category))
    return tuple(prompts)


def _word_prompts(records: list) -> tuple[Prompt, ...]:
    if not isinstance(records, list) or not records:
        raise CatalogError("The words table must be a non-empty list")
    prompts = []
    for index, record in enumerate(records):
        kana = str(record.get(WORD_KANA_FIELD) or '').strip() if isinstance(record, dict) else ''
        if not kana:
            raise CatalogError(f"Word #{index} has no {WORD_KANA_FIELD} field")
        romaji = kana_to_romaji(kana)
        if not romaji:
            raise CatalogError(f"Word #{index} ({kana}) has no romanization")
        prompts.append(Prompt(
            kana=kana,
            romaji=romaji,
            category='words',
            meaning=record.get(WORD_MEANING_FIELD) or None,
            expression=record.get(WORD_EXPRESSION_FIELD) or None
        ))
    return tuple(prompts)


def build_catalog(hiragana: dict = None, katakana: dict = None, words: list = None) -> Catalog:
    """Build the catalog from source tables, defaulting to the bundled ones."""
    if hiragana is None:
        hiragana = load_table(HIRAGANA_TABLE)
    if katakana is None:
        katakana = load_table(KATAKANA_TABLE)
    if words is None:
        words = load_table(WORDS_TABLE)

    catalog = Catalog(
        hiragana=_kana_prompts(hiragana, 'hiragana'),
        katakana=_kana_prompts(katakana, 'katakana'),
        words=_word_prompts(words)
    )
    logger.info(f"Catalog built: {catalog.counts()}")
    return catalog


def select_eligible_pools(catalog: Catalog, settings: Settings) -> tuple:
    """Return the pools whose category is enabled, in catalog order."""
    pools = []
    if settings.hiragana:
        pools.append(catalog.hiragana)
    if settings.katakana:
        pools.append(catalog.katakana)
    if settings.words:
        pools.append(catalog.words)
    return tuple(pools)


def draw_prompt(pools: tuple, rng: random.Random = None) -> Prompt | None:
    """Pick a pool uniformly, then a prompt uniformly within it.

    Small pools are drawn as often as large ones. Returns None when no pool
    is eligible.
    """
    if not pools:
        return None
    rng = rng or random
    pool = rng.choice(pools)
    return rng.choice(pool)
