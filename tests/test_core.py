"""Unit tests for kanadrill core module."""

import random
import unittest
from dataclasses import replace
from unittest.mock import MagicMock

from core.catalog import Catalog, CatalogError, build_catalog, draw_prompt, select_eligible_pools
from core.config import CATEGORIES, DEFAULT_SETTINGS, MACRON_VOWELS
from core.drill import Drill
from core.effects import EffectRunner, PlaySound, Speak, effect_from_dict
from core.interfaces import SoundPlayer
from core.models import Commit, InputChanged, Prompt, Session, Settings, SettingsChanged, ToggleReveal
from core.quiz import QuizMachine, failure_message
from core.utils import contains_hiragana, normalize, normalize_romaji, romaji_to_kana
from tests.mocks import MockStorage, RecordingSound, RecordingSpeech


HIRAGANA_A = Prompt(kana='あ', romaji='a', category='hiragana')
KATAKANA_A = Prompt(kana='ア', romaji='a', category='katakana')
GAKKOU = Prompt(kana='学校', romaji='gakkou', category='words', meaning='school', expression='学校')


def small_catalog() -> Catalog:
    return Catalog(
        hiragana=(HIRAGANA_A, Prompt(kana='か', romaji='ka', category='hiragana')),
        katakana=(KATAKANA_A,),
        words=(GAKKOU,)
    )


def make_machine(seed: int = 1) -> QuizMachine:
    return QuizMachine(small_catalog(), random.Random(seed))


def session_with(machine: QuizMachine, prompt: Prompt, **changes) -> Session:
    return replace(machine.new_session(Settings()), current=prompt, **changes)


# ============================================================================
# Test Cases
# ============================================================================

class TestUtils(unittest.TestCase):
    """Tests for romanization helpers."""

    def test_normalize_trims_and_lowercases(self):
        self.assertEqual(normalize('  GakKou \n'), 'gakkou')

    def test_normalize_romaji_macrons(self):
        self.assertEqual(normalize_romaji('Tōkyō'), 'tookyoo')
        self.assertEqual(normalize_romaji('sēru'), 'seeru')

    def test_normalize_romaji_strips_apostrophes(self):
        self.assertEqual(normalize_romaji("kin'en"), 'kinen')

    def test_contains_hiragana(self):
        self.assertTrue(contains_hiragana('あ'))
        self.assertTrue(contains_hiragana('食べる'))
        self.assertFalse(contains_hiragana('ア'))
        self.assertFalse(contains_hiragana('学校'))

    def test_romaji_to_hiragana(self):
        self.assertEqual(romaji_to_kana('ka'), 'か')

    def test_romaji_to_katakana(self):
        self.assertEqual(romaji_to_kana('ka', hiragana=False), 'カ')

    def test_romaji_to_kana_nothing_convertible(self):
        self.assertEqual(romaji_to_kana('123'), '')
        self.assertEqual(romaji_to_kana(''), '')


class TestModels(unittest.TestCase):
    """Tests for Prompt, Settings and Session."""

    def test_default_settings(self):
        self.assertEqual(Settings().to_dict(), DEFAULT_SETTINGS)

    def test_settings_toggled(self):
        settings = Settings().toggled('words')
        self.assertTrue(settings.words)
        self.assertTrue(Settings().toggled('words').toggled('words') == Settings())

    def test_settings_toggled_unknown(self):
        with self.assertRaises(ValueError):
            Settings().toggled('kanji')

    def test_settings_any_enabled(self):
        self.assertTrue(Settings().any_enabled())
        self.assertFalse(Settings(False, False, False).any_enabled())

    def test_settings_from_dict_fills_defaults(self):
        settings = Settings.from_dict({'words': True})
        self.assertEqual(settings, Settings(hiragana=True, katakana=True, words=True))
        self.assertEqual(Settings.from_dict(None), Settings())

    def test_prompt_roundtrip(self):
        self.assertEqual(Prompt.from_dict(GAKKOU.to_dict()), GAKKOU)

    def test_session_roundtrip(self):
        session = Session(current=HIRAGANA_A, input='k', is_wrong='ka (か)', correct=3)
        self.assertEqual(Session.from_dict(session.to_dict()), session)

    def test_session_persisted_fields(self):
        session = Session(current=HIRAGANA_A, input='k', correct=7, settings=Settings(words=True))
        self.assertEqual(session.persisted(), {
            'settings': {'hiragana': True, 'katakana': True, 'words': True},
            'correct': 7
        })

    def test_prompt_is_immutable(self):
        with self.assertRaises(Exception):
            HIRAGANA_A.romaji = 'o'


class TestCatalog(unittest.TestCase):
    """Tests for catalog construction and sampling."""

    @classmethod
    def setUpClass(cls):
        cls.catalog = build_catalog()

    def test_bundled_catalog_has_all_pools(self):
        counts = self.catalog.counts()
        for category in CATEGORIES:
            self.assertGreater(counts[category], 0)

    def test_prompt_categories(self):
        self.assertTrue(all(p.category == 'hiragana' for p in self.catalog.hiragana))
        self.assertTrue(all(p.category == 'katakana' for p in self.catalog.katakana))
        self.assertTrue(all(p.category == 'words' for p in self.catalog.words))

    def test_romaji_is_normalized(self):
        for prompt in self.catalog.hiragana + self.catalog.katakana + self.catalog.words:
            self.assertEqual(normalize(prompt.romaji), normalize(prompt.romaji))
            self.assertEqual(prompt.romaji, prompt.romaji.lower())
            self.assertNotIn("'", prompt.romaji)
            for macron in MACRON_VOWELS:
                self.assertNotIn(macron, prompt.romaji)

    def test_kana_prompts_have_no_gloss(self):
        for prompt in self.catalog.hiragana + self.catalog.katakana:
            self.assertIsNone(prompt.meaning)
            self.assertIsNone(prompt.expression)

    def test_word_romaji_from_kana(self):
        catalog = build_catalog(words=[
            {'Vocab-kana': 'がっこう', 'Vocab-meaning': 'school', 'Vocab-expression': '学校'}
        ])
        word = catalog.words[0]
        self.assertEqual(word.romaji, 'gakkou')
        self.assertEqual(word.meaning, 'school')
        self.assertEqual(word.expression, '学校')

    def test_kana_table_macrons_normalized(self):
        catalog = build_catalog(hiragana={'おう': 'Ō', 'ん': "n'"})
        self.assertEqual([p.romaji for p in catalog.hiragana], ['oo', 'n'])

    def test_word_missing_kana_is_error(self):
        with self.assertRaises(CatalogError):
            build_catalog(words=[{'Vocab-meaning': 'school'}])

    def test_empty_table_is_error(self):
        with self.assertRaises(CatalogError):
            build_catalog(katakana={})

    def test_empty_romaji_is_error(self):
        with self.assertRaises(CatalogError):
            build_catalog(hiragana={'あ': ''})

    def test_catalog_error_is_value_error(self):
        self.assertTrue(issubclass(CatalogError, ValueError))

    def test_select_eligible_pools_order(self):
        catalog = small_catalog()
        pools = select_eligible_pools(catalog, Settings(hiragana=True, katakana=False, words=True))
        self.assertEqual(pools, (catalog.hiragana, catalog.words))

    def test_select_eligible_pools_none(self):
        self.assertEqual(select_eligible_pools(small_catalog(), Settings(False, False, False)), ())

    def test_draw_prompt_empty(self):
        self.assertIsNone(draw_prompt(()))

    def test_draw_prompt_picks_pool_then_prompt(self):
        catalog = small_catalog()
        pools = (catalog.hiragana, catalog.katakana)
        rng = MagicMock()
        rng.choice.side_effect = [catalog.katakana, KATAKANA_A]
        self.assertEqual(draw_prompt(pools, rng), KATAKANA_A)
        self.assertEqual(rng.choice.call_args_list[0].args[0], pools)
        self.assertEqual(rng.choice.call_args_list[1].args[0], catalog.katakana)

    def test_draw_prompt_pools_equally_likely(self):
        big = tuple(Prompt(kana=f'k{i}', romaji=f'r{i}', category='hiragana') for i in range(50))
        small = (KATAKANA_A,)
        rng = random.Random(42)
        draws = [draw_prompt((big, small), rng) for _ in range(2000)]
        share = draws.count(KATAKANA_A) / len(draws)
        self.assertGreater(share, 0.4)
        self.assertLess(share, 0.6)


class TestQuizMachine(unittest.TestCase):
    """Tests for the quiz transition function."""

    def setUp(self):
        self.machine = make_machine()

    def test_new_session(self):
        session = self.machine.new_session(Settings(), correct=4)
        self.assertIsNotNone(session.current)
        self.assertEqual(session.correct, 4)
        self.assertEqual(session.input, '')
        self.assertFalse(session.is_wrong)
        self.assertFalse(session.is_revealing)

    def test_new_session_nothing_enabled(self):
        session = self.machine.new_session(Settings(False, False, False))
        self.assertIsNone(session.current)

    def test_correct_input_solves_immediately(self):
        session = session_with(self.machine, HIRAGANA_A, is_wrong='ka (か)')
        new, effects = self.machine.transition(session, InputChanged('A'))
        self.assertEqual(new.correct, 1)
        self.assertFalse(new.is_wrong)
        self.assertEqual(new.input, '')
        self.assertEqual(effects, [PlaySound(), Speak('あ')])

    def test_correct_ignores_case_and_whitespace(self):
        session = session_with(self.machine, GAKKOU)
        new, _ = self.machine.transition(session, InputChanged('  GakKou '))
        self.assertEqual(new.correct, 1)

    def test_correct_draws_next_prompt_from_settings(self):
        session = session_with(self.machine, HIRAGANA_A, settings=Settings(False, True, False))
        new, _ = self.machine.transition(session, InputChanged('a'))
        self.assertEqual(new.current, KATAKANA_A)

    def test_partial_input_is_stored(self):
        session = session_with(self.machine, GAKKOU, is_wrong='x ()')
        new, effects = self.machine.transition(session, InputChanged('gak'))
        self.assertEqual(new.input, 'gak')
        self.assertEqual(new.is_wrong, 'x ()')
        self.assertEqual(new.correct, 0)
        self.assertEqual(effects, [])

    def test_question_mark_reveals(self):
        session = session_with(self.machine, GAKKOU, input='ga')
        new, effects = self.machine.transition(session, InputChanged('ga?'))
        self.assertTrue(new.is_revealing)
        self.assertEqual(new.input, '')
        self.assertEqual(effects, [])

    def test_question_mark_reveals_when_already_revealing(self):
        session = session_with(self.machine, GAKKOU, is_revealing=True)
        new, _ = self.machine.transition(session, InputChanged('?'))
        self.assertTrue(new.is_revealing)
        self.assertEqual(new.input, '')

    def test_input_ignored_while_revealing(self):
        session = session_with(self.machine, HIRAGANA_A, is_revealing=True)
        for text in ('k', 'a'):
            new, effects = self.machine.transition(session, InputChanged(text))
            self.assertEqual(new, session)
            self.assertEqual(effects, [])

    def test_revealing_keeps_input_empty(self):
        session = session_with(self.machine, HIRAGANA_A, is_revealing=True)
        events = [
            InputChanged('k'),
            InputChanged('a'),
            SettingsChanged(Settings(False, True, True)),
            InputChanged('zzz'),
            SettingsChanged(Settings(True, False, False)),
        ]
        for event in events:
            session, _ = self.machine.transition(session, event)
            self.assertTrue(session.is_revealing)
            self.assertEqual(session.input, '')
        self.assertEqual(session.correct, 0)

    def test_commit_correct(self):
        session = session_with(self.machine, HIRAGANA_A, input=' a ')
        new, effects = self.machine.transition(session, Commit())
        self.assertEqual(new.correct, 1)
        self.assertEqual(len(effects), 2)

    def test_commit_correct_counts_once(self):
        session = session_with(self.machine, HIRAGANA_A)
        session, _ = self.machine.transition(session, InputChanged('a'))
        session, effects = self.machine.transition(session, Commit())
        self.assertEqual(session.correct, 1)
        self.assertEqual(effects, [])

    def test_commit_incorrect_hiragana(self):
        session = session_with(self.machine, HIRAGANA_A, input='ka')
        new, effects = self.machine.transition(session, Commit())
        self.assertEqual(new.is_wrong, 'ka (か)')
        self.assertEqual(new.input, '')
        self.assertEqual(new.current, HIRAGANA_A)
        self.assertEqual(new.correct, 0)
        self.assertEqual(effects, [])

    def test_commit_incorrect_katakana(self):
        session = session_with(self.machine, KATAKANA_A, input=' KA ')
        new, _ = self.machine.transition(session, Commit())
        self.assertEqual(new.is_wrong, 'ka (カ)')

    def test_commit_incorrect_word_with_kanji(self):
        session = session_with(self.machine, GAKKOU, input='gakko')
        new, _ = self.machine.transition(session, Commit())
        self.assertTrue(new.is_wrong.startswith('gakko ('))
        self.assertEqual(new.correct, 0)

    def test_commit_incorrect_unconvertible(self):
        session = session_with(self.machine, HIRAGANA_A, input='123')
        new, _ = self.machine.transition(session, Commit())
        self.assertEqual(new.is_wrong, '123 ()')

    def test_commit_empty_clears_wrong(self):
        session = session_with(self.machine, HIRAGANA_A, is_wrong='ka (か)')
        new, effects = self.machine.transition(session, Commit())
        self.assertFalse(new.is_wrong)
        self.assertEqual(new.current, HIRAGANA_A)
        self.assertEqual(new.correct, 0)
        self.assertEqual(effects, [])

    def test_commit_while_revealing_unreveals(self):
        session = session_with(self.machine, HIRAGANA_A, is_revealing=True)
        new, _ = self.machine.transition(session, Commit())
        self.assertFalse(new.is_revealing)
        self.assertEqual(new.input, '')
        self.assertEqual(new.current, HIRAGANA_A)

    def test_toggle_reveal_twice(self):
        session = session_with(self.machine, HIRAGANA_A, input='k')
        once, _ = self.machine.transition(session, ToggleReveal())
        self.assertTrue(once.is_revealing)
        self.assertEqual(once.input, '')
        twice, _ = self.machine.transition(once, ToggleReveal())
        self.assertFalse(twice.is_revealing)
        self.assertEqual(twice.input, '')

    def test_settings_change_keeps_eligible_prompt(self):
        session = session_with(self.machine, HIRAGANA_A, input='k', is_wrong='x ()', correct=2)
        new, _ = self.machine.transition(session, SettingsChanged(Settings(True, False, True)))
        self.assertEqual(new.current, HIRAGANA_A)
        self.assertEqual(new.input, 'k')
        self.assertEqual(new.is_wrong, 'x ()')
        self.assertEqual(new.correct, 2)

    def test_settings_change_redraws_ineligible_prompt(self):
        session = session_with(self.machine, HIRAGANA_A)
        new, _ = self.machine.transition(session, SettingsChanged(Settings(False, False, True)))
        self.assertEqual(new.current, GAKKOU)
        self.assertEqual(new.settings, Settings(False, False, True))

    def test_nothing_enabled_is_total(self):
        session = session_with(self.machine, HIRAGANA_A, correct=5)
        session, _ = self.machine.transition(session, SettingsChanged(Settings(False, False, False)))
        self.assertIsNone(session.current)
        session, effects = self.machine.transition(session, InputChanged('a'))
        self.assertEqual(session.input, 'a')
        self.assertEqual(effects, [])
        session, effects = self.machine.transition(session, Commit())
        self.assertEqual(session.correct, 5)
        self.assertEqual(effects, [])
        session, _ = self.machine.transition(session, InputChanged('?'))
        self.assertTrue(session.is_revealing)
        session, _ = self.machine.transition(session, SettingsChanged(Settings()))
        self.assertIsNotNone(session.current)

    def test_unknown_event_is_ignored(self):
        session = session_with(self.machine, HIRAGANA_A)
        new, effects = self.machine.transition(session, object())
        self.assertEqual(new, session)
        self.assertEqual(effects, [])

    def test_failure_message(self):
        self.assertEqual(failure_message('  Ka ', 'あ'), 'ka (か)')

    def test_failure_message_trailing_consonant(self):
        self.assertEqual(failure_message('kax', 'ア'), 'kax (カッ)')


class TestEffects(unittest.TestCase):
    """Tests for effect intents and the runner."""

    def test_wire_roundtrip(self):
        for effect in (PlaySound(), Speak('あ')):
            self.assertEqual(effect_from_dict(effect.to_dict()), effect)

    def test_unknown_wire_effect(self):
        with self.assertRaises(ValueError):
            effect_from_dict({'type': 'vibrate'})

    def test_runner_calls_collaborators(self):
        sound, speech = RecordingSound(), RecordingSpeech()
        EffectRunner(sound, speech).run([PlaySound(), Speak('か')])
        self.assertEqual(sound.plays, 1)
        self.assertEqual(speech.spoken, ['か'])

    def test_runner_survives_failing_collaborator(self):
        sound = MagicMock(spec=SoundPlayer)
        sound.play.side_effect = RuntimeError('no audio device')
        speech = RecordingSpeech()
        EffectRunner(sound, speech).run([PlaySound(), Speak('か')])
        self.assertEqual(speech.spoken, ['か'])

    def test_runner_without_collaborators(self):
        EffectRunner().run([PlaySound(), Speak('か')])


class TestDrill(unittest.TestCase):
    """Tests for the session owner and its persistence contract."""

    def test_fresh_user_uses_defaults(self):
        storage = MockStorage()
        drill = Drill(make_machine(), storage)
        self.assertEqual(drill.settings, Settings())
        self.assertEqual(drill.correct, 0)
        self.assertIsNotNone(drill.session.current)

    def test_restores_saved_state(self):
        storage = MockStorage({'settings': {'hiragana': False, 'katakana': False, 'words': True},
                               'correct': 12})
        drill = Drill(make_machine(), storage)
        self.assertEqual(drill.correct, 12)
        self.assertEqual(drill.session.current, GAKKOU)

    def test_malformed_state_falls_back(self):
        drill = Drill(make_machine(), MockStorage({'correct': 'lots'}))
        self.assertEqual(drill.correct, 0)

    def test_saves_after_every_event(self):
        storage = MockStorage()
        drill = Drill(make_machine(), storage, user_id='kim')
        drill.dispatch(ToggleReveal())
        drill.dispatch(SettingsChanged(Settings(False, False, True)))
        self.assertEqual(len(storage.save_calls), 2)
        self.assertEqual(storage.states['kim'], {
            'settings': {'hiragana': False, 'katakana': False, 'words': True},
            'correct': 0
        })

    def test_correct_answer_persists_count(self):
        storage = MockStorage({'settings': {'hiragana': False, 'katakana': True, 'words': False},
                               'correct': 1})
        drill = Drill(make_machine(), storage)
        effects = drill.dispatch(InputChanged('a'))
        self.assertEqual(effects, [PlaySound(), Speak('ア')])
        self.assertEqual(storage.states['default']['correct'], 2)


if __name__ == '__main__':
    unittest.main()
