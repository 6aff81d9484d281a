"""Console UI for kanadrill application."""

import sys

import requests

from core.config import CATEGORIES, SPEECH_LANGUAGE
from core.effects import EffectRunner, effect_from_dict
from core.interfaces import SoundPlayer, SpeechSynthesizer
from core.models import Settings


class TerminalBell(SoundPlayer):
    """Rings the terminal bell as the success sound."""

    def play(self) -> None:
        sys.stdout.write('\a')
        sys.stdout.flush()


class ConsoleSpeech(SpeechSynthesizer):
    """Prints what would be spoken."""

    def __init__(self, language: str = SPEECH_LANGUAGE):
        self.language = language

    def speak(self, text: str) -> None:
        print(f'  ♪ [{self.language}] {text}')


class ConsoleUI:
    """Console user interface for kanadrill application."""

    def __init__(self, backend, runner: EffectRunner = None, input_func=input):
        self.backend = backend
        self.runner = runner or EffectRunner(TerminalBell(), ConsoleSpeech())
        self.input_func = input_func
        self.state = None

    def apply(self, response: dict) -> dict:
        """Remember the latest snapshot and run its effects."""
        self.state = response
        self.runner.run([effect_from_dict(effect) for effect in response.get('effects', [])])
        return response

    def print_prompt(self):
        """Print the current prompt, or why there is none."""
        session = self.state['session']
        print('-' * 40)
        if not self.state['has_prompt']:
            print('Nothing to practice: enable a category with ":toggle <category>"')
            return
        current = session['current']
        print(f"\n    {current['kana']}\n")
        if current.get('meaning'):
            print(f"  {current['meaning']} ({current.get('expression') or ''})")
        if session['is_revealing']:
            print(f"  Answer: {current['romaji'].lower()}  (press enter to continue)")
        if session['is_wrong']:
            print(f"  ❌ {session['is_wrong']}")
        print(f"  Correct so far: {session['correct']}")

    def print_status(self):
        session = self.state['session']
        settings = Settings.from_dict(session['settings'])
        enabled = [c for c in CATEGORIES if settings.is_enabled(c)]
        if not settings.any_enabled():
            enabled = ['nothing']
        print(f"Correct: {session['correct']} | Enabled: {', '.join(enabled)}")

    def toggle_category(self, category: str):
        try:
            settings = Settings.from_dict(self.state['session']['settings']).toggled(category)
        except ValueError:
            print(f"Unknown category '{category}'. Choose from: {', '.join(CATEGORIES)}")
            return
        self.apply(self.backend.change_settings(settings.to_dict()))

    def handle_line(self, line: str) -> bool:
        """Turn one line of input into drill events. Returns False to quit."""
        command = line.strip()
        if command.lower() == 'exit':
            return False
        if command == '':
            self.apply(self.backend.commit())
        elif command == ':reveal':
            self.apply(self.backend.toggle_reveal())
        elif command == ':status':
            self.print_status()
        elif command.startswith(':toggle'):
            self.toggle_category(command[len(':toggle'):].strip().lower())
        else:
            response = self.apply(self.backend.send_input(line))
            session = response['session']
            # Still pending: neither solved on the fly nor revealed
            if session['input'] and not session['is_revealing']:
                self.apply(self.backend.commit())
        return True

    def run(self):
        """Run the main application loop."""
        try:
            health = self.backend.health_check()
            print(f"Connected to {health['service']}")
            self.apply(self.backend.get_session())
        except requests.RequestException:
            print(f"Error: Cannot connect to server at {self.backend.base_url}")
            print("Make sure the server is running: python run_server.py (or use --local)")
            return

        print('Type the romaji and press enter. "?" or ":reveal" shows the answer.')
        print('Commands: ":toggle hiragana|katakana|words", ":status", "exit" to quit\n')

        while True:
            self.print_prompt()
            line = self.input_func('==> ')
            try:
                if not self.handle_line(line):
                    print('Goodbye!')
                    return
            except requests.RequestException as e:
                print(f"Error talking to server: {e}")
