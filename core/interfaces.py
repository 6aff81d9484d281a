"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod


class SoundPlayer(ABC):
    """Plays the success sound."""

    @abstractmethod
    def play(self) -> None:
        pass


class SpeechSynthesizer(ABC):
    """Speaks Japanese text aloud."""

    @abstractmethod
    def speak(self, text: str) -> None:
        pass


class Storage(ABC):
    """Abstract base class for state and config storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict."""
        pass

    @abstractmethod
    def load_state(self, user_id: str = "default") -> dict | None:
        """Load state for a user. Returns state dict or None if not found."""
        pass

    @abstractmethod
    def save_state(self, state: dict, user_id: str = "default") -> None:
        """Save state for a user."""
        pass

    @abstractmethod
    def list_users(self) -> list[str]:
        """List all user IDs with saved state."""
        pass

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        """Delete a user's state. Returns True if something was removed."""
        pass
