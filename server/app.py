"""FastAPI server for kanadrill application."""

import asyncio
import logging
import os
import random

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import Optional

logger = logging.getLogger(__name__)

from core.catalog import build_catalog
from core.drill import Drill
from core.interfaces import Storage
from core.models import Commit, InputChanged, Settings, SettingsChanged, ToggleReveal
from core.quiz import QuizMachine

from server.file_storage import FileStorage


# Pydantic models for API
class InputRequest(BaseModel):
    text: str
    user_id: str = "default"


class UserRequest(BaseModel):
    user_id: str = "default"


class SettingsRequest(BaseModel):
    hiragana: bool
    katakana: bool
    words: bool
    user_id: str = "default"


class PromptModel(BaseModel):
    kana: str
    romaji: str
    category: str
    meaning: Optional[str] = None
    expression: Optional[str] = None


class SessionModel(BaseModel):
    current: Optional[PromptModel]
    input: str
    is_wrong: str | bool
    is_revealing: bool
    correct: int
    settings: dict[str, bool]


class SnapshotResponse(BaseModel):
    session: SessionModel
    has_prompt: bool
    effects: list[dict] = []


# Global state (in production, use proper DI)
storage: Storage = None
machine: QuizMachine = None
default_settings: Settings = Settings()
drills: dict[str, Drill] = {}
drill_locks: dict[str, asyncio.Lock] = {}


app = FastAPI(title="Kanadrill API", description="Kana and vocabulary romaji drill API")


def create_storage() -> Storage:
    """Pick the storage backend from KANADRILL_STORAGE (file or postgres)."""
    storage_type = os.environ.get('KANADRILL_STORAGE', 'file')
    if storage_type == 'postgres':
        from server.postgres_storage import PostgresStorage
        logger.info("Using PostgreSQL storage")
        return PostgresStorage()
    logger.info("Using file storage")
    return FileStorage()


@app.on_event("startup")
async def startup():
    """Build the catalog and initialize storage on startup."""
    global storage, machine, default_settings

    storage = create_storage()

    try:
        config = storage.load_config()
    except FileNotFoundError:
        config = {}
    default_settings = Settings.from_dict(config.get('default_settings'))

    seed = os.environ.get('KANADRILL_SEED')
    rng = random.Random(int(seed)) if seed else random.Random()
    machine = QuizMachine(build_catalog(), rng)
    logger.info(f"Drill ready, default settings {default_settings.to_dict()}")


@app.on_event("shutdown")
async def shutdown():
    """Release the storage connection, if the backend holds one."""
    if hasattr(storage, 'close'):
        storage.close()
        logger.info("Storage closed")


def get_drill(user_id: str = "default") -> Drill:
    """Get or create the drill for a user."""
    if user_id not in drills:
        drills[user_id] = Drill(machine, storage, user_id, default_settings)
    return drills[user_id]


def get_lock(user_id: str) -> asyncio.Lock:
    if user_id not in drill_locks:
        drill_locks[user_id] = asyncio.Lock()
    return drill_locks[user_id]


def snapshot(drill: Drill, effects: list = None) -> dict:
    return {
        'session': drill.session.to_dict(),
        'has_prompt': drill.session.current is not None,
        'effects': [effect.to_dict() for effect in effects or []]
    }


def log_answer(drill: Drill, before, event) -> None:
    """Record a judged answer when the storage keeps an event log."""
    prompt = before.current
    if prompt is None or not hasattr(storage, 'log_event'):
        return
    if drill.correct > before.correct:
        storage.log_event('answer.correct', drill.user_id, kana=prompt.kana, romaji=prompt.romaji)
    elif isinstance(event, Commit) and before.input and not before.is_revealing:
        storage.log_event('answer.incorrect', drill.user_id, kana=prompt.kana,
                          romaji=prompt.romaji, feedback=drill.session.is_wrong)


async def dispatch(user_id: str, event) -> dict:
    """Run one event for a user, one at a time per user."""
    async with get_lock(user_id):
        drill = get_drill(user_id)
        before = drill.session
        effects = drill.dispatch(event)
        log_answer(drill, before, event)
        return snapshot(drill, effects)


@app.get("/")
async def root():
    return {"service": "kanadrill", "status": "ok"}


@app.get("/api/session", response_model=SnapshotResponse)
async def get_session(user_id: str = "default"):
    """Current session snapshot for a user."""
    return snapshot(get_drill(user_id))


@app.post("/api/input", response_model=SnapshotResponse)
async def change_input(request: InputRequest):
    """The text in the answer field changed."""
    return await dispatch(request.user_id, InputChanged(request.text))


@app.post("/api/commit", response_model=SnapshotResponse)
async def commit(request: UserRequest):
    """Submit the pending input (enter key)."""
    return await dispatch(request.user_id, Commit())


@app.post("/api/reveal", response_model=SnapshotResponse)
async def toggle_reveal(request: UserRequest):
    """Show or hide the answer."""
    return await dispatch(request.user_id, ToggleReveal())


@app.post("/api/settings", response_model=SnapshotResponse)
async def change_settings(request: SettingsRequest):
    """Replace the enabled categories."""
    settings = Settings(hiragana=request.hiragana, katakana=request.katakana, words=request.words)
    return await dispatch(request.user_id, SettingsChanged(settings))


@app.get("/api/catalog")
async def catalog_stats():
    """Prompt counts per category."""
    return machine.catalog.counts()


@app.get("/api/users")
async def list_users():
    """List all users with saved progress."""
    return {"users": storage.list_users()}


@app.get("/api/events/recent")
async def get_recent_events(user_id: str, event_type: str = None, limit: int = 50):
    """Get recent answer events for a user."""
    if not hasattr(storage, 'get_user_events'):
        return {"error": "Event logging not available with current storage"}
    if not storage.user_exists(user_id):
        raise HTTPException(status_code=404, detail=f"Unknown user: {user_id}")

    events = storage.get_user_events(user_id, event_type, limit)
    # Convert datetime objects to strings for JSON serialization
    for event in events:
        if 'timestamp' in event and hasattr(event['timestamp'], 'isoformat'):
            event['timestamp'] = event['timestamp'].isoformat()
    return {"events": events}


def create_app():
    """Factory function for creating the app (useful for testing)."""
    return app
