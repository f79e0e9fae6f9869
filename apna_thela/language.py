import json
import logging
import re
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from .config import PREFERENCES_PATH


logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("hi", "en", "bn", "mr", "ta", "te")
DEFAULT_LANGUAGE = "hi"
PREFERENCE_KEY = "preferredLanguage"

Subscriber = Callable[[str, str], None]


class UnsupportedLanguageError(ValueError):
    pass


class JsonFileStore:
    """Small string key-value store kept as one JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("[language] Ignoring unreadable preferences file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            data = self._read()
            data[key] = value
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)


class LanguagePreference:
    """The app-wide language code.

    Subscribers are called synchronously, in the order they subscribed,
    with ``(new_code, old_code)`` whenever the value actually changes.
    """

    def __init__(self, store: JsonFileStore, default: str = DEFAULT_LANGUAGE):
        self.store = store
        self._subscribers: List[Subscriber] = []
        stored = store.get(PREFERENCE_KEY)
        self._current = stored if stored in SUPPORTED_LANGUAGES else default

    @property
    def current(self) -> str:
        return self._current

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def set(self, code: str) -> str:
        if code not in SUPPORTED_LANGUAGES:
            raise UnsupportedLanguageError(f"Unsupported language: {code!r}")
        old = self._current
        # value only changes once it is on disk
        self.store.set(PREFERENCE_KEY, code)
        self._current = code
        if code != old:
            logger.info("[language] %s -> %s", old, code)
            for callback in list(self._subscribers):
                try:
                    callback(code, old)
                except Exception:
                    logger.exception("[language] subscriber failed")
        return code


# Checked in order; the first script or greeting that matches wins.
# The Devanagari range for Hindi also covers every Marathi consonant.
_DETECTION_RULES = [
    ("hi", re.compile(r"[आ-ह]"), ("नमस्ते", "धन्यवाद")),
    ("bn", re.compile(r"[ক-হ]"), ("নমস্কার", "ধন্যবাদ")),
    ("mr", re.compile(r"[क-ह]"), ("नमस्कार", "धन्यवाद")),
    ("ta", re.compile(r"[அ-ஹ]"), ("வணக்கம்", "நன்றி")),
    ("te", re.compile(r"[అ-హ]"), ("నమస్కారం", "ధన్యవాదాలు")),
]


def detect_language(transcript: str) -> str:
    """Guess the language of a voice transcript from its script."""
    text = transcript or ""
    lowered = text.lower()
    for code, script, greetings in _DETECTION_RULES:
        if script.search(text) or any(g in lowered for g in greetings):
            return code
    return "en"


_preference: Optional[LanguagePreference] = None


def get_language_preference() -> LanguagePreference:
    global _preference
    if _preference is None:
        _preference = LanguagePreference(JsonFileStore(PREFERENCES_PATH))
    return _preference
