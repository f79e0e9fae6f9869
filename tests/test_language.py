import json

import pytest
from fastapi.testclient import TestClient

from apna_thela.language import (
    JsonFileStore,
    LanguagePreference,
    UnsupportedLanguageError,
    detect_language,
    get_language_preference,
)
from apna_thela.main import app


@pytest.fixture
def preference(tmp_path):
    return LanguagePreference(JsonFileStore(tmp_path / "prefs.json"))


def test_defaults_to_hindi(preference):
    assert preference.current == "hi"


def test_set_persists_to_store(tmp_path):
    path = tmp_path / "prefs.json"
    LanguagePreference(JsonFileStore(path)).set("ta")
    assert json.loads(path.read_text(encoding="utf-8")) == {"preferredLanguage": "ta"}
    assert LanguagePreference(JsonFileStore(path)).current == "ta"


def test_invalid_stored_value_falls_back_to_default(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text(json.dumps({"preferredLanguage": "fr"}), encoding="utf-8")
    assert LanguagePreference(JsonFileStore(path)).current == "hi"


def test_corrupt_store_falls_back_to_default(tmp_path):
    path = tmp_path / "prefs.json"
    path.write_text("{not json", encoding="utf-8")
    assert LanguagePreference(JsonFileStore(path)).current == "hi"


def test_subscribers_notified_in_registration_order(preference):
    seen = []
    preference.subscribe(lambda new, old: seen.append(("first", new, old)))
    preference.subscribe(lambda new, old: seen.append(("second", new, old)))
    preference.set("bn")
    assert seen == [("first", "bn", "hi"), ("second", "bn", "hi")]


def test_setting_same_value_does_not_notify(preference):
    seen = []
    preference.subscribe(lambda new, old: seen.append(new))
    preference.set("hi")
    assert seen == []


def test_unsubscribe_stops_notifications(preference):
    seen = []
    unsubscribe = preference.subscribe(lambda new, old: seen.append(new))
    preference.set("en")
    unsubscribe()
    preference.set("mr")
    assert seen == ["en"]


def test_unsupported_code_rejected(preference):
    with pytest.raises(UnsupportedLanguageError):
        preference.set("fr")
    assert preference.current == "hi"


@pytest.mark.parametrize("transcript,expected", [
    ("मुझे आलू चाहिए", "hi"),
    ("নমস্কার, আলু দাও", "bn"),
    ("வணக்கம்", "ta"),
    ("నమస్కారం", "te"),
    ("show my stock", "en"),
    ("", "en"),
])
def test_detect_language(transcript, expected):
    assert detect_language(transcript) == expected


def test_language_endpoints(tmp_path):
    pref = LanguagePreference(JsonFileStore(tmp_path / "prefs.json"))
    app.dependency_overrides[get_language_preference] = lambda: pref
    try:
        client = TestClient(app)
        assert client.get("/api/language").json()["language"] == "hi"
        resp = client.put("/api/language", json={"language": "te"})
        assert resp.status_code == 200, resp.text
        assert resp.json()["language"] == "te"
        assert pref.current == "te"
        assert client.put("/api/language", json={"language": "xx"}).status_code == 400
    finally:
        app.dependency_overrides.clear()


def test_failed_write_keeps_old_value(tmp_path):
    path = tmp_path / "prefs.json"
    pref = LanguagePreference(JsonFileStore(path))
    seen = []
    pref.subscribe(lambda new, old: seen.append(new))
    path.mkdir()
    with pytest.raises(OSError):
        pref.set("ta")
    assert pref.current == "hi"
    assert seen == []


def test_failing_subscriber_does_not_block_later_ones(preference):
    seen = []

    def broken(new, old):
        raise RuntimeError("listener crashed")

    preference.subscribe(broken)
    preference.subscribe(lambda new, old: seen.append(new))
    assert preference.set("bn") == "bn"
    assert seen == ["bn"]
    assert preference.current == "bn"
