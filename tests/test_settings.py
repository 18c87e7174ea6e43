import json

from Motion_Engine.config import DEFAULT_SETTINGS
from Motion_Engine.settings import SettingsStore


def test_defaults_when_file_missing(tmp_path):
    store = SettingsStore(tmp_path / "settings.json")
    assert store.as_dict() == DEFAULT_SETTINGS
    assert store.get('poor_posture_threshold') == -15.0
    assert store.get('warning_threshold') == 1.0
    assert store.get('roll_threshold') == 1.0
    assert store.get('reference_pitch') == 0.0
    assert store.get('reference_roll') == 0.0


def test_values_survive_reload(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    store = SettingsStore(path)
    assert store.set('roll_threshold', 7.0)
    assert store.update({'reference_pitch': -4.5, 'reference_roll': 1.25})

    reloaded = SettingsStore(path)
    assert reloaded.get('roll_threshold') == 7.0
    assert reloaded.get('reference_pitch') == -4.5
    assert reloaded.get('reference_roll') == 1.25


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(path)
    assert store.as_dict() == DEFAULT_SETTINGS


def test_out_of_range_thresholds_clamped_on_load(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({'poor_posture_threshold': -90, 'warning_threshold': "high",
                                'reference_pitch': 12.0}))
    store = SettingsStore(path)
    assert store.get('poor_posture_threshold') == -45.0
    assert store.get('warning_threshold') == 1.0
    assert store.get('reference_pitch') == 12.0


def test_failed_write_keeps_in_memory_value(tmp_path):
    store = SettingsStore(tmp_path)   # a directory: writes fail
    assert store.set('warning_threshold', 3.0) is False
    assert store.get('warning_threshold') == 3.0


def test_env_override(tmp_path, monkeypatch):
    path = tmp_path / "env.json"
    monkeypatch.setenv("HEADMOTION_SETTINGS_PATH", str(path))
    store = SettingsStore()
    store.set('roll_threshold', 2.0)
    assert path.exists()
