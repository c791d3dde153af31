"""Tests for program.yaml loading and user overrides."""

import pytest

from five_three_one.core.engine.config_loader import (
    get_bundled_yaml_path,
    load_model_config,
    load_program_defaults,
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


def _write_user_yaml(home, text):
    path = home / ".five-three-one" / "program.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(text)
    return path


def test_bundled_file_is_shipped():
    assert get_bundled_yaml_path() is not None


def test_bundled_defaults(home):
    defaults = load_program_defaults()

    assert defaults.training_max_percentage == 90.0
    assert defaults.progression["squat"] == 5.0
    assert [(s.percentage, s.reps) for s in defaults.warmup.sets] == [(40, 5), (50, 5), (60, 3)]
    assert defaults.assistance.percentage == 50.0
    assert defaults.unit == "kg"


def test_empty_config_falls_back_to_constants():
    defaults = load_program_defaults({})

    assert defaults.progression == {
        "benchPress": 2.5, "squat": 5.0, "deadlift": 5.0, "overheadPress": 2.5,
    }
    assert len(defaults.warmup.sets) == 3


def test_user_override_is_merged(home):
    _write_user_yaml(home, "assistance:\n  percentage: 60\nprogression:\n  deadlift: 10\n")

    defaults = load_program_defaults()

    assert defaults.assistance.percentage == 60.0
    assert defaults.assistance.enabled
    assert defaults.progression["deadlift"] == 10.0
    assert defaults.progression["benchPress"] == 2.5


def test_broken_user_override_warns_and_is_ignored(home):
    _write_user_yaml(home, "assistance: [unclosed\n")

    with pytest.warns(UserWarning):
        config = load_model_config()

    assert config["assistance"]["percentage"] == 50.0


@pytest.mark.parametrize(
    "text",
    [
        "warmup:\n  sets:\n    - {percentage: 40}\n",
        "progression:\n  squat: abc\n",
        "warmup:\n  sets:\n"
        "    - {percentage: 30, reps: 5}\n    - {percentage: 40, reps: 5}\n"
        "    - {percentage: 50, reps: 5}\n    - {percentage: 60, reps: 3}\n",
        "training_max: 90\n",
        "assistance:\n  percentage: .nan\n",
    ],
)
def test_unusable_user_values_fall_back_to_bundled(home, text):
    _write_user_yaml(home, text)

    with pytest.warns(UserWarning, match="Ignoring"):
        defaults = load_program_defaults()

    assert defaults.progression["squat"] == 5.0
    assert [(s.percentage, s.reps) for s in defaults.warmup.sets] == [(40, 5), (50, 5), (60, 3)]
    assert defaults.assistance.percentage == 50.0
    assert defaults.training_max_percentage == 90.0


def test_store_opens_with_unusable_user_values(home):
    from five_three_one.io.settings_store import SettingsStore

    _write_user_yaml(home, "progression:\n  squat: abc\n")

    with pytest.warns(UserWarning):
        progression = SettingsStore(home / "store.json").get_progression()

    assert progression["squat"] == 5.0


def test_explicit_config_with_bad_values_raises():
    with pytest.raises(ValueError):
        load_program_defaults({"progression": {"squat": "abc"}})


def test_unknown_unit_warns():
    with pytest.warns(UserWarning):
        defaults = load_program_defaults({"display": {"unit": "stone"}})
    assert defaults.unit == "kg"
