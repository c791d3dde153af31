"""Validation of backup documents and command-line value parsers."""

import copy
from datetime import datetime

import pytest

from five_three_one.io.serializers import (
    ValidationError,
    dict_to_app_data,
    generate_backup_filename,
    get_data_summary,
    parse_iso_datetime,
    parse_lift_numbers,
    parse_lift_values,
    parse_warmup_scheme,
    validate_import_data,
)

VALID_DOC = {
    "version": "1.0.0",
    "exportDate": "2026-03-10T08:30:00.000Z",
    "settings": {
        "unit": "kg",
        "theme": "dark",
        "workoutSchedule": {"benchPress": "Monday", "squat": "Tuesday"},
        "exerciseProgression": {"benchPress": 2.5, "squat": 5},
    },
    "trainingMaxes": [
        {
            "benchPress": 90,
            "squat": 125,
            "deadlift": 162.5,
            "overheadPress": 55,
            "lastUpdated": "2026-02-01T00:00:00.000Z",
        }
    ],
    "personalRecords": [
        {"exercise": "benchPress", "weight": 77.5, "reps": 8, "date": "2026-03-02", "workoutId": "w1"}
    ],
    "workoutHistory": [
        {
            "id": "w1",
            "date": "2026-03-02T18:00:00.000Z",
            "workoutType": "5/5/5+",
            "week": 1,
            "cycle": 1,
            "exercises": [
                {
                    "name": "benchPress",
                    "sets": [
                        {"weight": 65, "reps": 5, "completed": True},
                        {"weight": 75, "reps": 5, "completed": True},
                        {"weight": 77.5, "reps": 8, "completed": True, "notes": "amrap"},
                    ],
                }
            ],
            "completed": True,
        },
        {
            "id": "w2",
            "date": "2026-02-20",
            "workoutType": "deload",
            "week": 4,
            "cycle": 1,
            "exercises": [],
        },
    ],
    "currentCycle": 1,
    "currentWeek": 2,
}


def _doc(**changes):
    doc = copy.deepcopy(VALID_DOC)
    doc.update(changes)
    return doc


class TestValidateImportData:
    def test_valid_document(self):
        validate_import_data(VALID_DOC)

    @pytest.mark.parametrize(
        "changes, field",
        [
            ({"version": ""}, "version"),
            ({"exportDate": 5}, "exportDate"),
            ({"settings": []}, "settings"),
            ({"trainingMaxes": {}}, "trainingMaxes"),
            ({"personalRecords": None}, "personalRecords"),
            ({"workoutHistory": "x"}, "workoutHistory"),
            ({"currentCycle": 0}, "currentCycle"),
            ({"currentWeek": 5}, "currentWeek"),
            ({"currentWeek": "2"}, "currentWeek"),
            ({"currentWeek": 2.5}, "currentWeek"),
            ({"currentCycle": 1.5}, "currentCycle"),
        ],
    )
    def test_invalid_top_level_field(self, changes, field):
        with pytest.raises(ValidationError, match=field):
            validate_import_data(_doc(**changes))

    def test_invalid_unit(self):
        doc = _doc()
        doc["settings"]["unit"] = "stone"
        with pytest.raises(ValidationError, match="unit"):
            validate_import_data(doc)

    def test_invalid_theme(self):
        doc = _doc()
        doc["settings"]["theme"] = "neon"
        with pytest.raises(ValidationError, match="theme"):
            validate_import_data(doc)

    def test_missing_schedule(self):
        doc = _doc()
        del doc["settings"]["workoutSchedule"]
        with pytest.raises(ValidationError, match="workoutSchedule"):
            validate_import_data(doc)

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            validate_import_data([])


class TestDictToAppData:
    def test_converts_nested_records(self):
        data = dict_to_app_data(VALID_DOC)

        assert data.settings.theme == "dark"
        assert data.settings.exercise_progression["squat"] == 5.0
        assert data.training_maxes[0].deadlift == 162.5
        assert data.personal_records[0].workout_id == "w1"
        assert data.workout_history[0].lift == "benchPress"
        assert data.workout_history[0].exercises[0].sets[2].notes == "amrap"
        assert data.current_week == 2

    def test_older_backup_without_calculator_keys_gets_defaults(self):
        data = dict_to_app_data(VALID_DOC)

        assert data.settings.one_rep_maxes == {}
        assert data.settings.training_max_percentage == 90.0
        assert data.settings.failure_decreases == {}

    def test_bad_workout_type(self):
        doc = _doc()
        doc["workoutHistory"][0]["workoutType"] = "7/7/7"
        with pytest.raises(ValidationError):
            dict_to_app_data(doc)

    def test_bad_date(self):
        doc = _doc()
        doc["personalRecords"][0]["date"] = "March 2nd"
        with pytest.raises(ValidationError):
            dict_to_app_data(doc)

    def test_negative_failure_count(self):
        doc = _doc()
        doc["settings"]["failureDecreases"] = {"squat": -1}
        with pytest.raises(ValidationError, match="failureDecreases"):
            dict_to_app_data(doc)

    def test_too_many_warmup_sets(self):
        doc = _doc()
        doc["settings"]["warmup"] = {
            "enabled": True,
            "sets": [{"percentage": p, "reps": 5} for p in (30, 40, 50, 60)],
        }
        with pytest.raises(ValidationError):
            dict_to_app_data(doc)


class TestDataSummary:
    def test_summary(self):
        summary = get_data_summary(dict_to_app_data(VALID_DOC))

        assert summary.total_workouts == 2
        assert summary.total_prs == 1
        assert summary.oldest_workout == "2026-02-20"
        assert summary.newest_workout == "2026-03-02"
        assert (summary.cycle, summary.week) == (1, 2)

    def test_empty_history(self):
        summary = get_data_summary(dict_to_app_data(_doc(workoutHistory=[], personalRecords=[])))

        assert summary.total_workouts == 0
        assert summary.oldest_workout is None

    def test_backup_filename(self):
        assert generate_backup_filename(datetime(2026, 3, 9)) == "531-workout-backup-2026-03-09.json"


class TestParsers:
    def test_iso_datetime_with_z(self):
        assert parse_iso_datetime("2026-03-02T18:00:00Z").hour == 18
        assert parse_iso_datetime("2026-03-02").day == 2
        with pytest.raises(ValidationError):
            parse_iso_datetime("02/03/2026")

    def test_lift_values_accept_aliases(self):
        assert parse_lift_values("bench=Monday, dl=Thursday") == {
            "benchPress": "Monday",
            "deadlift": "Thursday",
        }

    def test_lift_numbers(self):
        assert parse_lift_numbers("ohp=62.5,squat=150") == {"overheadPress": 62.5, "squat": 150.0}
        with pytest.raises(ValidationError):
            parse_lift_numbers("bench=heavy")
        with pytest.raises(ValidationError):
            parse_lift_numbers("curl=40")
        with pytest.raises(ValidationError):
            parse_lift_numbers("bench")
        with pytest.raises(ValidationError):
            parse_lift_numbers("bench=nan")
        with pytest.raises(ValidationError):
            parse_lift_numbers("squat=-inf")

    def test_warmup_scheme(self):
        steps = parse_warmup_scheme("40x5, 50%x5, 60×3")
        assert [(s.percentage, s.reps) for s in steps] == [(40.0, 5), (50.0, 5), (60.0, 3)]
        with pytest.raises(ValidationError):
            parse_warmup_scheme("30x5,40x5,50x5,60x3")
        with pytest.raises(ValidationError):
            parse_warmup_scheme("forty x 5")
