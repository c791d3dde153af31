"""
Formula-focused unit tests for the 5/3/1 calculator.

Values are hand-computed from the formulas so the tests double as
documentation:

    training_max = round_2.5((1RM + prog * (cycle - 1)) * pct / 100 * 0.9^failures)
    set_weight   = round_2.5(training_max * week_pct / 100)
    e1RM         = weight * (1 + reps / 30)
"""

import math

import pytest

from five_three_one.core.config import WEEK_PERCENTAGES
from five_three_one.core.models import (
    AssistanceConfig,
    PersonalRecord,
    TrainingSettings,
    WarmupConfig,
    WarmupSet,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

DEFAULT_WARMUP = WarmupConfig(
    enabled=True,
    sets=(WarmupSet(40, 5), WarmupSet(50, 5), WarmupSet(60, 3)),
)


def _settings(**overrides) -> TrainingSettings:
    values = dict(
        one_rep_maxes={"benchPress": 100.0, "squat": 140.0, "deadlift": 180.0, "overheadPress": 60.0},
        progression={"benchPress": 2.5, "squat": 5.0, "deadlift": 5.0, "overheadPress": 2.5},
        training_max_percentage=90.0,
    )
    values.update(overrides)
    return TrainingSettings(**values)


# ---------------------------------------------------------------------------
# Weight rounding
# ---------------------------------------------------------------------------


class TestRoundToIncrement:
    def test_exact_multiple_unchanged(self):
        from five_three_one.core.calculator import round_to_increment

        assert round_to_increment(92.5) == 92.5
        assert round_to_increment(0.0) == 0.0

    def test_rounds_to_nearest(self):
        from five_three_one.core.calculator import round_to_increment

        assert round_to_increment(92.25) == 92.5
        assert round_to_increment(83.025) == 82.5
        assert round_to_increment(3.74) == 2.5

    def test_half_rounds_up(self):
        from five_three_one.core.calculator import round_to_increment

        assert round_to_increment(1.25) == 2.5
        assert round_to_increment(3.75) == 5.0

    def test_negative_half_rounds_toward_positive(self):
        from five_three_one.core.calculator import round_to_increment

        result = round_to_increment(-1.25)
        assert result == 0.0
        assert math.copysign(1.0, result) == 1.0

    @pytest.mark.parametrize("value", [0.1, 7.3, 41.24, 99.99, 123.75, -17.6])
    def test_idempotent(self, value):
        from five_three_one.core.calculator import round_to_increment

        once = round_to_increment(value)
        assert round_to_increment(once) == once

    def test_rejects_non_finite(self):
        from five_three_one.core.calculator import round_to_increment

        with pytest.raises(ValueError):
            round_to_increment(float("nan"))
        with pytest.raises(ValueError):
            round_to_increment(float("inf"))


# ---------------------------------------------------------------------------
# Training max resolver
# ---------------------------------------------------------------------------


class TestResolveTrainingMax:
    def test_second_cycle_adds_one_progression(self):
        """(100 + 2.5) * 0.9 = 92.25 -> 92.5"""
        from five_three_one.core.calculator import resolve_training_max

        assert resolve_training_max(100, 2.5, 90, 2, 0) == 92.5

    def test_one_failure_reduces_by_ten_percent(self):
        """92.25 * 0.9 = 83.025 -> 82.5"""
        from five_three_one.core.calculator import resolve_training_max

        assert resolve_training_max(100, 2.5, 90, 2, 1) == 82.5

    def test_failures_compound(self):
        """100 * 0.9 * 0.81 = 72.9 -> 72.5"""
        from five_three_one.core.calculator import resolve_training_max

        assert resolve_training_max(100, 5, 90, 1, 2) == 72.5

    def test_first_cycle_ignores_progression(self):
        from five_three_one.core.calculator import resolve_training_max

        assert resolve_training_max(140, 5, 90, 1) == 125.0

    def test_zero_failures_is_plain_rounding(self):
        from five_three_one.core.calculator import resolve_training_max, round_to_increment

        for one_rm, prog, pct, cycle in [(100, 2.5, 90, 3), (187.5, 5, 85, 4), (61, 2.5, 80, 1)]:
            adjusted = one_rm + prog * (cycle - 1)
            assert resolve_training_max(one_rm, prog, pct, cycle, 0) == round_to_increment(
                adjusted * pct / 100
            )

    def test_non_positive_one_rep_max_passes_through(self):
        from five_three_one.core.calculator import resolve_training_max

        assert resolve_training_max(0, 0, 90, 1) == 0.0
        assert resolve_training_max(-100, 0, 90, 1) == -90.0

    def test_invalid_inputs_raise(self):
        from five_three_one.core.calculator import resolve_training_max

        with pytest.raises(ValueError):
            resolve_training_max(float("nan"), 2.5, 90, 1)
        with pytest.raises(ValueError):
            resolve_training_max(100, 2.5, 90, 0)
        with pytest.raises(ValueError):
            resolve_training_max(100, 2.5, 90, 1, -1)
        with pytest.raises(ValueError):
            resolve_training_max(100, 2.5, -5, 1)

    def test_training_max_from_settings(self):
        from five_three_one.core.calculator import training_max_for, training_maxes

        settings = _settings(cycle=2, failure_decreases={"benchPress": 1})
        assert training_max_for(settings, "benchPress") == 82.5
        # (140 + 5) * 0.9 = 130.5 -> 130
        assert training_maxes(settings)["squat"] == 130.0

    def test_missing_lift_raises(self):
        from five_three_one.core.calculator import training_max_for

        settings = _settings(one_rep_maxes={"squat": 140.0})
        with pytest.raises(ValueError):
            training_max_for(settings, "benchPress")


# ---------------------------------------------------------------------------
# Week table
# ---------------------------------------------------------------------------


class TestWeekTable:
    def test_third_percentage_is_row_maximum(self):
        from five_three_one.core.calculator import week_percentages

        for week in range(1, 5):
            pcts = week_percentages(week)
            assert pcts[2] == max(pcts)

    def test_deload_percentages(self):
        from five_three_one.core.calculator import week_percentages

        assert set(week_percentages(4)) == {40, 50, 60}

    def test_weight_for_top_set(self):
        """200 * 85% = 170"""
        from five_three_one.core.calculator import weight_for_set

        assert weight_for_set(200, 1, 2) == 170.0

    def test_week_out_of_range(self):
        from five_three_one.core.calculator import week_percentages, weight_for_set

        with pytest.raises(ValueError):
            week_percentages(0)
        with pytest.raises(ValueError):
            week_percentages(5)
        with pytest.raises(ValueError):
            weight_for_set(100, 1, 3)

    def test_workout_types(self):
        from five_three_one.core.calculator import is_deload_week, workout_type_for_week

        assert [workout_type_for_week(w) for w in range(1, 5)] == [
            "5/5/5+", "3/3/3+", "5/3/1+", "deload",
        ]
        assert is_deload_week(4)
        assert not is_deload_week(3)


# ---------------------------------------------------------------------------
# Set plan generator
# ---------------------------------------------------------------------------


class TestGenerateSessionSets:
    def test_week_one_with_warmup_and_bbb(self):
        from five_three_one.core.calculator import generate_session_sets

        sets = generate_session_sets(100, 1, DEFAULT_WARMUP, AssistanceConfig(True, 50))

        assert [s.kind for s in sets] == ["warmup"] * 3 + ["working"] * 3 + ["bbb"] * 5
        assert [(s.weight, s.reps) for s in sets[:3]] == [(40, 5), (50, 5), (60, 3)]
        assert [(s.weight, s.reps) for s in sets[3:6]] == [(65, 5), (75, 5), (85, 5)]
        assert [s.is_amrap for s in sets] == [False] * 5 + [True] + [False] * 5

    def test_bbb_five_by_ten_at_half_training_max(self):
        from five_three_one.core.calculator import generate_session_sets

        bbb = [s for s in generate_session_sets(100, 1, None, AssistanceConfig(True, 50)) if s.kind == "bbb"]

        assert len(bbb) == 5
        assert all(s.weight == 50 and s.reps == 10 for s in bbb)

    def test_week_three_reps(self):
        from five_three_one.core.calculator import generate_session_sets

        sets = generate_session_sets(100, 3)

        assert [(s.weight, s.reps, s.is_amrap) for s in sets] == [
            (75, 5, False), (85, 3, False), (95, 1, True),
        ]

    def test_deload_has_no_amrap_warmup_or_bbb(self):
        from five_three_one.core.calculator import generate_session_sets

        sets = generate_session_sets(100, 4, DEFAULT_WARMUP, AssistanceConfig(True, 50))

        assert [(s.weight, s.reps) for s in sets] == [(40, 5), (50, 5), (60, 5)]
        assert not any(s.is_amrap for s in sets)
        assert all(s.kind == "working" for s in sets)

    def test_disabled_options_are_skipped(self):
        from five_three_one.core.calculator import generate_session_sets

        sets = generate_session_sets(
            100, 2, WarmupConfig(enabled=False, sets=DEFAULT_WARMUP.sets), AssistanceConfig(False, 50)
        )
        assert [s.kind for s in sets] == ["working"] * 3

    def test_zero_percentage_warmup_step_skipped(self):
        from five_three_one.core.calculator import generate_session_sets

        warmup = WarmupConfig(sets=(WarmupSet(0, 5), WarmupSet(50, 5)))
        sets = generate_session_sets(100, 1, warmup)
        assert [s.weight for s in sets if s.kind == "warmup"] == [50]

    def test_fresh_list_each_call(self):
        from five_three_one.core.calculator import generate_session_sets

        first = generate_session_sets(100, 1)
        second = generate_session_sets(100, 1)
        assert first == second
        assert first is not second

    def test_session_plan_uses_settings(self):
        from five_three_one.core.calculator import session_plan

        settings = _settings(week=2, warmup=WarmupConfig(enabled=False), assistance=AssistanceConfig(False))
        # Bench TM 90: 70/80/90% -> 62.5, 72.5, 80
        assert [(s.weight, s.reps) for s in session_plan(settings, "benchPress")] == [
            (62.5, 3), (72.5, 3), (80.0, 3),
        ]


class TestCycleOverview:
    def test_four_weeks_with_top_sets(self):
        from five_three_one.core.calculator import cycle_overview

        overview = cycle_overview(_settings())

        assert [w.week for w in overview] == [1, 2, 3, 4]
        # Bench TM 90 -> 85%, 90%, 95%, 60%
        assert [w.top_sets["benchPress"].weight for w in overview] == [77.5, 80.0, 85.0, 55.0]
        assert overview[0].top_sets["benchPress"].is_amrap
        assert not overview[3].top_sets["benchPress"].is_amrap

    def test_advance_week(self):
        from five_three_one.core.calculator import advance_week

        assert advance_week(1, 1) == (1, 2)
        assert advance_week(3, 3) == (3, 4)
        assert advance_week(1, 4) == (2, 1)
        with pytest.raises(ValueError):
            advance_week(1, 5)


def test_week_table_has_four_rows():
    assert sorted(WEEK_PERCENTAGES) == [1, 2, 3, 4]


# ---------------------------------------------------------------------------
# 1RM estimation
# ---------------------------------------------------------------------------


class TestOneRepMax:
    def test_epley(self):
        from five_three_one.core.one_rm import calculate_one_rm

        assert calculate_one_rm(100, 5) == pytest.approx(116.6667, rel=1e-4)
        assert calculate_one_rm(100, 1) == 100
        assert calculate_one_rm(100, 0) == 0
        assert calculate_one_rm(0, 5) == 0

    def test_max_reps(self):
        from five_three_one.core.one_rm import calculate_max_reps

        assert calculate_max_reps(120, 100) == 6
        assert calculate_max_reps(100, 100) == 1
        assert calculate_max_reps(100, 0) == 0

    def test_weight_for_reps_inverts_epley(self):
        from five_three_one.core.one_rm import calculate_one_rm, calculate_weight_for_reps

        assert calculate_weight_for_reps(calculate_one_rm(100, 5), 5) == pytest.approx(100)
        assert calculate_weight_for_reps(100, 0) == 0

    def test_personal_record_compares_estimates(self):
        from five_three_one.core.one_rm import best_one_rm, is_personal_record

        records = [PersonalRecord("benchPress", 105, 5, "2026-01-05", "a")]
        # 105 x 5 -> 122.5; 100 x 8 -> 126.67
        assert best_one_rm(records, "benchPress") == pytest.approx(122.5)
        assert is_personal_record(records, "benchPress", 100, 8)
        assert not is_personal_record(records, "benchPress", 105, 5)
        assert is_personal_record(records, "squat", 60, 1)
        assert not is_personal_record([], "squat", 60, 0)

    def test_format_weight(self):
        from five_three_one.core.one_rm import format_weight, from_display_unit

        assert format_weight(100, "kg") == "100 kg"
        assert format_weight(92.5, "kg") == "92.5 kg"
        assert format_weight(100, "lbs") == "220 lbs"
        assert from_display_unit(220.462, "lbs") == pytest.approx(100)
        assert from_display_unit(100, "kg") == 100


# ---------------------------------------------------------------------------
# Workout logging
# ---------------------------------------------------------------------------


class TestWorkoutLog:
    def _plan(self):
        from five_three_one.core.calculator import generate_session_sets

        return generate_session_sets(100, 1, None, AssistanceConfig(True, 50))

    def test_outcomes_from_failures(self):
        from five_three_one.core.workout_log import outcomes_from_failures

        plan = self._plan()
        outcomes = outcomes_from_failures(plan, {5}, amrap_reps=9)

        assert outcomes[2].completed and outcomes[2].reps == 9
        assert not outcomes[4].completed
        assert sum(o.completed for o in outcomes) == len(plan) - 1

    def test_zero_amrap_reps_counts_as_failed(self):
        from five_three_one.core.workout_log import outcomes_from_failures

        outcomes = outcomes_from_failures(self._plan(), set(), amrap_reps=0)
        assert not outcomes[2].completed

    def test_build_session(self):
        from five_three_one.core.workout_log import (
            amrap_result,
            build_session,
            has_failed_working_set,
            outcomes_from_failures,
        )

        plan = self._plan()
        session = build_session(
            "s1", "benchPress", plan, outcomes_from_failures(plan, set(), 8),
            cycle=1, week=1, date="2026-03-02",
        )

        assert session.lift == "benchPress"
        assert session.workout_type == "5/5/5+"
        assert [s.notes for s in session.exercises[0].sets[:4]] == ["working", "working", "amrap", "bbb"]
        assert amrap_result(session).reps == 8
        assert not has_failed_working_set(session)

    def test_logged_sets_are_noted_with_their_kind(self):
        from five_three_one.core.calculator import generate_session_sets
        from five_three_one.core.workout_log import build_session, outcomes_from_failures

        plan = generate_session_sets(100, 1, DEFAULT_WARMUP, AssistanceConfig(True, 50))
        session = build_session(
            "s1", "squat", plan, outcomes_from_failures(plan, set(), 6),
            cycle=1, week=1, date="2026-03-02",
        )

        notes = [s.notes for s in session.exercises[0].sets]
        assert notes == ["warmup"] * 3 + ["working", "working", "amrap"] + ["bbb"] * 5

    def test_failed_bbb_is_not_a_working_failure(self):
        from five_three_one.core.workout_log import build_session, has_failed_working_set, outcomes_from_failures

        plan = self._plan()
        session = build_session(
            "s1", "benchPress", plan, outcomes_from_failures(plan, {8}, 8),
            cycle=1, week=1, date="2026-03-02",
        )
        assert not has_failed_working_set(session)

    def test_completed_amrap_requires_reps(self):
        from five_three_one.core.workout_log import SetOutcome, build_session

        plan = self._plan()
        outcomes = [SetOutcome(completed=True) for _ in plan]
        with pytest.raises(ValueError):
            build_session("s1", "benchPress", plan, outcomes, cycle=1, week=1, date="2026-03-02")

    def test_outcome_count_must_match(self):
        from five_three_one.core.workout_log import SetOutcome, build_session

        with pytest.raises(ValueError):
            build_session(
                "s1", "benchPress", self._plan(), [SetOutcome(True)], cycle=1, week=1, date="2026-03-02"
            )

    def test_week_complete(self):
        from five_three_one.core.config import LIFTS
        from five_three_one.core.models import WorkoutExercise, WorkoutSession
        from five_three_one.core.workout_log import is_week_complete, lifts_done

        history = [
            WorkoutSession(str(i), "2026-03-02", "5/5/5+", 1, 1, [WorkoutExercise(lift)])
            for i, lift in enumerate(LIFTS[:3])
        ]
        assert not is_week_complete(history, 1, 1)
        history.append(WorkoutSession("x", "2026-03-05", "5/5/5+", 1, 1, [WorkoutExercise(LIFTS[3])]))
        assert is_week_complete(history, 1, 1)
        assert lifts_done(history, 1, 2) == set()
