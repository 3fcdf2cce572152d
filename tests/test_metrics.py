from datetime import datetime, timedelta, timezone

import pytest

from dashboard.core.metrics import (
    activation_rate,
    average_activation_minutes,
    compute_snapshot,
    format_duration,
    percentage_change,
)
from dashboard.models.signup import Signup

BASE = datetime(2026, 5, 1, 9, 0, tzinfo=timezone.utc)


def _signup(plan="free", activated_after_min=None):
    activation = None
    if activated_after_min is not None:
        activation = BASE + timedelta(minutes=activated_after_min)
    return Signup(
        email="x@example.com",
        signup_date=BASE,
        activation_date=activation,
        current_plan=plan,
    )


@pytest.mark.parametrize(
    "minutes,expected",
    [
        (90, "0d 1h 30m"),
        (1500, "1d 1h 0m"),
        (0, "0d 0h 0m"),
        (-15, "0d 0h 0m"),
        (None, "0d 0h 0m"),
        (59.9, "0d 0h 59m"),
        (2 * 1440 + 61, "2d 1h 1m"),
    ],
)
def test_format_duration(minutes, expected):
    assert format_duration(minutes) == expected


def test_activation_rate_bounds():
    assert activation_rate(0, 0) == 0.0
    assert activation_rate(5, 0) == 0.0
    assert activation_rate(1, 3) == 33.3
    assert activation_rate(2, 3) == 66.7
    assert activation_rate(3, 3) == 100.0


def test_percentage_change():
    assert percentage_change(0, 0) == 0
    assert percentage_change(7, 0) == 100
    assert percentage_change(15, 10) == 50
    assert percentage_change(5, 10) == -50
    assert percentage_change(1, 8) == -88  # -87.5 rounds away from zero
    assert percentage_change(10, 3) == 233


def test_average_activation_ignores_unactivated():
    signups = [_signup(activated_after_min=60), _signup(), _signup(activated_after_min=120)]
    assert average_activation_minutes(signups) == 90
    assert average_activation_minutes([_signup()]) == 0.0


def test_compute_snapshot():
    current = [
        _signup(plan="pro", activated_after_min=90),
        _signup(plan="free"),
        _signup(plan="enterprise", activated_after_min=1500),
        _signup(plan="churned"),
    ]
    previous = [_signup(plan="free", activated_after_min=30), _signup(plan="free_trial")]

    snap = compute_snapshot(current, previous)

    assert snap.current.total_signups == 4
    assert snap.current.activated == 2
    assert snap.current.converted == 2
    assert snap.current.activation_rate == 50.0
    assert snap.current.avg_time_to_activation == "0d 13h 15m"
    assert snap.previous.total_signups == 2
    assert snap.previous.converted == 0
    assert snap.previous.avg_time_to_activation == "0d 0h 30m"

    assert snap.signups_change.pct == 100
    assert snap.activated_change.pct == 100
    assert snap.converted_change.pct == 100
    assert snap.converted_change.direction == "up"

    assert snap.activation_time_change.improved is False
    assert snap.activation_time_change.delta_days == 0.5

    weights = {seg.key: seg.weight for seg in snap.funnel}
    assert weights == {"signups": 1.0, "activated": 0.5, "converted": 0.5}


def test_compute_snapshot_empty_periods():
    snap = compute_snapshot([], [])

    assert snap.current.total_signups == 0
    assert snap.current.activation_rate == 0.0
    assert snap.current.avg_time_to_activation == "0d 0h 0m"
    assert snap.signups_change.pct == 0
    assert snap.signups_change.direction == "up"
    assert [seg.weight for seg in snap.funnel] == [1.0, 0.01, 0.01]
    assert snap.activation_rate_target == 25.0


def test_funnel_converted_segment_has_minimum_weight():
    current = [_signup(plan="free") for _ in range(99)] + [_signup(plan="pro")]
    snap = compute_snapshot(current, [])

    converted = snap.funnel[2]
    assert converted.count == 1
    assert converted.pct_of_signups == 1.0
    assert converted.weight == 0.02
    assert snap.signups_change.direction == "up"


def test_downward_change_direction():
    snap = compute_snapshot([_signup()], [_signup(), _signup()])
    assert snap.signups_change.pct == -50
    assert snap.signups_change.direction == "down"
