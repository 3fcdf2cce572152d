from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from dashboard.models.signup import Signup
from dashboard.schemas.dashboard import (
    ActivationTimeChange,
    ChangeBlock,
    FunnelSegment,
    MetricsSnapshot,
    PeriodMetrics,
)

PAID_PLANS = frozenset({"pro", "enterprise"})

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * MINUTES_PER_HOUR


def _round_half_up(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def is_activated(signup: Signup) -> bool:
    return signup.activation_date is not None


def is_converted(signup: Signup) -> bool:
    return signup.current_plan in PAID_PLANS


def activation_rate(activated: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return float(_round_half_up(Decimal(activated * 100) / Decimal(total), "0.1"))


def percentage_change(current: int, previous: int) -> int:
    if previous == 0:
        return 100 if current > 0 else 0
    pct = Decimal(current - previous) * 100 / Decimal(previous)
    # ROUND_HALF_UP on Decimal rounds ties away from zero
    return int(_round_half_up(pct, "1"))


def format_duration(minutes: float | None) -> str:
    if not minutes or minutes <= 0:
        return "0d 0h 0m"
    total = int(minutes // 1)
    days = total // MINUTES_PER_DAY
    hours = (total % MINUTES_PER_DAY) // MINUTES_PER_HOUR
    mins = total % MINUTES_PER_HOUR
    return f"{days}d {hours}h {mins}m"


def average_activation_minutes(signups: Iterable[Signup]) -> float:
    """Mean signup->activation time over activated records only."""
    durations = [
        (s.activation_date - s.signup_date).total_seconds() / 60
        for s in signups
        if is_activated(s)
    ]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def period_metrics(signups: list[Signup]) -> PeriodMetrics:
    total = len(signups)
    activated = sum(1 for s in signups if is_activated(s))
    converted = sum(1 for s in signups if is_converted(s))
    avg_minutes = average_activation_minutes(signups)
    return PeriodMetrics(
        total_signups=total,
        activated=activated,
        converted=converted,
        activation_rate=activation_rate(activated, total),
        avg_time_to_activation=format_duration(avg_minutes),
        avg_activation_minutes=avg_minutes,
    )


def change_block(current: int, previous: int) -> ChangeBlock:
    pct = percentage_change(current, previous)
    return ChangeBlock(
        current=current,
        previous=previous,
        pct=pct,
        direction="up" if pct >= 0 else "down",
    )


def activation_time_change(
    current_minutes: float, previous_minutes: float
) -> ActivationTimeChange:
    delta = abs(current_minutes - previous_minutes) / MINUTES_PER_DAY
    return ActivationTimeChange(
        delta_days=float(_round_half_up(Decimal(str(delta)), "0.1")),
        improved=current_minutes <= previous_minutes,
    )


def funnel(current: PeriodMetrics) -> list[FunnelSegment]:
    total = current.total_signups
    if total > 0:
        activated_weight = current.activated / total
        converted_weight = max(current.converted / total, 0.02)
    else:
        activated_weight = converted_weight = 0.01

    return [
        FunnelSegment(
            key="signups",
            label="Signups",
            count=total,
            pct_of_signups=100.0 if total > 0 else 0.0,
            weight=1.0,
        ),
        FunnelSegment(
            key="activated",
            label="Activated",
            count=current.activated,
            pct_of_signups=current.activation_rate,
            weight=activated_weight,
        ),
        FunnelSegment(
            key="converted",
            label="Paid",
            count=current.converted,
            pct_of_signups=activation_rate(current.converted, total),
            weight=converted_weight,
        ),
    ]


def compute_snapshot(
    current_signups: list[Signup],
    previous_signups: list[Signup],
    activation_rate_target: float = 25.0,
) -> MetricsSnapshot:
    """
    Build a fresh snapshot from the two period record sets.

    Nothing is carried over from earlier snapshots.
    """
    current = period_metrics(current_signups)
    previous = period_metrics(previous_signups)

    return MetricsSnapshot(
        current=current,
        previous=previous,
        signups_change=change_block(current.total_signups, previous.total_signups),
        activated_change=change_block(current.activated, previous.activated),
        converted_change=change_block(current.converted, previous.converted),
        activation_time_change=activation_time_change(
            current.avg_activation_minutes, previous.avg_activation_minutes
        ),
        activation_rate_target=activation_rate_target,
        funnel=funnel(current),
    )
