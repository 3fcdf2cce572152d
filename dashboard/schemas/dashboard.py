from datetime import datetime
from typing import Literal

from pydantic import BaseModel


class WindowOut(BaseModel):
    start_utc: datetime
    end_utc: datetime


class PeriodMetrics(BaseModel):
    total_signups: int
    activated: int
    converted: int
    activation_rate: float  # percent, one decimal
    avg_time_to_activation: str  # "Dd Hh Mm"
    avg_activation_minutes: float


class ChangeBlock(BaseModel):
    current: int
    previous: int
    pct: int
    direction: Literal["up", "down"]


class ActivationTimeChange(BaseModel):
    delta_days: float
    improved: bool  # current average is not slower than previous


class FunnelSegment(BaseModel):
    key: Literal["signups", "activated", "converted"]
    label: str
    count: int
    pct_of_signups: float
    weight: float  # flex weight of the bar segment


class MetricsSnapshot(BaseModel):
    current: PeriodMetrics
    previous: PeriodMetrics
    signups_change: ChangeBlock
    activated_change: ChangeBlock
    converted_change: ChangeBlock
    activation_time_change: ActivationTimeChange
    activation_rate_target: float
    funnel: list[FunnelSegment]


class MetricsOut(BaseModel):
    range: str
    current_window: WindowOut
    previous_window: WindowOut
    metrics: MetricsSnapshot
    seq: int | None  # echoed view-state sequence for stale-result checks


class SignupRowOut(BaseModel):
    id: str
    email: str
    contact_number: str
    business_name: str
    website_url: str | None
    admin_url: str | None
    country: str
    signup_date: str
    churned_date: str
    last_login: str
    plan: str | None  # raw code
    plan_label: str
    plan_style: str
    type_label: str
    source_label: str
    activation_date: str
    first_chat_date: str
    num_chats: int
    num_customers: int


class SignupPageOut(BaseModel):
    range: str
    items: list[SignupRowOut]
    total: int
    page: int
    page_size: int
    total_pages: int
    pages: list[int | str]
    showing_from: int
    showing_to: int
    search: str | None
    seq: int | None  # echoed view-state sequence for stale-result checks
