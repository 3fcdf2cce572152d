from datetime import datetime, timezone, tzinfo

from dashboard.models.signup import Signup
from dashboard.schemas.dashboard import SignupRowOut

PLACEHOLDER = "—"

PLAN_LABELS = {
    "free": "Free",
    "free_trial": "Free Trial",
    "pro": "Pro",
    "enterprise": "Enterprise",
    "churned": "Churned",
}

PLAN_STYLES = {
    "free": "neutral",
    "free_trial": "info",
    "pro": "paid",
    "enterprise": "paid",
    "churned": "danger",
}

SOURCE_LABELS = {
    "app_store": "App Store",
    "google_search": "Google Search",
    "direct": "Direct",
    "referral": "Referral",
    "paid_ads": "Paid Ads",
}


def format_timestamp(value: datetime | None, tz: tzinfo | None = None) -> str:
    """DD/MM/YY hh:mm AM|PM in the viewer's zone. Naive values are UTC."""
    if value is None:
        return PLACEHOLDER
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    local = value.astimezone(tz or timezone.utc)
    hour12 = local.hour % 12 or 12
    ampm = "PM" if local.hour >= 12 else "AM"
    return (
        f"{local.day:02d}/{local.month:02d}/{local.year % 100:02d} "
        f"{hour12:02d}:{local.minute:02d} {ampm}"
    )


def plan_label(plan: str | None) -> str:
    if plan is None:
        return PLACEHOLDER
    return PLAN_LABELS.get(plan, plan)


def plan_style(plan: str | None) -> str:
    return PLAN_STYLES.get(plan, "neutral")


def source_label(source: str | None) -> str:
    if not source:
        return PLACEHOLDER
    return SOURCE_LABELS.get(source, source)


def type_label(value: str | None) -> str:
    if not value:
        return PLACEHOLDER
    return value[0].upper() + value[1:]


def _text(value: str | None) -> str:
    return value or PLACEHOLDER


def present_signup(signup: Signup, tz: tzinfo | None = None) -> SignupRowOut:
    return SignupRowOut(
        id=str(signup.id),
        email=signup.email,
        contact_number=_text(signup.contact_number),
        business_name=_text(signup.business_name),
        website_url=signup.website_url or None,
        admin_url=signup.admin_url or None,
        country=_text(signup.country),
        signup_date=format_timestamp(signup.signup_date, tz),
        churned_date=format_timestamp(signup.churned_date, tz),
        last_login=format_timestamp(signup.last_login, tz),
        plan=signup.current_plan,
        plan_label=plan_label(signup.current_plan),
        plan_style=plan_style(signup.current_plan),
        type_label=type_label(signup.type),
        source_label=source_label(signup.source),
        activation_date=format_timestamp(signup.activation_date, tz),
        first_chat_date=format_timestamp(signup.first_chat_date, tz),
        num_chats=signup.num_chats or 0,
        num_customers=signup.num_customers or 0,
    )
