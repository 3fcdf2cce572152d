import uuid
from datetime import datetime
from sqlalchemy import DateTime, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from dashboard.db.base import Base


class Signup(Base):
    """
    Owned by the upstream product database; this service only reads it.
    current_plan and source are plain strings so unknown codes pass through.
    """

    __tablename__ = "signups"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    email: Mapped[str] = mapped_column(String(320), index=True, nullable=False)

    current_plan: Mapped[str | None] = mapped_column(String(40), nullable=True)
    type: Mapped[str | None] = mapped_column(String(40), nullable=True)
    source: Mapped[str | None] = mapped_column(String(40), nullable=True)

    signup_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), index=True, nullable=False
    )
    activation_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    churned_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_login: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    first_chat_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    num_chats: Mapped[int | None] = mapped_column(Integer, nullable=True)
    num_customers: Mapped[int | None] = mapped_column(Integer, nullable=True)

    business_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    website_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    country: Mapped[str | None] = mapped_column(String(120), nullable=True)
