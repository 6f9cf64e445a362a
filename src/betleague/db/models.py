"""ORM models for saved bet slip drafts."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base declarative class."""


class SlipDraft(Base):
    """A user's unsubmitted slip for one week, carried between screens."""

    __tablename__ = "slip_drafts"
    __table_args__ = (UniqueConstraint("user_id", "week", name="uq_slip_draft_user_week"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    league_id: Mapped[int | None] = mapped_column(Integer)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    parlay_stake: Mapped[float] = mapped_column(Float, default=0.0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    selections: Mapped[list[DraftSelection]] = relationship(
        back_populates="draft",
        cascade="all, delete-orphan",
        order_by="DraftSelection.position",
    )


class DraftSelection(Base):
    """One saved option: a single bet (with stake) or a parlay leg."""

    __tablename__ = "draft_selections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    draft_id: Mapped[int] = mapped_column(ForeignKey("slip_drafts.id"), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0)
    stake: Mapped[float] = mapped_column(Float, default=0.0)

    betting_option_id: Mapped[int] = mapped_column(Integer, nullable=False)
    game_id: Mapped[str] = mapped_column(String(64), nullable=False)
    market_type: Mapped[str] = mapped_column(String(64), nullable=False)
    outcome_name: Mapped[str] = mapped_column(String(255), nullable=False)
    outcome_point: Mapped[float | None] = mapped_column(Float)
    player_name: Mapped[str | None] = mapped_column(String(128))
    bookmaker: Mapped[str] = mapped_column(String(64), nullable=False)
    american_odds: Mapped[int] = mapped_column(Integer, nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False)

    home_team: Mapped[str | None] = mapped_column(String(128))
    away_team: Mapped[str | None] = mapped_column(String(128))
    start_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    draft: Mapped[SlipDraft] = relationship(back_populates="selections")
