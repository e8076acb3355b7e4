"""SmallCraftDesign model: one saved design record per row."""

from datetime import datetime

from sqlalchemy import DateTime, Integer, JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from smallcraft.models.base import Base


class SmallCraftDesign(Base):
    """A persisted small craft design.

    The name is unique across the store.  The rest of the design (hull,
    armor, drives, fuel, fittings, weapons, cargo, staff) lives in the JSON
    data column in its camelCase interchange shape.
    """

    __tablename__ = "small_craft_designs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    # Set by the store on every save, not by the database
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
