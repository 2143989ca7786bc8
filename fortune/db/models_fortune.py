"""SQLAlchemy model for fortune quotes."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from fortune.db.base import BaseEntity


class FortuneEntity(BaseEntity):
    """A single fortune quote."""

    __tablename__ = "fortune"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    quote: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
