from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.orm_db_setting import Base


class InventoryModel(Base):
    __tablename__ = 'inventory'
    __table_args__ = (UniqueConstraint('movie_key', 'theatre_key', name='uk_movie_theatre'),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Normalized (casefolded) identity; display names kept separately
    movie_key: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    theatre_key: Mapped[str] = mapped_column(String(255), nullable=False)
    movie_name: Mapped[str] = mapped_column(String(255), nullable=False)
    theatre_name: Mapped[str] = mapped_column(String(255), nullable=False)
    total_capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
