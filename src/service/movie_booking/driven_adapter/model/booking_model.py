from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.orm_db_setting import Base


class BookingModel(Base):
    __tablename__ = 'booking'
    __table_args__ = (Index('ix_booking_movie_theatre', 'movie_key', 'theatre_key'),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True)  # UUID7
    movie_key: Mapped[str] = mapped_column(String(255), nullable=False)
    theatre_key: Mapped[str] = mapped_column(String(255), nullable=False)
    movie_name: Mapped[str] = mapped_column(String(255), nullable=False)
    theatre_name: Mapped[str] = mapped_column(String(255), nullable=False)
    seat_count: Mapped[int] = mapped_column(Integer, nullable=False)
    seat_labels: Mapped[list] = mapped_column(JSON, nullable=False)
    booked_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
