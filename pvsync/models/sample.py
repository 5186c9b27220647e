"""
Sample model - one solar reading recorded by the local logger
"""

from sqlalchemy import Boolean, Float, Index, Integer, false
from sqlalchemy.orm import Mapped, mapped_column

from pvsync.core.database import Base


class Sample(Base):
    """Solar reading for one tracker of an inverter."""

    __tablename__ = "solar"
    __table_args__ = (
        Index("ix_solar_pending", "device_id", "tracker_id", "uploaded"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    device_id: Mapped[int] = mapped_column(Integer)
    tracker_id: Mapped[int] = mapped_column(Integer)

    # Unix epoch seconds, UTC
    timestamp: Mapped[int] = mapped_column(Integer)

    # Readings
    energy_generation: Mapped[int] = mapped_column(Integer)  # Wh, lifetime
    power_generation: Mapped[int] = mapped_column(Integer)  # W
    temperature: Mapped[float] = mapped_column(Float)  # Celsius
    voltage: Mapped[float] = mapped_column(Float)  # V

    uploaded: Mapped[bool] = mapped_column(Boolean, default=False, server_default=false())

    def __repr__(self) -> str:
        return f"<Sample {self.id} tracker=({self.device_id},{self.tracker_id}) p={self.power_generation}W>"
