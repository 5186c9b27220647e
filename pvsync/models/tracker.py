"""
Tracker - maps an inverter tracker to its PVOutput system
"""

from pydantic import BaseModel, ConfigDict


class Tracker(BaseModel):
    """Configured tracker; (device_id, tracker_id) selects its samples."""

    model_config = ConfigDict(frozen=True)

    device_id: int
    tracker_id: int
    system_id: str

    @property
    def key(self) -> tuple[int, int]:
        return (self.device_id, self.tracker_id)

    def __str__(self) -> str:
        return f"tracker ({self.device_id},{self.tracker_id}) -> system {self.system_id}"
