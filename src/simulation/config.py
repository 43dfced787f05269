from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Optional


@dataclass
class SystemConfig:
    """Fleet size, stepping cadence and building bounds for a dispatch system."""

    capacity: int = 4
    step_period: float = 1.0
    channel_capacity: Optional[int] = None
    lowest_floor: Optional[int] = None
    highest_floor: Optional[int] = None
    dispatcher: str = "nearest"

    def __post_init__(self) -> None:
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        if self.step_period <= 0:
            raise ValueError("step_period must be positive")
        if self.channel_capacity is None:
            self.channel_capacity = self.capacity
        elif self.channel_capacity < 1:
            raise ValueError("channel_capacity must be at least 1")
        if (
            self.lowest_floor is not None
            and self.highest_floor is not None
            and self.lowest_floor > self.highest_floor
        ):
            raise ValueError("lowest_floor must not exceed highest_floor")

    def floor_in_range(self, floor: int) -> bool:
        if self.lowest_floor is not None and floor < self.lowest_floor:
            return False
        if self.highest_floor is not None and floor > self.highest_floor:
            return False
        return True

    @classmethod
    def from_dict(cls, data: Dict) -> "SystemConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(sorted(unknown))}")
        return cls(**data)
