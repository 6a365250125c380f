# File: clinic_agenda/models/config.py
"""
Data models for the agenda grid configuration.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GridConfig:
    """
    Working-hours window and slot granularity of the time grid.

    Every component reads these values through a TimeGrid built from one
    GridConfig, so changing the window only means changing this object.
    """
    start_hour: int = 7
    end_hour: int = 21
    slot_minutes: int = 15
    pixels_per_hour: float = 80
    min_visual_height: float = 40

    def __post_init__(self):
        """Validate the window."""
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(
                f"Working window must satisfy 0 <= start < end <= 24, got {self.start_hour}-{self.end_hour}"
            )
        if self.slot_minutes <= 0:
            raise ValueError(f"Slot minutes must be positive: {self.slot_minutes}")
        if self.slot_minutes > self.window_minutes:
            raise ValueError(f"Slot of {self.slot_minutes} min does not fit a {self.window_minutes} min window")
        if self.pixels_per_hour <= 0:
            raise ValueError(f"Pixels per hour must be positive: {self.pixels_per_hour}")
        if self.min_visual_height < 0:
            raise ValueError(f"Minimum visual height cannot be negative: {self.min_visual_height}")

    @property
    def window_minutes(self) -> int:
        return (self.end_hour - self.start_hour) * 60

    @classmethod
    def from_dict(cls, data: dict) -> 'GridConfig':
        """Create GridConfig from dictionary (e.g., loaded from JSON)."""
        defaults = cls()
        return cls(
            start_hour=int(data.get('start_hour', defaults.start_hour)),
            end_hour=int(data.get('end_hour', defaults.end_hour)),
            slot_minutes=int(data.get('slot_minutes', defaults.slot_minutes)),
            pixels_per_hour=float(data.get('pixels_per_hour', defaults.pixels_per_hour)),
            min_visual_height=float(data.get('min_visual_height', defaults.min_visual_height)),
        )

    def to_dict(self) -> dict:
        return {
            'start_hour': self.start_hour,
            'end_hour': self.end_hour,
            'slot_minutes': self.slot_minutes,
            'pixels_per_hour': self.pixels_per_hour,
            'min_visual_height': self.min_visual_height,
        }
