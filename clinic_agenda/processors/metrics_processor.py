# File: clinic_agenda/processors/metrics_processor.py
"""
Weekly agenda metrics: state ratios, counts by kind, a day x time-block
heatmap and per-day occupancy.
"""

import datetime
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from clinic_agenda.core.occupancy import occupancy_rate
from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models import AgendaEvent, EventKind, EventState, round_half_up
from clinic_agenda.processors.event_processor import EventProcessor
from clinic_agenda.utils.logger import setup_logger


@dataclass(frozen=True)
class TimeBlock:
    id: str
    label: str
    start_hour: int
    end_hour: int

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


TIME_BLOCKS = (
    TimeBlock("morning", "Morning", 7, 11),
    TimeBlock("midday", "Midday", 11, 15),
    TimeBlock("afternoon", "Afternoon", 15, 19),
    TimeBlock("evening", "Evening", 19, 22),
)

# A block with this many events renders at full intensity
HEATMAP_SATURATION = 3


@dataclass(frozen=True)
class HeatmapCell:
    block: TimeBlock
    count: int

    @property
    def intensity(self) -> float:
        return min(self.count / HEATMAP_SATURATION, 1.0)


@dataclass
class WeekMetrics:
    """Figures for the metrics panel of the week view."""
    week_start: datetime.date
    total: int = 0
    confirmed: int = 0
    cancelled: int = 0
    completed: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)
    days: List[datetime.date] = field(default_factory=list)
    heatmap: List[List[HeatmapCell]] = field(default_factory=list)
    occupancy_by_day: Dict[datetime.date, int] = field(default_factory=dict)

    def _ratio(self, count: int) -> int:
        return round_half_up(count / self.total * 100) if self.total else 0

    @property
    def confirmation_ratio(self) -> int:
        return self._ratio(self.confirmed)

    @property
    def cancellation_ratio(self) -> int:
        return self._ratio(self.cancelled)

    @property
    def completion_ratio(self) -> int:
        return self._ratio(self.completed)

    @property
    def busiest_day(self) -> Optional[datetime.date]:
        """Day with the most events; None for an empty week."""
        if not self.total:
            return None
        counts = [sum(cell.count for cell in row) for row in self.heatmap]
        return self.days[counts.index(max(counts))]

    def to_dict(self) -> dict:
        return {
            'week_start': self.week_start.isoformat(),
            'total': self.total,
            'confirmed': self.confirmed,
            'cancelled': self.cancelled,
            'completed': self.completed,
            'confirmation_ratio': self.confirmation_ratio,
            'cancellation_ratio': self.cancellation_ratio,
            'completion_ratio': self.completion_ratio,
            'by_kind': dict(self.by_kind),
            'heatmap': [
                {
                    'day': day.isoformat(),
                    'blocks': [
                        {'id': cell.block.id, 'count': cell.count, 'intensity': cell.intensity}
                        for cell in row
                    ],
                }
                for day, row in zip(self.days, self.heatmap)
            ],
            'occupancy_by_day': {day.isoformat(): rate for day, rate in self.occupancy_by_day.items()},
        }


class MetricsProcessor:
    """Computes WeekMetrics from an event list."""

    def __init__(self, grid: Optional[TimeGrid] = None, include_cancelled: bool = False):
        self.grid = grid or TimeGrid()
        self.include_cancelled = include_cancelled
        self.event_processor = EventProcessor(self.grid)
        self.logger = setup_logger(__name__)

    def week_metrics(self, events: Iterable[AgendaEvent], week_start: DayLike) -> WeekMetrics:
        """
        Metrics for the seven days starting at ``week_start``. Events outside
        the week are ignored.
        """
        by_day = self.event_processor.events_in_week(events, week_start)
        week_events = [e for day_events in by_day.values() for e in day_events]

        metrics = WeekMetrics(
            week_start=self.grid.local_day(week_start),
            total=len(week_events),
            days=list(by_day.keys()),
        )
        metrics.confirmed = sum(1 for e in week_events if e.state == EventState.CONFIRMED)
        metrics.cancelled = sum(1 for e in week_events if e.state == EventState.CANCELLED)
        metrics.completed = sum(1 for e in week_events if e.state == EventState.COMPLETED)

        by_kind = {kind.value: 0 for kind in EventKind}
        for event in week_events:
            by_kind[event.kind.value] += 1
        metrics.by_kind = {kind: count for kind, count in by_kind.items() if count}

        for day, day_events in by_day.items():
            hours = [self.grid.local(e.start).hour for e in day_events]
            metrics.heatmap.append([
                HeatmapCell(block=block, count=sum(1 for h in hours if block.contains(h)))
                for block in TIME_BLOCKS
            ])
            metrics.occupancy_by_day[day] = occupancy_rate(
                day_events, day, grid=self.grid, include_cancelled=self.include_cancelled
            )

        self.logger.info(
            f"Week of {metrics.week_start}: {metrics.total} events, "
            f"{metrics.confirmation_ratio}% confirmed"
        )
        return metrics
