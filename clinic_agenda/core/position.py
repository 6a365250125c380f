# File: clinic_agenda/core/position.py

import datetime
from typing import Optional

from clinic_agenda.core.time_grid import TimeGrid
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.models.slots import EventPosition


def position_for(
    event: AgendaEvent,
    pixels_per_hour: Optional[float] = None,
    grid: Optional[TimeGrid] = None,
) -> EventPosition:
    """
    Vertical placement of an event card on the grid.

    top = minutes from window start in pixels; height = true duration in
    pixels, floored at the grid's minimum visual height so short events stay
    clickable. The floor is presentational only; conflict and occupancy math
    always use the true duration. Never raises, degenerate ranges get the
    minimum height.
    """
    grid = grid or TimeGrid()
    pph = pixels_per_hour if pixels_per_hour is not None else grid.pixels_per_hour

    top = (grid.offset_for_time(event.start) / 60) * pph
    height = (event.duration_minutes() / 60) * pph
    return EventPosition(top=top, height=max(height, grid.config.min_visual_height))


def current_time_position(
    now: datetime.datetime,
    pixels_per_hour: Optional[float] = None,
    grid: Optional[TimeGrid] = None,
) -> float:
    """Offset of the "now" indicator line. Not clamped to the window."""
    grid = grid or TimeGrid()
    pph = pixels_per_hour if pixels_per_hour is not None else grid.pixels_per_hour
    return (grid.offset_for_time(now) / 60) * pph
