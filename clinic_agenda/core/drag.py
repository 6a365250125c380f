# File: clinic_agenda/core/drag.py
"""
Drag/resize interaction state machine.

    IDLE -> DRAGGING -> DROPPED
                     -> CANCELLED

One ``DragSession`` lives for exactly one gesture. While dragging, pointer
moves only record the last Y position; all projection and rounding happens
on drop. Proposals go out through the ``on_move`` / ``on_resize`` /
``on_create`` callbacks, at most once per gesture. Nothing is persisted here.

A ``pointer_source`` is anything with ``subscribe(callback) -> unsubscribe``.
The controller subscribes when a gesture starts and always unsubscribes when
it ends, whether by drop or cancel.
"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from clinic_agenda.core.position import position_for
from clinic_agenda.core.time_grid import DayLike, TimeGrid
from clinic_agenda.models.common import round_half_up
from clinic_agenda.models.enums import ResourceKind
from clinic_agenda.models.event import AgendaEvent
from clinic_agenda.models.proposals import CreateProposal, MoveProposal, ResizeProposal
from clinic_agenda.utils.logger import setup_logger

logger = setup_logger(__name__)


class DragStateError(RuntimeError):
    """Raised when the controller is driven through an invalid transition."""


class DragState(Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    DROPPED = "dropped"
    CANCELLED = "cancelled"


class DragMode(Enum):
    MOVE = "move"
    RESIZE = "resize"


@dataclass
class DragSession:
    """State of the gesture in progress."""
    event: AgendaEvent
    mode: DragMode
    state: DragState = DragState.DRAGGING
    last_pointer_y: Optional[float] = None
    origin_pointer_y: Optional[float] = None
    initial_height: Optional[float] = None
    unsubscribe: Optional[Callable[[], None]] = field(default=None, repr=False)

    @property
    def event_id(self) -> str:
        return self.event.id

    @property
    def has_real_pointer(self) -> bool:
        """True once at least one pointer position was observed."""
        return self.last_pointer_y is not None

    @property
    def is_active(self) -> bool:
        return self.state == DragState.DRAGGING


@dataclass(frozen=True)
class DropTarget:
    """
    Where a gesture ended.

    ``container_top`` and ``scroll_top`` describe the grid container at drop
    time: both are subtracted from the pointer Y to get the offset from the
    top of the window. ``index`` is the discrete slot row of the target
    cell, used when no pointer position is available. ``resource_id`` is
    the lane the event was dropped on, if the view has lanes.
    """
    day: DayLike
    index: Optional[int] = None
    container_top: float = 0.0
    scroll_top: float = 0.0
    resource_id: Optional[str] = None
    resource_kind: ResourceKind = ResourceKind.PROFESSIONAL


MoveCallback = Callable[[MoveProposal], None]
ResizeCallback = Callable[[ResizeProposal], None]
CreateCallback = Callable[[CreateProposal], None]


class DragController:
    """Owns the drag session and turns finished gestures into proposals."""

    def __init__(
        self,
        grid: Optional[TimeGrid] = None,
        on_move: Optional[MoveCallback] = None,
        on_resize: Optional[ResizeCallback] = None,
        on_create: Optional[CreateCallback] = None,
        pointer_source=None,
    ):
        self.grid = grid or TimeGrid()
        self.on_move = on_move
        self.on_resize = on_resize
        self.on_create = on_create
        self.pointer_source = pointer_source
        self._session: Optional[DragSession] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def state(self) -> DragState:
        if self._session is None:
            return DragState.IDLE
        return self._session.state

    # ------------------------------------------------------------- lifecycle

    def begin_move(self, event: AgendaEvent) -> DragSession:
        """Start dragging ``event`` to a new time and/or lane."""
        return self._begin(DragSession(event=event, mode=DragMode.MOVE))

    def begin_resize(
        self,
        event: AgendaEvent,
        initial_height: Optional[float] = None,
        pointer_y: Optional[float] = None,
    ) -> DragSession:
        """
        Start resizing ``event`` from its bottom edge.

        ``initial_height`` defaults to the card's rendered height and
        ``pointer_y`` is where the resize handle was grabbed. Without it the
        first pointer sample of the gesture becomes the origin.
        """
        if initial_height is None:
            initial_height = position_for(event, grid=self.grid).height
        session = DragSession(
            event=event,
            mode=DragMode.RESIZE,
            origin_pointer_y=pointer_y,
            initial_height=initial_height,
        )
        return self._begin(session)

    def _begin(self, session: DragSession) -> DragSession:
        if self._session is not None and self._session.is_active:
            raise DragStateError(f"A gesture on event {self._session.event_id} is already in progress")

        if self.pointer_source is not None:
            session.unsubscribe = self.pointer_source.subscribe(self._on_pointer)

        self._session = session
        logger.debug(f"Drag started: {session.mode.value} {session.event_id}")
        return session

    def _on_pointer(self, y: float):
        # Late deliveries after the gesture ended are dropped
        if self._session is not None and self._session.is_active:
            self._record_pointer(self._session, y)

    def pointer_move(self, y: float):
        """Record the pointer position. No computation happens here."""
        self._record_pointer(self._active_session(), y)

    @staticmethod
    def _record_pointer(session: DragSession, y: float):
        # A resize started without a grab position measures from the first sample
        if session.mode == DragMode.RESIZE and session.origin_pointer_y is None:
            session.origin_pointer_y = y
        session.last_pointer_y = y

    def cancel(self):
        """Abort the gesture. No callback fires."""
        session = self._active_session()
        self._finish(session, DragState.CANCELLED)
        logger.debug(f"Drag cancelled: {session.event_id}")

    def drop(self, target: Optional[DropTarget]):
        """
        Release the gesture over ``target``.

        Without a target the gesture is cancelled and None is returned.
        Otherwise the proposal is emitted through the matching callback and
        returned.
        """
        session = self._active_session()
        if target is None:
            self.cancel()
            return None

        if session.mode == DragMode.MOVE:
            proposal = self._move_proposal(session, target)
            callback = self.on_move
        else:
            proposal = self._resize_proposal(session)
            callback = self.on_resize

        # Detach before handing control to the callback
        self._finish(session, DragState.DROPPED)
        logger.debug(f"Drag dropped: {proposal}")
        if callback is not None:
            callback(proposal)
        return proposal

    def _active_session(self) -> DragSession:
        if self._session is None:
            raise DragStateError("No gesture has been started")
        if not self._session.is_active:
            raise DragStateError(
                f"Gesture on event {self._session.event_id} already {self._session.state.value}"
            )
        return self._session

    def _finish(self, session: DragSession, state: DragState):
        session.state = state
        if session.unsubscribe is not None:
            unsubscribe, session.unsubscribe = session.unsubscribe, None
            unsubscribe()

    # ------------------------------------------------------------ projection

    def _pointer_minutes(self, pointer_y: float, container_top: float, scroll_top: float) -> float:
        """Minutes from window start under a pointer, clamped to the window."""
        pixels = pointer_y - container_top - scroll_top
        return self.grid.clamp_offset(self.grid.minutes_for_pixels(pixels))

    def _move_proposal(self, session: DragSession, target: DropTarget) -> MoveProposal:
        grid = self.grid
        if session.has_real_pointer:
            minutes = self._pointer_minutes(session.last_pointer_y, target.container_top, target.scroll_top)
        elif target.index is not None:
            minutes = grid.clamp_offset(target.index * grid.slot_minutes)
        else:
            # Nothing to go on: keep the event's time of day
            minutes = grid.clamp_offset(grid.offset_for_time(session.event.start))

        candidate = grid.time_for_offset(target.day, minutes)
        new_start = grid.round_to_nearest_slot(candidate)

        new_resource_id = None
        if target.resource_id is not None and target.resource_id != session.event.resource_ref(target.resource_kind):
            new_resource_id = target.resource_id

        return MoveProposal(event_id=session.event_id, new_start=new_start, new_resource_id=new_resource_id)

    def _resize_proposal(self, session: DragSession) -> ResizeProposal:
        grid = self.grid
        delta = 0.0
        if session.has_real_pointer and session.origin_pointer_y is not None:
            delta = session.last_pointer_y - session.origin_pointer_y

        height = max(grid.config.min_visual_height, session.initial_height + delta)
        duration = max(round_half_up(height / (grid.pixels_per_hour / 60)), grid.slot_minutes)
        return ResizeProposal(event_id=session.event_id, new_duration_minutes=duration)

    # -------------------------------------------------------- click-to-create

    def click_to_create(
        self,
        day: DayLike,
        pointer_y: float,
        container_top: float = 0.0,
        scroll_top: float = 0.0,
        resource_id: Optional[str] = None,
    ) -> CreateProposal:
        """
        Propose a new event at the slot under a timeline click.

        The start is the boundary of the clicked slot, kept inside the
        window so a click on the very bottom edge yields the last slot.
        """
        if self._session is not None and self._session.is_active:
            raise DragStateError("Cannot create while a gesture is in progress")

        grid = self.grid
        minutes = self._pointer_minutes(pointer_y, container_top, scroll_top)
        start = grid.floor_to_slot(grid.time_for_offset(day, minutes))
        last_slot = grid.window_end(day) - datetime.timedelta(minutes=grid.slot_minutes)
        if start > last_slot:
            start = last_slot

        proposal = CreateProposal(start=start, resource_id=resource_id)
        logger.debug(f"Create proposed: {proposal}")
        if self.on_create is not None:
            self.on_create(proposal)
        return proposal
