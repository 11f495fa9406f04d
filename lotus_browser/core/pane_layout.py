from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)

DEFAULT_PANE_SIZES: Tuple[float, ...] = (20.0, 35.0, 45.0)
DEFAULT_MIN_PIXELS = 240.0

PointerMoveHandler = Callable[[float, float], None]
PointerUpHandler = Callable[[], None]
Unsubscribe = Callable[[], None]


# -------------------------------------------------------------------------
# Pointer-event source
# -------------------------------------------------------------------------

class PointerEventSource(Protocol):
    """
    Anything that can deliver global pointer move/up events.

    `subscribe` returns the function that detaches both handlers again.
    """

    def subscribe(self, on_move: PointerMoveHandler, on_up: PointerUpHandler) -> Unsubscribe:
        ...


class PointerEventBus:
    """
    In-process pointer-event source. Mirrors window-level mousemove/mouseup
    listeners: every subscriber sees every event until it unsubscribes.
    """

    def __init__(self) -> None:
        self._listeners: Dict[object, Tuple[PointerMoveHandler, PointerUpHandler]] = {}

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, on_move: PointerMoveHandler, on_up: PointerUpHandler) -> Unsubscribe:
        token = object()
        self._listeners[token] = (on_move, on_up)

        def unsubscribe() -> None:
            self._listeners.pop(token, None)

        return unsubscribe

    def move(self, x: float, y: float = 0.0) -> None:
        # Copy: handlers may unsubscribe while we iterate
        for on_move, _ in list(self._listeners.values()):
            on_move(x, y)

    def up(self) -> None:
        for _, on_up in list(self._listeners.values()):
            on_up()


# -------------------------------------------------------------------------
# Drag session
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class DragSession:
    """
    Snapshot taken on pointer-down. Every move is computed against these
    values, never against the output of the previous move.
    """

    divider_index: int
    anchor_x: float
    start_left_px: float
    start_right_px: float
    start_sizes: Tuple[float, ...]
    container_width: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DragSession:
        return cls(
            divider_index=int(data["divider_index"]),
            anchor_x=float(data["anchor_x"]),
            start_left_px=float(data["start_left_px"]),
            start_right_px=float(data["start_right_px"]),
            start_sizes=tuple(float(v) for v in data["start_sizes"]),
            container_width=float(data["container_width"]),
        )


# -------------------------------------------------------------------------
# Engine
# -------------------------------------------------------------------------

class PaneLayoutEngine:
    """
    Size split of N side-by-side panes, redistributed by dragging the
    dividers between them.

    Sizes are percentages of the container and sum to 100. A drag only ever
    moves pixels between the two panes flanking the active divider; each of
    them is held at `min_pixels` where possible, with the shortfall taken from
    its neighbour. One non-adjacent pane closes the sum (`100 - others`).

    When the container is narrower than the sum of minimums a pane can end up
    with a negative computed width. `sizes` reports such values as 0; nothing
    is raised.

    States: Idle -> Dragging (begin_drag) -> Idle (end_drag / close).
    While Dragging the engine holds one subscription on its pointer source.
    """

    def __init__(
            self,
            sizes: Sequence[float] = DEFAULT_PANE_SIZES,
            *,
            min_pixels: float = DEFAULT_MIN_PIXELS,
            container_width: float = 0.0,
            pointer_source: Optional[PointerEventSource] = None,
    ):
        self.min_pixels = float(min_pixels)
        self.container_width = max(0.0, float(container_width))
        self.pointer_source = pointer_source

        self._sizes: List[float] = _normalise_sizes(sizes)
        self._session: Optional[DragSession] = None
        self._release: Optional[Unsubscribe] = None

    # ---- read-only views ----

    @property
    def is_dragging(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def raw_sizes(self) -> List[float]:
        return list(self._sizes)

    @property
    def sizes(self) -> List[float]:
        """Sizes for display: never below 0."""
        return [max(0.0, s) for s in self._sizes]

    def pixel_widths(self, container_width: Optional[float] = None) -> List[float]:
        width = self.container_width if container_width is None else float(container_width)
        return [s / 100.0 * width for s in self._sizes]

    def set_container_width(self, container_width: float) -> None:
        self.container_width = max(0.0, float(container_width))

    # ---- drag lifecycle ----

    def begin_drag(
            self,
            divider_index: int,
            pointer_x: float,
            container_width: Optional[float] = None,
    ) -> bool:
        """
        Start dragging the divider between panes `divider_index` and
        `divider_index + 1`. Replaces any session already in progress.

        Returns False (and changes nothing) for a divider that does not exist.
        """
        if not 0 <= divider_index < len(self._sizes) - 1:
            logger.warning(
                "Ignoring drag on unknown divider",
                extra={"divider_index": divider_index, "n_panes": len(self._sizes)},
            )
            return False

        if container_width is not None:
            self.set_container_width(container_width)

        # Last writer wins: drop the previous session's listeners first
        self._release_pointer()

        px = self.pixel_widths()
        self._session = DragSession(
            divider_index=divider_index,
            anchor_x=float(pointer_x),
            start_left_px=px[divider_index],
            start_right_px=px[divider_index + 1],
            start_sizes=tuple(self._sizes),
            container_width=self.container_width,
        )

        if self.pointer_source is not None:
            self._release = self.pointer_source.subscribe(self._on_pointer_move, self._on_pointer_up)

        logger.debug(
            "Drag started",
            extra={"divider_index": divider_index, "container_width": self.container_width},
        )
        return True

    def on_drag_move(self, pointer_x: float) -> List[float]:
        """Apply a pointer position to the active session; no-op when Idle."""
        session = self._session
        if session is None or session.container_width <= 0:
            return self.sizes

        delta = float(pointer_x) - session.anchor_x
        left = session.start_left_px + delta
        right = session.start_right_px - delta

        floor = self.min_pixels
        if left < floor:
            right -= floor - left
            left = floor
        if right < floor:
            left -= floor - right
            right = floor

        width = session.container_width
        i = session.divider_index
        sizes = list(session.start_sizes)
        sizes[i] = left / width * 100.0
        sizes[i + 1] = right / width * 100.0

        derived = self._derived_index(i)
        if derived is not None:
            sizes[derived] = 100.0 - sum(s for j, s in enumerate(sizes) if j != derived)

        self._sizes = sizes
        return self.sizes

    def end_drag(self) -> None:
        """Back to Idle. Safe to call when no drag is active."""
        if self._session is not None:
            logger.debug("Drag ended", extra={"sizes": self.sizes})
        self._session = None
        self._release_pointer()

    def close(self) -> None:
        """Unmount: ends a drag that never saw its pointer-up."""
        self.end_drag()

    def handle_pointer_event(self, event: Optional[Dict[str, Any]]) -> List[float]:
        """
        Dispatch a serialised pointer event:

            {"type": "down", "divider": 0, "x": 412.0, "width": 1280.0}
            {"type": "move", "x": 398.5}
            {"type": "up", "x": 401.0}

        "up" applies its final position before ending the drag: the last
        "move" and the "up" can both be computed from the same stored state.
        Unknown or malformed events are ignored.
        """
        if not isinstance(event, dict):
            return self.sizes

        kind = event.get("type")
        try:
            if kind == "down":
                width = event.get("width")
                self.begin_drag(
                    int(event.get("divider", -1)),
                    float(event.get("x", 0.0)),
                    container_width=float(width) if width is not None else None,
                )
            elif kind == "move":
                self.on_drag_move(float(event.get("x", 0.0)))
            elif kind in ("up", "cancel"):
                x = event.get("x")
                try:
                    if x is not None:
                        self.on_drag_move(float(x))
                finally:
                    self.end_drag()
        except (TypeError, ValueError):
            logger.warning("Ignoring malformed pointer event", extra={"event": repr(event)})
        return self.sizes

    # ---- persistence (browser store) ----

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sizes": list(self._sizes),
            "min_pixels": self.min_pixels,
            "container_width": self.container_width,
            "session": asdict(self._session) if self._session is not None else None,
        }

    @classmethod
    def from_dict(
            cls,
            data: Optional[Dict[str, Any]],
            *,
            default_sizes: Sequence[float] = DEFAULT_PANE_SIZES,
            min_pixels: float = DEFAULT_MIN_PIXELS,
    ) -> PaneLayoutEngine:
        if not isinstance(data, dict):
            return cls(default_sizes, min_pixels=min_pixels)

        try:
            width = float(data.get("container_width") or 0.0)
        except (TypeError, ValueError):
            width = 0.0

        engine = cls(default_sizes, min_pixels=min_pixels, container_width=width)

        # Stored sizes are the raw split; they may legitimately be negative
        # after a drag in a narrow container, so they skip normalisation.
        sizes = data.get("sizes")
        if isinstance(sizes, list) and len(sizes) == len(engine._sizes):
            try:
                restored = [float(s) for s in sizes]
            except (TypeError, ValueError):
                restored = None
            if restored is not None and all(math.isfinite(s) for s in restored):
                engine._sizes = restored

        raw_session = data.get("session")
        if isinstance(raw_session, dict):
            try:
                session = DragSession.from_dict(raw_session)
            except (KeyError, TypeError, ValueError):
                session = None
            if session is not None and 0 <= session.divider_index < len(engine._sizes) - 1 \
                    and len(session.start_sizes) == len(engine._sizes):
                engine._session = session
        return engine

    # ---- internals ----

    def _derived_index(self, divider_index: int) -> Optional[int]:
        """The non-adjacent pane that absorbs rounding to keep the sum at 100."""
        n = len(self._sizes)
        if n < 3:
            return None
        last = n - 1
        return last if divider_index + 1 < last else 0

    def _on_pointer_move(self, x: float, _y: float) -> None:
        self.on_drag_move(x)

    def _on_pointer_up(self) -> None:
        self.end_drag()

    def _release_pointer(self) -> None:
        release, self._release = self._release, None
        if release is not None:
            release()


def _normalise_sizes(sizes: Sequence[float]) -> List[float]:
    """Coerce a starting split to floats summing to 100."""
    try:
        values = [float(s) for s in sizes]
    except (TypeError, ValueError):
        values = []

    if len(values) < 2 or any(math.isnan(v) or v < 0 for v in values) or sum(values) <= 0:
        logger.warning("Invalid pane split, using default", extra={"sizes": repr(sizes)})
        values = list(DEFAULT_PANE_SIZES)

    total = sum(values)
    if not math.isclose(total, 100.0):
        values = [v / total * 100.0 for v in values]
    return values
