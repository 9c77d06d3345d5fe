"""
Pointer interaction over the price chart.

The machine knows nothing about pixels: a resolver callable maps pointer
coordinates to the nearest sample index (or None outside the plot area).
States are plain frozen dataclasses so the whole flow can be driven from
tests without a browser.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

from schemas.prices import Sample

logger = logging.getLogger(__name__)

Resolver = Callable[[float, float], Optional[int]]


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Hovering:
    index: int


@dataclass(frozen=True)
class Dragging:
    start_index: int
    current_index: int


InteractionState = Union[Idle, Hovering, Dragging]

IDLE = Idle()


@dataclass(frozen=True)
class SelectionRange:
    start_index: int
    end_index: int

    @property
    def ordered(self) -> tuple[int, int]:
        return min(self.start_index, self.end_index), max(self.start_index, self.end_index)


@dataclass(frozen=True)
class SelectionDelta:
    start_price: float
    end_price: float
    change: float
    percent: Optional[float]
    date_from: int
    date_to: int

    @property
    def rising(self) -> bool:
        return self.end_price >= self.start_price


def selection_delta(series: Sequence[Sample], start: int, end: int) -> SelectionDelta:
    """
    Price change between two sample indices.

    `change` and `percent` follow the drag direction (start -> end), so a
    backward drag over a falling stretch reports a negative change. The date
    range is always chronological.

    Raises:
        IndexError: if either index is outside the series.
    """
    n = len(series)
    if not (0 <= start < n and 0 <= end < n):
        raise IndexError(f"selection ({start}, {end}) outside series of {n}")

    start_price = series[start].close
    end_price = series[end].close
    change = end_price - start_price
    percent = change / start_price * 100 if start_price else None
    lo, hi = min(start, end), max(start, end)
    return SelectionDelta(
        start_price=start_price,
        end_price=end_price,
        change=change,
        percent=percent,
        date_from=series[lo].timestamp,
        date_to=series[hi].timestamp,
    )


class InteractionMachine:
    """
    Idle / Hovering / Dragging state machine plus the committed selection.

    Every event handler returns True when something observable changed
    (state or selection), which is the caller's cue to repaint.

    Notes:
        - `_last_hover` holds the (index, price) of the last hover write and is
          used to skip redundant hover updates.
        - `_swallow_click` is set when a drag is committed; the click the
          browser fires at the end of that same gesture must not clear it.
          It is dropped again on the next pointer down or leave.
    """
    def __init__(self, resolver: Optional[Resolver] = None) -> None:
        self.resolver: Optional[Resolver] = resolver
        self.state: InteractionState = IDLE
        self.selection: Optional[SelectionRange] = None
        self._prices: tuple[float, ...] = ()
        self._last_hover: Optional[tuple[int, float]] = None
        self._swallow_click = False

    @property
    def length(self) -> int:
        return len(self._prices)

    @property
    def active(self) -> bool:
        return self.length >= 2

    def bind(self, prices: Sequence[float]) -> None:
        """Attach a freshly built series and reset all interaction state."""
        self._prices = tuple(prices)
        self.reset()

    def reset(self) -> None:
        """Back to Idle with no selection; used on period change and series rebuild."""
        logger.debug("InteractionMachine.reset")
        self.state = IDLE
        self.selection = None
        self._last_hover = None
        self._swallow_click = False

    def active_range(self) -> Optional[tuple[int, int]]:
        """(start, end) to highlight: the live drag first, else the committed selection."""
        if isinstance(self.state, Dragging):
            return self.state.start_index, self.state.current_index
        if self.selection is not None:
            return self.selection.start_index, self.selection.end_index
        return None

    def _resolve(self, x: float, y: float) -> Optional[int]:
        if not self.active or self.resolver is None:
            return None
        try:
            index = self.resolver(x, y)
        except (TypeError, ValueError):
            logger.debug(f"InteractionMachine: resolver failed for ({x}, {y})")
            return None
        if not isinstance(index, int) or isinstance(index, bool):
            return None
        if not 0 <= index < self.length:
            return None
        return index

    def pointer_down(self, x: float, y: float) -> bool:
        """
        Start a drag at the resolved index.

        A committed selection is kept (the live drag is drawn instead) until
        the new drag commits or a click clears it. Any new gesture ends the wait for the click of the
        previous one (touch drags never fire it).
        """
        self._swallow_click = False
        index = self._resolve(x, y)
        if index is None:
            return False
        self.state = Dragging(start_index=index, current_index=index)
        self._last_hover = None
        logger.debug(f"InteractionMachine.pointer_down: drag start={index}")
        return True

    def pointer_move(self, x: float, y: float) -> bool:
        index = self._resolve(x, y)
        if index is None:
            return False

        if isinstance(self.state, Dragging):
            if index == self.state.current_index:
                return False
            self.state = Dragging(start_index=self.state.start_index, current_index=index)
            return True

        key = (index, self._prices[index])
        if key == self._last_hover:
            return False
        self._last_hover = key
        self.state = Hovering(index=index)
        return True

    def pointer_up(self) -> bool:
        """
        Commit the drag as the selection and return to Idle.

        A zero-width drag (start == current) is a plain click: nothing is
        committed and an existing selection is kept, so the click that follows
        can clear it.
        """
        if not isinstance(self.state, Dragging):
            return False
        start, current = self.state.start_index, self.state.current_index
        self.state = IDLE
        if start == current:
            return True
        self.selection = SelectionRange(start_index=start, end_index=current)
        self._swallow_click = True
        logger.debug(f"InteractionMachine.pointer_up: committed {self.selection}")
        return True

    def pointer_leave(self) -> bool:
        changed = not isinstance(self.state, Idle)
        if isinstance(self.state, Dragging):
            logger.debug("InteractionMachine.pointer_leave: drag cancelled")
        self.state = IDLE
        self._last_hover = None
        self._swallow_click = False
        return changed

    def click(self) -> bool:
        if self._swallow_click:
            self._swallow_click = False
            return False
        if self.selection is None:
            return False
        logger.debug(f"InteractionMachine.click: cleared {self.selection}")
        self.selection = None
        self.state = IDLE
        self._last_hover = None
        return True
