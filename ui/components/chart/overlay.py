"""
Selection overlay drawn on top of the line series as ECharts `graphic` elements.

`paint` is the only place pixel geometry is computed; it is called on every
redraw with the current mapper, so a resized chart never sees stale pixels.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

from schemas.prices import Sample
from utils.utils import fmt_signed, fmt_pct
from .interaction import Dragging, InteractionState, SelectionRange, selection_delta

logger = logging.getLogger(__name__)

UP_COLOR = "#22c55e"
DOWN_COLOR = "#ef4444"
BAND_OPACITY = 0.15
LINE_WIDTH = 3
MARKER_RADIUS = 5
TIP_FONT_SIZE = 12
TIP_CHAR_WIDTH = 7
TIP_PADDING = (6, 10)
TIP_HEIGHT = TIP_FONT_SIZE + 2 * TIP_PADDING[0]
TIP_GAP = 12

OVERLAY_IDS = ("sel-band", "sel-line", "sel-start", "sel-end", "sel-tip")

# Grid margins shared with the line chart options.
DEFAULT_GRID = {"left": 16, "right": 64, "top": 24, "bottom": 36}


@dataclass(frozen=True)
class PlotArea:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


class CoordinateMapper(Protocol):
    def index_to_x(self, index: int) -> float: ...

    def price_to_y(self, price: float) -> float: ...

    def plot_area(self) -> PlotArea: ...


class GridMapper:
    """
    Linear pixel mapping for a category x-axis without boundary gap and a
    value y-axis with explicit min/max, laid out in a fixed-margin grid.

    Also resolves pointer x to the nearest sample index.
    """
    def __init__(
        self,
        width: float,
        height: float,
        count: int,
        y_min: float,
        y_max: float,
        grid: Optional[dict] = None,
    ) -> None:
        g = {**DEFAULT_GRID, **(grid or {})}
        self.area = PlotArea(
            left=g["left"],
            top=g["top"],
            right=width - g["right"],
            bottom=height - g["bottom"],
        )
        self.count = count
        self.y_min = y_min
        self.y_max = y_max

    def plot_area(self) -> PlotArea:
        return self.area

    @property
    def step(self) -> float:
        return self.area.width / (self.count - 1) if self.count > 1 else 0.0

    def index_to_x(self, index: int) -> float:
        return self.area.left + index * self.step

    def price_to_y(self, price: float) -> float:
        span = self.y_max - self.y_min
        if span == 0:
            return (self.area.top + self.area.bottom) / 2
        return self.area.bottom - (price - self.y_min) / span * self.area.height

    def x_to_index(self, x: float, y: float) -> Optional[int]:
        """Nearest sample index for a pointer position; None outside the plot area."""
        if self.count < 1 or self.area.width <= 0 or not self.area.contains(x, y):
            return None
        if self.count == 1:
            return 0
        index = round((x - self.area.left) / self.step)
        return min(max(index, 0), self.count - 1)


def tooltip_text(start_price: float, end_price: float, change: float, percent: Optional[float]) -> str:
    """'<start> → <end>: <±delta> (<±pct>%)'"""
    return f"{start_price:,.2f} → {end_price:,.2f}: {fmt_signed(change)} ({fmt_pct(percent)})"


def _rgba(hex_color: str, alpha: float) -> str:
    r, g, b = (int(hex_color[i:i + 2], 16) for i in (1, 3, 5))
    return f"rgba({r}, {g}, {b}, {alpha})"


def paint(
    state: InteractionState,
    selection: Optional[SelectionRange],
    series: Sequence[Sample],
    mapper: CoordinateMapper,
) -> list[dict]:
    """
    Compute the overlay for the current interaction.

    The live drag takes precedence over a committed selection. Nothing is
    drawn for Idle or Hovering without a selection, or when the indices no
    longer fit the series (e.g. a rebuild raced the pointer).

    Args:
        state: Current interaction state.
        selection: Committed selection, if any.
        series: Normalized samples the indices refer to.
        mapper: Pixel mapping of the chart as laid out right now.

    Returns:
        List of ECharts graphic element dicts (empty when nothing to draw).
    """
    if isinstance(state, Dragging):
        start, end = state.start_index, state.current_index
    elif selection is not None:
        start, end = selection.start_index, selection.end_index
    else:
        return []

    try:
        delta = selection_delta(series, start, end)
    except IndexError:
        logger.debug(f"paint: range ({start}, {end}) does not fit series of {len(series)}")
        return []

    area = mapper.plot_area()
    color = UP_COLOR if delta.rising else DOWN_COLOR
    x0, x1 = mapper.index_to_x(start), mapper.index_to_x(end)
    y0, y1 = mapper.price_to_y(delta.start_price), mapper.price_to_y(delta.end_price)

    text = tooltip_text(delta.start_price, delta.end_price, delta.change, delta.percent)
    tip_w = len(text) * TIP_CHAR_WIDTH + 2 * TIP_PADDING[1]
    tip_x = (x0 + x1) / 2 - tip_w / 2
    tip_x = max(area.left, min(tip_x, area.right - tip_w))
    tip_y = max(area.top, min(y0, y1) - TIP_GAP - TIP_HEIGHT)

    return [
        {
            "id": "sel-band",
            "type": "rect",
            "silent": True,
            "z": 90,
            "shape": {"x": min(x0, x1), "y": area.top, "width": abs(x1 - x0), "height": area.height},
            "style": {"fill": _rgba(color, BAND_OPACITY)},
        },
        {
            "id": "sel-line",
            "type": "line",
            "silent": True,
            "z": 91,
            "shape": {"x1": x0, "y1": y0, "x2": x1, "y2": y1},
            "style": {"stroke": color, "lineWidth": LINE_WIDTH},
        },
        {
            "id": "sel-start",
            "type": "circle",
            "silent": True,
            "z": 92,
            "shape": {"cx": x0, "cy": y0, "r": MARKER_RADIUS},
            "style": {"fill": color, "stroke": "#ffffff", "lineWidth": 2},
        },
        {
            "id": "sel-end",
            "type": "circle",
            "silent": True,
            "z": 92,
            "shape": {"cx": x1, "cy": y1, "r": MARKER_RADIUS},
            "style": {"fill": color, "stroke": "#ffffff", "lineWidth": 2},
        },
        {
            "id": "sel-tip",
            "type": "text",
            "silent": True,
            "z": 93,
            "x": tip_x,
            "y": tip_y,
            "style": {
                "text": text,
                "fill": "#f9fafb",
                "fontSize": TIP_FONT_SIZE,
                "backgroundColor": "rgba(17, 24, 39, 0.9)",
                "borderColor": color,
                "borderWidth": 1,
                "borderRadius": 6,
                "padding": list(TIP_PADDING),
            },
        },
    ]


def to_graphic_option(elements: list[dict]) -> dict:
    """
    Wrap painted elements for `setOption`, removing overlay ids not drawn.
    """
    drawn = {el["id"] for el in elements}
    removals = [{"id": i, "$action": "remove"} for i in OVERLAY_IDS if i not in drawn]
    return {"graphic": {"elements": [*elements, *removals]}}
