from __future__ import annotations

import logging
from typing import Any, Optional

from nicegui import ui

from clients.price_client import PriceClient
from components.chart.chart_draw import ChartsDrawMixin
from components.chart.interaction import Dragging, Hovering, InteractionMachine, selection_delta
from components.chart.loader import ChartView, PriceSeriesLoader, ViewStatus
from components.chart.normalizer import describe
from components.chart.overlay import GridMapper, paint, to_graphic_option
from schemas.prices import Period
from utils.dates import display_tz, from_epoch_ms, range_text, tooltip_title
from utils.utils import fmt_pct, fmt_price, fmt_signed

logger = logging.getLogger(__name__)

POINTER_JS = (
    "(e) => emit(e.offsetX, e.offsetY, "
    "e.currentTarget.clientWidth, e.currentTarget.clientHeight)"
)


class StockPriceChart(ChartsDrawMixin):
    """
    Interactive price chart for one ticker.

    Responsibilities:
    - Period toggle (1D ... 5Y) driving `PriceSeriesLoader`
    - Loading / error / insufficient-data display states
    - Pointer events -> `InteractionMachine` -> overlay repaint
    - Header with last close and period change, replaced by the hovered point
      or the drag/selection delta while the user interacts

    Notes:
    - The overlay is repainted from scratch on every state change using the
      surface size reported with the latest pointer event.
    - Any period or ticker change resets the selection before the new fetch.
    """
    def __init__(
        self,
        ticker: str,
        client: Optional[PriceClient] = None,
        period: Period = Period.ONE_DAY,
        height_px: int = 320,
    ) -> None:
        """
        Build the chart UI and schedule the first load.

        Args:
            ticker: Ticker symbol to chart.
            client: Price client; a shared-connection one is created if omitted.
            period: Initially selected period.
            height_px: Plot height in pixels.
        """
        logger.info(f"StockPriceChart: init ticker={ticker!r}, period={period}")
        self.ticker = ticker
        self.period = Period(period)
        self.height_px = height_px
        self.client = client or PriceClient()

        self.loader = PriceSeriesLoader(fetch=self.client.get_prices, tz=display_tz())
        self.loader.subscribe(self._on_view)
        self.machine = InteractionMachine(resolver=self._resolve)
        self.view: Optional[ChartView] = None

        self._size: tuple[float, float] = (800.0, float(height_px))
        self._period_buttons: dict[Period, Any] = {}

        self.build_ui()
        self.schedule_load()

    def build_ui(self) -> None:
        """
        Build header, plot surface with status overlay, and the period bar.
        """
        with ui.card().classes("price-chart-card w-full q-pa-md"):
            with ui.row().classes("items-baseline gap-3 w-full"):
                ui.label(self.ticker).classes("price-chart-ticker")
                self.price_label = ui.label("—").classes("price-chart-price")
                self.delta_label = ui.label("").classes("price-chart-delta")
                ui.space()
                self.range_label = ui.label("").classes("text-grey-5 text-sm")

            self.surface = ui.element("div").classes("relative w-full").style(
                f"height: {self.height_px}px; touch-action: none;"
            )
            with self.surface:
                self.chart = ui.echart({"series": []}).classes("w-full").style(f"height: {self.height_px}px;")
                self.status_box = ui.column().classes("absolute-full flex flex-center").style("pointer-events: none;")

            self.surface.on("pointerdown", self._on_pointer_down, js_handler=POINTER_JS)
            self.surface.on("pointermove", self._on_pointer_move, js_handler=POINTER_JS, throttle=0.03)
            self.surface.on("pointerup", self._on_pointer_up, js_handler=POINTER_JS)
            self.surface.on("pointerleave", self._on_pointer_leave)
            self.surface.on("click", self._on_click)

            with ui.row().classes("items-center justify-between w-full price-chart-bar"):
                with ui.row().classes("gap-1"):
                    for p in Period:
                        self._period_buttons[p] = ui.button(
                            p.value, on_click=lambda _=None, p=p: self.set_period(p)
                        ).props("flat dense no-caps")
                self.details_btn = ui.button("Details (0 points)", on_click=self.show_details) \
                    .props("flat dense no-caps size=sm color=grey")
        self._style_period_buttons()

    def schedule_load(self) -> None:
        """Start the first fetch once the page is connected."""
        ui.timer(0.01, self.reload, once=True)

    def _style_period_buttons(self) -> None:
        for p, btn in self._period_buttons.items():
            btn.props(f"color={'positive' if p == self.period else 'grey'}")

    async def reload(self) -> None:
        """Fetch the active (ticker, period); superseded results are dropped by the loader."""
        await self.loader.load(self.ticker, self.period)

    async def set_period(self, period: Period) -> None:
        """
        Switch the active period.

        The selection and interaction state are cleared before the new fetch
        starts, so nothing from the previous range survives the switch.
        """
        period = Period(period)
        logger.info(f"StockPriceChart.set_period: {self.period} -> {period}")
        self.period = period
        self.machine.reset()
        self.repaint()
        self._style_period_buttons()
        await self.reload()

    async def set_ticker(self, ticker: str) -> None:
        logger.info(f"StockPriceChart.set_ticker: {self.ticker!r} -> {ticker!r}")
        self.ticker = ticker
        self.machine.reset()
        self.repaint()
        await self.reload()

    def _on_view(self, view: ChartView) -> None:
        """
        Render a view published by the loader.

        LOADING makes the machine inert; ERROR and INSUFFICIENT drop the old
        series so no stale chart stays visible.
        """
        logger.debug(f"StockPriceChart._on_view: status={view.status}, token={view.token}")
        self.view = view
        self._show_status(view)

        if view.status != ViewStatus.READY:
            self.machine.bind(())
            self.details_btn.text = f"Details ({len(view.series)} points)"
            self.render_header()
            return

        self.machine.bind(view.model.values)
        self.chart.options.clear()
        self.chart.options.update(self.build_line_options(view.ticker, view.model, view.period))
        self.chart.update()
        self.chart.run_chart_method("resize")
        self.details_btn.text = f"Details ({len(view.series)} points)"
        self.repaint()

    def _show_status(self, view: ChartView) -> None:
        """Spinner, error or insufficient-data notice over the plot; hides the chart unless READY."""
        self.status_box.clear()
        self.chart.set_visibility(view.status == ViewStatus.READY)
        if view.status == ViewStatus.READY:
            return
        with self.status_box:
            if view.status == ViewStatus.LOADING:
                ui.spinner(size="lg", color="positive")
            elif view.status == ViewStatus.ERROR:
                ui.label(view.error or "Failed to load price data").classes("text-negative")
            else:
                ui.label("Insufficient price data available").classes("text-grey-5")

    def _mapper(self) -> Optional[GridMapper]:
        if self.view is None or self.view.model is None:
            return None
        width, height = self._size
        return GridMapper(width, height, len(self.view.series), self.view.model.y_min, self.view.model.y_max)

    def _resolve(self, x: float, y: float) -> Optional[int]:
        mapper = self._mapper()
        return mapper.x_to_index(x, y) if mapper else None

    def _read_pointer(self, e) -> tuple[float, float]:
        """
        Unpack (x, y, width, height) emitted by `POINTER_JS` and remember the size.
        """
        args = e.args if isinstance(e.args, (list, tuple)) else [e.args]
        try:
            x, y, width, height = (float(a) for a in args[:4])
        except (TypeError, ValueError):
            return -1.0, -1.0
        if width > 0 and height > 0:
            self._size = (width, height)
        return x, y

    def _on_pointer_down(self, e) -> None:
        x, y = self._read_pointer(e)
        if self.machine.pointer_down(x, y):
            self.repaint()

    def _on_pointer_move(self, e) -> None:
        x, y = self._read_pointer(e)
        if self.machine.pointer_move(x, y):
            self.repaint()

    def _on_pointer_up(self, e) -> None:
        self._read_pointer(e)
        if self.machine.pointer_up():
            self.repaint()

    def _on_pointer_leave(self, _e=None) -> None:
        if self.machine.pointer_leave():
            self.repaint()

    def _on_click(self, _e=None) -> None:
        if self.machine.click():
            self.repaint()

    def repaint(self) -> None:
        """Recompute overlay geometry for the current state and refresh the header."""
        mapper = self._mapper()
        if mapper is not None:
            elements = paint(self.machine.state, self.machine.selection, self.view.series, mapper)
            self.chart.run_chart_method("setOption", to_graphic_option(elements))
        self.render_header()

    def render_header(self) -> None:
        """
        Update price/delta/range labels from the view and interaction state.
        """
        view = self.view
        if view is None or view.model is None:
            self.price_label.text = "—"
            self.delta_label.text = ""
            self.range_label.text = ""
            return

        series = view.series
        span = self.machine.active_range()
        state = self.machine.state

        if span is not None:
            d = selection_delta(series, *span)
            self.price_label.text = fmt_price(d.end_price)
            self._set_delta(d.change, d.percent)
            self.range_label.text = range_text(d.date_from, d.date_to, view.period, display_tz())
            return

        if isinstance(state, Hovering):
            s = series[state.index]
            first = series[0].close
            self.price_label.text = fmt_price(s.close)
            self._set_delta(s.close - first, (s.close - first) / first * 100 if first else None)
            self.range_label.text = tooltip_title(s.timestamp, view.period, display_tz())
            return

        delta = view.model.delta
        self.price_label.text = fmt_price(series[-1].close)
        if delta is not None:
            self._set_delta(delta.change, delta.percent)
        self.range_label.text = view.period.value

    def _set_delta(self, change: float, percent: Optional[float]) -> None:
        self.delta_label.text = f"{fmt_signed(change)} ({fmt_pct(percent)})"
        self.delta_label.classes(
            replace="price-chart-delta " + ("text-positive" if change >= 0 else "text-negative")
        )

    def show_details(self) -> None:
        """
        Show the diagnostic readout: fetched bars, real/synthetic points, range.
        """
        view = self.view
        info = describe(view.series if view else ())
        with ui.dialog() as dialog, ui.card().classes("q-pa-md"):
            ui.label(f"{self.ticker} · {self.period.value}").classes("text-h6")
            ui.label(f"Status: {view.status.value if view else 'n/a'}")
            ui.label(f"Fetched bars: {view.raw_count if view else 0}")
            ui.label(f"Chart points: {info['points']} ({info['real']} real, {info['synthetic']} interpolated)")
            if info["first_ts"] is not None:
                tz = display_tz()
                ui.label(f"First point: {from_epoch_ms(info['first_ts'], tz):%Y-%m-%d %H:%M %Z}")
                ui.label(f"Last point: {from_epoch_ms(info['last_ts'], tz):%Y-%m-%d %H:%M %Z}")
            if isinstance(self.machine.state, Dragging) or self.machine.selection is not None:
                ui.label(f"Selection: {self.machine.active_range()}")
            ui.button("Close", on_click=dialog.close).props("flat color=primary")
        dialog.open()
