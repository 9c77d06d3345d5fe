from types import SimpleNamespace

import pytest
import pytest_asyncio

from exceptions import PriceFetchError
from schemas.prices import Period, Timespan
from components.chart.interaction import IDLE, Dragging, Hovering, SelectionRange
from components.chart.loader import ViewStatus
from components.chart.overlay import OVERLAY_IDS, to_graphic_option
from components.price_chart import StockPriceChart

WIDTH, HEIGHT = 800, 320
FIRST_X, LAST_X = 16, WIDTH - 64
PLOT_Y = 100


class FakeLabel:
    def __init__(self, text=""):
        self.text = text
        self.class_names = ""

    def classes(self, add=None, *, remove=None, replace=None):
        if replace is not None:
            self.class_names = replace
        return self


class FakeEChart:
    def __init__(self):
        self.options = {}
        self.visible = True
        self.calls = []

    def set_visibility(self, visible):
        self.visible = visible

    def update(self):
        pass

    def run_chart_method(self, name, *args):
        self.calls.append((name, *args))


class FakePriceClient:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def get_prices(self, ticker, date_from, date_to, timespan=Timespan.DAY, multiplier=1):
        self.calls.append((ticker, timespan, multiplier))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class HeadlessPriceChart(StockPriceChart):
    """StockPriceChart with plain objects in place of the NiceGUI widgets."""

    def build_ui(self):
        self.price_label = FakeLabel("—")
        self.delta_label = FakeLabel()
        self.range_label = FakeLabel()
        self.details_btn = FakeLabel()
        self.chart = FakeEChart()
        self.statuses = []

    def schedule_load(self):
        pass

    def _show_status(self, view):
        self.statuses.append(view.status)
        self.chart.set_visibility(view.status == ViewStatus.READY)


def pointer(x, y=PLOT_Y):
    return SimpleNamespace(args=[x, y, WIDTH, HEIGHT])


def drag_across(chart):
    chart._on_pointer_down(pointer(FIRST_X))
    chart._on_pointer_move(pointer(LAST_X))
    chart._on_pointer_up(pointer(LAST_X))


@pytest.fixture
def client(make_samples):
    return FakePriceClient(make_samples([10, 12, 8]))


@pytest_asyncio.fixture
async def chart(client):
    chart = HeadlessPriceChart("AAPL", client=client, height_px=HEIGHT)
    await chart.reload()
    return chart


@pytest.mark.asyncio
async def test_load_binds_machine_and_shows_period_delta(chart):
    assert chart.statuses == [ViewStatus.LOADING, ViewStatus.READY]
    assert chart.chart.visible
    assert chart.machine.length == len(chart.view.series)
    assert chart.chart.options["series"][0]["data"][0] == 10.0
    assert chart.price_label.text == "$8.00"
    assert chart.delta_label.text == "-2.00 (-20.00%)"
    assert "text-negative" in chart.delta_label.class_names
    assert chart.range_label.text == "1D"


@pytest.mark.asyncio
async def test_drag_commits_selection_and_paints_overlay(chart):
    last = len(chart.view.series) - 1

    chart._on_pointer_down(pointer(FIRST_X))
    chart._on_pointer_move(pointer(LAST_X))
    assert chart.machine.state == Dragging(0, last)

    chart._on_pointer_up(pointer(LAST_X))
    chart._on_click()

    assert chart.machine.selection == SelectionRange(0, last)
    name, option = chart.chart.calls[-1]
    assert name == "setOption"
    assert [el["id"] for el in option["graphic"]["elements"]] == list(OVERLAY_IDS)
    assert chart.delta_label.text == "-2.00 (-20.00%)"


@pytest.mark.asyncio
async def test_hover_shows_hovered_point_in_header(chart):
    chart._on_pointer_move(pointer(FIRST_X))

    assert chart.machine.state == Hovering(0)
    assert chart.price_label.text == "$10.00"
    assert chart.delta_label.text == "+0.00 (+0.00%)"


@pytest.mark.asyncio
async def test_period_switch_clears_selection(chart, client):
    drag_across(chart)
    assert chart.machine.selection is not None

    await chart.set_period(Period.ONE_WEEK)

    assert chart.period == Period.ONE_WEEK
    assert chart.machine.selection is None
    assert chart.machine.state == IDLE
    assert client.calls[-1] == ("AAPL", Timespan.HOUR, 1)
    assert chart.chart.calls[-1] == ("setOption", to_graphic_option([]))
    assert chart.range_label.text == "1W"


@pytest.mark.asyncio
async def test_ticker_switch_clears_selection(chart, client):
    drag_across(chart)

    await chart.set_ticker("MSFT")

    assert chart.ticker == "MSFT"
    assert chart.machine.selection is None
    assert chart.machine.state == IDLE
    assert client.calls[-1][0] == "MSFT"


@pytest.mark.asyncio
async def test_fetch_error_drops_series_and_blanks_header(chart, client):
    drag_across(chart)
    client.result = PriceFetchError()

    await chart.reload()

    assert chart.statuses[-1] == ViewStatus.ERROR
    assert not chart.chart.visible
    assert chart.machine.length == 0
    assert chart.machine.selection is None
    assert (chart.price_label.text, chart.delta_label.text, chart.range_label.text) == ("—", "", "")

    chart._on_pointer_down(pointer(FIRST_X))
    assert chart.machine.state == IDLE


@pytest.mark.asyncio
async def test_single_bar_is_insufficient(chart, client, make_samples):
    drag_across(chart)
    client.result = make_samples([42.0])

    await chart.reload()

    assert chart.statuses[-1] == ViewStatus.INSUFFICIENT
    assert not chart.machine.active
    assert chart.machine.selection is None
    assert chart.price_label.text == "—"
    assert chart.details_btn.text == "Details (1 points)"
