import pytest

from schemas.prices import Period
from components.chart.chart_draw import ChartsDrawMixin
from components.chart.overlay import DEFAULT_GRID, DOWN_COLOR, UP_COLOR
from components.chart.render_model import axis_bounds, build_series, price_delta


def test_price_delta():
    d = price_delta(100.0, 110.0)
    assert d.change == pytest.approx(10.0)
    assert d.percent == pytest.approx(10.0)
    assert d.rising


def test_price_delta_from_zero_has_no_percent():
    d = price_delta(0.0, 5.0)
    assert d.change == 5.0
    assert d.percent is None


@pytest.mark.parametrize("values, expected", [
    ([10.0, 12.0, 8.0], (7.8, 12.2)),
    ([5.0, 5.0], (4.95, 5.05)),
    ([0.0, 0.0], (-1.0, 1.0)),
    ([], (0.0, 1.0)),
])
def test_axis_bounds(values, expected):
    assert axis_bounds(values) == pytest.approx(expected)


def test_build_series_one_entry_per_sample(make_samples, utc):
    series = make_samples([10, 12, 8])

    model = build_series(series, Period.ONE_DAY, utc)

    assert model.values == (10.0, 12.0, 8.0)
    assert model.labels == ("14:30", "14:35", "14:40")
    assert model.titles[0] == "Fri, Jan 5, 14:30"
    assert model.delta.change == pytest.approx(-2.0)
    assert model.delta.percent == pytest.approx(-20.0)
    assert model.y_min < 8.0 < 12.0 < model.y_max


def test_build_series_single_sample_has_no_delta(make_samples, utc):
    model = build_series(make_samples([10]), Period.ONE_MONTH, utc)
    assert model.delta is None
    assert model.labels == ("Jan 5",)


def test_line_options_follow_model(make_samples, utc):
    model = build_series(make_samples([10, 12, 8]), Period.ONE_WEEK, utc)

    options = ChartsDrawMixin().build_line_options("AAPL", model, Period.ONE_WEEK)

    assert options["yAxis"]["min"] == model.y_min
    assert options["yAxis"]["max"] == model.y_max
    assert options["xAxis"]["data"] == list(model.labels)
    assert options["xAxis"]["boundaryGap"] is False
    assert options["series"][0]["data"] == [10.0, 12.0, 8.0]
    assert options["series"][0]["lineStyle"]["color"] == DOWN_COLOR
    assert options["grid"]["left"] == DEFAULT_GRID["left"]
    assert options["graphic"] == {"elements": []}
    assert "Friday, January 5, 2024" in options["tooltip"][":formatter"]


def test_line_options_rising_series_is_green(make_samples, utc):
    model = build_series(make_samples([8, 12]), Period.ONE_DAY, utc)
    options = ChartsDrawMixin().build_line_options("AAPL", model, Period.ONE_DAY)
    assert options["series"][0]["itemStyle"]["color"] == UP_COLOR


def test_build_series_is_idempotent_and_pure(make_samples, utc):
    series = make_samples([10, 12, 8, 9])
    before = list(series)

    assert build_series(series, Period.THREE_MONTHS, utc) == build_series(series, Period.THREE_MONTHS, utc)
    assert series == before
