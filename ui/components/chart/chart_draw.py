import json
import logging

from schemas.prices import Period
from .overlay import DEFAULT_GRID, UP_COLOR, DOWN_COLOR
from .render_model import ChartModel

logger = logging.getLogger(__name__)


class ChartsDrawMixin:

    def build_line_options(
        self,
        ticker: str,
        model: ChartModel,
        period: Period,
    ) -> dict:
        """
        Build ECharts line chart options (option dict) for a single ticker.

        Layout notes:
            - the grid uses fixed pixel margins (`DEFAULT_GRID`) and the y-axis
              gets explicit min/max from the model, so `GridMapper` reproduces
              the renderer's pixel mapping exactly;
            - the category x-axis has no boundary gap: sample i sits at
              left + i * step;
            - the hover tooltip shows the precomputed per-sample titles.

        Args:
            ticker: Symbol shown as the series name.
            model: Labels/values/titles built by `build_series`.
            period: Active period (x-axis tick budget).

        Returns:
            ECharts options dict ready to be passed into `ui.echart`.
        """
        rising = model.delta.rising if model.delta is not None else True
        color = UP_COLOR if rising else DOWN_COLOR
        max_ticks = 6 if period == Period.ONE_DAY else 8
        interval = max(len(model.labels) // max_ticks, 0)

        logger.debug(
            f"build_line_options: ticker={ticker!r}, points={len(model.values)}, "
            f"period={period}, color={color}"
        )

        titles = json.dumps(list(model.titles))
        tooltip_formatter = (
            f"(p) => {{ const t = {titles}; const i = p[0].dataIndex; "
            f"return t[i] + '<br/><b>$' + Number(p[0].value).toFixed(2) + '</b>'; }}"
        )

        return {
            "animation": False,
            "grid": {**DEFAULT_GRID, "containLabel": False},
            "tooltip": {
                "trigger": "axis",
                "backgroundColor": "rgba(17, 24, 39, 0.8)",
                "borderColor": "#4b5563",
                "borderWidth": 1,
                "padding": 10,
                "textStyle": {"color": "#f9fafb"},
                "axisPointer": {"type": "line", "lineStyle": {"color": "#6b7280"}},
                ":formatter": tooltip_formatter,
            },
            "xAxis": {
                "type": "category",
                "data": list(model.labels),
                "boundaryGap": False,
                "axisTick": {"show": False},
                "splitLine": {"show": False},
                "axisLabel": {"color": "#9ca3af", "interval": interval, "hideOverlap": True},
            },
            "yAxis": {
                "type": "value",
                "position": "right",
                "min": model.y_min,
                "max": model.y_max,
                "splitLine": {"show": True, "lineStyle": {"color": "rgba(75, 85, 99, 0.1)"}},
                "axisLabel": {"color": "#9ca3af", ":formatter": "(v) => '$' + Number(v).toFixed(2)"},
            },
            "series": [
                {
                    "name": ticker,
                    "type": "line",
                    "data": list(model.values),
                    "showSymbol": False,
                    "smooth": 0.3,
                    "lineStyle": {"color": color, "width": 2},
                    "itemStyle": {"color": color},
                    "emphasis": {"focus": "none"},
                }
            ],
            "graphic": {"elements": []},
        }
