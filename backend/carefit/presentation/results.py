"""
Results view model.

Builds what the results page shows for one user: a summary header, one table
column per visit (oldest to newest) and the chart series of the tracked
metrics over the same visits.
"""

from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Sequence

from carefit.domain.metrics import (
    CHARTED_METRICS,
    DEFAULT_LATEST_LIMIT,
    MetricDefinition,
)
from carefit.services.derived_values import calculate_age, calculate_bmi, format_date

EMPTY_CELL = "-"


def _metric_value(measurement: Mapping[str, Any], metric: MetricDefinition) -> Any:
    value = measurement.get(metric.key)
    if metric.paired:
        return (value or {}).get("best")
    return value


def _format_number(value: Optional[float], decimals: int) -> str:
    if value is None:
        return EMPTY_CELL
    return f"{value:.{decimals}f}"


def _bmi_cell(measurement: Mapping[str, Any]) -> str:
    height = measurement.get("height") or 0
    weight = measurement.get("weight") or 0
    if height <= 0:
        return EMPTY_CELL
    return _format_number(calculate_bmi(height, weight), 2)


def select_visits(
    measurements: Sequence[Mapping[str, Any]], max_items: int = DEFAULT_LATEST_LIMIT
) -> List[Mapping[str, Any]]:
    """The ``max_items`` most recent visits, ordered oldest to newest."""
    ordered = sorted(measurements, key=lambda m: m["measurementDate"])
    return ordered[-max_items:] if max_items > 0 else []


def build_user_summary(
    user: Mapping[str, Any], today: Optional[date] = None
) -> Dict[str, Any]:
    history = user.get("medicalHistory") or []
    return {
        "id": str(user["id"]),
        "name": f"{user['lastName']} {user['firstName']}",
        "gender": user["gender"],
        "birthDate": format_date(user["birthDate"]),
        "age": calculate_age(user["birthDate"], today=today),
        "medicalHistory": list(history),
    }


def build_table_rows(visits: Sequence[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """One row per displayed item, one cell per visit."""
    rows = [
        {
            "key": "height",
            "label": "Height (cm)",
            "values": [_format_number(v.get("height"), 2) for v in visits],
        },
        {
            "key": "weight",
            "label": "Weight (kg)",
            "values": [_format_number(v.get("weight"), 1) for v in visits],
        },
        {
            "key": "bmi",
            "label": "BMI",
            "values": [_bmi_cell(v) for v in visits],
        },
    ]
    for metric in CHARTED_METRICS:
        rows.append(
            {
                "key": metric.key,
                "label": f"{metric.label} ({metric.unit})",
                "values": [
                    _format_number(_metric_value(v, metric), metric.decimals)
                    for v in visits
                ],
                # BI is edited inline from the table
                "editable": metric.key == "bi",
            }
        )
    rows.append(
        {
            "key": "notes",
            "label": "Notes",
            "values": [v.get("notes") or "" for v in visits],
        }
    )
    return rows


def build_chart(visits: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    """Line chart series for the charted metrics across the visits."""
    datasets = []
    for metric in CHARTED_METRICS:
        red, green, blue = metric.chart_color
        datasets.append(
            {
                "label": metric.label,
                "data": [_metric_value(v, metric) for v in visits],
                "borderColor": f"rgb({red}, {green}, {blue})",
                "backgroundColor": f"rgba({red}, {green}, {blue}, 0.5)",
            }
        )
    return {
        "labels": [format_date(v["measurementDate"]) for v in visits],
        "datasets": datasets,
    }


def build_results_view(
    user: Mapping[str, Any],
    measurements: Sequence[Mapping[str, Any]],
    max_items: int = DEFAULT_LATEST_LIMIT,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Everything the results page renders for a user."""
    visits = select_visits(measurements, max_items)
    return {
        "user": build_user_summary(user, today=today),
        "visits": [
            {
                "id": str(v["id"]),
                "label": format_date(v["measurementDate"]),
                "bi": v.get("bi") or 0,
            }
            for v in visits
        ],
        "rows": build_table_rows(visits),
        "chart": build_chart(visits),
    }
