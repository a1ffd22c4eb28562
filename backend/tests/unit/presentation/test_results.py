"""
Unit tests for the results view model.
"""

from datetime import date
from uuid import uuid4

from carefit.presentation.results import (
    build_chart,
    build_results_view,
    build_table_rows,
    build_user_summary,
    select_visits,
)


def _visit(visit_date, **overrides):
    visit = {
        "id": uuid4(),
        "measurementDate": visit_date,
        "height": 150.0,
        "weight": 45.0,
        "tug": {"first": 12.0, "second": 10.5, "best": 10.5},
        "walkingSpeed": {"first": 6.0, "second": 5.5, "best": 5.5},
        "fr": {"first": 20.0, "second": 24.0, "best": 24.0},
        "cs10": 9,
        "bi": 90,
        "notes": "",
    }
    visit.update(overrides)
    return visit


def _row(rows, key):
    return next(row for row in rows if row["key"] == key)


class TestSelectVisits:
    """Tests for select_visits."""

    def test_keeps_latest_in_chronological_order(self):
        visits = [_visit(date(2024, month, 1)) for month in (5, 1, 3, 2, 4)]
        selected = select_visits(visits, max_items=3)
        assert [v["measurementDate"].month for v in selected] == [3, 4, 5]

    def test_fewer_visits_than_limit(self):
        visits = [_visit(date(2024, 2, 1)), _visit(date(2024, 1, 1))]
        assert len(select_visits(visits, max_items=4)) == 2


class TestBuildUserSummary:
    """Tests for build_user_summary."""

    def test_summary_fields(self, user_payload):
        user = {"id": uuid4(), **user_payload}
        summary = build_user_summary(user, today=date(2024, 6, 1))

        assert summary["name"] == "Tanaka Hanako"
        assert summary["birthDate"] == "1942/6/15"
        assert summary["age"] == 81
        assert summary["medicalHistory"] == ["Hypertension", "Diabetes"]


class TestBuildTableRows:
    """Tests for build_table_rows."""

    def test_row_order(self):
        rows = build_table_rows([_visit(date(2024, 1, 1))])
        assert [row["key"] for row in rows] == [
            "height",
            "weight",
            "bmi",
            "tug",
            "walkingSpeed",
            "fr",
            "cs10",
            "bi",
            "notes",
        ]

    def test_formatting(self):
        rows = build_table_rows([_visit(date(2024, 1, 1))])

        assert _row(rows, "height")["values"] == ["150.00"]
        assert _row(rows, "weight")["values"] == ["45.0"]
        assert _row(rows, "bmi")["values"] == ["20.00"]
        assert _row(rows, "tug")["values"] == ["10.50"]
        assert _row(rows, "fr")["values"] == ["24"]
        assert _row(rows, "tug")["label"] == "TUG (s)"

    def test_bmi_blank_without_height(self):
        rows = build_table_rows([_visit(date(2024, 1, 1), height=0)])
        assert _row(rows, "bmi")["values"] == ["-"]

    def test_only_bi_is_editable(self):
        rows = build_table_rows([_visit(date(2024, 1, 1))])
        editable = [row["key"] for row in rows if row.get("editable")]
        assert editable == ["bi"]


class TestBuildChart:
    """Tests for build_chart."""

    def test_series_follow_visits(self):
        visits = [
            _visit(date(2024, 1, 5), bi=70),
            _visit(date(2024, 3, 12), bi=75),
        ]
        chart = build_chart(visits)

        assert chart["labels"] == ["2024/1/5", "2024/3/12"]
        bi = next(d for d in chart["datasets"] if d["label"] == "BI")
        assert bi["data"] == [70, 75]
        assert bi["borderColor"] == "rgb(153, 102, 255)"
        assert bi["backgroundColor"] == "rgba(153, 102, 255, 0.5)"

    def test_paired_metrics_chart_best_value(self):
        chart = build_chart([_visit(date(2024, 1, 5))])
        walk = next(d for d in chart["datasets"] if d["label"] == "5m walk")
        assert walk["data"] == [5.5]


class TestBuildResultsView:
    """Tests for build_results_view."""

    def test_empty_history(self, user_payload):
        user = {"id": uuid4(), **user_payload}
        view = build_results_view(user, [], today=date(2024, 6, 1))

        assert view["visits"] == []
        assert view["chart"]["labels"] == []
        assert all(row["values"] == [] for row in view["rows"])

    def test_visit_headers(self, user_payload):
        user = {"id": uuid4(), **user_payload}
        visits = [_visit(date(2024, month, 1), bi=60 + month) for month in range(1, 7)]

        view = build_results_view(user, visits, max_items=4, today=date(2024, 6, 1))

        assert [v["label"] for v in view["visits"]] == [
            "2024/3/1",
            "2024/4/1",
            "2024/5/1",
            "2024/6/1",
        ]
        assert [v["bi"] for v in view["visits"]] == [63, 64, 65, 66]
