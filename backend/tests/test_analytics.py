from types import SimpleNamespace

import pytest

from income_tracker.db import crud, models
from income_tracker.services import analytics
from income_tracker.services.projections import FlatGrowthProjector, Projector

from tests.conftest import income_payload


class TestLabels:
    def test_every_income_type_has_a_label(self):
        assert set(analytics.TYPE_LABELS) == set(models.IncomeType)
        for income_type in models.IncomeType:
            assert analytics.type_label(income_type)

    def test_month_table(self):
        assert len(analytics.MONTH_NAMES) == 12
        assert analytics.month_label(1) == "يناير"
        assert analytics.month_label(2) == "فبراير"
        assert analytics.month_label(12) == "ديسمبر"
        with pytest.raises(ValueError):
            analytics.month_label(13)


class TestPureBreakdowns:
    def test_zero_division_yields_zero(self):
        assert analytics.safe_div(10, 0) == 0
        assert analytics.percentage(10, 0) == 0

    def test_monthly_growth_against_previous_month(self):
        rows = [(2, 2000, 2), (1, 1000, 1), (4, 500, 1)]
        monthly = analytics.monthly_breakdown(rows)
        assert [m["monthNumber"] for m in monthly] == [1, 2, 4]
        assert monthly[0]["growth"] == 0
        assert monthly[1]["growth"] == 100.0
        # March is empty, so April has nothing to compare against
        assert monthly[2]["growth"] == 0

    def test_types_follow_declaration_order(self):
        rows = [(models.IncomeType.OTHER, 5, 1), ("SUBSCRIPTION", 10, 2)]
        types = analytics.type_breakdown(rows)
        assert [t["code"] for t in types] == ["SUBSCRIPTION", "OTHER"]
        assert types[0]["type"] == "اشتراكات"
        assert types[1] == {"type": "أخرى", "code": "OTHER", "amount": 5.0, "count": 1}

    def test_missing_provinces_share_the_unknown_bucket(self):
        rows = [("جدة", 300, 3), (None, 100, 1), ("", 50, 1)]
        provinces = analytics.province_breakdown(rows)
        assert provinces[0] == {"province": "جدة", "amount": 300.0, "count": 3, "average": 100.0}
        assert provinces[1] == {"province": "Unknown", "amount": 150.0, "count": 2, "average": 75.0}

    def test_entity_percentages(self):
        parent = SimpleNamespace(id="p", name="Parent")
        entities = {
            "a": SimpleNamespace(id="a", name="A", province="X", main_entity=None),
            "b": SimpleNamespace(id="b", name="B", province="Y", main_entity=parent),
        }
        rows = [("a", 1000, 1, 1000), ("b", 2000, 2, 1000)]
        out = analytics.entity_breakdown(rows, entities, 3000)
        assert [e["entityId"] for e in out] == ["b", "a"]
        assert out[0]["entity"]["mainEntity"] == {"id": "p", "name": "Parent"}
        assert sum(e["percentage"] for e in out) == pytest.approx(100, abs=0.02)

    def test_entity_percentages_with_zero_total(self):
        out = analytics.entity_breakdown([("a", 0, 0, None)], {}, 0)
        assert out[0]["percentage"] == 0
        assert out[0]["entity"] is None


class TestProjections:
    def test_flat_growth_factors(self):
        p = FlatGrowthProjector().project([1000, 2000])
        assert p == {
            "nextMonth": 1650,
            "quarter": 4725,
            "year": 19440,
            "confidence": 85,
            "basis": "flat-growth-heuristic",
        }

    def test_no_data(self):
        p = FlatGrowthProjector().project([])
        assert (p["nextMonth"], p["quarter"], p["year"]) == (0, 0, 0)

    def test_projector_is_replaceable(self, db):
        class Fixed(Projector):
            name = "fixed"

            def project(self, monthly_totals):
                return {"nextMonth": 1, "quarter": 3, "year": 12, "confidence": 0, "basis": self.name}

        report = analytics.build_report(db, 2024, projector=Fixed())
        assert report["predictions"]["basis"] == "fixed"


def test_empty_year(db):
    report = analytics.build_report(db, 1999)
    assert report["entities"] == report["monthly"] == report["types"] == report["provinces"] == []
    assert report["totals"] == {"income": 0, "count": 0, "average": 0}


def test_yearly_report_endpoint(client, db, entity, member, member_headers):
    other = crud.create_entity(db, name="شركة الاتصالات", province="جدة")
    db.commit()
    payloads = [
        income_payload(entity.id, member.id, amount=1000, month=1),
        income_payload(other.id, member.id, amount=2000, month=2, dueDate="2024-02-10", type="PENALTIES"),
        # different year, must not count
        income_payload(entity.id, member.id, amount=999, month=1, year=2023),
    ]
    for p in payloads:
        assert client.post("/api/v1/incomes", json=p, headers=member_headers).status_code == 201

    r = client.get("/api/v1/analytics", params={"year": 2024}, headers=member_headers)
    assert r.status_code == 200
    report = r.json()

    assert [{"month": m["month"], "amount": m["amount"]} for m in report["monthly"]] == [
        {"month": "يناير", "amount": 1000},
        {"month": "فبراير", "amount": 2000},
    ]
    assert report["totals"] == {"income": 3000, "count": 2, "average": 1500}
    assert sum(e["percentage"] for e in report["entities"]) == pytest.approx(100, abs=0.02)
    assert {e["entity"]["name"]: e["percentage"] for e in report["entities"]} == {
        "وزارة التجارة": 33.33,
        "شركة الاتصالات": 66.67,
    }
    assert {t["code"]: t["amount"] for t in report["types"]} == {"SUBSCRIPTION": 1000, "PENALTIES": 2000}
    assert {p["province"]: p["amount"] for p in report["provinces"]} == {"الرياض": 1000, "جدة": 2000}
    assert report["predictions"]["nextMonth"] == 1650


def test_analytics_requires_authentication(client):
    assert client.get("/api/v1/analytics", params={"year": 2024}).status_code == 401
