# income_tracker/services/analytics.py
"""Yearly income report: per-entity, per-month, per-type and per-province
breakdowns plus totals and projections.

The grouping itself is done in SQL (see ``crud.income_totals_by_*``); the
functions below only label, merge and derive ratios from those rows, so they
can be exercised with plain tuples.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from sqlalchemy.orm import Session

from income_tracker.db import crud, models
from income_tracker.services.projections import Projector, default_projector

logger = logging.getLogger(__name__)

MONTH_NAMES = (
    "يناير", "فبراير", "مارس", "أبريل", "مايو", "يونيو",
    "يوليو", "أغسطس", "سبتمبر", "أكتوبر", "نوفمبر", "ديسمبر",
)

TYPE_LABELS: Dict[models.IncomeType, str] = {
    models.IncomeType.SUBSCRIPTION: "اشتراكات",
    models.IncomeType.LEGAL_FEES: "اتعاب محاماة",
    models.IncomeType.PENALTIES: "جزاءات",
    models.IncomeType.AUTOMATION: "ميكنة",
    models.IncomeType.OTHER: "أخرى",
}

UNKNOWN_PROVINCE = "Unknown"


def safe_div(numerator: float, denominator: float) -> float:
    """Division where an empty group yields 0."""
    if not denominator:
        return 0.0
    return numerator / denominator


def percentage(part: float, whole: float) -> float:
    return round(safe_div(part, whole) * 100, 2)


def month_label(month: int) -> str:
    if not 1 <= month <= 12:
        raise ValueError(f"month out of range: {month}")
    return MONTH_NAMES[month - 1]


def type_label(income_type: models.IncomeType) -> str:
    # KeyError here means a new IncomeType was added without a label
    return TYPE_LABELS[models.IncomeType(income_type)]


def entity_breakdown(rows: Iterable[Any], entities: Mapping[str, models.Entity], total: float) -> List[Dict[str, Any]]:
    """rows: (entity_id, total, count, average)."""
    out = []
    for entity_id, amount, count, average in rows:
        amount = float(amount or 0)
        entity = entities.get(entity_id)
        out.append({
            "entityId": entity_id,
            "entity": {
                "id": entity.id,
                "name": entity.name,
                "province": entity.province,
                "mainEntity": {"id": entity.main_entity.id, "name": entity.main_entity.name}
                if entity.main_entity else None,
            } if entity else None,
            "amount": amount,
            "count": int(count or 0),
            "average": float(average or 0),
            "percentage": percentage(amount, total),
        })
    out.sort(key=lambda e: e["amount"], reverse=True)
    return out


def monthly_breakdown(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """rows: (month, total, count). Only months with data are returned, ascending."""
    sums = {}
    counts = {}
    for month, amount, count in rows:
        sums[int(month)] = sums.get(int(month), 0.0) + float(amount or 0)
        counts[int(month)] = counts.get(int(month), 0) + int(count or 0)

    out = []
    for month in sorted(sums):
        previous = sums.get(month - 1, 0.0)
        out.append({
            "month": month_label(month),
            "monthNumber": month,
            "amount": sums[month],
            "count": counts[month],
            "growth": percentage(sums[month] - previous, previous),
        })
    return out


def type_breakdown(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """rows: (type, total, count). Ordered by the IncomeType declaration."""
    by_type = {}
    for income_type, amount, count in rows:
        by_type[models.IncomeType(income_type)] = (float(amount or 0), int(count or 0))

    out = []
    for income_type in models.IncomeType:
        if income_type not in by_type:
            continue
        amount, count = by_type[income_type]
        out.append({
            "type": type_label(income_type),
            "code": income_type.value,
            "amount": amount,
            "count": count,
        })
    return out


def province_breakdown(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """rows: (province, total, count). Missing provinces share one bucket."""
    grouped: Dict[str, Dict[str, Any]] = {}
    for province, amount, count in rows:
        key = (province or "").strip() or UNKNOWN_PROVINCE
        bucket = grouped.setdefault(key, {"province": key, "amount": 0.0, "count": 0})
        bucket["amount"] += float(amount or 0)
        bucket["count"] += int(count or 0)

    out = list(grouped.values())
    for bucket in out:
        bucket["average"] = safe_div(bucket["amount"], bucket["count"])
    out.sort(key=lambda p: p["amount"], reverse=True)
    return out


def build_report(db: Session, year: int, projector: Optional[Projector] = None) -> Dict[str, Any]:
    projector = projector or default_projector

    entity_rows = crud.income_totals_by_entity(db, year)
    month_rows = crud.income_totals_by_month(db, year)
    type_rows = crud.income_totals_by_type(db, year)
    province_rows = crud.income_totals_by_province(db, year)

    total_income = sum(float(r[1] or 0) for r in entity_rows)
    total_count = sum(int(r[2] or 0) for r in entity_rows)
    entities = crud.get_entities_by_ids(db, [r[0] for r in entity_rows])

    monthly = monthly_breakdown(month_rows)
    logger.debug("analytics year=%s incomes=%s months=%s", year, total_count, len(monthly))

    return {
        "year": year,
        "entities": entity_breakdown(entity_rows, entities, total_income),
        "monthly": monthly,
        "types": type_breakdown(type_rows),
        "provinces": province_breakdown(province_rows),
        "totals": {
            "income": total_income,
            "count": total_count,
            "average": safe_div(total_income, total_count),
        },
        "predictions": projector.project([m["amount"] for m in monthly]),
    }
