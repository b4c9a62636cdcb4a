"""Production dashboard figures.

Everything is recomputed per request from the rows inside the requested
date range; nothing is stored between calls.
"""

import logging
from datetime import date, datetime

from django.db import DatabaseError
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncMonth
from django.utils import timezone
from django.utils.dateparse import parse_date

from core.exceptions import ValidationError
from core.services.results import returns_result
from inventory.models import InventoryItem
from inventory.services.rollup import records_from_items, rollup
from masterdata.models import Ledger
from production.models import Expense, PaymentVoucher, Purchase, ShortingEntry, StitchingChallan, WeaverChallan
from production.services.calculator import ZERO, quality_rate

logger = logging.getLogger(__name__)

DEFAULT_MONTHS = 6
TOP_PRODUCTS = 10


def to_date(value):
    if value is None:
        return None
    # datetime is a subclass of date, so check datetime first
    if isinstance(value, datetime):
        return value.date()
    return value


def _num(value) -> float:
    return float(value or 0)


def _parse_day(value, name):
    if value in (None, ""):
        return None
    try:
        parsed = parse_date(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError(f"{name} must be a date (YYYY-MM-DD).", field=name)
    return parsed


def _in_range(qs, field, start, end):
    if start:
        qs = qs.filter(**{f"{field}__gte": start})
    if end:
        qs = qs.filter(**{f"{field}__lte": end})
    return qs


def month_starts(today: date, months: int) -> list:
    """First day of each of the last ``months`` months, oldest first."""
    year, month = today.year, today.month
    starts = []
    for _ in range(months):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def raw_material_stock(start=None, end=None):
    purchased = {
        row["material_type"]: row["meters"]
        for row in _in_range(Purchase.objects.all(), "purchase_date", start, end)
        .values("material_type").annotate(meters=Sum("total_meters"))
    }
    sent = {
        row["material_type"]: row["meters"]
        for row in _in_range(WeaverChallan.objects.exclude(material_type=""), "challan_date", start, end)
        .values("material_type").annotate(meters=Sum("quantity_sent_meters"))
    }
    rows = []
    for material in sorted(set(purchased) | set(sent)):
        bought = purchased.get(material) or ZERO
        out = sent.get(material) or ZERO
        rows.append({
            "material_type": material,
            "total_purchased_meters": _num(bought),
            "total_sent_to_weaver_meters": _num(out),
            "available_meters": _num(bought - out),
        })
    return rows


def material_in_production(start=None, end=None):
    weaving = _in_range(WeaverChallan.objects.filter(status=WeaverChallan.Status.SENT), "challan_date", start, end)
    stitching = _in_range(StitchingChallan.objects.all(), "challan_date", start, end)
    at_stitcher = stitching.filter(status=StitchingChallan.Status.PENDING).aggregate(q=Sum("quantity_sent"))["q"]
    in_qc = stitching.filter(
        status__in=[StitchingChallan.Status.QC_PENDING, StitchingChallan.Status.QC_DONE]
    ).aggregate(q=Sum("quantity_received"))["q"]
    return [
        {"stage": "Weaving", "quantity": _num(weaving.aggregate(q=Sum("quantity_sent_meters"))["q"]), "unit": "meters"},
        {"stage": "Stitching", "quantity": _num(at_stitcher), "unit": "pieces"},
        {"stage": "Quality check", "quantity": _num(in_qc), "unit": "pieces"},
    ]


def finished_goods(items):
    rows = (
        items.values("classification")
        .annotate(
            total_quantity=Sum("quantity"),
            unique_products=Count("product_sku", distinct=True),
            total_value=Sum("total_cost"),
        )
        .order_by("classification")
    )
    return [
        {
            "condition_type": row["classification"],
            "total_quantity": row["total_quantity"] or 0,
            "unique_products": row["unique_products"],
            "total_value": _num(row["total_value"]),
        }
        for row in rows
    ]


def production_efficiency(start=None, end=None):
    weaver = _in_range(WeaverChallan.objects.filter(quantity_received_meters__gt=0), "challan_date", start, end)
    stitching = _in_range(StitchingChallan.objects.all(), "challan_date", start, end)
    shorting = _in_range(ShortingEntry.objects.all(), "entry_date", start, end).aggregate(
        total=Sum("total_pieces"), good=Sum("good_pieces")
    )
    counts = stitching.aggregate(
        live=Count("id", filter=~Q(status=StitchingChallan.Status.CANCELLED)),
        converted=Count("id", filter=Q(status=StitchingChallan.Status.CONVERTED)),
    )
    conversion_rate = counts["converted"] / counts["live"] * 100 if counts["live"] else 0

    return [
        {
            "metric_name": "Average weaving loss",
            "value": round(_num(weaver.aggregate(v=Avg("loss_percentage"))["v"]), 2),
            "unit": "%",
        },
        {
            "metric_name": "Average stitching loss",
            "value": round(_num(stitching.filter(quantity_received__gt=0).aggregate(v=Avg("loss_percentage"))["v"]), 2),
            "unit": "%",
        },
        {
            "metric_name": "Shorting quality rate",
            "value": float(quality_rate(shorting["total"] or 0, shorting["good"] or 0)),
            "unit": "%",
        },
        {"metric_name": "Conversion rate", "value": round(conversion_rate, 2), "unit": "%"},
    ]


def monthly_expenses(months=DEFAULT_MONTHS, today=None):
    starts = month_starts(today or timezone.localdate(), months)
    rows = (
        Expense.objects.filter(expense_date__gte=starts[0])
        .annotate(m=TruncMonth("expense_date"))
        .values("m", "expense_type")
        .annotate(total=Sum("cost"), n=Count("id"))
        .order_by("m", "expense_type")
    )
    return [
        {
            "month": to_date(row["m"]).strftime("%Y-%m"),
            "expense_type": row["expense_type"],
            "total_cost": _num(row["total"]),
            "transaction_count": row["n"],
        }
        for row in rows
    ]


def ledger_dues(start=None, end=None):
    """Invoiced (weaver vendor amounts + stitching payable) against payment vouchers, per ledger."""
    invoiced = {}
    for qs, ledger_field, amount_field, date_field in (
        (WeaverChallan.objects.all(), "weaver_ledger", "vendor_amount", "challan_date"),
        (StitchingChallan.objects.exclude(status=StitchingChallan.Status.CANCELLED), "ledger", "amount_payable", "challan_date"),
    ):
        rows = (
            _in_range(qs.filter(**{f"{ledger_field}__isnull": False}), date_field, start, end)
            .values(ledger_field).annotate(total=Sum(amount_field))
        )
        for row in rows:
            invoiced[row[ledger_field]] = invoiced.get(row[ledger_field], ZERO) + (row["total"] or ZERO)

    paid = {
        row["ledger"]: row["total"] or ZERO
        for row in _in_range(PaymentVoucher.objects.filter(ledger__isnull=False), "payment_date", start, end)
        .values("ledger").annotate(total=Sum("amount"))
    }

    ledgers = Ledger.objects.in_bulk(set(invoiced) | set(paid))
    rows = []
    for pk, ledger in ledgers.items():
        total_invoiced = invoiced.get(pk, ZERO)
        total_paid = paid.get(pk, ZERO)
        rows.append({
            "ledger_id": pk,
            "name": ledger.business_name,
            "ledger_type": ledger.ledger_type,
            "total_invoiced": _num(total_invoiced),
            "total_paid": _num(total_paid),
            "due_amount": _num(total_invoiced - total_paid),
        })
    return sorted(rows, key=lambda r: (-r["due_amount"], r["name"]))


def top_products(items, limit=TOP_PRODUCTS):
    rows = (
        items.values("product_sku", "product_name")
        .annotate(
            good_qty=Sum("good_quantity"),
            bad_qty=Sum("bad_quantity"),
            waste_qty=Sum("wastage_quantity"),
            total_qty=Sum("quantity"),
        )
        .order_by("-total_qty", "product_sku")[:limit]
    )
    return list(rows)


@returns_result
def production_analytics(params=None):
    params = params or {}
    start = _parse_day(params.get("start_date") or params.get("startDate"), "start_date")
    end = _parse_day(params.get("end_date") or params.get("endDate"), "end_date")
    if start and end and start > end:
        raise ValidationError("start_date must not be after end_date.", field="start_date")

    months = params.get("months") or DEFAULT_MONTHS
    try:
        months = int(months)
    except (TypeError, ValueError):
        raise ValidationError("months must be a whole number.", field="months")
    if not 1 <= months <= 24:
        raise ValidationError("months must be between 1 and 24.", field="months")

    try:
        items = _in_range(InventoryItem.objects.all(), "date", start, end)
        return {
            "rawMaterialStock": raw_material_stock(start, end),
            "materialInProduction": material_in_production(start, end),
            "finishedGoods": finished_goods(items),
            "productionEfficiency": production_efficiency(start, end),
            "monthlyExpenses": monthly_expenses(months),
            "ledgerDues": ledger_dues(start, end),
            "topProducts": top_products(items),
            "classificationRollup": rollup(records_from_items(items.iterator())).as_dict(),
        }
    except DatabaseError:
        logger.exception("Production analytics query failed")
        raise
