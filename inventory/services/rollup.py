"""Cost & classification rollup.

Pure reduction over records shaped like ``{"classification", "quantity",
"cost"}``. Sums are Decimals so the result is identical for any ordering
of the input. Nothing is cached: callers rebuild the rollup from the
currently filtered rows on every request.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from inventory.models import Classification
from production.services.calculator import HUNDRED, ZERO, to_decimal

GOOD, BAD, WASTAGE, UNCLASSIFIED = (
    Classification.GOOD.value,
    Classification.BAD.value,
    Classification.WASTAGE.value,
    Classification.UNCLASSIFIED.value,
)
CLASSES = (GOOD, BAD, WASTAGE)

QUALITY_LABELS = {
    "a": GOOD,
    "b": GOOD,
    "premium": GOOD,
    "good": GOOD,
    "c": BAD,
    "d": BAD,
    "poor": BAD,
    "bad": BAD,
    "waste": WASTAGE,
    "wastage": WASTAGE,
    "damaged": WASTAGE,
    "rejected": WASTAGE,
}


def classify_quality(label) -> str:
    """Map a free-text quality/grade label to a classification."""
    return QUALITY_LABELS.get(str(label or "").strip().lower(), UNCLASSIFIED)


def dominant_classification(good, bad, wastage) -> str:
    """Largest bucket wins; ties go to good, then bad. No pieces means unclassified."""
    counts = ((GOOD, good or 0), (BAD, bad or 0), (WASTAGE, wastage or 0))
    best, best_count = UNCLASSIFIED, 0
    for name, count in counts:
        if count > best_count:
            best, best_count = name, count
    return best


@dataclass(frozen=True)
class Bucket:
    count: int = 0
    quantity: Decimal = ZERO
    cost: Decimal = ZERO

    def add(self, quantity, cost):
        return Bucket(self.count + 1, self.quantity + quantity, self.cost + cost)

    def as_dict(self):
        return {"count": self.count, "quantity": float(self.quantity), "cost": float(self.cost)}


def _percent(part, whole) -> Decimal:
    if whole == 0:
        return ZERO
    return (part / whole * HUNDRED).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Rollup:
    good: Bucket = field(default_factory=Bucket)
    bad: Bucket = field(default_factory=Bucket)
    wastage: Bucket = field(default_factory=Bucket)
    total: Bucket = field(default_factory=Bucket)

    @property
    def good_perc(self) -> Decimal:
        return _percent(self.good.quantity, self.total.quantity)

    @property
    def wastage_perc(self) -> Decimal:
        return _percent(self.wastage.quantity, self.total.quantity)

    @property
    def defect_perc(self) -> Decimal:
        return _percent(self.bad.quantity + self.wastage.quantity, self.total.quantity)

    @property
    def loss_cost(self) -> Decimal:
        return self.bad.cost + self.wastage.cost

    def as_dict(self):
        return {
            "good": self.good.as_dict(),
            "bad": self.bad.as_dict(),
            "wastage": self.wastage.as_dict(),
            "total": self.total.as_dict(),
            "goodPerc": float(self.good_perc),
            "wastagePerc": float(self.wastage_perc),
            "defectPerc": float(self.defect_perc),
            "lossCost": float(self.loss_cost),
        }


def _field(record, *names):
    for name in names:
        if name in record:
            return record[name]
    return None


def rollup(records) -> Rollup:
    """Aggregate count, quantity and cost per classification plus the overall total.

    Unclassified records only count towards ``total``.
    """
    buckets = {name: Bucket() for name in CLASSES}
    total = Bucket()
    for record in records:
        classification = classify_quality(_field(record, "classification", "class"))
        quantity = to_decimal(_field(record, "quantity", "qty"), "quantity")
        cost = to_decimal(_field(record, "cost"), "cost")

        if classification in buckets:
            buckets[classification] = buckets[classification].add(quantity, cost)
        total = total.add(quantity, cost)

    return Rollup(
        good=buckets[GOOD],
        bad=buckets[BAD],
        wastage=buckets[WASTAGE],
        total=total,
    )


def _split(quantity, good, bad, wastage, price, fallback):
    """Records for one row: one per non-empty bucket, any unsplit remainder under ``fallback``."""
    price = to_decimal(price, "price")
    parts = ((GOOD, good or 0), (BAD, bad or 0), (WASTAGE, wastage or 0))
    remainder = (quantity or 0) - sum(count for _, count in parts)
    for name, count in parts:
        if count:
            yield {"classification": name, "quantity": count, "cost": count * price}
    if remainder > 0:
        yield {"classification": fallback, "quantity": remainder, "cost": remainder * price}


def records_from_items(items):
    """Records for inventory items.

    An item still classified as its dominant QC bucket is split per bucket.
    An item reclassified after conversion counts wholly under its new class.
    """
    for item in items:
        qc_class = dominant_classification(item.good_quantity, item.bad_quantity, item.wastage_quantity)
        if item.classification != qc_class:
            quantity = item.quantity or 0
            cost = quantity * to_decimal(item.price_per_piece, "price")
            yield {"classification": item.classification, "quantity": quantity, "cost": cost}
            continue
        yield from _split(
            item.quantity, item.good_quantity, item.bad_quantity, item.wastage_quantity,
            item.price_per_piece, item.classification,
        )


def records_from_challans(challans):
    """Classified pieces of stitching challans; unclassified pieces count towards the total only."""
    for challan in challans:
        yield from _split(
            challan.quantity_received, challan.total_good, challan.total_bad, challan.total_wastage,
            challan.rate_per_piece, UNCLASSIFIED,
        )
