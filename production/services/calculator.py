"""Unit & loss calculator.

Single source of truth for every derived quantity in the pipeline. Models
call these at write time to persist derived fields, and the API/analytics
call them at read time, so stored and displayed values never drift.

All functions are pure. Quantities are Decimals (meters) or ints (pieces);
``None`` is read as zero the way the dashboard forms treat empty inputs.
"""

from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import models

from core.exceptions import InvalidQuantity, ValidationError

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")


class QualityBand(models.TextChoices):
    GOOD = "good", "≥90% good"
    ACCEPTABLE = "acceptable", "70–89% acceptable"
    POOR = "poor", "<70% poor"


def to_decimal(value, name="value") -> Decimal:
    if value is None or value == "":
        return ZERO
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{name} must be a number.", field=name)


def _non_negative(value, name) -> Decimal:
    number = to_decimal(value, name)
    if number < 0:
        raise InvalidQuantity(f"{name} cannot be negative.", field=name)
    return number


def loss_quantity(sent, received) -> Decimal:
    sent = _non_negative(sent, "sent")
    received = _non_negative(received, "received")
    if received > sent:
        raise InvalidQuantity(
            f"Quantity received ({received}) cannot exceed quantity sent ({sent}).",
            field="received",
        )
    return sent - received


def loss_percentage(sent, received) -> Decimal:
    """(sent - received) / sent * 100, clamped to [0, 100]; 0 when nothing was sent."""
    loss = loss_quantity(sent, received)
    sent = to_decimal(sent)
    if sent == 0:
        return ZERO
    percent = (loss / sent * HUNDRED).quantize(CENTS, rounding=ROUND_HALF_UP)
    return min(max(percent, ZERO), HUNDRED)


def quality_rate(total, good) -> str:
    """Share of good pieces as a display string with one decimal ("0" for no pieces)."""
    total = to_decimal(total, "total")
    good = to_decimal(good, "good")
    if total == 0:
        return "0"
    rate = (good / total * HUNDRED).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{rate:.1f}"


def quality_band(rate) -> QualityBand:
    rate = to_decimal(rate, "rate")
    if rate >= 90:
        return QualityBand.GOOD
    if rate >= 70:
        return QualityBand.ACCEPTABLE
    return QualityBand.POOR


def derive_amount(quantity, rate) -> Decimal:
    quantity = _non_negative(quantity, "quantity")
    rate = _non_negative(rate, "rate")
    return (quantity * rate).quantize(CENTS, rounding=ROUND_HALF_UP)


def gst_multiplier(gst_percent) -> Decimal:
    """'5%' -> 1.05, 'Not Applicable' / blank -> 1."""
    if gst_percent in (None, "") or str(gst_percent).strip().lower() == "not applicable":
        return Decimal("1")
    raw = str(gst_percent).strip().rstrip("%").strip()
    percent = _non_negative(raw, "gst_percent")
    return Decimal("1") + percent / HUNDRED


def purchase_amount(meters, rate, gst_percent=None) -> Decimal:
    base = derive_amount(meters, rate)
    return (base * gst_multiplier(gst_percent)).quantize(CENTS, rounding=ROUND_HALF_UP)


def meters_to_pieces(meters, meters_per_piece) -> int:
    """Whole pieces that can be cut from ``meters``; the remainder is offcut."""
    meters = _non_negative(meters, "meters")
    per_piece = _non_negative(meters_per_piece, "meters_per_piece")
    if per_piece == 0:
        raise ValidationError("meters_per_piece must be greater than zero.", field="meters_per_piece")
    return int((meters / per_piece).to_integral_value(rounding=ROUND_DOWN))


def pieces_to_meters(pieces, meters_per_piece) -> Decimal:
    return derive_amount(pieces, meters_per_piece)


def meters_per_taka(meters, taka) -> Decimal:
    meters = _non_negative(meters, "meters")
    taka = _non_negative(taka, "taka")
    if taka == 0:
        return ZERO
    return (meters / taka).quantize(CENTS, rounding=ROUND_HALF_UP)


def check_piece_conservation(total, *parts, label="pieces"):
    """Raise InvalidQuantity unless the parts add up to exactly ``total``."""
    total = _non_negative(total, "total")
    counted = sum((_non_negative(p, label) for p in parts), ZERO)
    if counted != total:
        raise InvalidQuantity(
            f"Classified {label} add up to {counted} but the total is {total}."
        )
