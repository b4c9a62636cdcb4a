from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class PaymentMode(models.TextChoices):
    CASH = "Cash", "Cash"
    BANK_TRANSFER = "Bank Transfer", "Bank Transfer"
    CHEQUE = "Cheque", "Cheque"
    UPI = "UPI", "UPI"
    OTHER = "Other", "Other"


class Expense(models.Model):
    """Production cost not captured on a challan (transport, labour, job work)."""

    class ExpenseType(models.TextChoices):
        TRANSPORT = "Transport", "Transport"
        LABOR = "Labor", "Labor"
        JOB_WORK = "Job Work", "Job Work"
        MATERIAL = "Material", "Material"
        OTHER = "Other", "Other"

    class ChallanType(models.TextChoices):
        WEAVER = "Weaver", "Weaver"
        STITCHING = "Stitching", "Stitching"
        PURCHASE = "Purchase", "Purchase"
        OTHER = "Other", "Other"

    expense_date = models.DateField()
    expense_type = models.CharField(max_length=20, choices=ExpenseType.choices)
    ledger = models.ForeignKey(
        "masterdata.Ledger", null=True, blank=True, on_delete=models.PROTECT, related_name="expenses"
    )

    # free-text reference to a challan number; not a foreign key
    challan_no = models.CharField(max_length=50, blank=True, default="")
    challan_type = models.CharField(max_length=20, choices=ChallanType.choices, blank=True, default="")

    description = models.TextField(blank=True, default="")
    cost = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0"))])
    paid_to = models.CharField(max_length=255, blank=True, default="")
    payment_mode = models.CharField(max_length=20, choices=PaymentMode.choices, blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-expense_date", "-id")
        indexes = [models.Index(fields=["expense_type", "expense_date"], name="expense_type_date_idx")]

    def __str__(self):
        return f"{self.get_expense_type_display()} {self.expense_date} {self.cost}"


class PaymentVoucher(models.Model):
    voucher_no = models.CharField(max_length=50, unique=True)
    payment_date = models.DateField()
    ledger = models.ForeignKey(
        "masterdata.Ledger", null=True, blank=True, on_delete=models.PROTECT, related_name="payment_vouchers"
    )
    payment_for = models.CharField(max_length=255, blank=True, default="")
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal("0.01"))])
    payment_mode = models.CharField(max_length=20, choices=PaymentMode.choices, default=PaymentMode.CASH)
    reference_no = models.CharField(max_length=100, blank=True, default="")
    remarks = models.TextField(blank=True, default="")

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-payment_date", "-id")

    def __str__(self):
        return self.voucher_no
