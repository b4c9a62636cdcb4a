import django_filters

from core.forms.filters import DateRangeFilterSet
from masterdata.models import Ledger
from production.models import (
    Expense,
    MaterialType,
    PaymentMode,
    PaymentVoucher,
    Purchase,
    ShortingEntry,
    StitchingChallan,
    WeaverChallan,
)


class PurchaseFilterSet(DateRangeFilterSet):
    date_field = "purchase_date"

    material_type = django_filters.ChoiceFilter(choices=MaterialType.choices)
    ledger = django_filters.ModelChoiceFilter(field_name="vendor_ledger", queryset=Ledger.objects.all())

    class Meta:
        model = Purchase
        fields = ["material_type", "gst_percent"]


class WeaverChallanFilterSet(DateRangeFilterSet):
    date_field = "challan_date"

    material_type = django_filters.ChoiceFilter(choices=MaterialType.choices)
    status = django_filters.ChoiceFilter(choices=WeaverChallan.Status.choices)
    ledger = django_filters.ModelChoiceFilter(field_name="weaver_ledger", queryset=Ledger.objects.all())

    class Meta:
        model = WeaverChallan
        fields = ["material_type", "status", "purchase", "batch_number"]


class ShortingEntryFilterSet(DateRangeFilterSet):
    date_field = "entry_date"

    material_type = django_filters.ChoiceFilter(choices=MaterialType.choices)

    class Meta:
        model = ShortingEntry
        fields = ["material_type", "weaver_challan", "purchase", "batch_number"]


class StitchingChallanFilterSet(DateRangeFilterSet):
    date_field = "challan_date"

    status = django_filters.ChoiceFilter(choices=StitchingChallan.Status.choices)
    ledger = django_filters.ModelChoiceFilter(queryset=Ledger.objects.all())
    product_sku = django_filters.CharFilter(lookup_expr="iexact")

    class Meta:
        model = StitchingChallan
        fields = ["status", "ledger", "product_sku"]


class ExpenseFilterSet(DateRangeFilterSet):
    date_field = "expense_date"

    expense_type = django_filters.ChoiceFilter(choices=Expense.ExpenseType.choices)
    payment_mode = django_filters.ChoiceFilter(choices=PaymentMode.choices)

    class Meta:
        model = Expense
        fields = ["expense_type", "challan_type", "payment_mode", "ledger"]


class PaymentVoucherFilterSet(DateRangeFilterSet):
    date_field = "payment_date"

    payment_mode = django_filters.ChoiceFilter(choices=PaymentMode.choices)

    class Meta:
        model = PaymentVoucher
        fields = ["payment_mode", "ledger"]
