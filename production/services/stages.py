"""Stage ledgers: one repository per production entity.

Instances at the bottom of the module (``purchases``, ``weaver_challans``
...) are what the views, admin actions and tests use.
"""

from django.core.exceptions import ObjectDoesNotExist

from core.exceptions import Conflict, blocking_reference
from core.services.stage_ledger import EditLock, StageLedger, first_blocking_reference
from inventory.services.rollup import dominant_classification
from production.forms.production_filters import (
    ExpenseFilterSet,
    PaymentVoucherFilterSet,
    PurchaseFilterSet,
    ShortingEntryFilterSet,
    StitchingChallanFilterSet,
    WeaverChallanFilterSet,
)
from production.forms.production_forms import (
    ExpenseForm,
    PaymentVoucherForm,
    PurchaseForm,
    ShortingEntryForm,
    StitchingChallanForm,
    WeaverChallanForm,
)
from production.models import Expense, PaymentVoucher, Purchase, ShortingEntry, StitchingChallan, WeaverChallan
from production.services import pipeline

TRANSPORT_FIELDS = frozenset({"transport_name", "lr_number", "transport_charge"})


class PurchaseLedger(StageLedger):
    model = Purchase
    form_class = PurchaseForm
    filterset_class = PurchaseFilterSet

    label = "purchase"
    number_field = "purchase_no"
    search_fields = ("purchase_no", "invoice_number", "remarks", "vendor_ledger__business_name")
    sortable_fields = (
        "purchase_date", "purchase_no", "material_type", "total_meters", "total_amount", "created_at",
    )
    select_related = ("vendor_ledger",)

    export_filename = "purchases.csv"
    export_headers = (
        "Purchase No", "Purchase Date", "Vendor Ledger ID", "Material Type", "Total Meters",
        "Rate Per Meter", "Total Amount", "GST Percent", "Invoice Number", "Remarks", "Created At",
    )

    def edit_lock(self, obj):
        blocker = first_blocking_reference(obj)
        if blocker is None:
            return None
        return EditLock(
            reason=f"Purchase {obj.purchase_no} is used by {blocker._meta.verbose_name} {blocker}.",
            editable=frozenset({"remarks", "invoice_number"}),
            blocking=blocker,
        )

    def export_row(self, obj):
        return (
            obj.purchase_no, obj.purchase_date, obj.vendor_ledger_id, obj.material_type,
            obj.total_meters, obj.rate_per_meter, obj.total_amount, obj.gst_percent,
            obj.invoice_number, obj.remarks, obj.created_at,
        )


class ChallanLedger(StageLedger):
    """Shared behaviour of the two state-machine entities."""

    status_field = "status"

    def apply_status(self, obj, status, by=None, **params):
        pipeline.transition_to(obj, status, by=by, **params)

    def extra_fields(self, obj):
        return {"available_actions": pipeline.available_actions(obj)}


class WeaverChallanLedger(ChallanLedger):
    model = WeaverChallan
    form_class = WeaverChallanForm
    filterset_class = WeaverChallanFilterSet

    label = "weaver challan"
    number_field = "challan_no"
    search_fields = ("challan_no", "batch_number", "ms_party_name", "lr_number", "weaver_ledger__business_name")
    sortable_fields = (
        "challan_date", "challan_no", "status", "material_type", "quantity_sent_meters",
        "quantity_received_meters", "loss_percentage", "vendor_amount", "created_at",
    )
    select_related = ("weaver_ledger", "purchase")

    export_filename = "weaver_challans.csv"
    export_headers = (
        "Challan No", "Challan Date", "Purchase ID", "Weaver Ledger ID", "Material Type",
        "Quantity Sent (meters)", "Quantity Received (meters)", "Weaving Loss (meters)",
        "Loss Percentage", "Rate per Meter", "Vendor Amount", "Transport Name", "LR Number",
        "Transport Charge", "Status", "Created At",
    )

    def prepare(self, data):
        data = super().prepare(data)
        # a vendor amount typed by the user overrides the derived one
        if data.get("vendor_amount") not in (None, "") and "vendor_amount_manual" not in data:
            data["vendor_amount_manual"] = True
        return data

    def edit_lock(self, obj):
        if obj.status == WeaverChallan.Status.COMPLETED:
            return EditLock(
                reason=f"Weaver challan {obj.challan_no} is Completed.",
                editable=TRANSPORT_FIELDS,
            )
        return None

    def check_deletable(self, obj):
        if obj.status != WeaverChallan.Status.SENT:
            raise Conflict(
                f"Weaver challan {obj.challan_no} is {obj.status} and can no longer be deleted.",
                blocking=blocking_reference(obj),
            )

    def extra_fields(self, obj):
        return {**super().extra_fields(obj), "meters_per_taka": obj.meters_per_taka}

    def export_row(self, obj):
        return (
            obj.challan_no, obj.challan_date, obj.purchase_id, obj.weaver_ledger_id, obj.material_type,
            obj.quantity_sent_meters, obj.quantity_received_meters, obj.weaving_loss_meters,
            obj.loss_percentage, obj.rate_per_meter, obj.vendor_amount, obj.transport_name,
            obj.lr_number, obj.transport_charge, obj.status, obj.created_at,
        )


class ShortingEntryLedger(StageLedger):
    model = ShortingEntry
    form_class = ShortingEntryForm
    filterset_class = ShortingEntryFilterSet

    label = "shorting entry"
    number_field = "entry_no"
    search_fields = ("entry_no", "batch_number", "remarks", "weaver_challan__challan_no", "purchase__purchase_no")
    sortable_fields = (
        "entry_date", "entry_no", "material_type", "total_pieces", "good_pieces", "created_at",
    )
    select_related = ("weaver_challan", "purchase")

    export_filename = "shorting_entries.csv"
    export_headers = (
        "Entry No", "Entry Date", "Weaver Challan ID", "Purchase ID", "Material Type", "Batch Number",
        "Total Pieces", "Good Pieces", "Damaged Pieces", "Rejected Pieces", "Size Breakdown",
        "Remarks", "Created At",
    )

    def extra_fields(self, obj):
        band = obj.quality_band
        return {
            "quality_rate": obj.quality_rate,
            "quality_band": band.value,
            "quality_band_label": band.label,
        }

    def export_row(self, obj):
        return (
            obj.entry_no, obj.entry_date, obj.weaver_challan_id, obj.purchase_id, obj.material_type,
            obj.batch_number, obj.total_pieces, obj.good_pieces, obj.damaged_pieces,
            obj.rejected_pieces, obj.size_breakdown, obj.remarks, obj.created_at,
        )


class StitchingChallanLedger(ChallanLedger):
    model = StitchingChallan
    form_class = StitchingChallanForm
    filterset_class = StitchingChallanFilterSet

    label = "stitching challan"
    number_field = "challan_no"
    status_params = {
        "total_good": "good",
        "total_bad": "bad",
        "total_wastage": "wastage",
        "qc_remarks": "remarks",
        "cancellation_reason": "reason",
    }
    search_fields = ("challan_no", "product_name", "product_sku", "lr_number", "ledger__business_name")
    sortable_fields = (
        "challan_date", "challan_no", "status", "product_sku", "quantity_sent", "quantity_received",
        "loss_percentage", "amount_payable", "created_at",
    )
    select_related = ("ledger",)

    export_filename = "stitching_challans.csv"
    export_headers = (
        "Challan No", "Challan Date", "Ledger ID", "Product Name", "Product SKU", "Batch Numbers",
        "Quantity Sent", "Quantity Received", "Stitching Loss", "Loss Percentage", "Rate per Piece",
        "Amount Payable", "Status", "Created At",
    )

    def edit_lock(self, obj):
        if obj.status == StitchingChallan.Status.CONVERTED:
            return EditLock(
                reason=f"Stitching challan {obj.challan_no} was converted to inventory.",
                blocking=self._inventory_item(obj),
            )
        if obj.status == StitchingChallan.Status.CANCELLED:
            return EditLock(reason=f"Stitching challan {obj.challan_no} is cancelled.")
        if obj.status != StitchingChallan.Status.PENDING:
            # quantities are frozen once QC has classified them
            return EditLock(
                reason=f"Stitching challan {obj.challan_no} is {obj.status}.",
                editable=TRANSPORT_FIELDS | {"rate_per_piece", "size_breakdown"},
            )
        return None

    def check_deletable(self, obj):
        if obj.status != StitchingChallan.Status.PENDING:
            raise Conflict(
                f"Stitching challan {obj.challan_no} is {obj.status} and can no longer be deleted.",
                blocking=blocking_reference(obj),
            )

    @staticmethod
    def _inventory_item(obj):
        try:
            return obj.inventory_item
        except ObjectDoesNotExist:
            return None

    def extra_fields(self, obj):
        item = self._inventory_item(obj)
        return {
            **super().extra_fields(obj),
            "classification": dominant_classification(obj.total_good, obj.total_bad, obj.total_wastage),
            "inventory_number": item.inventory_number if item else None,
        }

    def export_row(self, obj):
        return (
            obj.challan_no, obj.challan_date, obj.ledger_id, obj.product_name, obj.product_sku,
            ", ".join(obj.batch_numbers or []), obj.quantity_sent, obj.quantity_received,
            obj.stitching_loss, obj.loss_percentage, obj.rate_per_piece, obj.amount_payable,
            obj.status, obj.created_at,
        )


class ExpenseLedger(StageLedger):
    model = Expense
    form_class = ExpenseForm
    filterset_class = ExpenseFilterSet

    label = "expense"
    search_fields = ("description", "paid_to", "challan_no", "ledger__business_name")
    sortable_fields = ("expense_date", "expense_type", "cost", "created_at")
    select_related = ("ledger",)

    export_filename = "expenses.csv"
    export_headers = (
        "Expense Date", "Expense Type", "Challan No", "Challan Type", "Description", "Cost",
        "Paid To", "Payment Mode", "Created At",
    )

    def export_row(self, obj):
        return (
            obj.expense_date, obj.expense_type, obj.challan_no, obj.challan_type, obj.description,
            obj.cost, obj.paid_to, obj.payment_mode, obj.created_at,
        )


class PaymentVoucherLedger(StageLedger):
    model = PaymentVoucher
    form_class = PaymentVoucherForm
    filterset_class = PaymentVoucherFilterSet

    label = "payment voucher"
    number_field = "voucher_no"
    search_fields = ("voucher_no", "payment_for", "reference_no", "remarks", "ledger__business_name")
    sortable_fields = ("payment_date", "voucher_no", "amount", "payment_mode", "created_at")
    select_related = ("ledger",)

    export_filename = "payment_vouchers.csv"
    export_headers = (
        "Voucher No", "Payment Date", "Ledger ID", "Payment For", "Payment Mode", "Amount",
        "Reference No", "Created At",
    )

    def export_row(self, obj):
        return (
            obj.voucher_no, obj.payment_date, obj.ledger_id, obj.payment_for, obj.payment_mode,
            obj.amount, obj.reference_no, obj.created_at,
        )


purchases = PurchaseLedger()
weaver_challans = WeaverChallanLedger()
shorting_entries = ShortingEntryLedger()
stitching_challans = StitchingChallanLedger()
expenses = ExpenseLedger()
payment_vouchers = PaymentVoucherLedger()
