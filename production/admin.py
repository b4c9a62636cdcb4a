from django.contrib import admin, messages
from django_object_actions import DjangoObjectActions, action
from guardian.admin import GuardedModelAdmin

from core.admin_utils import StageLedgerAdminMixin
from inventory.services.conversion import convert_to_inventory
from production.models import Expense, PaymentVoucher, Purchase, ShortingEntry, StitchingChallan, WeaverChallan
from production.services import stages
from production.services.pipeline import available_actions, perform_action


class TransitionActionsMixin(DjangoObjectActions):
    """Detail-page buttons for the transitions the record can take right now.

    Buttons call the pipeline service; status is never edited in the form.
    """

    transition_buttons = {}

    def get_change_actions(self, request, object_id, form_url):
        obj = self.get_object(request, object_id)
        if not obj:
            return ()
        allowed = set(available_actions(obj))
        return tuple(button for name, button in self.transition_buttons.items() if name in allowed)

    def run_transition(self, request, obj, name, **params):
        result = perform_action(type(obj), obj.pk, name, by=request.user, **params)
        if result.ok:
            self.message_user(request, f"{obj}: now {result.value.status}.", level=messages.SUCCESS)
        else:
            self.message_user(request, f"Could not {name.replace('_', ' ')}: {result.error.message}", level=messages.ERROR)


@admin.register(Purchase)
class PurchaseAdmin(StageLedgerAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.purchases
    list_display = ("purchase_no", "purchase_date", "vendor_ledger", "material_type", "total_meters", "total_amount")
    list_filter = ("material_type", "gst_percent")
    search_fields = ("purchase_no", "invoice_number")
    readonly_fields = ("total_amount",)


@admin.register(WeaverChallan)
class WeaverChallanAdmin(StageLedgerAdminMixin, TransitionActionsMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.weaver_challans
    list_display = (
        "challan_no", "challan_date", "weaver_ledger", "quantity_sent_meters",
        "quantity_received_meters", "loss_percentage", "vendor_amount", "status",
    )
    list_filter = ("status", "material_type")
    search_fields = ("challan_no", "batch_number", "ms_party_name")
    readonly_fields = ("status", "weaving_loss_meters", "loss_percentage", "received_at", "completed_at")

    transition_buttons = {"mark_received": "mark_received_action", "complete": "complete_action"}
    change_actions = tuple(transition_buttons.values())

    @action(label="Mark received", description="Record the cloth as received from the weaver")
    def mark_received_action(self, request, obj):
        self.run_transition(request, obj, "mark_received")

    @action(label="Complete", description="Close the weaver challan")
    def complete_action(self, request, obj):
        self.run_transition(request, obj, "complete")


@admin.register(ShortingEntry)
class ShortingEntryAdmin(StageLedgerAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.shorting_entries
    list_display = ("entry_no", "entry_date", "material_type", "total_pieces", "good_pieces", "damaged_pieces", "rejected_pieces")
    list_filter = ("material_type",)
    search_fields = ("entry_no", "batch_number")


@admin.register(StitchingChallan)
class StitchingChallanAdmin(StageLedgerAdminMixin, TransitionActionsMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.stitching_challans
    list_display = (
        "challan_no", "challan_date", "ledger", "product_sku", "quantity_sent", "quantity_received",
        "total_good", "total_bad", "total_wastage", "status",
    )
    list_filter = ("status",)
    search_fields = ("challan_no", "product_name", "product_sku")
    readonly_fields = (
        "status", "stitching_loss", "loss_percentage", "amount_payable", "total_good", "total_bad",
        "total_wastage", "qc_remarks", "qc_done_at", "qc_done_by", "converted_at", "cancelled_at",
        "cancellation_reason",
    )

    transition_buttons = {
        "approve_qc": "approve_qc_action",
        "cancel": "cancel_action",
    }
    change_actions = ("approve_qc_action", "cancel_action", "convert_action")

    def get_change_actions(self, request, object_id, form_url):
        buttons = super().get_change_actions(request, object_id, form_url)
        obj = self.get_object(request, object_id)
        if obj and obj.status == StitchingChallan.Status.QC_DONE:
            buttons += ("convert_action",)
        return buttons

    @action(label="Approve QC", description="Accept the recorded classification")
    def approve_qc_action(self, request, obj):
        self.run_transition(request, obj, "approve_qc")

    @action(label="Cancel", description="Cancel this stitching challan")
    def cancel_action(self, request, obj):
        self.run_transition(request, obj, "cancel", reason="Cancelled from admin")

    @action(label="Convert to inventory", description="Create the inventory item and mark the challan Converted")
    def convert_action(self, request, obj):
        result = convert_to_inventory(obj.pk, by=request.user)
        if result.ok:
            self.message_user(request, f"Created inventory item {result.value.inventory_number}.", level=messages.SUCCESS)
        elif result.error.success_adjacent:
            self.message_user(request, result.error.message, level=messages.INFO)
        else:
            self.message_user(request, f"Could not convert: {result.error.message}", level=messages.ERROR)


@admin.register(Expense)
class ExpenseAdmin(StageLedgerAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.expenses
    list_display = ("expense_date", "expense_type", "ledger", "challan_no", "cost", "payment_mode")
    list_filter = ("expense_type", "payment_mode")
    search_fields = ("description", "paid_to", "challan_no")


@admin.register(PaymentVoucher)
class PaymentVoucherAdmin(StageLedgerAdminMixin, GuardedModelAdmin, admin.ModelAdmin):
    stage_ledger = stages.payment_vouchers
    list_display = ("voucher_no", "payment_date", "ledger", "amount", "payment_mode")
    list_filter = ("payment_mode",)
    search_fields = ("voucher_no", "reference_no", "payment_for")
