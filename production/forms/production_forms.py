from django import forms

from production.models import Expense, PaymentVoucher, Purchase, ShortingEntry, StitchingChallan, WeaverChallan


class PurchaseForm(forms.ModelForm):
    class Meta:
        model = Purchase
        fields = [
            "purchase_no",
            "purchase_date",
            "vendor_ledger",
            "material_type",
            "total_meters",
            "rate_per_meter",
            "gst_percent",
            "invoice_number",
            "remarks",
        ]
        widgets = {"purchase_date": forms.DateInput(attrs={"type": "date"})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # an omitted rate means "not priced yet", not a missing field
        self.fields["rate_per_meter"].required = False
        self.fields["gst_percent"].required = False

    def clean_rate_per_meter(self):
        return self.cleaned_data.get("rate_per_meter") or 0

    def clean_gst_percent(self):
        return self.cleaned_data.get("gst_percent") or Purchase._meta.get_field("gst_percent").default


class WeaverChallanForm(forms.ModelForm):
    """Status is not a form field; it changes only through transitions."""

    class Meta:
        model = WeaverChallan
        fields = [
            "challan_no",
            "challan_date",
            "purchase",
            "weaver_ledger",
            "material_type",
            "batch_number",
            "ms_party_name",
            "total_grey_mtr",
            "taka",
            "quantity_sent_meters",
            "quantity_received_meters",
            "rate_per_meter",
            "vendor_amount",
            "vendor_amount_manual",
            "transport_name",
            "lr_number",
            "transport_charge",
        ]
        widgets = {"challan_date": forms.DateInput(attrs={"type": "date"})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ("quantity_received_meters", "rate_per_meter", "vendor_amount", "transport_charge"):
            self.fields[name].required = False

    def _zero_if_blank(self, name):
        return self.cleaned_data.get(name) or 0

    def clean_quantity_received_meters(self):
        return self._zero_if_blank("quantity_received_meters")

    def clean_rate_per_meter(self):
        return self._zero_if_blank("rate_per_meter")

    def clean_vendor_amount(self):
        return self._zero_if_blank("vendor_amount")

    def clean_transport_charge(self):
        return self._zero_if_blank("transport_charge")


class ShortingEntryForm(forms.ModelForm):
    class Meta:
        model = ShortingEntry
        fields = [
            "entry_no",
            "entry_date",
            "weaver_challan",
            "purchase",
            "material_type",
            "batch_number",
            "total_pieces",
            "good_pieces",
            "damaged_pieces",
            "rejected_pieces",
            "size_breakdown",
            "remarks",
        ]
        widgets = {"entry_date": forms.DateInput(attrs={"type": "date"})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ("good_pieces", "damaged_pieces", "rejected_pieces", "size_breakdown"):
            self.fields[name].required = False

    def clean_good_pieces(self):
        return self.cleaned_data.get("good_pieces") or 0

    def clean_damaged_pieces(self):
        return self.cleaned_data.get("damaged_pieces") or 0

    def clean_rejected_pieces(self):
        return self.cleaned_data.get("rejected_pieces") or 0

    def clean_size_breakdown(self):
        # forms.JSONField reads {} as empty and returns None
        return self.cleaned_data.get("size_breakdown") or {}


class StitchingChallanForm(forms.ModelForm):
    """Classification totals are written by the QC transition, not by this form."""

    class Meta:
        model = StitchingChallan
        fields = [
            "challan_no",
            "challan_date",
            "ledger",
            "shorting_entry",
            "product_name",
            "product_sku",
            "batch_numbers",
            "quantity_sent",
            "quantity_received",
            "rate_per_piece",
            "size_breakdown",
            "transport_name",
            "lr_number",
            "transport_charge",
        ]
        widgets = {"challan_date": forms.DateInput(attrs={"type": "date"})}

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for name in ("batch_numbers", "quantity_received", "rate_per_piece", "size_breakdown", "transport_charge"):
            self.fields[name].required = False

    def clean_batch_numbers(self):
        batches = self.cleaned_data.get("batch_numbers") or []
        if isinstance(batches, str):
            batches = [b.strip() for b in batches.split(",")]
        if not isinstance(batches, list):
            raise forms.ValidationError("Batch numbers must be a list.")
        return [str(b).strip() for b in batches if str(b).strip()]

    def clean_quantity_received(self):
        return self.cleaned_data.get("quantity_received") or 0

    def clean_rate_per_piece(self):
        return self.cleaned_data.get("rate_per_piece") or 0

    def clean_size_breakdown(self):
        return self.cleaned_data.get("size_breakdown") or {}

    def clean_transport_charge(self):
        return self.cleaned_data.get("transport_charge") or 0


class ExpenseForm(forms.ModelForm):
    class Meta:
        model = Expense
        fields = [
            "expense_date",
            "expense_type",
            "ledger",
            "challan_no",
            "challan_type",
            "description",
            "cost",
            "paid_to",
            "payment_mode",
        ]
        widgets = {"expense_date": forms.DateInput(attrs={"type": "date"})}


class PaymentVoucherForm(forms.ModelForm):
    class Meta:
        model = PaymentVoucher
        fields = [
            "voucher_no",
            "payment_date",
            "ledger",
            "payment_for",
            "amount",
            "payment_mode",
            "reference_no",
            "remarks",
        ]
        widgets = {"payment_date": forms.DateInput(attrs={"type": "date"})}


class QualityCheckForm(forms.Form):
    """Parameters of StitchingChallan.record_qc."""
    good = forms.IntegerField(min_value=0)
    bad = forms.IntegerField(min_value=0, required=False)
    wastage = forms.IntegerField(min_value=0, required=False)
    remarks = forms.CharField(required=False)

    def clean(self):
        cleaned = super().clean()
        cleaned["bad"] = cleaned.get("bad") or 0
        cleaned["wastage"] = cleaned.get("wastage") or 0
        return cleaned
