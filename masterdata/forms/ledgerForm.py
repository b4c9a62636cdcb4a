from django import forms

from masterdata.models import Ledger
from masterdata.models.ledger import normalize_tax_id


class LedgerForm(forms.ModelForm):
    # looser than the model columns; the model validators check the normalized value
    gst_number = forms.CharField(required=False, max_length=30)
    pan_number = forms.CharField(required=False, max_length=20)

    class Meta:
        model = Ledger
        fields = [
            "business_name",
            "ledger_type",
            "contact_person_name",
            "mobile_number",
            "email",
            "address",
            "city",
            "district",
            "state",
            "country",
            "zip_code",
            "gst_number",
            "pan_number",
        ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields["ledger_type"].required = False

    def clean_ledger_type(self):
        return self.cleaned_data.get("ledger_type") or Ledger.LedgerType.VENDOR

    def clean_gst_number(self):
        return normalize_tax_id(self.cleaned_data.get("gst_number"))

    def clean_pan_number(self):
        return normalize_tax_id(self.cleaned_data.get("pan_number"))
