from core.services.stage_ledger import StageLedger
from masterdata.forms.ledgerFilters import LedgerFilterSet
from masterdata.forms.ledgerForm import LedgerForm
from masterdata.models import Ledger


class PartnerLedger(StageLedger):
    """Business partners. Deleting one that any record still points at is a Conflict."""

    model = Ledger
    form_class = LedgerForm
    filterset_class = LedgerFilterSet

    label = "ledger"
    number_field = "business_name"
    search_fields = ("business_name", "contact_person_name", "mobile_number", "email", "city", "gst_number")
    sortable_fields = ("business_name", "ledger_type", "city", "state", "created_at")
    default_ordering = ("business_name", "id")

    export_filename = "ledgers.csv"
    export_headers = (
        "Ledger ID", "Business Name", "Ledger Type", "Contact Person", "Mobile Number", "Email",
        "Address", "City", "District", "State", "Country", "ZIP Code", "GST Number", "PAN Number",
        "Created At",
    )

    def export_row(self, obj):
        return (
            obj.pk, obj.business_name, obj.ledger_type, obj.contact_person_name, obj.mobile_number,
            obj.email, obj.address, obj.city, obj.district, obj.state, obj.country, obj.zip_code,
            obj.gst_number, obj.pan_number, obj.created_at,
        )


partner_ledgers = PartnerLedger()
