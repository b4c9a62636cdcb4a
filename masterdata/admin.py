from django.contrib import admin
from guardian.admin import GuardedModelAdmin

from masterdata.models import Ledger


@admin.register(Ledger)
class LedgerAdmin(GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("business_name", "ledger_type", "contact_person_name", "mobile_number", "city", "gst_number")
    list_filter = ("ledger_type", "state")
    search_fields = ("business_name", "contact_person_name", "gst_number", "pan_number")
