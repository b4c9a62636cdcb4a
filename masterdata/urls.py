from django.urls import path

from masterdata.views import ledgers

app_name = "masterdata"

urlpatterns = [
    path("ledgers/", ledgers.ledger_list, name="ledger-list"),
    path("ledgers/export/", ledgers.ledger_export, name="ledger-export"),
    path("ledgers/<int:pk>/", ledgers.ledger_detail, name="ledger-detail"),
]
