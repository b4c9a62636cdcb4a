from django.urls import path

from core.views.api import record_collection, record_detail, record_export
from production.services import stages
from production.views import api

app_name = "production"


def stage_routes(prefix, ledger):
    extra = {"ledger": ledger}
    return [
        path(f"{prefix}/", record_collection, extra, name=f"{prefix}-list"),
        path(f"{prefix}/export/", record_export, extra, name=f"{prefix}-export"),
        path(f"{prefix}/<int:pk>/", record_detail, extra, name=f"{prefix}-detail"),
    ]


urlpatterns = [
    *stage_routes("purchases", stages.purchases),
    *stage_routes("weaver-challans", stages.weaver_challans),
    *stage_routes("shorting-entries", stages.shorting_entries),
    *stage_routes("stitching-challans", stages.stitching_challans),
    *stage_routes("expenses", stages.expenses),
    *stage_routes("payment-vouchers", stages.payment_vouchers),

    path(
        "weaver-challans/<int:pk>/action/", api.challan_action, {"ledger": stages.weaver_challans},
        name="weaver-challans-action",
    ),
    path(
        "stitching-challans/<int:pk>/action/", api.challan_action, {"ledger": stages.stitching_challans},
        name="stitching-challans-action",
    ),
    path("stitching-challans/<int:pk>/convert/", api.convert_challan, name="stitching-challans-convert"),
    path("analytics/", api.analytics, name="analytics"),
]
