from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_http_methods

from core.views.api import create_response, detail_response, export_response, json_api, list_response
from masterdata.services.partners import partner_ledgers


@login_required
@require_http_methods(["GET", "POST"])
@json_api
def ledger_list(request):
    if request.method == "POST":
        return create_response(request, partner_ledgers)
    return list_response(request, partner_ledgers)


@login_required
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@json_api
def ledger_detail(request, pk):
    return detail_response(request, partner_ledgers, pk)


@login_required
@require_http_methods(["GET"])
@json_api
def ledger_export(request):
    return export_response(request, partner_ledgers)
