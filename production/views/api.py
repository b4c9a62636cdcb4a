from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_http_methods

from core.exceptions import ValidationError
from core.views.api import json_api, parse_json_body, render_result
from inventory.services.conversion import convert_to_inventory
from inventory.services.items import inventory_items
from production.services.analytics import production_analytics
from production.services.pipeline import perform_action

# keys the URL and the session supply; a request body cannot override them
RESERVED_ACTION_KEYS = ("action", "by", "model", "pk")


@login_required
@require_http_methods(["POST"])
@json_api
def challan_action(request, pk, ledger):
    """POST {"action": "...", ...params}: run one state-machine transition."""
    payload = parse_json_body(request)
    action = payload.get("action") or ""
    if not isinstance(action, str):
        raise ValidationError("action must be a string.", field="action")
    params = {k: v for k, v in payload.items() if k not in RESERVED_ACTION_KEYS}
    result = perform_action(ledger.model, pk, action, by=request.user, **params)
    return render_result(result, ledger.serialize)


@login_required
@require_http_methods(["POST"])
@json_api
def convert_challan(request, pk):
    """The challan id in the URL is the whole input."""
    result = convert_to_inventory(pk, by=request.user)
    return render_result(result, inventory_items.serialize, status=201)


@login_required
@require_http_methods(["GET"])
@json_api
def analytics(request):
    return render_result(production_analytics(request.GET), lambda data: data)
