from django.contrib.auth.decorators import login_required
from django.views.decorators.http import require_http_methods

from core.views.api import detail_response, export_response, json_api, list_response
from inventory.services.items import inventory_items


@login_required
@require_http_methods(["GET"])
@json_api
def item_list(request):
    """Items are created by conversion only, so there is no POST."""
    return list_response(request, inventory_items)


@login_required
@require_http_methods(["GET", "PUT", "PATCH"])
@json_api
def item_detail(request, pk):
    return detail_response(request, inventory_items, pk)


@login_required
@require_http_methods(["GET"])
@json_api
def item_export(request):
    return export_response(request, inventory_items)
