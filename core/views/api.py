"""JSON endpoints over StageLedger repositories.

Function views, each wrapped in ``login_required`` and
``require_http_methods``. ``json_api`` maps pipeline errors raised while
parsing input to their status code and storage failures to 503; results
returned by services go through ``render_result``.

The generic ``record_*`` views take the ledger as an extra URL kwarg, see
``production.urls``.
"""

import json
import logging
from functools import wraps

from django.contrib.auth.decorators import login_required
from django.db import DatabaseError
from django.http import HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from core.exceptions import PipelineError, ValidationError

logger = logging.getLogger(__name__)

STORAGE_UNAVAILABLE = "The database is temporarily unavailable. Please try again."


def error_response(error: PipelineError) -> JsonResponse:
    return JsonResponse(error.as_dict(), status=error.status_code)


def parse_json_body(request) -> dict:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body.decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON.")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object.")
    return payload


def json_api(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except PipelineError as exc:
            return error_response(exc)
        except DatabaseError:
            logger.exception("Storage failure on %s %s", request.method, request.path)
            return JsonResponse(
                {"error": STORAGE_UNAVAILABLE, "code": "storage_unavailable"},
                status=503,
            )
    return wrapper


def render_result(result, render, status=200):
    if not result.ok:
        return error_response(result.error)
    return JsonResponse(render(result.value), status=status, safe=False)


# --- building blocks -----------------------------------------------------

def list_response(request, ledger):
    params = request.GET
    result = ledger.list(
        params,
        page=params.get("page"),
        limit=params.get("limit"),
        sort_by=params.get("sortBy") or params.get("sort_by"),
        sort_order=params.get("sortOrder") or params.get("sort_order"),
    )

    def render_page(page):
        payload = {
            "data": [ledger.serialize(obj) for obj in page.records],
            "pagination": page.pagination(),
        }
        if page.summary is not None:
            payload["summary"] = page.summary
        return payload

    return render_result(result, render_page)


def create_response(request, ledger):
    result = ledger.create(parse_json_body(request), by=request.user)
    return render_result(result, ledger.serialize, status=201)


def detail_response(request, ledger, pk):
    if request.method in ("PUT", "PATCH"):
        result = ledger.update(pk, parse_json_body(request), by=request.user)
        return render_result(result, ledger.serialize)
    if request.method == "DELETE":
        result = ledger.delete(pk)
        if not result.ok:
            return error_response(result.error)
        return HttpResponse(status=204)
    return render_result(ledger.get(pk), ledger.serialize)


def export_response(request, ledger):
    result = ledger.export_csv(request.GET)
    if not result.ok:
        return error_response(result.error)
    response = HttpResponse(result.value, content_type="text/csv; charset=utf-8")
    response["Content-Disposition"] = f'attachment; filename="{ledger.export_filename}"'
    return response


# --- generic views -------------------------------------------------------

@login_required
@require_http_methods(["GET", "POST"])
@json_api
def record_collection(request, ledger):
    if request.method == "POST":
        return create_response(request, ledger)
    return list_response(request, ledger)


@login_required
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@json_api
def record_detail(request, pk, ledger):
    return detail_response(request, ledger, pk)


@login_required
@require_http_methods(["GET"])
@json_api
def record_export(request, ledger):
    return export_response(request, ledger)
