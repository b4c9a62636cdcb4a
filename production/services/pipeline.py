"""Pipeline state machine.

Every status change on a challan goes through this module. The transitions
themselves are django-fsm ``@transition`` methods on the models; this
module decides which of them a caller may invoke, validates their
parameters, locks the row and saves.

Conversion to inventory is not an action here: ``StitchingChallan.mark_converted``
is marked internal and only ``inventory.services.conversion`` calls it.
"""

import logging

from django.db import transaction
from django_fsm import ConcurrentTransition, TransitionNotAllowed, can_proceed

from core.exceptions import InvalidTransition, NotFound, ValidationError
from core.services.results import returns_result
from production.forms.production_forms import QualityCheckForm
from production.models import StitchingChallan, WeaverChallan

logger = logging.getLogger(__name__)

TERMINAL_STATES = {
    WeaverChallan: (WeaverChallan.Status.COMPLETED,),
    StitchingChallan: (StitchingChallan.Status.CONVERTED, StitchingChallan.Status.CANCELLED),
}


def _public_transitions(record):
    return [t for t in record.get_all_status_transitions() if not t.custom.get("internal")]


def available_actions(record) -> list:
    """Names of the public transitions the record can take right now."""
    return sorted({
        t.name for t in record.get_available_status_transitions() if not t.custom.get("internal")
    })


def is_terminal(record) -> bool:
    return record.status in TERMINAL_STATES.get(type(record), ())


def _terminal_error(record, attempted):
    return InvalidTransition(
        f"{record._meta.verbose_name.capitalize()} {record} is {record.status}; "
        f"it cannot {attempted}."
    )


def _action_kwargs(record, action, params):
    """Turn loose request parameters into the keyword arguments of a transition."""
    if action == "record_qc":
        form = QualityCheckForm(data=params)
        if not form.is_valid():
            errors = {k: list(v) for k, v in form.errors.items()}
            name, messages = next(iter(errors.items()))
            raise ValidationError(f"{name}: {messages[0]}", errors=errors)
        return dict(form.cleaned_data)
    if action == "cancel":
        return {"description": params.get("reason") or params.get("description") or ""}
    if action == "mark_received":
        return {"quantity_received_meters": params.get("quantity_received_meters")}
    return {}


def _apply(record, action, by=None, params=None):
    method = getattr(record, action)
    before = record.status
    if is_terminal(record):
        raise _terminal_error(record, action.replace("_", " "))
    if not can_proceed(method):
        raise InvalidTransition(
            f"Cannot {action.replace('_', ' ')} {record._meta.verbose_name} {record} "
            f"while it is {before}."
        )

    kwargs = _action_kwargs(record, action, params or {})
    try:
        method(by=by, **kwargs)
        record.save()
    except TransitionNotAllowed as exc:
        raise InvalidTransition(str(exc))
    except ConcurrentTransition:
        raise InvalidTransition(
            f"{record._meta.verbose_name.capitalize()} {record} was changed by someone else. Reload and try again."
        )

    logger.info(
        "%s %s: %s -> %s (%s)", record._meta.verbose_name, record, before, record.status, action
    )
    return record


@returns_result
def perform_action(model, pk, action, by=None, **params):
    """Run one public transition on a challan, serialized on the row lock."""
    transitions = list(model._meta.get_field("status").get_all_transitions(model))
    names = {t.name for t in transitions}
    public = {t.name for t in transitions if not t.custom.get("internal")}
    if action not in public:
        if action in names:
            raise InvalidTransition(f"'{action}' is not available as a direct action.")
        raise ValidationError(
            f"Unknown action '{action}'. Allowed: {', '.join(sorted(public))}.", field="action"
        )

    with transaction.atomic():
        try:
            record = model._default_manager.select_for_update().get(pk=pk)
        except (model.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"{model._meta.verbose_name.capitalize()} {pk} not found.")
        return _apply(record, action, by=by, params=params)


def transition_to(record, target_status, by=None, **params):
    """Move ``record`` to ``target_status`` through the matching transition.

    Used when a status arrives in an update payload. Skipping states,
    leaving a terminal state and reaching ``Converted`` directly are all
    refused with InvalidTransition. The caller holds the row lock.
    """
    if target_status == record.status:
        return record

    valid = dict(record._meta.get_field("status").choices)
    if target_status not in valid:
        raise ValidationError(
            f"Unknown status '{target_status}'. Allowed: {', '.join(valid)}.", field="status"
        )
    if is_terminal(record):
        raise _terminal_error(record, f"move to {target_status}")
    if isinstance(record, StitchingChallan) and target_status == StitchingChallan.Status.CONVERTED:
        raise InvalidTransition("A stitching challan becomes Converted only through convert to inventory.")

    for t in _public_transitions(record):
        if t.target == target_status and can_proceed(getattr(record, t.name)):
            return _apply(record, t.name, by=by, params=params)

    raise InvalidTransition(
        f"Cannot move {record._meta.verbose_name} {record} from {record.status} to {target_status}."
    )
