"""Pipeline error taxonomy.

Every failure the pipeline can report to a caller is one of these kinds.
Domain code raises them; the public service entry points turn them into
a ``Result`` (see ``core.services.results``) so the HTTP layer can map the
kind to a status code without guessing.

Storage failures (``django.db.DatabaseError``) are *not* part
of this hierarchy: they propagate after the surrounding transaction has
rolled back.
"""


class PipelineError(Exception):
    kind = "error"
    status_code = 400
    success_adjacent = False

    def __init__(self, message, *, field=None, blocking=None, extra=None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.blocking = blocking
        self.extra = extra or {}

    def as_dict(self) -> dict:
        payload = {"error": self.message, "code": self.kind}
        if self.field:
            payload["field"] = self.field
        if self.blocking:
            payload["blocking"] = self.blocking
        payload.update(self.extra)
        return payload


class ValidationError(PipelineError):
    """Malformed or missing input. The caller fixes the input and tries again."""
    kind = "validation_error"
    status_code = 400

    def __init__(self, message, *, errors=None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or {}

    def as_dict(self) -> dict:
        payload = super().as_dict()
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidQuantity(PipelineError):
    """A quantity conservation law would be broken (received > sent, parts != total)."""
    kind = "invalid_quantity"
    status_code = 400


class InvalidTransition(PipelineError):
    kind = "invalid_transition"
    status_code = 409


class InvalidState(PipelineError):
    """The record exists but is not in the state the operation needs."""
    kind = "invalid_state"
    status_code = 409


class NotFound(PipelineError):
    kind = "not_found"
    status_code = 404


class Conflict(PipelineError):
    """Blocked by a downstream reference or by a locked (progressed) record."""
    kind = "conflict"
    status_code = 409


class AlreadyConverted(PipelineError):
    """Idempotency guard: the conversion already happened."""
    kind = "already_converted"
    status_code = 409
    success_adjacent = True


def blocking_reference(obj) -> dict:
    """Describe the record that blocks an operation, for Conflict payloads."""
    return {
        "model": obj._meta.verbose_name,
        "id": obj.pk,
        "label": str(obj),
    }
