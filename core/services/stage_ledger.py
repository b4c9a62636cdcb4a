"""Generic record repository shared by every pipeline entity.

A ``StageLedger`` wraps one model with:

- a ModelForm for writable fields (input validation),
- a django-filter FilterSet for list/export filtering,
- free-text search over ``search_fields``,
- whitelisted single-field sorting and page/limit pagination,
- referential-integrity checks before delete,
- edit locks for records that progressed or are referenced downstream,
- CSV export with a fixed header row.

All public operations return a ``Result``. Writes run inside
``transaction.atomic`` and lock the target row with ``select_for_update``
so two writers on the same record are serialized.
"""

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.db import IntegrityError, models, transaction
from django.db.models import ProtectedError, Q
from django.forms import ALL_FIELDS
from django.forms.models import model_to_dict

from core.exceptions import (
    Conflict,
    InvalidQuantity,
    InvalidTransition,
    NotFound,
    ValidationError,
    blocking_reference,
)
from core.services.csv_export import write_csv
from core.services.results import returns_result

logger = logging.getLogger(__name__)

# Query parameter names used by the dashboard UI, mapped to filter names.
QUERY_ALIASES = {
    "startDate": "start_date",
    "endDate": "end_date",
    "materialType": "material_type",
    "sortBy": "sort_by",
    "sortOrder": "sort_order",
    "ledgerId": "ledger",
    "productSku": "product_sku",
}


def pipeline_setting(name):
    return settings.PIPELINE[name]


def normalize_params(params) -> dict:
    """Flatten a QueryDict (or dict) and translate camelCase aliases."""
    if params is None:
        return {}
    flat = {}
    for key, value in params.items():
        if isinstance(value, (list, tuple)):
            value = value[-1] if value else ""
        flat[QUERY_ALIASES.get(key, key)] = value
    return flat


@dataclass(frozen=True)
class Page:
    records: list
    page: int
    limit: int
    total: int
    pages: int
    summary: dict = None

    def pagination(self) -> dict:
        return {"page": self.page, "limit": self.limit, "total": self.total, "pages": self.pages}


@dataclass(frozen=True)
class EditLock:
    """Fields that may still change on a record that is otherwise frozen."""
    reason: str
    editable: frozenset = field(default_factory=frozenset)
    blocking: object = None


def first_blocking_reference(obj):
    """Return the first row that points at ``obj`` through a PROTECT foreign key."""
    for rel in obj._meta.related_objects:
        if rel.on_delete is not models.PROTECT:
            continue
        blocker = rel.related_model._default_manager.filter(**{rel.field.name: obj}).first()
        if blocker is not None:
            return blocker
    return None


def raise_form_errors(form):
    """Translate ModelForm errors into the pipeline taxonomy."""
    data = form.errors.as_data()
    for field_name, errors in data.items():
        for error in errors:
            target = None if field_name == "__all__" else field_name
            if error.code == "invalid_quantity":
                raise InvalidQuantity(error.messages[0], field=target)
            if error.code in ("unique", "unique_together"):
                raise Conflict(error.messages[0], field=target)

    flat = {name: [m for e in errors for m in e.messages] for name, errors in data.items()}
    name, messages = next(iter(flat.items()))
    message = messages[0] if name == "__all__" else f"{name}: {messages[0]}"
    raise ValidationError(message, errors=flat)


class StageLedger:
    model = None
    form_class = None
    filterset_class = None

    label = "record"
    number_field = None
    status_field = None
    # patch keys handed to the status transition instead of the form
    status_params = {}
    search_fields = ()
    sortable_fields = ()
    default_ordering = ("-created_at", "-id")
    select_related = ()

    export_headers = ()
    export_filename = "export.csv"

    # --- reads -----------------------------------------------------------

    def queryset(self):
        return self.model._default_manager.select_related(*self.select_related)

    def _get(self, pk, *, lock=False):
        qs = self.model._default_manager.select_for_update() if lock else self.queryset()
        try:
            return qs.get(pk=pk)
        except (self.model.DoesNotExist, ValueError, TypeError):
            raise NotFound(f"{self.label.capitalize()} {pk} not found.")

    @returns_result
    def get(self, pk):
        return self._get(pk)

    def filtered(self, params=None):
        params = normalize_params(params)
        search = (params.pop("search", "") or "").strip()
        for key in ("page", "limit", "sort_by", "sort_order"):
            params.pop(key, None)

        qs = self.queryset()
        if self.filterset_class is not None:
            filterset = self.filterset_class(data=params, queryset=qs)
            if not filterset.is_valid():
                errors = {k: [str(m) for m in v] for k, v in filterset.errors.items()}
                name, messages = next(iter(errors.items()))
                raise ValidationError(f"Invalid filter {name}: {messages[0]}", errors=errors)
            qs = filterset.qs

        if search and self.search_fields:
            q = Q()
            for name in self.search_fields:
                q |= Q(**{f"{name}__icontains": search})
            qs = qs.filter(q)
        return qs

    def ordering(self, sort_by=None, sort_order=None):
        if not sort_by:
            return self.default_ordering
        if sort_by not in self.sortable_fields:
            raise ValidationError(
                f"Cannot sort by '{sort_by}'. Allowed: {', '.join(self.sortable_fields)}.",
                field="sortBy",
            )
        direction = (sort_order or "desc").lower()
        if direction not in ("asc", "desc"):
            raise ValidationError("sortOrder must be 'asc' or 'desc'.", field="sortOrder")
        prefix = "-" if direction == "desc" else ""
        return (f"{prefix}{sort_by}", f"{prefix}id")

    @staticmethod
    def _positive_int(value, default, name):
        if value in (None, ""):
            return default
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be a positive integer.", field=name)
        if number < 1:
            raise ValidationError(f"{name} must be a positive integer.", field=name)
        return number

    @returns_result
    def list(self, params=None, page=1, limit=None, sort_by=None, sort_order=None):
        limit = self._positive_int(limit, pipeline_setting("DEFAULT_PAGE_SIZE"), "limit")
        limit = min(limit, pipeline_setting("MAX_PAGE_SIZE"))

        qs = self.filtered(params).order_by(*self.ordering(sort_by, sort_order))
        paginator = Paginator(qs, limit)
        try:
            current = paginator.page(1 if page in (None, "") else page)
        except PageNotAnInteger:
            raise ValidationError("page must be a positive integer.", field="page")
        except EmptyPage:
            raise ValidationError(
                f"page {page} is out of range; there are {paginator.num_pages} page(s).", field="page"
            )

        return Page(
            records=list(current.object_list),
            page=current.number,
            limit=limit,
            total=paginator.count,
            # Paginator reports one (empty) page for an empty set
            pages=paginator.num_pages if paginator.count else 0,
        )

    # --- writes ----------------------------------------------------------

    def prepare(self, data) -> dict:
        """Hook: normalize raw input before it reaches the form.

        Foreign keys may arrive under their column name (``ledger_id``), the
        way ``serialize`` writes them.
        """
        data = dict(data or {})
        for f in self.model._meta.concrete_fields:
            if f.is_relation and f.attname != f.name and f.attname in data:
                data.setdefault(f.name, data.pop(f.attname))
        return data

    def edit_lock(self, obj):
        """Hook: return an EditLock when the record may no longer change freely."""
        return None

    def validate_patch(self, obj, patch) -> dict:
        """Hook: reject or strip patch keys that may never change on ``obj``."""
        return patch

    def check_deletable(self, obj):
        """Hook: raise Conflict when the record's own state forbids deletion."""

    def before_save(self, obj, form, created):
        """Hook: last chance to adjust the instance before it is written."""

    def apply_status(self, obj, status, by=None, **params):
        raise InvalidTransition(f"Status of a {self.label} cannot be written directly.")

    def build_form(self, data, instance=None, submitted=None):
        """Hook: bound form for a write; ``submitted`` holds the caller's own keys."""
        return self.form_class(data=data, instance=instance)

    def form_data(self, obj) -> dict:
        fields = self.form_class._meta.fields
        if fields == ALL_FIELDS:
            fields = None
        return model_to_dict(obj, fields=fields)

    def _save_form(self, form, *, by=None, created=False):
        if not form.is_valid():
            raise_form_errors(form)

        obj = form.save(commit=False)
        if created and by is not None and hasattr(obj, "created_by_id"):
            obj.created_by = by
        self.before_save(obj, form, created)
        try:
            with transaction.atomic():
                obj.save()
        except IntegrityError as exc:
            raise Conflict(f"Could not save {self.label}: {exc}")
        return obj

    def _split_status(self, data):
        """Pull the status and its transition parameters out of the form data."""
        if not self.status_field:
            return data, None, {}
        status = data.pop(self.status_field, None)
        params = {
            kwarg: data.pop(key) for key, kwarg in self.status_params.items() if key in data
        }
        return data, status, params

    @returns_result
    def create(self, data, by=None):
        data, status, _ = self._split_status(self.prepare(data))
        if status:
            initial = self.model._meta.get_field(self.status_field).get_default()
            if status != initial:
                raise InvalidTransition(
                    f"A new {self.label} starts as '{initial}', not '{status}'."
                )

        with transaction.atomic():
            obj = self._save_form(self.build_form(data, submitted=data), by=by, created=True)

        logger.info("Created %s %s (id=%s)", self.label, self.number_of(obj), obj.pk)
        return obj

    @returns_result
    def update(self, pk, patch, by=None):
        patch, status, params = self._split_status(self.prepare(patch))

        with transaction.atomic():
            obj = self._get(pk, lock=True)
            patch = self.validate_patch(obj, patch)
            form = self.build_form({**self.form_data(obj), **patch}, instance=obj, submitted=patch)

            lock = self.edit_lock(obj)
            if lock is not None:
                # only keys the caller sent; empty JSON fields always report as changed
                blocked = sorted((set(form.changed_data) & set(patch)) - set(lock.editable))
                if blocked:
                    raise Conflict(
                        f"{lock.reason} Locked fields: {', '.join(blocked)}.",
                        blocking=blocking_reference(lock.blocking) if lock.blocking is not None else None,
                    )

            obj = self._save_form(form, by=by)
            if status and status != getattr(obj, self.status_field):
                self.apply_status(obj, status, by=by, **params)

        logger.info("Updated %s %s (id=%s)", self.label, self.number_of(obj), obj.pk)
        return obj

    @returns_result
    def delete(self, pk):
        with transaction.atomic():
            obj = self._get(pk, lock=True)
            self.check_deletable(obj)

            blocker = first_blocking_reference(obj)
            if blocker is not None:
                raise Conflict(
                    f"{self.label.capitalize()} {self.number_of(obj)} is referenced by "
                    f"{blocker._meta.verbose_name} {blocker} and cannot be deleted.",
                    blocking=blocking_reference(blocker),
                )

            number = self.number_of(obj)
            try:
                obj.delete()
            except ProtectedError as exc:
                blocker = next(iter(exc.protected_objects))
                raise Conflict(
                    f"{self.label.capitalize()} {number} is referenced by "
                    f"{blocker._meta.verbose_name} {blocker} and cannot be deleted.",
                    blocking=blocking_reference(blocker),
                )

        logger.info("Deleted %s %s (id=%s)", self.label, number, pk)

    # --- presentation ----------------------------------------------------

    def number_of(self, obj):
        return getattr(obj, self.number_field) if self.number_field else obj.pk

    def extra_fields(self, obj) -> dict:
        return {}

    def serialize(self, obj) -> dict:
        data = {f.attname: getattr(obj, f.attname) for f in obj._meta.concrete_fields}
        data.update(self.extra_fields(obj))
        return data

    def export_row(self, obj):
        raise NotImplementedError

    @returns_result
    def export_csv(self, params=None):
        params = normalize_params(params)
        qs = self.filtered(params).order_by(
            *self.ordering(params.get("sort_by"), params.get("sort_order"))
        )
        return write_csv(self.export_headers, (self.export_row(obj) for obj in qs.iterator()))
