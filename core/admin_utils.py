"""Admin mixins that keep the admin inside the same rules as the API."""

from core.exceptions import Conflict


class StageLedgerAdminMixin:
    """Apply a StageLedger's delete rules and edit locks to the admin.

    A record whose state forbids deletion loses the delete permission (the
    single delete view and the bulk action both check it per object), and
    fields an edit lock freezes are rendered read-only.
    """

    stage_ledger = None

    def has_delete_permission(self, request, obj=None):
        if obj is not None and self.stage_ledger is not None:
            try:
                self.stage_ledger.check_deletable(obj)
            except Conflict:
                return False
        return super().has_delete_permission(request, obj)

    def get_readonly_fields(self, request, obj=None):
        ro = list(super().get_readonly_fields(request, obj))
        lock = self.stage_ledger.edit_lock(obj) if obj is not None and self.stage_ledger else None
        if lock is None:
            return ro
        for f in obj._meta.concrete_fields:
            if f.primary_key or not f.editable or f.name in lock.editable or f.name in ro:
                continue
            ro.append(f.name)
        return ro
