from dataclasses import replace

from core.exceptions import Conflict, ValidationError
from core.services.results import returns_result
from core.services.stage_ledger import StageLedger
from inventory.forms.inventory_filters import InventoryItemFilterSet
from inventory.forms.inventory_forms import InventoryItemForm
from inventory.models import InventoryItem
from inventory.services.rollup import records_from_items, rollup

# patch key -> model attribute; these are fixed at conversion time
PROVENANCE_FIELDS = {
    "inventory_number": "inventory_number",
    "source_challan": "source_challan_id",
    "quantity": "quantity",
    "good_quantity": "good_quantity",
    "bad_quantity": "bad_quantity",
    "wastage_quantity": "wastage_quantity",
    "product_sku": "product_sku",
    "product_name": "product_name",
}


class InventoryLedger(StageLedger):
    """Finished goods. Items come only from conversion and are never deleted here."""

    model = InventoryItem
    form_class = InventoryItemForm
    filterset_class = InventoryItemFilterSet

    label = "inventory item"
    number_field = "inventory_number"
    search_fields = ("inventory_number", "product_name", "product_sku", "source_challan__challan_no")
    sortable_fields = (
        "date", "inventory_number", "product_sku", "quantity", "classification", "quality_grade",
        "price_per_piece", "total_cost", "created_at",
    )
    select_related = ("source_challan",)

    export_filename = "inventory.csv"
    export_headers = (
        "Inventory Number", "Challan No", "Date", "Quality Grade", "Quantity", "Product Name",
        "Product SKU", "Classification", "Price Per Piece", "Total Cost",
    )

    @returns_result
    def create(self, data, by=None):
        raise Conflict("Inventory items are created by converting a QC Done stitching challan.")

    @returns_result
    def delete(self, pk):
        raise Conflict("Inventory items cannot be deleted; they record a completed conversion.")

    @returns_result
    def list(self, params=None, page=1, limit=None, sort_by=None, sort_order=None):
        result = super().list(params, page=page, limit=limit, sort_by=sort_by, sort_order=sort_order)
        page = result.unwrap()
        return replace(page, summary=self.summary(params))

    def summary(self, params=None) -> dict:
        """Rollup over the whole filtered set, not just the current page."""
        return rollup(records_from_items(self.filtered(params).iterator())).as_dict()

    def build_form(self, data, instance=None, submitted=None):
        return self.form_class(data=data, instance=instance, submitted=submitted)

    def validate_patch(self, obj, patch):
        for key, attname in PROVENANCE_FIELDS.items():
            if key not in patch:
                continue
            value = patch.pop(key)
            if str(value) != str(getattr(obj, attname)):
                raise ValidationError(
                    f"{key} of inventory item {obj.inventory_number} cannot be changed.", field=key
                )
        return patch

    def extra_fields(self, obj):
        return {"challan_no": obj.source_challan.challan_no}

    def export_row(self, obj):
        return (
            obj.inventory_number, obj.source_challan.challan_no, obj.date, obj.quality_grade,
            obj.quantity, obj.product_name, obj.product_sku, obj.classification,
            obj.price_per_piece, obj.total_cost,
        )


inventory_items = InventoryLedger()
