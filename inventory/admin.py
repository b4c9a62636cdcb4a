from django.contrib import admin
from guardian.admin import GuardedModelAdmin

from inventory.forms.inventory_forms import InventoryItemForm
from inventory.models import InventoryConversionLog, InventoryItem


@admin.register(InventoryItem)
class InventoryItemAdmin(GuardedModelAdmin, admin.ModelAdmin):
    form = InventoryItemForm
    list_display = (
        "inventory_number", "date", "product_sku", "quantity", "classification", "quality_grade",
        "price_per_piece", "total_cost",
    )
    list_filter = ("classification", "quality_grade")
    search_fields = ("inventory_number", "product_name", "product_sku")
    readonly_fields = (
        "inventory_number", "source_challan", "quantity", "good_quantity", "bad_quantity",
        "wastage_quantity", "total_cost",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(InventoryConversionLog)
class InventoryConversionLogAdmin(GuardedModelAdmin, admin.ModelAdmin):
    list_display = ("converted_at", "challan", "inventory_item", "quantity", "converted_by")
    readonly_fields = ("challan", "inventory_item", "quantity", "converted_by", "converted_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
