import django_filters

from core.forms.filters import DateRangeFilterSet
from inventory.models import Classification, InventoryItem, QualityGrade


class InventoryItemFilterSet(DateRangeFilterSet):
    date_field = "date"

    classification = django_filters.ChoiceFilter(choices=Classification.choices)
    quality_grade = django_filters.ChoiceFilter(choices=QualityGrade.choices)
    product_sku = django_filters.CharFilter(lookup_expr="iexact")

    class Meta:
        model = InventoryItem
        fields = ["classification", "quality_grade", "product_sku", "source_challan"]
