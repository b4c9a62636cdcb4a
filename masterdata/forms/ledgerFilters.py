import django_filters

from masterdata.models import Ledger


class LedgerFilterSet(django_filters.FilterSet):
    ledger_type = django_filters.ChoiceFilter(choices=Ledger.LedgerType.choices)
    city = django_filters.CharFilter(lookup_expr="iexact")
    state = django_filters.CharFilter(lookup_expr="iexact")
    has_gst = django_filters.BooleanFilter(method="filter_has_gst")

    class Meta:
        model = Ledger
        fields = ["ledger_type", "city", "state"]

    def filter_has_gst(self, queryset, name, value):
        if value:
            return queryset.exclude(gst_number="")
        return queryset.filter(gst_number="")
