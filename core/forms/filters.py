import django_filters


class DateRangeFilterSet(django_filters.FilterSet):
    """start_date/end_date (inclusive) on the model's business date field."""

    date_field = None

    start_date = django_filters.DateFilter(method="filter_start_date")
    end_date = django_filters.DateFilter(method="filter_end_date")

    def filter_start_date(self, queryset, name, value):
        return queryset.filter(**{f"{self.date_field}__gte": value})

    def filter_end_date(self, queryset, name, value):
        return queryset.filter(**{f"{self.date_field}__lte": value})
