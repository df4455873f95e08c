import django_filters

from billboard_marketplace.billboards.models import Billboard


class BillboardFilter(django_filters.FilterSet):
    city = django_filters.CharFilter(lookup_expr="iexact")
    province = django_filters.CharFilter(lookup_expr="iexact")
    traffic_level = django_filters.ChoiceFilter(choices=Billboard.TrafficLevel.choices)
    status = django_filters.ChoiceFilter(choices=Billboard.Status.choices)
    min_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="base_price", lookup_expr="lte")
    owner = django_filters.NumberFilter(field_name="owner__id")

    class Meta:
        model = Billboard
        fields = [
            "city",
            "province",
            "traffic_level",
            "status",
            "min_price",
            "max_price",
            "owner",
        ]
