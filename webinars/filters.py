from django_filters import rest_framework as filters
from .models import Webinar


class WebinarFilter(filters.FilterSet):
    """Filter for webinar listings"""
    webinar_type = filters.ChoiceFilter(choices=Webinar.TYPE_CHOICES)
    status = filters.ChoiceFilter(choices=Webinar.STATUS_CHOICES)
    is_free = filters.BooleanFilter()
    instructor = filters.NumberFilter(field_name='instructor__id')
    search = filters.CharFilter(field_name='title', lookup_expr='icontains')
    scheduled_from = filters.DateTimeFilter(field_name='scheduled_at', lookup_expr='gte')
    scheduled_to = filters.DateTimeFilter(field_name='scheduled_at', lookup_expr='lte')

    class Meta:
        model = Webinar
        fields = ['webinar_type', 'status', 'is_free', 'instructor']
