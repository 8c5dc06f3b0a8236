from django_filters import rest_framework as filters
from .models import Certificate


class CertificateFilter(filters.FilterSet):
    """Filter for certificate queries"""
    status = filters.ChoiceFilter(choices=Certificate.STATUS_CHOICES)
    student = filters.NumberFilter(field_name='student__id')
    course = filters.NumberFilter(field_name='course__id')
    issue_date_from = filters.DateFilter(field_name='issue_date', lookup_expr='date__gte')
    issue_date_to = filters.DateFilter(field_name='issue_date', lookup_expr='date__lte')

    class Meta:
        model = Certificate
        fields = ['status', 'student', 'course']
