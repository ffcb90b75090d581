from django_filters import rest_framework as filters
from certificates.models import Certificate
from internships.models import Internship
from tasks.models import Task
from clients.models import Bill
from .models import AdminActivity


class InternshipFilter(filters.FilterSet):
    """Filter for internship queries"""
    status = filters.ChoiceFilter(choices=Internship.Status.choices)
    intern = filters.NumberFilter(field_name='intern__id')
    start_date_from = filters.DateFilter(field_name='start_date', lookup_expr='gte')
    start_date_to = filters.DateFilter(field_name='start_date', lookup_expr='lte')
    has_certificate = filters.BooleanFilter(field_name='certificate', lookup_expr='isnull', exclude=True)

    class Meta:
        model = Internship
        fields = ['status', 'intern']


class CertificateFilter(filters.FilterSet):
    """Filter for certificate queries"""
    artifact_status = filters.ChoiceFilter(choices=Certificate.ArtifactStatus.choices)
    intern = filters.NumberFilter(field_name='intern__id')
    issued_from = filters.DateFilter(field_name='issued_at', lookup_expr='date__gte')
    issued_to = filters.DateFilter(field_name='issued_at', lookup_expr='date__lte')

    class Meta:
        model = Certificate
        fields = ['artifact_status', 'intern']


class TaskFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Task.Status.choices)
    assigned_to = filters.NumberFilter(field_name='assigned_to__id')
    project = filters.NumberFilter(field_name='project__id')
    deadline_before = filters.DateFilter(field_name='deadline', lookup_expr='lte')

    class Meta:
        model = Task
        fields = ['status', 'assigned_to', 'project']


class BillFilter(filters.FilterSet):
    status = filters.ChoiceFilter(choices=Bill.Status.choices)
    client = filters.NumberFilter(field_name='client__id')
    due_before = filters.DateFilter(field_name='due_date', lookup_expr='lte')

    class Meta:
        model = Bill
        fields = ['status', 'client']


class AdminActivityFilter(filters.FilterSet):
    """Filter for admin activity logs"""
    action = filters.ChoiceFilter(choices=AdminActivity.Action.choices)
    admin = filters.NumberFilter(field_name='admin__id')
    model_name = filters.CharFilter(lookup_expr='icontains')
    timestamp_from = filters.DateTimeFilter(field_name='timestamp', lookup_expr='gte')
    timestamp_to = filters.DateTimeFilter(field_name='timestamp', lookup_expr='lte')

    class Meta:
        model = AdminActivity
        fields = ['action', 'admin', 'model_name']
