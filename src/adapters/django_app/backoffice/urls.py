"""
URL patterns da API JSON do back office.

Rotas fixas (stats/, escalated/, bulk-status/) vêm antes de <pk>
para não conflitar.
"""

from django.urls import path

from . import api_views

app_name = 'backoffice'

urlpatterns = [
    # =========================================================================
    # Denúncias
    # =========================================================================
    path('reports/', api_views.ReportAPIListView.as_view(), name='report_list'),
    path('reports/stats/', api_views.ReportAPIStatsView.as_view(), name='report_stats'),
    path('reports/<str:pk>/', api_views.ReportAPIDetailView.as_view(), name='report_detail'),
    path('reports/<str:pk>/assign/', api_views.ReportAPIAssignView.as_view(), name='report_assign'),
    path('reports/<str:pk>/unassign/', api_views.ReportAPIUnassignView.as_view(), name='report_unassign'),
    path('reports/<str:pk>/status/', api_views.ReportAPIStatusView.as_view(), name='report_status'),

    # =========================================================================
    # Tickets
    # =========================================================================
    path('tickets/', api_views.TicketAPIListView.as_view(), name='ticket_list'),
    path('tickets/stats/', api_views.TicketAPIStatsView.as_view(), name='ticket_stats'),
    path('tickets/escalated/', api_views.TicketAPIEscalatedView.as_view(), name='ticket_escalated'),
    path('tickets/bulk-status/', api_views.TicketAPIBulkStatusView.as_view(), name='ticket_bulk_status'),
    path('tickets/<str:pk>/', api_views.TicketAPIDetailView.as_view(), name='ticket_detail'),
    path('tickets/<str:pk>/assign/', api_views.TicketAPIAssignView.as_view(), name='ticket_assign'),
    path('tickets/<str:pk>/unassign/', api_views.TicketAPIUnassignView.as_view(), name='ticket_unassign'),
    path('tickets/<str:pk>/escalate/', api_views.TicketAPIEscalateView.as_view(), name='ticket_escalate'),
    path('tickets/<str:pk>/status/', api_views.TicketAPIStatusView.as_view(), name='ticket_status'),
    path('tickets/<str:pk>/notes/', api_views.TicketAPINoteView.as_view(), name='ticket_notes'),
    path('tickets/<str:pk>/responses/', api_views.TicketAPIResponseView.as_view(), name='ticket_responses'),
]
