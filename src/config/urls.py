"""
URL Configuration do Back Office.

Estrutura:
- /api/reports/ - API de denúncias
- /api/tickets/ - API de tickets de suporte
- /health/ - Health check
"""

from django.http import JsonResponse
from django.urls import include, path


def health(request):
    return JsonResponse({'status': 'ok'})


urlpatterns = [
    path('api/', include('src.adapters.django_app.backoffice.urls')),
    path('health/', health, name='health'),
]
