"""
Configuração do Django App do back office.

Reúne o document store (coleções "reports" e "support_tickets")
e o Event Store.
"""

from django.apps import AppConfig


class BackofficeConfig(AppConfig):
    """Configuração do app Backoffice."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.backoffice'
    label = 'backoffice'
    verbose_name = 'Back Office Administrativo'
