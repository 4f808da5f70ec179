"""
Configuração do projeto Back Office.

Módulos:
- settings: Configurações Django
- urls: Rotas principais
- wsgi: WSGI application
- celery: Configuração Celery para eventos assíncronos
- container: Dependency Injection Container
"""

# Carrega o app Celery junto com o Django (shared_task usa este app)
from .celery import app as celery_app

__all__ = ('celery_app',)
