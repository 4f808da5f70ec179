"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para entregar Domain Events do back office
(EVENT_PUBLISHER_MODE=celery) aos handlers em
src/adapters/django_app/events/handlers.py.

Arquitetura:
- Broker: RabbitMQ (via kombu)
- Backend: RPC (resultados de tarefas pelo próprio broker)
- Fila "events": todos os handlers de eventos

Uso:
    celery -A src.config.celery worker -l INFO -Q events,default
"""

import os

from celery import Celery
from kombu import Exchange, Queue

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('backoffice')

# Chaves CELERY_* do settings do Django
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    enable_utc=True,
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,
    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
)

app.conf.task_routes = {
    'src.adapters.django_app.events.handlers.*': {'queue': 'events'},
}

app.autodiscover_tasks(
    ['src.adapters.django_app.events'],
    related_name='handlers',
)
